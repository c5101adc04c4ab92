# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/schemas/archive_schemas.py

Modelos Pydantic v2 para respuestas de la bóveda Glacier.
Los alias corresponden a los nombres de campo de la API de AWS.

Autor: ColdVault Team
Fecha: 03/09/2026
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from coldvault.modules.vault.enums import ArchiveJobAction, ArchiveJobStatus


class JobReference(BaseModel):
    """Entrada de JobList (ListJobs)."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    job_id: str = Field(alias="JobId")
    action: ArchiveJobAction = Field(alias="Action")
    status_code: ArchiveJobStatus = Field(alias="StatusCode")
    creation_date: datetime = Field(alias="CreationDate")
    completed: bool = Field(default=False, alias="Completed")
    archive_id: Optional[str] = Field(default=None, alias="ArchiveId")
    archive_sha256_tree_hash: Optional[str] = Field(default=None, alias="ArchiveSHA256TreeHash")
    description: Optional[str] = Field(default=None, alias="JobDescription")

    @property
    def succeeded(self) -> bool:
        return self.status_code == ArchiveJobStatus.SUCCEEDED

    @property
    def is_inventory(self) -> bool:
        return self.action == ArchiveJobAction.INVENTORY_RETRIEVAL

    @property
    def is_archive_retrieval(self) -> bool:
        return self.action == ArchiveJobAction.ARCHIVE_RETRIEVAL


class JobOutput(BaseModel):
    """Salida de GetJobOutput ya leída en memoria."""
    status_code: int = 200
    body: bytes = b""
    checksum: Optional[str] = None
    content_type: Optional[str] = None


class UploadResult(BaseModel):
    """Respuesta de UploadArchive."""
    archive_id: str
    checksum: str
    location: Optional[str] = None


class InventoryArchive(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    archive_id: str = Field(alias="ArchiveId")
    description: Optional[str] = Field(default=None, alias="ArchiveDescription")
    size: Optional[int] = Field(default=None, alias="Size")
    sha256_tree_hash: Optional[str] = Field(default=None, alias="SHA256TreeHash")


class InventoryPayload(BaseModel):
    """Cuerpo JSON de un job InventoryRetrieval."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    vault_arn: Optional[str] = Field(default=None, alias="VaultARN")
    inventory_date: datetime = Field(alias="InventoryDate")
    archive_list: List[InventoryArchive] = Field(default_factory=list, alias="ArchiveList")

    @property
    def archive_ids(self) -> set[str]:
        return {a.archive_id for a in self.archive_list}


class PartitionedJobs(BaseModel):
    """Listado de jobs partido por tipo y estado."""
    in_flight_inventory: List[JobReference] = Field(default_factory=list)
    inventory_succeeded: List[JobReference] = Field(default_factory=list)
    retrieval_succeeded: List[JobReference] = Field(default_factory=list)

    @property
    def has_inventory_in_flight(self) -> bool:
        return bool(self.in_flight_inventory)


__all__ = [
    "JobReference",
    "JobOutput",
    "UploadResult",
    "InventoryArchive",
    "InventoryPayload",
    "PartitionedJobs",
]
# Fin del archivo coldvault/modules/vault/schemas/archive_schemas.py
