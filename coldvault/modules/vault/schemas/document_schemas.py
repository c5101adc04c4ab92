# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/schemas/document_schemas.py

Modelos Pydantic v2 para filas del almacén de registros.

- DocumentRow: fila candidata de cualquier workflow. status y file_type
  son campos separados (file_type es SOLO la extensión real).
- ArchiveMetadata: blob JSON de metadata (archive_id, checksum,
  filesystem_id). Fuente autoritativa del vínculo con la bóveda.
- ArchiveRecord: datos para registrar un archivo subido.
- StatusUpdate / InventoryFlagResult: resultado de rutinas de escritura.

Autor: ColdVault Team
Fecha: 03/09/2026
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from coldvault.modules.vault.enums import DocumentStatus, DocumentType, WorkScenario

_logger = logging.getLogger("vault.schemas")


class ArchiveMetadata(BaseModel):
    model_config = ConfigDict(extra="ignore")

    archive_id: Optional[str] = None
    checksum: Optional[str] = None
    filesystem_id: Optional[str] = None

    @classmethod
    def parse(cls, raw: Any) -> "ArchiveMetadata":
        """
        Parsea el blob de metadata. JSON vacío, inválido o con tipos que no
        validan devuelve un ArchiveMetadata vacío (el documento queda sin
        archive_id resoluble y se trata por la ruta de huérfanos).
        """
        if raw is None or raw == "":
            return cls()
        if isinstance(raw, dict):
            data = raw
        else:
            try:
                data = json.loads(raw)
            except (TypeError, ValueError) as e:
                _logger.warning("archive_metadata_invalid_json: error=%s", str(e)[:120])
                return cls()
        if not isinstance(data, dict):
            return cls()
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            _logger.warning(
                "archive_metadata_invalid_fields: fields=%s",
                [".".join(str(p) for p in err["loc"]) for err in e.errors()],
            )
            return cls()


class DocumentRow(BaseModel):
    model_config = ConfigDict(extra="ignore", use_enum_values=False)

    document_id: int
    document_type: DocumentType = DocumentType.DOCUMENT
    file_system_id: Optional[str] = None
    file_type: Optional[str] = None
    status: DocumentStatus
    scenario: Optional[WorkScenario] = None
    archive_id: Optional[str] = None
    checksum: Optional[str] = None
    parid: Optional[int] = None
    filename: Optional[str] = None
    file_size_bytes: Optional[int] = None
    created_on: Optional[datetime] = None
    purged_date: Optional[datetime] = None
    metadata: Optional[Any] = None

    @field_validator("file_type")
    @classmethod
    def _normalize_file_type(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip().lstrip(".").lower() or None

    @property
    def archive_metadata(self) -> ArchiveMetadata:
        return ArchiveMetadata.parse(self.metadata)

    @property
    def resolved_archive_id(self) -> Optional[str]:
        """archive_id de metadata; si no existe, el de la columna."""
        return self.archive_metadata.archive_id or self.archive_id or None

    @property
    def resolved_checksum(self) -> Optional[str]:
        return self.archive_metadata.checksum or self.checksum or None

    @property
    def resolved_file_system_id(self) -> Optional[str]:
        return self.file_system_id or self.archive_metadata.filesystem_id or None


class ArchiveRecord(BaseModel):
    """Registro de un archivo recién subido a la bóveda."""
    parid: Optional[int] = None
    document_id: int
    filename: str
    file_size_bytes: int
    status: DocumentStatus = DocumentStatus.ARCHIVED
    archive_id: str
    checksum: str


class StatusUpdate(BaseModel):
    """Resultado de una rutina de escritura: filas afectadas y código de retorno."""
    row_count: int = 0
    return_code: int = 0

    @property
    def ok(self) -> bool:
        return self.return_code == 0


class InventoryFlagResult(BaseModel):
    """Filas actualizadas en la tabla de archivos y en la tabla de campos."""
    archive_rows: int = 0
    field_rows: int = 0

    @property
    def consistent(self) -> bool:
        return self.archive_rows == self.field_rows


class PurgedDocument(BaseModel):
    """Documento PURGED pendiente de confirmar contra un inventario."""
    document_id: int
    archive_id: Optional[str] = None
    metadata: Optional[Any] = None
    created_on: Optional[datetime] = None

    @property
    def resolved_archive_id(self) -> Optional[str]:
        return ArchiveMetadata.parse(self.metadata).archive_id or self.archive_id or None


__all__ = [
    "ArchiveMetadata",
    "DocumentRow",
    "ArchiveRecord",
    "StatusUpdate",
    "InventoryFlagResult",
    "PurgedDocument",
]
# Fin del archivo coldvault/modules/vault/schemas/document_schemas.py
