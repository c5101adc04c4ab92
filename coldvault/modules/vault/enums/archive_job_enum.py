# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/enums/archive_job_enum.py

Valores de los jobs de la bóveda Glacier tal como los devuelve ListJobs.

Autor: ColdVault Team
Fecha: 03/09/2026
"""

from enum import StrEnum


class ArchiveJobAction(StrEnum):
    ARCHIVE_RETRIEVAL = "ArchiveRetrieval"
    INVENTORY_RETRIEVAL = "InventoryRetrieval"
    SELECT = "Select"


class ArchiveJobStatus(StrEnum):
    IN_PROGRESS = "InProgress"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class ArchiveJobType(StrEnum):
    """Valores de Type en InitiateJob."""
    ARCHIVE_RETRIEVAL = "archive-retrieval"
    INVENTORY_RETRIEVAL = "inventory-retrieval"


__all__ = ["ArchiveJobAction", "ArchiveJobStatus", "ArchiveJobType"]
# Fin del archivo coldvault/modules/vault/enums/archive_job_enum.py
