# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/schemas/__init__.py

Schemas del módulo vault.
"""

from .archive_schemas import (
    InventoryArchive,
    InventoryPayload,
    JobOutput,
    JobReference,
    PartitionedJobs,
    UploadResult,
)
from .date_range import DateRange
from .document_schemas import (
    ArchiveMetadata,
    ArchiveRecord,
    DocumentRow,
    InventoryFlagResult,
    PurgedDocument,
    StatusUpdate,
)

__all__ = [
    "ArchiveMetadata",
    "ArchiveRecord",
    "DateRange",
    "DocumentRow",
    "InventoryArchive",
    "InventoryFlagResult",
    "InventoryPayload",
    "JobOutput",
    "JobReference",
    "PartitionedJobs",
    "PurgedDocument",
    "StatusUpdate",
    "UploadResult",
]
