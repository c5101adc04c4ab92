# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/enums/__init__.py

Punto de entrada de enums del módulo vault.
"""

from .archive_job_enum import ArchiveJobAction, ArchiveJobStatus, ArchiveJobType
from .document_status_enum import DELETED_STATUSES, DocumentStatus
from .document_status_transitions import (
    VALID_STATUS_TRANSITIONS,
    TransitionOutcome,
    get_allowed_transitions,
    is_valid_status_transition,
    next_status,
    validate_status_transition,
)
from .work_scenario_enum import SCHEDULED_WORKFLOWS, DocumentType, WorkflowKind, WorkScenario

__all__ = [
    "ArchiveJobAction",
    "ArchiveJobStatus",
    "ArchiveJobType",
    "DocumentStatus",
    "DELETED_STATUSES",
    "VALID_STATUS_TRANSITIONS",
    "TransitionOutcome",
    "get_allowed_transitions",
    "is_valid_status_transition",
    "next_status",
    "validate_status_transition",
    "DocumentType",
    "WorkflowKind",
    "WorkScenario",
    "SCHEDULED_WORKFLOWS",
]
