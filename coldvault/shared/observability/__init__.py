# -*- coding: utf-8 -*-
"""
coldvault/shared/observability/__init__.py

Observabilidad: bitácoras de auditoría por workflow.
"""

from .audit_log import (
    AUDIT_KINDS,
    audit_file_path,
    close_audit_logger,
    format_document_entry,
    get_audit_logger,
)

__all__ = [
    "AUDIT_KINDS",
    "audit_file_path",
    "close_audit_logger",
    "format_document_entry",
    "get_audit_logger",
]
