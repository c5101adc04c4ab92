# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/run_context.py

Contexto de un run de workflow.

Cada run crea su propio WorkflowRunContext: contadores, bitácoras de
auditoría (errors/orphans/deletes) y estado final. El contexto se devuelve
a quien dispara el run y se descarta al terminar; no hay contadores
globales de proceso.

Regla heredada de la operación: en modo debug los errores se registran
pero NO se contabilizan.

Autor: ColdVault Team
Fecha: 04/09/2026
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from coldvault.modules.vault.enums import WorkflowKind
from coldvault.shared.observability import (
    close_audit_logger,
    format_document_entry,
    get_audit_logger,
)

_logger = logging.getLogger("vault.run_context")

NOTHING_TO_DO = "0"


@dataclass
class WorkflowRunContext:
    workflow: WorkflowKind
    log_prefix: str = "vault"
    log_dir: Optional[Path] = None
    debug: bool = False

    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    finished_at: Optional[datetime] = None
    completed: bool = False
    failure: Optional[str] = None

    # ── contadores ──
    documents: int = 0
    processed: int = 0
    errors: int = 0
    deleted: int = 0
    orphans: int = 0
    purged_remote: int = 0
    others: int = 0
    restored: int = 0
    restore_requests: int = 0
    confirmed_deleted: int = 0
    reconcile_mismatches: int = 0
    last_inventory_request: Optional[datetime] = None

    def __post_init__(self) -> None:
        self._error_log = get_audit_logger(self.log_prefix, "errors", self.log_dir, self.debug)
        self._orphan_log = get_audit_logger(self.log_prefix, "orphans", self.log_dir, self.debug)
        self._delete_log = get_audit_logger(self.log_prefix, "deletes", self.log_dir, self.debug)

    @classmethod
    def from_settings(cls, workflow: WorkflowKind, settings) -> "WorkflowRunContext":
        """Construye el contexto con prefijo, carpeta de bitácoras y debug de settings."""
        audit_workflow = WorkflowKind.INVENTORY if workflow == WorkflowKind.RESTORE else workflow
        return cls(
            workflow=workflow,
            log_prefix=settings.log_prefix_for(audit_workflow.value),
            log_dir=settings.log_dir,
            debug=settings.debug,
        )

    # ═══════════════════════════════════════════════════════════════════════
    # REGISTRO
    # ═══════════════════════════════════════════════════════════════════════

    def record_error(self, message: str, document_id: Optional[int] = None) -> None:
        """Escribe en la bitácora de errores; no incrementa el contador en debug."""
        if not self.debug:
            self.errors += 1
        entry = message if document_id is None else f"docId:{document_id} {message}"
        self._error_log.error(entry)
        _logger.warning("%s_error: %s", self.workflow.value, entry)

    def record_orphan(self, document_id, archive_id, scenario) -> None:
        self.orphans += 1
        self._orphan_log.info(format_document_entry(document_id, archive_id, scenario))

    def record_deleted(self, document_id, archive_id, scenario) -> None:
        self.deleted += 1
        self._delete_log.info(format_document_entry(document_id, archive_id, scenario))

    def fail(self, exc: BaseException) -> None:
        """Marca el run como no completado por un error de nivel run."""
        self.completed = False
        self.failure = f"{type(exc).__name__}: {exc}"
        self.record_error(f"run aborted -> {self.failure}")

    def finish(self) -> None:
        self.finished_at = datetime.now(timezone.utc)

    def close(self) -> None:
        for log in (self._error_log, self._orphan_log, self._delete_log):
            close_audit_logger(log)

    # ═══════════════════════════════════════════════════════════════════════
    # RESUMEN
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def duration_ms(self) -> float:
        end = self.finished_at or datetime.now(timezone.utc)
        return round((end - self.started_at).total_seconds() * 1000, 2)

    @property
    def nothing_to_do(self) -> bool:
        return self.completed and self.documents == 0 and self.workflow != WorkflowKind.INVENTORY

    def summary_line(self) -> str:
        """
        Línea final de estado para el scheduler, delimitada por tabuladores.
        "0" cuando el run no tuvo documentos que procesar.
        """
        if self.nothing_to_do:
            return NOTHING_TO_DO

        done = str(self.completed).lower()
        if self.workflow == WorkflowKind.UPLOAD:
            return (
                f"\tUpload completed: {done}.\tDocuments: {self.documents}."
                f"\tErrors: {self.errors}.\tOrphans: {self.orphans}."
            )
        if self.workflow == WorkflowKind.PURGE:
            return (
                f"\tPurge completed: {done}.\tDocuments: {self.documents}."
                f"\tDocuments purged in AWS: {self.purged_remote}."
                f"\tAll others: {self.others}.\tErrors: {self.errors}."
            )
        if self.workflow == WorkflowKind.DELETE:
            return (
                f"\tDelete completed: {done}.\tDocuments: {self.documents}."
                f"\tErrors: {self.errors}.\tDeletes: {self.deleted}.\tOrphans: {self.orphans}."
            )

        last_request = ""
        if self.last_inventory_request is not None:
            last_request = f"\tLast Job Request: {self.last_inventory_request.isoformat()}."
        return (
            f"\tInventory completed: {done}.{last_request}"
            f"\tProcessed: {self.processed}.\tRestores: {self.restored}.\tErrors: {self.errors}."
        )

    def to_stats(self) -> Dict[str, Any]:
        """Estadísticas del run en el formato de los jobs programados."""
        return {
            "job_id": f"vault_{self.workflow.value}",
            "timestamp": self.started_at.isoformat(),
            "duration_ms": self.duration_ms,
            "completed": self.completed,
            "documents": self.documents,
            "processed": self.processed,
            "errors": self.errors,
            "deleted": self.deleted,
            "orphans": self.orphans,
            "purged_remote": self.purged_remote,
            "others": self.others,
            "restored": self.restored,
            "restore_requests": self.restore_requests,
            "confirmed_deleted": self.confirmed_deleted,
            "reconcile_mismatches": self.reconcile_mismatches,
            "error": self.failure,
        }


__all__ = ["WorkflowRunContext", "NOTHING_TO_DO"]

# Fin del archivo coldvault/modules/vault/run_context.py
