# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/repositories/inmemory.py

Almacén de registros en memoria con el mismo contrato que
SqlRecordStoreGateway. No toca DB. Se usa en la suite de pruebas y en
corridas locales de ensayo.

Reproduce la semántica de las rutinas:
- compare-and-swap sobre el estado esperado (código 3 si no coincide)
- candidatos por workflow según estado
- flag de inventario sobre documentos y campos de categoría
- códigos de retorno forzables por rutina/documento para pruebas

Autor: ColdVault Team
Fecha: 05/09/2026
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from coldvault.modules.vault.enums import (
    DELETED_STATUSES,
    DocumentStatus,
    WorkflowKind,
    validate_status_transition,
)
from coldvault.modules.vault.errors import StoreUnavailable
from coldvault.modules.vault.schemas import (
    ArchiveRecord,
    DateRange,
    DocumentRow,
    InventoryFlagResult,
    PurgedDocument,
    StatusUpdate,
)

from .record_store_gateway import RecordStoreGateway
from .store_routines import CATEGORY_FIELD_NAMES, RC_NO_DATA, RC_NO_ROWS, RC_OK

_CANDIDATE_STATUSES: Dict[WorkflowKind, Set[DocumentStatus]] = {
    WorkflowKind.UPLOAD: {DocumentStatus.NEW},
    WorkflowKind.PURGE: {DocumentStatus.PENDING_PURGE},
    WorkflowKind.DELETE: set(DELETED_STATUSES),
    WorkflowKind.RESTORE: {DocumentStatus.PENDING_RESTORE},
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryRecordStore(RecordStoreGateway):
    """Implementa el contrato completo sobre diccionarios."""

    def __init__(
        self,
        documents: Optional[Iterable[DocumentRow]] = None,
        aws_settings: Optional[Dict[str, Any]] = None,
        nas_path: Optional[str] = None,
    ):
        self.documents: Dict[int, DocumentRow] = {}
        # document_id → {field_name: string_value}
        self.fields: Dict[int, Dict[str, str]] = {}
        self.archives: Dict[int, ArchiveRecord] = {}
        self.inventory_jobs: Dict[int, str] = {}
        self.stamped_jobs: List[Tuple[str, DateRange]] = []
        self.restore_requested_on: Dict[int, datetime] = {}
        self.removed: Set[int] = set()
        self.aws_settings = dict(aws_settings or {})
        self.nas_path = nas_path
        self.available = True
        self.calls: List[Tuple[str, Any]] = []
        self._forced_codes: Dict[Tuple[str, Optional[int]], int] = {}
        for row in documents or ():
            self.add_document(row)

    # ── utilidades de prueba ──

    def add_document(self, row: DocumentRow, category: Optional[str] = None) -> DocumentRow:
        self.documents[row.document_id] = row
        if category is not None:
            self.fields[row.document_id] = {CATEGORY_FIELD_NAMES[0]: category}
        return row

    def status_of(self, document_id: int) -> DocumentStatus:
        if document_id in self.removed:
            return DocumentStatus.REMOVED
        return self.documents[document_id].status

    def force_return_code(self, routine: str, code: int, document_id: Optional[int] = None) -> None:
        """La próxima llamada a `routine` (para ese documento) devuelve `code`."""
        self._forced_codes[(routine, document_id)] = code

    def _check_available(self, routine: str) -> None:
        self.calls.append((routine, None))
        if not self.available:
            raise StoreUnavailable(routine, "in-memory store marked unavailable")

    def _forced(self, routine: str, document_id: Optional[int]) -> Optional[int]:
        for key in ((routine, document_id), (routine, None)):
            if key in self._forced_codes:
                return self._forced_codes.pop(key)
        return None

    def _cas(
        self,
        routine: str,
        document_id: int,
        expected: DocumentStatus,
        new: DocumentStatus,
        **updates: Any,
    ) -> StatusUpdate:
        self._check_available(routine)
        forced = self._forced(routine, document_id)
        if forced is not None:
            return StatusUpdate(row_count=0, return_code=forced)
        row = self.documents.get(document_id)
        if row is None or document_id in self.removed:
            return StatusUpdate(row_count=0, return_code=RC_NO_DATA)
        if row.status != expected:
            return StatusUpdate(row_count=0, return_code=RC_NO_ROWS)
        validate_status_transition(expected, new)
        self.documents[document_id] = row.model_copy(update={"status": new, **updates})
        return StatusUpdate(row_count=1, return_code=RC_OK)

    # ── lectura ──

    async def fetch_candidates(self, workflow: WorkflowKind) -> List[DocumentRow]:
        self._check_available(f"candidates:{workflow}")
        statuses = _CANDIDATE_STATUSES.get(workflow)
        if statuses is None:
            raise ValueError(f"El workflow '{workflow}' no tiene rutina de candidatos")
        return [
            row.model_copy()
            for doc_id, row in sorted(self.documents.items())
            if doc_id not in self.removed and row.status in statuses
        ]

    async def fetch_purged_documents(self, inventory_date: datetime, creation_date: datetime) -> List[PurgedDocument]:
        self._check_available("fn_get_docs_purged_aws")
        out: List[PurgedDocument] = []
        for doc_id, row in sorted(self.documents.items()):
            if doc_id in self.removed or row.status != DocumentStatus.PURGED:
                continue
            if row.purged_date is not None and row.purged_date > inventory_date:
                continue
            if row.created_on is not None and row.created_on > creation_date:
                continue
            out.append(PurgedDocument(
                document_id=doc_id,
                archive_id=row.archive_id,
                metadata=row.metadata,
                created_on=row.created_on,
            ))
        return out

    async def fetch_restore_jobs(self) -> List[DocumentRow]:
        self._check_available("fn_get_restore_jobs")
        return [
            row.model_copy()
            for doc_id, row in sorted(self.documents.items())
            if doc_id not in self.removed and row.status == DocumentStatus.RESTORE_REQUESTED
        ]

    def _range_of(self, values: List[datetime]) -> Optional[DateRange]:
        if not values:
            return None
        return DateRange(start=min(values), end=max(values))

    async def get_purged_date_range(self) -> Optional[DateRange]:
        self._check_available("fn_get_purged_date_range")
        return self._range_of([
            row.created_on
            for doc_id, row in self.documents.items()
            if row.status == DocumentStatus.PURGED
            and row.created_on is not None
            and doc_id not in self.inventory_jobs
            and doc_id not in self.removed
        ])

    async def get_restore_date_range(self) -> Optional[DateRange]:
        self._check_available("fn_get_restore_date_range")
        return self._range_of([
            when for doc_id, when in self.restore_requested_on.items()
            if self.documents[doc_id].status == DocumentStatus.RESTORE_REQUESTED
        ])

    async def count_inventory_work(self) -> int:
        self._check_available("fn_get_inv_work")
        return sum(
            1 for doc_id, row in self.documents.items()
            if row.status == DocumentStatus.PURGED and doc_id not in self.removed
        )

    async def get_archive_settings(self) -> Dict[str, Any]:
        self._check_available("fn_get_aws_settings")
        return dict(self.aws_settings)

    async def get_nas_path(self) -> Optional[str]:
        self._check_available("fn_get_nas_path")
        return self.nas_path

    # ── escritura ──

    async def update_status(self, document_id, expected_status, new_status) -> StatusUpdate:
        return self._cas("fn_upd_doc_status", document_id, DocumentStatus(expected_status), DocumentStatus(new_status))

    async def batch_update_status(self, document_ids, expected_status, new_status) -> int:
        updated = 0
        for doc_id in document_ids:
            result = await self.update_status(doc_id, expected_status, new_status)
            updated += result.row_count
        return updated

    async def insert_archive(self, record: ArchiveRecord) -> StatusUpdate:
        result = self._cas(
            "fn_ins_archive",
            record.document_id,
            DocumentStatus.NEW,
            record.status,
            archive_id=record.archive_id,
            checksum=record.checksum,
        )
        if result.ok:
            self.archives[record.document_id] = record
        return result

    async def mark_purged(self, document_id: int) -> StatusUpdate:
        return self._cas(
            "fn_upd_doc_purged",
            document_id,
            DocumentStatus.PENDING_PURGE,
            DocumentStatus.PURGED,
            purged_date=_now(),
        )

    async def delete_document_records(self, document_id: int) -> StatusUpdate:
        self._check_available("fn_del_docs")
        forced = self._forced("fn_del_docs", document_id)
        if forced is not None:
            return StatusUpdate(row_count=0, return_code=forced)
        row = self.documents.get(document_id)
        if row is None or document_id in self.removed or not row.status.is_deleted:
            return StatusUpdate(row_count=0, return_code=RC_NO_ROWS)
        validate_status_transition(row.status, DocumentStatus.REMOVED)
        self.removed.add(document_id)
        self.fields.pop(document_id, None)
        return StatusUpdate(row_count=1, return_code=RC_OK)

    def _flag_fields(self, ids: List[int]) -> int:
        updated = 0
        for doc_id in ids:
            values = self.fields.get(doc_id, {})
            for name in CATEGORY_FIELD_NAMES:
                value = values.get(name)
                if value is not None and value.startswith("PURGED"):
                    values[name] = "DELETD" + value.replace("PURGED", "")
                    updated += 1
        return updated

    async def flag_inventory_deleted(self, document_ids) -> InventoryFlagResult:
        self._check_available("flag_inventory_deleted")
        ids = list(document_ids)
        archive_rows = 0
        for doc_id in ids:
            row = self.documents.get(doc_id)
            if row is None or doc_id in self.removed or row.status != DocumentStatus.PURGED:
                continue
            self.documents[doc_id] = row.model_copy(update={"status": DocumentStatus.DELETED})
            archive_rows += 1
        return InventoryFlagResult(archive_rows=archive_rows, field_rows=self._flag_fields(ids))

    async def reflag_field_deleted(self, document_ids) -> int:
        self._check_available("reflag_field_deleted")
        return self._flag_fields(list(document_ids))

    async def stamp_inventory_job(self, job_id: str, window: DateRange) -> StatusUpdate:
        self._check_available("fn_upd_purged_jobid")
        forced = self._forced("fn_upd_purged_jobid", None)
        if forced is not None:
            return StatusUpdate(row_count=0, return_code=forced)
        self.stamped_jobs.append((job_id, window))
        stamped = 0
        for doc_id, row in self.documents.items():
            if row.status != DocumentStatus.PURGED or doc_id in self.inventory_jobs:
                continue
            if row.created_on is not None and window.start <= row.created_on <= window.end:
                self.inventory_jobs[doc_id] = job_id
                stamped += 1
        return StatusUpdate(row_count=stamped, return_code=RC_OK)

    async def mark_restore_requested(self, document_id: int) -> StatusUpdate:
        result = self._cas(
            "fn_upd_docs_restore_requested",
            document_id,
            DocumentStatus.PENDING_RESTORE,
            DocumentStatus.RESTORE_REQUESTED,
        )
        if result.ok:
            self.restore_requested_on[document_id] = _now()
        return result

    async def mark_restore_completed(self, document_id: int) -> StatusUpdate:
        result = self._cas(
            "fn_upd_docs_restore_done",
            document_id,
            DocumentStatus.RESTORE_REQUESTED,
            DocumentStatus.ARCHIVED,
        )
        if result.ok:
            self.restore_requested_on.pop(document_id, None)
        return result


__all__ = ["InMemoryRecordStore"]
# Fin del archivo coldvault/modules/vault/repositories/inmemory.py
