# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/repositories/record_store_gateway.py

Gateway del almacén de registros.

- RecordStoreGateway (ABC): contrato que usan los workflows.
- SqlRecordStoreGateway: implementación SQLAlchemy async + asyncpg que
  invoca las rutinas registradas en store_routines.py.

Política de errores:
- Fallos de conexión/driver (OperationalError, InterfaceError, OSError,
  TimeoutError) → StoreUnavailable (nivel run).
- Código de retorno distinto de 0 → StoreLogicalError (nivel fila),
  vía raise_for_return_code() en quien invoca.

Autor: ColdVault Team
Fecha: 05/09/2026
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from coldvault.modules.vault.enums import DocumentStatus, WorkflowKind
from coldvault.modules.vault.errors import StoreLogicalError, StoreUnavailable
from coldvault.modules.vault.schemas import (
    ArchiveRecord,
    DateRange,
    DocumentRow,
    InventoryFlagResult,
    PurgedDocument,
    StatusUpdate,
)

from . import store_routines as r

_logger = logging.getLogger("vault.record_store")

M = TypeVar("M", bound=BaseModel)


def raise_for_return_code(routine: str, result: StatusUpdate, document_id: Optional[int] = None) -> StatusUpdate:
    """
    Lanza StoreLogicalError si la rutina no devolvió código 0.

    Returns:
        El mismo StatusUpdate si es exitoso.
    """
    if not result.ok:
        raise StoreLogicalError(routine, document_id, result.return_code, result.row_count)
    return result


# ═══════════════════════════════════════════════════════════════════════════════
# CONTRATO
# ═══════════════════════════════════════════════════════════════════════════════

class RecordStoreGateway(ABC):
    """
    Contrato del almacén de registros.

    Todas las transiciones de estado son compare-and-swap sobre el estado
    previo esperado; una fila que ya avanzó devuelve row_count=0 y un
    código distinto de 0, nunca se sobrescribe.
    """

    @abstractmethod
    async def fetch_candidates(self, workflow: WorkflowKind) -> List[DocumentRow]:
        """
        Candidatos de un workflow (upload | purge | delete | restore), paginados
        hasta agotar resultados.
        """
        ...

    @abstractmethod
    async def update_status(
        self,
        document_id: int,
        expected_status: DocumentStatus,
        new_status: DocumentStatus,
    ) -> StatusUpdate:
        ...

    @abstractmethod
    async def batch_update_status(
        self,
        document_ids: Iterable[int],
        expected_status: DocumentStatus,
        new_status: DocumentStatus,
    ) -> int:
        ...

    @abstractmethod
    async def insert_archive(self, record: ArchiveRecord) -> StatusUpdate:
        """Registra el archivo subido y deja el documento en ARCHVD."""
        ...

    @abstractmethod
    async def mark_purged(self, document_id: int) -> StatusUpdate:
        """PENDING PURGE → PURGED y sella la fecha de purga."""
        ...

    @abstractmethod
    async def delete_document_records(self, document_id: int) -> StatusUpdate:
        """Elimina las filas del documento (DELETD* → REMOVED)."""
        ...

    @abstractmethod
    async def get_purged_date_range(self) -> Optional[DateRange]:
        ...

    @abstractmethod
    async def get_restore_date_range(self) -> Optional[DateRange]:
        ...

    @abstractmethod
    async def count_inventory_work(self) -> int:
        ...

    @abstractmethod
    async def fetch_purged_documents(
        self,
        inventory_date: datetime,
        creation_date: datetime,
    ) -> List[PurgedDocument]:
        """Documentos PURGED comparables contra un inventario generado en inventory_date."""
        ...

    @abstractmethod
    async def flag_inventory_deleted(self, document_ids: Iterable[int]) -> InventoryFlagResult:
        """
        PURGED → DELETD en la tabla de documentos y en la tabla de campos,
        en una sola transacción.
        """
        ...

    @abstractmethod
    async def reflag_field_deleted(self, document_ids: Iterable[int]) -> int:
        """Reaplica (idempotente) la actualización de la tabla de campos."""
        ...

    @abstractmethod
    async def stamp_inventory_job(self, job_id: str, window: DateRange) -> StatusUpdate:
        ...

    @abstractmethod
    async def fetch_restore_jobs(self) -> List[DocumentRow]:
        """Documentos en RESTORE REQUESTED a la espera de su job de recuperación."""
        ...

    @abstractmethod
    async def mark_restore_requested(self, document_id: int) -> StatusUpdate:
        ...

    @abstractmethod
    async def mark_restore_completed(self, document_id: int) -> StatusUpdate:
        ...

    @abstractmethod
    async def get_archive_settings(self) -> Dict[str, Any]:
        """Credenciales y región de la bóveda almacenadas en el almacén."""
        ...

    @abstractmethod
    async def get_nas_path(self) -> Optional[str]:
        ...


# ═══════════════════════════════════════════════════════════════════════════════
# IMPLEMENTACIÓN SQL
# ═══════════════════════════════════════════════════════════════════════════════

class SqlRecordStoreGateway(RecordStoreGateway):
    """
    Implementación sobre PostgreSQL (SQLAlchemy async + asyncpg).

    Cada operación abre su propia sesión y confirma al terminar, de modo
    que el avance por documento persiste aunque el run se aborte después.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        page_sizes: Optional[Dict[WorkflowKind, int]] = None,
        inventory_page_size: int = 1000,
    ):
        self._session_factory = session_factory
        self._page_sizes = dict(page_sizes or {})
        self._inventory_page_size = inventory_page_size

    @classmethod
    def from_settings(cls, session_factory, settings) -> "SqlRecordStoreGateway":
        return cls(
            session_factory,
            page_sizes={
                WorkflowKind.UPLOAD: settings.upload_fetch_max_rows,
                WorkflowKind.PURGE: settings.purge_fetch_max_rows,
                WorkflowKind.DELETE: settings.delete_fetch_max_rows,
                WorkflowKind.RESTORE: settings.restore_fetch_max_rows,
            },
            inventory_page_size=settings.inventory_fetch_max_rows,
        )

    # ── helpers ──

    @asynccontextmanager
    async def _session(self, routine: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as db:
                yield db
        except (OperationalError, InterfaceError, OSError, TimeoutError) as e:
            _logger.error("store_unavailable: routine=%s error=%s", routine, str(e)[:200])
            raise StoreUnavailable(routine, str(e)[:200]) from e
        except DBAPIError as e:
            if e.connection_invalidated:
                raise StoreUnavailable(routine, str(e)[:200]) from e
            raise

    async def _fetch_paged(
        self,
        routine: str,
        sql,
        params: Dict[str, Any],
        page_size: int,
        model: Type[M],
    ) -> List[M]:
        rows: List[M] = []
        offset = 0
        async with self._session(routine) as db:
            while True:
                result = await db.execute(sql, {**params, "limit": page_size, "offset": offset})
                page = result.mappings().all()
                if not page:
                    break
                rows.extend(model.model_validate(dict(row)) for row in page)
                offset += page_size
        _logger.debug("store_fetch_done: routine=%s rows=%d", routine, len(rows))
        return rows

    async def _write(self, routine: str, sql, params: Dict[str, Any], document_id: Optional[int] = None) -> StatusUpdate:
        async with self._session(routine) as db:
            try:
                result = await db.execute(sql, params)
                row = result.mappings().first()
                await db.commit()
            except (OperationalError, InterfaceError):
                raise
            except SQLAlchemyError as e:
                await db.rollback()
                _logger.error(
                    "store_routine_failed: routine=%s document_id=%s error=%s",
                    routine, document_id, str(e)[:200],
                )
                raise StoreLogicalError(routine, document_id, r.RC_ROLLBACK) from e
        if row is None:
            return StatusUpdate(row_count=0, return_code=r.RC_NO_DATA)
        return StatusUpdate(row_count=row["row_count"] or 0, return_code=row["return_code"] or 0)

    async def _date_range(self, routine: str, sql) -> Optional[DateRange]:
        async with self._session(routine) as db:
            row = (await db.execute(sql)).mappings().first()
        if row is None or row["min_date"] is None or row["max_date"] is None:
            return None
        return DateRange(start=row["min_date"], end=row["max_date"])

    async def _scalar(self, routine: str, sql) -> Any:
        async with self._session(routine) as db:
            return (await db.execute(sql)).scalar()

    # ── lectura ──

    async def fetch_candidates(self, workflow: WorkflowKind) -> List[DocumentRow]:
        routine = r.CANDIDATE_ROUTINES.get(workflow)
        if routine is None:
            raise ValueError(f"El workflow '{workflow}' no tiene rutina de candidatos")
        page_size = self._page_sizes.get(workflow, 1000)
        return await self._fetch_paged(routine, r.candidates_sql(routine), {}, page_size, DocumentRow)

    async def fetch_purged_documents(self, inventory_date: datetime, creation_date: datetime) -> List[PurgedDocument]:
        return await self._fetch_paged(
            "fn_get_docs_purged_aws",
            r.GET_DOCS_PURGED_AWS,
            {"inventory_date": inventory_date, "creation_date": creation_date},
            self._inventory_page_size,
            PurgedDocument,
        )

    async def fetch_restore_jobs(self) -> List[DocumentRow]:
        return await self._fetch_paged(
            "fn_get_restore_jobs",
            r.GET_RESTORE_JOBS,
            {},
            self._page_sizes.get(WorkflowKind.RESTORE, 200),
            DocumentRow,
        )

    async def get_purged_date_range(self) -> Optional[DateRange]:
        return await self._date_range("fn_get_purged_date_range", r.GET_PURGED_DATE_RANGE)

    async def get_restore_date_range(self) -> Optional[DateRange]:
        return await self._date_range("fn_get_restore_date_range", r.GET_RESTORE_DATE_RANGE)

    async def count_inventory_work(self) -> int:
        return int(await self._scalar("fn_get_inv_work", r.GET_INVENTORY_WORK) or 0)

    async def get_archive_settings(self) -> Dict[str, Any]:
        raw = await self._scalar("fn_get_aws_settings", r.GET_AWS_SETTINGS)
        if not raw:
            return {}
        return raw if isinstance(raw, dict) else json.loads(raw)

    async def get_nas_path(self) -> Optional[str]:
        return await self._scalar("fn_get_nas_path", r.GET_NAS_PATH)

    # ── escritura ──

    async def update_status(self, document_id, expected_status, new_status) -> StatusUpdate:
        return await self._write(
            "fn_upd_doc_status",
            r.UPDATE_DOC_STATUS,
            {
                "document_id": document_id,
                "expected_status": DocumentStatus(expected_status).value,
                "new_status": DocumentStatus(new_status).value,
            },
            document_id,
        )

    async def batch_update_status(self, document_ids, expected_status, new_status) -> int:
        ids = list(document_ids)
        if not ids:
            return 0
        async with self._session("batch_update_status") as db:
            result = await db.execute(
                r.BATCH_UPDATE_STATUS,
                {
                    "ids": ids,
                    "expected_status": DocumentStatus(expected_status).value,
                    "new_status": DocumentStatus(new_status).value,
                },
            )
            await db.commit()
        return result.rowcount or 0

    async def insert_archive(self, record: ArchiveRecord) -> StatusUpdate:
        return await self._write(
            "fn_ins_archive",
            r.INSERT_ARCHIVE,
            {
                "parid": record.parid,
                "document_id": record.document_id,
                "filename": record.filename,
                "file_size": record.file_size_bytes,
                "status": record.status.value,
                "archive_id": record.archive_id,
                "checksum": record.checksum,
            },
            record.document_id,
        )

    async def mark_purged(self, document_id: int) -> StatusUpdate:
        return await self._write("fn_upd_doc_purged", r.UPDATE_DOC_PURGED, {"document_id": document_id}, document_id)

    async def delete_document_records(self, document_id: int) -> StatusUpdate:
        return await self._write("fn_del_docs", r.DELETE_DOC_RECORDS, {"document_id": document_id}, document_id)

    async def flag_inventory_deleted(self, document_ids) -> InventoryFlagResult:
        ids = list(document_ids)
        if not ids:
            return InventoryFlagResult()
        async with self._session("flag_inventory_deleted") as db:
            async with db.begin():
                docs = await db.execute(r.FLAG_DOCUMENTS_DELETED, {"ids": ids})
                fields = await db.execute(
                    r.FLAG_FIELDS_DELETED,
                    {"ids": ids, "names": list(r.CATEGORY_FIELD_NAMES)},
                )
        return InventoryFlagResult(archive_rows=docs.rowcount or 0, field_rows=fields.rowcount or 0)

    async def reflag_field_deleted(self, document_ids) -> int:
        ids = list(document_ids)
        if not ids:
            return 0
        async with self._session("reflag_field_deleted") as db:
            async with db.begin():
                fields = await db.execute(
                    r.FLAG_FIELDS_DELETED,
                    {"ids": ids, "names": list(r.CATEGORY_FIELD_NAMES)},
                )
        return fields.rowcount or 0

    async def stamp_inventory_job(self, job_id: str, window: DateRange) -> StatusUpdate:
        return await self._write(
            "fn_upd_purged_jobid",
            r.UPDATE_PURGED_JOBID,
            {"job_id": job_id, "start_date": window.start, "end_date": window.end},
        )

    async def mark_restore_requested(self, document_id: int) -> StatusUpdate:
        return await self._write(
            "fn_upd_docs_restore_requested", r.UPDATE_RESTORE_REQUESTED, {"document_id": document_id}, document_id,
        )

    async def mark_restore_completed(self, document_id: int) -> StatusUpdate:
        return await self._write(
            "fn_upd_docs_restore_done", r.UPDATE_RESTORE_DONE, {"document_id": document_id}, document_id,
        )


__all__ = [
    "RecordStoreGateway",
    "SqlRecordStoreGateway",
    "raise_for_return_code",
]

# Fin del archivo coldvault/modules/vault/repositories/record_store_gateway.py
