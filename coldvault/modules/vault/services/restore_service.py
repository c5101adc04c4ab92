# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/services/restore_service.py

Restauración de archivos desde la bóveda.

Dos pasadas, ambas dentro del run de inventario:

1. request_restores(): PENDING RESTORE → initiate_job(archive-retrieval)
   → RESTORE REQUESTED.
2. complete_restores(jobs): para cada documento en RESTORE REQUESTED con
   un job ArchiveRetrieval exitoso:
   - descarga la salida del job
   - verifica el tree hash contra el checksum registrado
   - escribe el archivo de forma atómica en su ruta del NAS
   - RESTORE REQUESTED → ARCHVD

Si el checksum no coincide no se escribe nada y el documento queda en
RESTORE REQUESTED (ChecksumMismatch queda en la bitácora de errores).

Autor: ColdVault Team
Fecha: 08/09/2026
"""

from __future__ import annotations

import asyncio
import logging
from typing import Dict, List, Optional, Tuple

from coldvault.modules.vault.adapters import ArchiveClient
from coldvault.modules.vault.enums import ArchiveJobType, TransitionOutcome, WorkflowKind, next_status
from coldvault.modules.vault.errors import ArchiveNotFound, ChecksumMismatch, RowLevelError
from coldvault.modules.vault.repositories import RecordStoreGateway, raise_for_return_code
from coldvault.modules.vault.run_context import WorkflowRunContext
from coldvault.modules.vault.schemas import DocumentRow, JobReference
from coldvault.shared.utils import atomic_write_bytes

from .fan_out import process_work_map
from .location_resolver import LocationResolver

_logger = logging.getLogger("vault.restore_service")


def build_retrieval_job_parameters(archive_id: str, document_id: int) -> Dict[str, str]:
    return {
        "Type": ArchiveJobType.ARCHIVE_RETRIEVAL.value,
        "ArchiveId": archive_id,
        "Description": f"Restore DocId: {document_id}",
    }


def latest_job_by_archive(jobs: List[JobReference]) -> Dict[str, JobReference]:
    """archive_id → job exitoso más reciente."""
    by_archive: Dict[str, JobReference] = {}
    for job in jobs:
        if not job.archive_id:
            continue
        current = by_archive.get(job.archive_id)
        if current is None or job.creation_date > current.creation_date:
            by_archive[job.archive_id] = job
    return by_archive


class RestoreService:

    def __init__(
        self,
        store: RecordStoreGateway,
        archive: ArchiveClient,
        resolver: LocationResolver,
        ctx: WorkflowRunContext,
        concurrency_limit: int = 4,
    ):
        self.store = store
        self.archive = archive
        self.resolver = resolver
        self.ctx = ctx
        self.concurrency_limit = concurrency_limit

    # ═══════════════════════════════════════════════════════════════════════
    # SOLICITUD
    # ═══════════════════════════════════════════════════════════════════════

    async def request_restores(self) -> int:
        """
        Inicia un job archive-retrieval por cada documento PENDING RESTORE.

        Returns:
            Número de solicitudes registradas.
        """
        candidates = await self.store.fetch_candidates(WorkflowKind.RESTORE)
        work_map = {row.document_id: row for row in candidates}
        if not work_map:
            return 0

        self.ctx.documents += len(work_map)
        before = self.ctx.restore_requests
        _logger.info("restore_requests_start: documents=%d", len(work_map))
        await process_work_map(work_map, self._request_one, self.concurrency_limit)
        return self.ctx.restore_requests - before

    async def _request_one(self, row: DocumentRow) -> None:
        try:
            archive_id = row.resolved_archive_id
            if not archive_id:
                self.ctx.record_error("restore requested without archive id", row.document_id)
                return
            next_status(WorkflowKind.RESTORE, row.status, TransitionOutcome.RETRIEVAL_REQUESTED)

            job_id = await self.archive.initiate_job(build_retrieval_job_parameters(archive_id, row.document_id))
            result = await self.store.mark_restore_requested(row.document_id)
            raise_for_return_code("fn_upd_docs_restore_requested", result, row.document_id)

            self.ctx.restore_requests += 1
            _logger.info(
                "restore_requested: document_id=%s archive_id=%s job_id=%s",
                row.document_id, archive_id, job_id,
            )
        except ArchiveNotFound as e:
            self.ctx.record_error(f"restore archive not found: {e}", row.document_id)
        except RowLevelError as e:
            self.ctx.record_error(str(e), row.document_id)

    # ═══════════════════════════════════════════════════════════════════════
    # FINALIZACIÓN
    # ═══════════════════════════════════════════════════════════════════════

    async def complete_restores(self, retrieval_jobs: List[JobReference]) -> int:
        """
        Escribe en el NAS los archivos cuyo job de recuperación terminó.

        Args:
            retrieval_jobs: Jobs ArchiveRetrieval en Succeeded

        Returns:
            Número de documentos restaurados.
        """
        window = await self.store.get_restore_date_range()
        if window is None:
            _logger.debug("restore_complete_skip: no pending restores")
            return 0

        jobs = latest_job_by_archive(retrieval_jobs)
        rows = await self.store.fetch_restore_jobs()

        work_map: Dict[int, Tuple[DocumentRow, JobReference]] = {}
        for row in rows:
            job = jobs.get(row.resolved_archive_id or "")
            if job is not None:
                work_map[row.document_id] = (row, job)

        _logger.info(
            "restore_complete_start: window=%s pending=%d ready=%d",
            window, len(rows), len(work_map),
        )
        if not work_map:
            return 0

        self.ctx.documents += len(work_map)
        before = self.ctx.restored
        await process_work_map(work_map, self._complete_one, self.concurrency_limit)
        return self.ctx.restored - before

    async def _complete_one(self, item: Tuple[DocumentRow, JobReference]) -> None:
        row, job = item
        try:
            target = next_status(WorkflowKind.RESTORE, row.status, TransitionOutcome.RESTORED)

            output = await self.archive.get_job_output(job.job_id)
            actual = self.archive.compute_checksum(output.body)
            # Solo el checksum registrado al subir; sin él no se escribe nada
            expected: Optional[str] = row.resolved_checksum
            if expected is None or actual != expected:
                raise ChecksumMismatch(row.document_id, expected, actual)

            path = self.resolver.path_for(row.document_type, row.resolved_file_system_id, row.file_type)
            await asyncio.to_thread(atomic_write_bytes, path, output.body)

            result = await self.store.mark_restore_completed(row.document_id)
            raise_for_return_code("fn_upd_docs_restore_done", result, row.document_id)

            self.ctx.restored += 1
            _logger.info(
                "restore_completed: document_id=%s path=%s status=%s bytes=%d",
                row.document_id, path, target.value, len(output.body),
            )
        except ArchiveNotFound as e:
            self.ctx.record_error(f"restore job output not found: jobId={job.job_id} {e}", row.document_id)
        except RowLevelError as e:
            self.ctx.record_error(str(e), row.document_id)
        except OSError as e:
            self.ctx.record_error(f"restore write failed: {e}", row.document_id)


__all__ = ["RestoreService", "build_retrieval_job_parameters", "latest_job_by_archive"]
# Fin del archivo coldvault/modules/vault/services/restore_service.py
