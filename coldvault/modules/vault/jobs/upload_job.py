# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/jobs/upload_job.py

Workflow de subida: NEW → ARCHVD.

Por cada candidato (fan-out acotado por ARCHIVE_MAX_CONCURRENCY):
1. Resuelve la ruta en el NAS
   - no existe      → DELETD_OS2 + bitácora de huérfanos
   - sin permiso    → error + bitácora de huérfanos (se reintenta en el próximo run)
2. Lee el archivo y calcula el tree hash
3. upload_archive con el checksum; el checksum devuelto debe coincidir
4. insert_archive; el documento cuenta como archivado solo con código 0

Autor: ColdVault Team
Fecha: 10/09/2026
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial

from coldvault.modules.vault.enums import TransitionOutcome, WorkflowKind, next_status
from coldvault.modules.vault.errors import (
    ArchiveNotFound,
    ArchiveUnavailable,
    ChecksumMismatch,
    FilesystemAccessDenied,
    FilesystemNotFound,
    RowLevelError,
    StoreLogicalError,
)
from coldvault.modules.vault.repositories import raise_for_return_code
from coldvault.modules.vault.run_context import WorkflowRunContext
from coldvault.modules.vault.schemas import ArchiveRecord, DocumentRow
from coldvault.modules.vault.services import process_work_map

_logger = logging.getLogger("vault.jobs.upload")

# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════════
ORPHAN_UPLOAD_SCENARIO = "FILE NOT FOUND FOR UPLOAD"
ACCESS_DENIED_SCENARIO = "FILE NOT READABLE FOR UPLOAD"


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

async def _flag_missing_file(deps, ctx: WorkflowRunContext, row: DocumentRow) -> None:
    target = next_status(WorkflowKind.UPLOAD, row.status, TransitionOutcome.FILE_MISSING)
    result = await deps.store.update_status(row.document_id, row.status, target)
    raise_for_return_code("fn_upd_doc_status", result, row.document_id)
    ctx.record_orphan(row.document_id, row.resolved_archive_id, ORPHAN_UPLOAD_SCENARIO)
    _logger.info("upload_file_missing: document_id=%s status=%s", row.document_id, target.value)


async def _upload_document(deps, ctx: WorkflowRunContext, row: DocumentRow) -> None:
    target = next_status(WorkflowKind.UPLOAD, row.status, TransitionOutcome.UPLOADED)

    try:
        path = deps.resolver.resolve(row.document_type, row.resolved_file_system_id, row.file_type)
    except FilesystemNotFound:
        await _flag_missing_file(deps, ctx, row)
        return
    except FilesystemAccessDenied as e:
        ctx.record_error(str(e), row.document_id)
        ctx.record_orphan(row.document_id, row.resolved_archive_id, ACCESS_DENIED_SCENARIO)
        return

    try:
        body = await asyncio.to_thread(path.read_bytes)
    except OSError as e:
        raise FilesystemAccessDenied(path, str(e)) from e

    checksum = deps.archive.compute_checksum(body)
    try:
        uploaded = await deps.archive.upload_archive(str(row.document_id), body, checksum)
    except ArchiveNotFound as e:
        # La bóveda misma no existe
        raise ArchiveUnavailable("upload_archive", "ResourceNotFoundException", str(e)) from e
    if uploaded.checksum != checksum:
        mismatch = ChecksumMismatch(row.document_id, checksum, uploaded.checksum)
        ctx.record_error(f"{mismatch} orphanArchiveId:{uploaded.archive_id}", row.document_id)
        return

    result = await deps.store.insert_archive(ArchiveRecord(
        parid=row.parid,
        document_id=row.document_id,
        filename=row.filename or path.name,
        file_size_bytes=len(body),
        status=target,
        archive_id=uploaded.archive_id,
        checksum=checksum,
    ))
    try:
        raise_for_return_code("fn_ins_archive", result, row.document_id)
    except StoreLogicalError as e:
        # El archivo ya está en la bóveda; el archiveId queda para limpieza manual
        ctx.record_error(f"{e} orphanArchiveId:{uploaded.archive_id}", row.document_id)
        return

    ctx.processed += 1
    _logger.info(
        "upload_archived: document_id=%s archive_id=%s bytes=%d",
        row.document_id, uploaded.archive_id, len(body),
    )


async def _upload_one(deps, ctx: WorkflowRunContext, row: DocumentRow) -> None:
    try:
        await _upload_document(deps, ctx, row)
    except RowLevelError as e:
        ctx.record_error(str(e), row.document_id)


# ═══════════════════════════════════════════════════════════════════════════════
# JOB PRINCIPAL
# ═══════════════════════════════════════════════════════════════════════════════

async def run_upload_workflow(deps, ctx: WorkflowRunContext) -> WorkflowRunContext:
    """
    Sube a la bóveda los documentos NEW.

    Args:
        deps: VaultDependencies del run
        ctx: Contexto del run (se actualiza en sitio)

    Returns:
        El mismo contexto, con completed=True si no hubo error de nivel run.

    Raises:
        RunLevelError: almacén o bóveda no disponibles
    """
    candidates = await deps.store.fetch_candidates(WorkflowKind.UPLOAD)
    work_map = {row.document_id: row for row in candidates}
    ctx.documents = len(work_map)
    _logger.info("upload_workflow_start: documents=%d", ctx.documents)

    if work_map:
        await process_work_map(
            work_map,
            partial(_upload_one, deps, ctx),
            deps.settings.archive_max_concurrency,
        )

    ctx.completed = True
    return ctx


__all__ = ["ORPHAN_UPLOAD_SCENARIO", "run_upload_workflow"]
# Fin del archivo coldvault/modules/vault/jobs/upload_job.py
