# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/jobs/delete_job.py

Workflow de borrado local: DELETD | DELETD_NS2 | DELETD_OS2 → REMOVED.

Primero fn_del_docs; los códigos 3 / 9 dejan la fila y su archivo para el
próximo run. Con los registros eliminados:
- Escenarios normales: borra el archivo del NAS y su miniatura (-th);
  si el archivo ya no estaba, el documento se reporta como huérfano.
- Escenarios huérfanos: no se toca el NAS.

Cada documento queda en la bitácora de borrados o en la de huérfanos.

Autor: ColdVault Team
Fecha: 10/09/2026
"""

from __future__ import annotations

import asyncio
import logging
from functools import partial

from coldvault.modules.vault.enums import TransitionOutcome, WorkflowKind, next_status
from coldvault.modules.vault.errors import FilesystemAccessDenied, FilesystemNotFound, RowLevelError
from coldvault.modules.vault.repositories import raise_for_return_code
from coldvault.modules.vault.run_context import WorkflowRunContext
from coldvault.modules.vault.schemas import DocumentRow
from coldvault.modules.vault.services import LocationResolver, process_work_map
from coldvault.shared.utils import remove_file_if_exists

_logger = logging.getLogger("vault.jobs.delete")


async def _remove_local_file(resolver: LocationResolver, row: DocumentRow) -> bool:
    """
    Borra el archivo y su miniatura.

    Returns:
        True si el archivo principal existía y se borró.
    """
    try:
        path = resolver.path_for(row.document_type, row.resolved_file_system_id, row.file_type)
    except FilesystemNotFound:
        return False

    try:
        removed = await asyncio.to_thread(remove_file_if_exists, path)
        thumb_removed = await asyncio.to_thread(remove_file_if_exists, resolver.thumbnail_for(path))
    except OSError as e:
        raise FilesystemAccessDenied(path, str(e)) from e

    if not removed:
        _logger.warning("delete_file_missing: document_id=%s path=%s", row.document_id, path)
    _logger.debug(
        "delete_file_removed: document_id=%s removed=%s thumbnail=%s",
        row.document_id, removed, thumb_removed,
    )
    return removed


async def _delete_one(deps, ctx: WorkflowRunContext, row: DocumentRow) -> None:
    try:
        next_status(WorkflowKind.DELETE, row.status, TransitionOutcome.REMOVED)

        # Registros primero: si el almacén rechaza (3/9) el archivo sigue en el NAS
        result = await deps.store.delete_document_records(row.document_id)
        raise_for_return_code("fn_del_docs", result, row.document_id)

        orphan = row.scenario is not None and row.scenario.is_orphan
        if not orphan:
            orphan = not await _remove_local_file(deps.resolver, row)

        scenario = row.scenario.value if row.scenario else row.status.value
        if orphan:
            ctx.record_orphan(row.document_id, row.resolved_archive_id, scenario)
        else:
            ctx.record_deleted(row.document_id, row.resolved_archive_id, scenario)
    except RowLevelError as e:
        ctx.record_error(str(e), row.document_id)


async def run_delete_workflow(deps, ctx: WorkflowRunContext) -> WorkflowRunContext:
    """Elimina archivos y registros de los documentos marcados DELETD*."""
    candidates = await deps.store.fetch_candidates(WorkflowKind.DELETE)
    work_map = {row.document_id: row for row in candidates}
    ctx.documents = len(work_map)
    _logger.info("delete_workflow_start: documents=%d", ctx.documents)

    if work_map:
        await process_work_map(
            work_map,
            partial(_delete_one, deps, ctx),
            deps.settings.archive_max_concurrency,
        )

    ctx.completed = True
    return ctx


__all__ = ["run_delete_workflow"]
# Fin del archivo coldvault/modules/vault/jobs/delete_job.py
