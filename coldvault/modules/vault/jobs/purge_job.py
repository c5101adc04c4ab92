# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/jobs/purge_job.py

Workflow de purga: PENDING PURGE → PURGED | DELETD_NS2.

- PurgeNormalScenarioOne / PurgeOrphanScenarioOne con archive_id:
  delete_archive en la bóveda (NotFound cuenta como borrado) y
  fn_upd_doc_purged (el almacén sella la fecha de purga).
- PurgeNormalScenarioTwo, o cualquier fila sin archive_id resoluble:
  sin llamada remota, DELETD_NS2.

Autor: ColdVault Team
Fecha: 10/09/2026
"""

from __future__ import annotations

import logging
from functools import partial

from coldvault.modules.vault.enums import TransitionOutcome, WorkflowKind, next_status
from coldvault.modules.vault.errors import ArchiveNotFound, RowLevelError
from coldvault.modules.vault.repositories import raise_for_return_code
from coldvault.modules.vault.run_context import WorkflowRunContext
from coldvault.modules.vault.schemas import DocumentRow
from coldvault.modules.vault.services import process_work_map

_logger = logging.getLogger("vault.jobs.purge")


def requires_remote_delete(row: DocumentRow) -> bool:
    if not row.resolved_archive_id:
        return False
    return row.scenario is None or row.scenario.requires_remote_delete


async def _purge_remote(deps, ctx: WorkflowRunContext, row: DocumentRow) -> None:
    archive_id = row.resolved_archive_id
    next_status(WorkflowKind.PURGE, row.status, TransitionOutcome.REMOTE_DELETED)

    try:
        await deps.archive.delete_archive(archive_id)
        outcome = TransitionOutcome.REMOTE_DELETED
    except ArchiveNotFound:
        outcome = TransitionOutcome.REMOTE_NOT_FOUND
        _logger.info("purge_archive_already_gone: document_id=%s archive_id=%s", row.document_id, archive_id)

    result = await deps.store.mark_purged(row.document_id)
    raise_for_return_code("fn_upd_doc_purged", result, row.document_id)

    ctx.purged_remote += 1
    _logger.info(
        "purge_done: document_id=%s archive_id=%s outcome=%s",
        row.document_id, archive_id, outcome.value,
    )


async def _flag_without_archive(deps, ctx: WorkflowRunContext, row: DocumentRow) -> None:
    target = next_status(WorkflowKind.PURGE, row.status, TransitionOutcome.NO_ARCHIVE)
    result = await deps.store.update_status(row.document_id, row.status, target)
    raise_for_return_code("fn_upd_doc_status", result, row.document_id)

    ctx.others += 1
    _logger.info(
        "purge_flagged_local: document_id=%s scenario=%s status=%s",
        row.document_id, row.scenario, target.value,
    )


async def _purge_one(deps, ctx: WorkflowRunContext, row: DocumentRow) -> None:
    try:
        if requires_remote_delete(row):
            await _purge_remote(deps, ctx, row)
        else:
            await _flag_without_archive(deps, ctx, row)
    except RowLevelError as e:
        ctx.record_error(str(e), row.document_id)


async def run_purge_workflow(deps, ctx: WorkflowRunContext) -> WorkflowRunContext:
    """Purga de la bóveda los documentos PENDING PURGE."""
    candidates = await deps.store.fetch_candidates(WorkflowKind.PURGE)
    work_map = {row.document_id: row for row in candidates}
    ctx.documents = len(work_map)
    _logger.info("purge_workflow_start: documents=%d", ctx.documents)

    if work_map:
        await process_work_map(
            work_map,
            partial(_purge_one, deps, ctx),
            deps.settings.archive_max_concurrency,
        )

    ctx.completed = True
    return ctx


__all__ = ["requires_remote_delete", "run_purge_workflow"]
# Fin del archivo coldvault/modules/vault/jobs/purge_job.py
