# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/jobs/inventory_job.py

Workflow de inventario (incluye el sub-flujo de restauración).

Flujo:
1. Ventana de purga (fn_get_purged_date_range) normalizada; una ventana
   inválida solo omite la solicitud de un nuevo inventario.
2. list_jobs y partición (en vuelo / inventarios / recuperaciones).
3. Si hay documentos PURGED pendientes: reconciliar cada inventario exitoso.
4. Si no hay inventario en vuelo y hay ventana: solicitar uno nuevo.
5. Restauración: solicitudes nuevas y finalización de jobs terminados.

Autor: ColdVault Team
Fecha: 11/09/2026
"""

from __future__ import annotations

import logging
from typing import Optional

from coldvault.modules.vault.errors import InventoryWindowInvalid
from coldvault.modules.vault.run_context import WorkflowRunContext
from coldvault.modules.vault.schemas import DateRange, PartitionedJobs
from coldvault.modules.vault.services import InventoryReconciler, RestoreService, partition_jobs

_logger = logging.getLogger("vault.jobs.inventory")


# ═══════════════════════════════════════════════════════════════════════════════
# HELPERS
# ═══════════════════════════════════════════════════════════════════════════════

async def _purged_window(deps, ctx: WorkflowRunContext) -> Optional[DateRange]:
    purged_range = await deps.store.get_purged_date_range()
    if purged_range is None:
        _logger.info("inventory_no_purged_window")
        return None
    try:
        window = purged_range.normalized(deps.settings.inventory_max_window_days)
    except InventoryWindowInvalid as e:
        ctx.record_error(str(e))
        return None
    _logger.info("inventory_window: raw=%s normalized=%s", purged_range, window)
    return window


async def _list_partitioned_jobs(deps) -> PartitionedJobs:
    jobs = await deps.archive.list_jobs()
    return partition_jobs(jobs, cooldown_hours=deps.settings.inventory_request_cooldown_hours)


async def _run_restores(deps, ctx: WorkflowRunContext, jobs: PartitionedJobs) -> None:
    restorer = RestoreService(
        deps.store, deps.archive, deps.resolver, ctx,
        concurrency_limit=deps.settings.archive_max_concurrency,
    )
    await restorer.request_restores()
    await restorer.complete_restores(jobs.retrieval_succeeded)


# ═══════════════════════════════════════════════════════════════════════════════
# JOB PRINCIPAL
# ═══════════════════════════════════════════════════════════════════════════════

async def run_inventory_workflow(deps, ctx: WorkflowRunContext) -> WorkflowRunContext:
    """
    Reconcilia inventarios, solicita el siguiente y procesa restauraciones.

    Raises:
        RunLevelError: almacén o bóveda no disponibles
    """
    window = await _purged_window(deps, ctx)
    jobs = await _list_partitioned_jobs(deps)
    reconciler = InventoryReconciler(deps.store, deps.archive, ctx)

    pending = await deps.store.count_inventory_work()
    ctx.documents = pending
    _logger.info(
        "inventory_workflow_start: pending=%d inventories=%d in_flight=%d",
        pending, len(jobs.inventory_succeeded), len(jobs.in_flight_inventory),
    )

    if pending > 0:
        for job in sorted(jobs.inventory_succeeded, key=lambda j: j.creation_date):
            await reconciler.reconcile_job(job)

    if window is not None:
        if jobs.has_inventory_in_flight:
            _logger.info(
                "inventory_request_deferred: in_flight=%s",
                [job.job_id for job in jobs.in_flight_inventory],
            )
        else:
            await reconciler.request_inventory(window)

    await _run_restores(deps, ctx, jobs)

    ctx.completed = True
    return ctx


async def run_restore_workflow(deps, ctx: WorkflowRunContext) -> WorkflowRunContext:
    """Solo el sub-flujo de restauración (ejecución manual)."""
    jobs = await _list_partitioned_jobs(deps)
    await _run_restores(deps, ctx, jobs)
    ctx.completed = True
    return ctx


__all__ = ["run_inventory_workflow", "run_restore_workflow"]
# Fin del archivo coldvault/modules/vault/jobs/inventory_job.py
