# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/jobs/registry.py

Registro de los workflows programados en el scheduler.

Un job cron por workflow (UPLOAD_CRON, PURGE_CRON, DELETE_CRON,
INVENTORY_CRON), cada uno detrás del SingleFlightGuard. Según
SCHEDULER_ISOLATION cada disparo corre:
- process: en un intérprete hijo (python -m coldvault run <kind>)
- inline:  en el mismo event loop (execute_workflow)

La línea de estado de cada run se escribe en la bitácora "jobs" del
servicio, salvo que sea "0" (nada que hacer).

Autor: ColdVault Team
Fecha: 12/09/2026
"""

from __future__ import annotations

import logging
from typing import List, Optional

from coldvault.modules.vault.enums import SCHEDULED_WORKFLOWS, WorkflowKind
from coldvault.modules.vault.run_context import NOTHING_TO_DO
from coldvault.shared.config import BaseAppSettings, get_settings
from coldvault.shared.observability import close_audit_logger, get_audit_logger
from coldvault.shared.scheduler import SingleFlightGuard, run_module_process

from .runner import RUN_COMPLETED_EXIT_CODE, execute_workflow

_logger = logging.getLogger("vault.jobs.registry")

# ═══════════════════════════════════════════════════════════════════════════════
# CONFIGURACIÓN
# ═══════════════════════════════════════════════════════════════════════════════
JOB_ID_PREFIX = "vault_"


def job_id_for(kind: WorkflowKind) -> str:
    return f"{JOB_ID_PREFIX}{WorkflowKind(kind).value}"


def _cron_for(settings: BaseAppSettings, kind: WorkflowKind) -> str:
    return getattr(settings, f"{kind.value}_cron")


def _enabled(settings: BaseAppSettings, kind: WorkflowKind) -> bool:
    return bool(getattr(settings, f"{kind.value}_job_enabled"))


# ═══════════════════════════════════════════════════════════════════════════════
# EJECUCIÓN DE UN DISPARO
# ═══════════════════════════════════════════════════════════════════════════════

class WorkflowTrigger:
    """Disparo de un workflow; el scheduler invoca fire()."""

    def __init__(self, kind: WorkflowKind, guard: SingleFlightGuard, settings: BaseAppSettings):
        self.kind = WorkflowKind(kind)
        self.guard = guard
        self.settings = settings
        self.job_id = job_id_for(self.kind)

    async def fire(self) -> str:
        line = await self.guard.run(self.kind.value, self._run_once, job_id=self.job_id)
        if line != NOTHING_TO_DO:
            self._write_jobs_log(line)
        return line

    def _write_jobs_log(self, line: str) -> None:
        # Archivo diario: se abre por disparo
        s = self.settings
        jobs_log = get_audit_logger(s.log_prefix_service, "jobs", s.log_dir, s.debug)
        try:
            jobs_log.info(line)
        finally:
            close_audit_logger(jobs_log)

    async def _run_once(self) -> str:
        if self.settings.scheduler_isolation == "inline":
            ctx = await execute_workflow(self.kind, settings=self.settings)
            return ctx.summary_line()

        result = await run_module_process("coldvault", ["run", self.kind.value])
        if result.returncode != RUN_COMPLETED_EXIT_CODE:
            _logger.warning(
                "workflow_process_unexpected_exit: kind=%s returncode=%s",
                self.kind.value, result.returncode,
            )
        return result.last_line


# ═══════════════════════════════════════════════════════════════════════════════
# REGISTRO EN SCHEDULER
# ═══════════════════════════════════════════════════════════════════════════════

def register_vault_jobs(
    scheduler=None,
    settings: Optional[BaseAppSettings] = None,
    guard: Optional[SingleFlightGuard] = None,
) -> List[str]:
    """
    Registra los workflows habilitados en el scheduler.

    Args:
        scheduler: Instancia de SchedulerService (opcional, usa global si None)
        settings: Configuración (default: get_settings())
        guard: SingleFlightGuard compartido (default: uno nuevo sobre `scheduler`)

    Returns:
        IDs de los jobs registrados (los deshabilitados no aparecen)
    """
    settings = settings or get_settings()
    if scheduler is None:
        from coldvault.shared.scheduler import get_scheduler
        scheduler = get_scheduler(settings.scheduler_timezone)
    guard = guard or SingleFlightGuard(scheduler)

    registered: List[str] = []
    for kind in SCHEDULED_WORKFLOWS:
        if not _enabled(settings, kind):
            _logger.info("vault_job_disabled: kind=%s", kind.value)
            continue
        trigger = WorkflowTrigger(kind, guard, settings)
        registered.append(scheduler.add_cron_job(
            func=trigger.fire,
            job_id=job_id_for(kind),
            cron_expression=_cron_for(settings, kind),
        ))

    _logger.info(
        "vault_jobs_registered: jobs=%s isolation=%s timezone=%s",
        registered, settings.scheduler_isolation, settings.scheduler_timezone,
    )
    return registered


__all__ = ["WorkflowTrigger", "job_id_for", "register_vault_jobs"]
# Fin del archivo coldvault/modules/vault/jobs/registry.py
