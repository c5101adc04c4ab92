# -*- coding: utf-8 -*-
"""
Tests del registro de workflows en el scheduler y de cada disparo.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from coldvault.modules.vault.enums import WorkflowKind
from coldvault.modules.vault.jobs import WorkflowTrigger, job_id_for, register_vault_jobs
from coldvault.shared.observability import audit_file_path
from coldvault.shared.scheduler import ProcessResult, SingleFlightGuard

PURGE_LINE = "\tPurge completed: true.\tDocuments: 1.\tDocuments purged in AWS: 1.\tAll others: 0.\tErrors: 0."


def _scheduler():
    scheduler = MagicMock()
    scheduler.add_cron_job.side_effect = lambda func, job_id, cron_expression: job_id
    return scheduler


def test_registers_enabled_workflows(vault_settings):
    settings = vault_settings.model_copy(update={"delete_job_enabled": False, "upload_cron": "*/5 * * * *"})
    scheduler = _scheduler()

    registered = register_vault_jobs(scheduler, settings)

    assert registered == ["vault_upload", "vault_purge", "vault_inventory"]
    first = scheduler.add_cron_job.call_args_list[0].kwargs
    assert first["cron_expression"] == "*/5 * * * *"
    assert first["func"].__self__.kind == WorkflowKind.UPLOAD


@pytest.mark.asyncio
async def test_inline_fire_writes_jobs_log(vault_settings, log_dir):
    ctx = MagicMock()
    ctx.summary_line.return_value = PURGE_LINE
    trigger = WorkflowTrigger(WorkflowKind.PURGE, SingleFlightGuard(), vault_settings)

    with patch("coldvault.modules.vault.jobs.registry.execute_workflow", AsyncMock(return_value=ctx)) as run:
        line = await trigger.fire()

    assert line == PURGE_LINE
    run.assert_awaited_once_with(WorkflowKind.PURGE, settings=vault_settings)
    content = audit_file_path(log_dir, "vault-service", "jobs").read_text(encoding="utf-8")
    assert PURGE_LINE in content


@pytest.mark.asyncio
async def test_nothing_to_do_is_not_logged(vault_settings, log_dir):
    ctx = MagicMock()
    ctx.summary_line.return_value = "0"
    trigger = WorkflowTrigger(WorkflowKind.UPLOAD, SingleFlightGuard(), vault_settings)

    with patch("coldvault.modules.vault.jobs.registry.execute_workflow", AsyncMock(return_value=ctx)):
        assert await trigger.fire() == "0"

    assert not audit_file_path(log_dir, "vault-service", "jobs").exists()


@pytest.mark.asyncio
async def test_process_isolation_runs_child(vault_settings):
    settings = vault_settings.model_copy(update={"scheduler_isolation": "process"})
    scheduler = MagicMock()
    scheduler.pause_job.return_value = True
    trigger = WorkflowTrigger(WorkflowKind.PURGE, SingleFlightGuard(scheduler), settings)
    child = AsyncMock(return_value=ProcessResult(returncode=1, last_line=PURGE_LINE))

    with patch("coldvault.modules.vault.jobs.registry.run_module_process", child):
        assert await trigger.fire() == PURGE_LINE

    child.assert_awaited_once_with("coldvault", ["run", "purge"])
    scheduler.pause_job.assert_called_once_with(job_id_for(WorkflowKind.PURGE))
    scheduler.resume_job.assert_called_once_with("vault_purge")
