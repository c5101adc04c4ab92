# -*- coding: utf-8 -*-
"""
Tests del servicio de scheduler (APScheduler).
"""

import pytest

from coldvault.shared.scheduler import SchedulerService, cron_trigger


async def _noop():
    return None


def test_cron_trigger_requires_five_fields():
    with pytest.raises(ValueError):
        cron_trigger("*/5 * * *")
    assert cron_trigger("0 */6 * * *", "UTC") is not None


@pytest.mark.asyncio
async def test_pause_and_resume_job():
    service = SchedulerService(timezone="UTC")
    service.start()
    try:
        assert service.add_cron_job(_noop, "vault_upload", "*/15 * * * *") == "vault_upload"
        assert service.get_job_status("vault_upload")["paused"] is False

        assert service.pause_job("vault_upload")
        assert service.get_job_status("vault_upload")["paused"] is True

        assert service.resume_job("vault_upload")
        assert service.get_job_status("vault_upload")["next_run"] is not None
        assert [job["id"] for job in service.get_jobs()] == ["vault_upload"]
    finally:
        service.shutdown(wait=False)
    assert not service.is_running


@pytest.mark.asyncio
async def test_missing_job_operations_return_false():
    service = SchedulerService(timezone="UTC")
    service.start()
    try:
        assert service.pause_job("nope") is False
        assert service.resume_job("nope") is False
        assert service.remove_job("nope") is False
        assert service.get_job_status("nope") is None
    finally:
        service.shutdown(wait=False)
