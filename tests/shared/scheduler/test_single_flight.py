# -*- coding: utf-8 -*-
"""
Tests de la guardia de vuelo único.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from coldvault.shared.scheduler import SingleFlightGuard


@pytest.mark.asyncio
async def test_second_fire_waits_for_first():
    guard = SingleFlightGuard()
    release = asyncio.Event()
    order = []

    async def first():
        order.append("first-start")
        await release.wait()
        order.append("first-end")
        return "first"

    async def second():
        order.append("second")
        return "second"

    task_one = asyncio.create_task(guard.run("upload", first))
    await asyncio.sleep(0)
    assert guard.is_running("upload")

    task_two = asyncio.create_task(guard.run("upload", second))
    await asyncio.sleep(0)
    assert order == ["first-start"]

    release.set()
    assert await asyncio.gather(task_one, task_two) == ["first", "second"]
    assert order == ["first-start", "first-end", "second"]
    assert not guard.is_running("upload")


@pytest.mark.asyncio
async def test_different_kinds_run_in_parallel():
    guard = SingleFlightGuard()
    release = asyncio.Event()

    async def blocked():
        await release.wait()
        return "upload"

    async def quick():
        return "purge"

    pending = asyncio.create_task(guard.run("upload", blocked))
    await asyncio.sleep(0)
    assert await guard.run("purge", quick) == "purge"
    release.set()
    assert await pending == "upload"


@pytest.mark.asyncio
async def test_job_is_paused_and_resumed_on_failure():
    scheduler = MagicMock()
    scheduler.pause_job.return_value = True
    guard = SingleFlightGuard(scheduler)

    async def broken():
        raise RuntimeError("boom")

    line = await guard.run("inventory", broken, job_id="vault_inventory")

    assert line == "\tInventory failed: RuntimeError."
    scheduler.pause_job.assert_called_once_with("vault_inventory")
    scheduler.resume_job.assert_called_once_with("vault_inventory")


@pytest.mark.asyncio
async def test_missing_job_is_not_resumed():
    scheduler = MagicMock()
    scheduler.pause_job.return_value = False
    guard = SingleFlightGuard(scheduler)

    async def ok():
        return "done"

    assert await guard.run("delete", ok, job_id="vault_delete") == "done"
    scheduler.resume_job.assert_not_called()
