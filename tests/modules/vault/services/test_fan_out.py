# -*- coding: utf-8 -*-
"""
Tests del procesamiento concurrente del mapa de trabajo.
"""

import asyncio

import pytest

from coldvault.modules.vault.errors import ArchiveUnavailable
from coldvault.modules.vault.services import process_work_map


@pytest.mark.asyncio
async def test_concurrency_is_bounded():
    in_flight = 0
    peak = 0
    seen = []

    async def worker(item):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        seen.append(item)
        in_flight -= 1

    await process_work_map({i: f"doc-{i}" for i in range(10)}, worker, concurrency_limit=3)

    assert peak == 3
    assert sorted(seen) == sorted(f"doc-{i}" for i in range(10))


@pytest.mark.asyncio
async def test_empty_map_is_a_noop():
    async def worker(item):
        raise AssertionError("no debería llamarse")

    await process_work_map({}, worker, concurrency_limit=2)


@pytest.mark.asyncio
async def test_run_level_error_stops_pending_items():
    processed = []

    async def worker(item):
        if item == 0:
            raise ArchiveUnavailable("upload_archive", "ServiceUnavailable")
        processed.append(item)

    with pytest.raises(ArchiveUnavailable):
        await process_work_map({i: i for i in range(5)}, worker, concurrency_limit=1)

    assert processed == []


@pytest.mark.asyncio
async def test_unclassified_error_surfaces_after_all_items():
    processed = []

    async def worker(item):
        if item == 1:
            raise KeyError("boom")
        processed.append(item)

    with pytest.raises(KeyError):
        await process_work_map({i: i for i in range(3)}, worker, concurrency_limit=1)

    assert processed == [0, 2]
