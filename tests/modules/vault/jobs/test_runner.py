# -*- coding: utf-8 -*-
"""
Tests de execute_workflow: frontera de errores de nivel run.
"""

import pytest
from conftest import make_row, write_nas_file

from coldvault.modules.vault.enums import DocumentStatus, WorkflowKind
from coldvault.modules.vault.jobs import execute_workflow, runner


@pytest.mark.asyncio
async def test_successful_run_returns_closed_context(deps, store, nas_root):
    write_nas_file(nas_root, store.add_document(make_row(1, DocumentStatus.NEW)))

    ctx = await execute_workflow("upload", deps=deps)

    assert ctx.completed
    assert ctx.finished_at is not None
    assert ctx.summary_line() == "\tUpload completed: true.\tDocuments: 1.\tErrors: 0.\tOrphans: 0."


@pytest.mark.asyncio
async def test_store_outage_marks_run_incomplete(deps, store):
    store.available = False

    ctx = await execute_workflow(WorkflowKind.PURGE, deps=deps)

    assert not ctx.completed
    assert ctx.failure.startswith("StoreUnavailable")
    assert ctx.errors == 1
    assert ctx.summary_line().startswith("\tPurge completed: false.")


@pytest.mark.asyncio
async def test_unexpected_error_is_contained(deps, monkeypatch):
    async def _broken(deps, ctx):
        raise RuntimeError("inesperado")

    monkeypatch.setitem(runner.WORKFLOWS, WorkflowKind.DELETE, _broken)

    ctx = await execute_workflow(WorkflowKind.DELETE, deps=deps)

    assert not ctx.completed
    assert ctx.failure == "RuntimeError: inesperado"


@pytest.mark.asyncio
async def test_unknown_kind_is_rejected(deps):
    with pytest.raises(ValueError):
        await execute_workflow("compress", deps=deps)
