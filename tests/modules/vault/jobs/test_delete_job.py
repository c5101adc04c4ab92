# -*- coding: utf-8 -*-
"""
Tests del workflow de borrado local (DELETD* → REMOVED).
"""

import pytest
from conftest import make_row, write_nas_file

from coldvault.modules.vault.enums import DocumentStatus, WorkflowKind, WorkScenario
from coldvault.modules.vault.jobs import run_delete_workflow
from coldvault.modules.vault.services import LocationResolver
from coldvault.shared.observability import audit_file_path


@pytest.mark.asyncio
async def test_delete_removes_file_thumbnail_and_records(deps, store, nas_root, log_dir, make_ctx):
    row = store.add_document(
        make_row(1, DocumentStatus.DELETED, archive_id="arch-1", scenario=WorkScenario.DELETE_NORMAL_ONE),
        category="DELETD 2026",
    )
    path = write_nas_file(nas_root, row)
    thumb = LocationResolver.thumbnail_for(path)
    thumb.write_bytes(b"th")
    ctx = make_ctx(WorkflowKind.DELETE)

    await run_delete_workflow(deps, ctx)
    ctx.close()

    assert not path.exists() and not thumb.exists()
    assert store.status_of(1) == DocumentStatus.REMOVED
    assert 1 not in store.fields
    assert ctx.deleted == 1 and ctx.orphans == 0
    deletes = audit_file_path(log_dir, "vault-delete", "deletes").read_text(encoding="utf-8")
    assert "docId:1,archiveId:arch-1,scenario:DeleteNormalScenarioOne" in deletes


@pytest.mark.asyncio
async def test_missing_file_is_orphan_but_record_removed(deps, store, make_ctx):
    store.add_document(make_row(2, DocumentStatus.DELETED_NORMAL_SCENARIO_TWO))
    ctx = make_ctx(WorkflowKind.DELETE)

    await run_delete_workflow(deps, ctx)

    assert store.status_of(2) == DocumentStatus.REMOVED
    assert ctx.orphans == 1 and ctx.deleted == 0


@pytest.mark.asyncio
async def test_orphan_scenario_skips_filesystem(deps, store, nas_root, make_ctx):
    row = store.add_document(
        make_row(3, DocumentStatus.DELETED_ORPHAN_SCENARIO_TWO, scenario=WorkScenario.DELETE_ORPHAN_TWO)
    )
    path = write_nas_file(nas_root, row)
    ctx = make_ctx(WorkflowKind.DELETE)

    await run_delete_workflow(deps, ctx)

    assert path.exists()
    assert store.status_of(3) == DocumentStatus.REMOVED
    assert ctx.orphans == 1


@pytest.mark.asyncio
async def test_store_failure_keeps_document_for_next_run(deps, store, nas_root, make_ctx):
    path = write_nas_file(nas_root, store.add_document(make_row(4, DocumentStatus.DELETED)))
    store.force_return_code("fn_del_docs", 9, document_id=4)
    ctx = make_ctx(WorkflowKind.DELETE)

    await run_delete_workflow(deps, ctx)

    assert store.status_of(4) == DocumentStatus.DELETED
    assert path.exists()
    assert ctx.errors == 1 and ctx.deleted == 0 and ctx.completed

    retry = make_ctx(WorkflowKind.DELETE)
    await run_delete_workflow(deps, retry)

    assert not path.exists()
    assert store.status_of(4) == DocumentStatus.REMOVED
    assert retry.deleted == 1 and retry.orphans == 0


@pytest.mark.asyncio
async def test_only_deleted_statuses_are_candidates(deps, store, make_ctx):
    store.add_document(make_row(5, DocumentStatus.PURGED))
    store.add_document(make_row(6, DocumentStatus.ARCHIVED))
    ctx = make_ctx(WorkflowKind.DELETE)

    await run_delete_workflow(deps, ctx)

    assert ctx.summary_line() == "0"
    assert store.status_of(5) == DocumentStatus.PURGED
