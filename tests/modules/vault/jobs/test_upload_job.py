# -*- coding: utf-8 -*-
"""
Tests del workflow de subida (NEW → ARCHVD | DELETD_OS2).
"""

import pytest
from conftest import make_row, write_nas_file

from coldvault.modules.vault.enums import DocumentStatus, WorkflowKind
from coldvault.modules.vault.errors import ArchiveNotFound, ArchiveUnavailable
from coldvault.modules.vault.jobs import run_upload_workflow
from coldvault.shared.observability import audit_file_path
from coldvault.shared.utils import calculate_tree_hash_bytes


@pytest.mark.asyncio
async def test_upload_archives_new_documents(deps, store, archive, nas_root, make_ctx):
    row = store.add_document(make_row(1, DocumentStatus.NEW))
    write_nas_file(nas_root, row, b"contenido uno")
    ctx = make_ctx(WorkflowKind.UPLOAD)

    await run_upload_workflow(deps, ctx)

    assert store.status_of(1) == DocumentStatus.ARCHIVED
    record = store.archives[1]
    assert record.archive_id == "archive-1"
    assert record.checksum == calculate_tree_hash_bytes(b"contenido uno")
    assert record.file_size_bytes == len(b"contenido uno")
    assert record.parid == 901
    assert archive.uploaded == ["1"]
    assert ctx.completed and ctx.documents == 1 and ctx.processed == 1
    assert ctx.summary_line() == "\tUpload completed: true.\tDocuments: 1.\tErrors: 0.\tOrphans: 0."


@pytest.mark.asyncio
async def test_missing_file_becomes_orphan_without_upload(deps, store, archive, make_ctx):
    store.add_document(make_row(2, DocumentStatus.NEW))
    ctx = make_ctx(WorkflowKind.UPLOAD)

    await run_upload_workflow(deps, ctx)

    assert store.status_of(2) == DocumentStatus.DELETED_ORPHAN_SCENARIO_TWO
    assert archive.uploaded == []
    assert ctx.orphans == 1 and ctx.errors == 0


@pytest.mark.asyncio
async def test_checksum_mismatch_keeps_document_new(deps, store, archive, nas_root, make_ctx):
    row = store.add_document(make_row(3, DocumentStatus.NEW))
    write_nas_file(nas_root, row)
    archive.returned_checksum = "0" * 64
    ctx = make_ctx(WorkflowKind.UPLOAD)

    await run_upload_workflow(deps, ctx)

    assert store.status_of(3) == DocumentStatus.NEW
    assert 3 not in store.archives
    assert ctx.errors == 1 and ctx.completed


@pytest.mark.asyncio
async def test_store_rejection_is_row_level(deps, store, nas_root, log_dir, make_ctx):
    for doc_id in (4, 5):
        write_nas_file(nas_root, store.add_document(make_row(doc_id, DocumentStatus.NEW)))
    store.force_return_code("fn_ins_archive", 3, document_id=4)
    ctx = make_ctx(WorkflowKind.UPLOAD)

    await run_upload_workflow(deps, ctx)
    ctx.close()

    assert store.status_of(4) == DocumentStatus.NEW
    assert store.status_of(5) == DocumentStatus.ARCHIVED
    assert ctx.errors == 1 and ctx.completed
    errors = audit_file_path(log_dir, "vault-upload", "errors").read_text(encoding="utf-8")
    assert "docId:4" in errors
    assert "orphanArchiveId:archive-4" in errors


@pytest.mark.asyncio
async def test_missing_vault_aborts_run(deps, store, archive, nas_root, make_ctx):
    write_nas_file(nas_root, store.add_document(make_row(6, DocumentStatus.NEW)))
    archive.fail_next("upload_archive", ArchiveNotFound("upload_archive", "coldvault-test"))
    ctx = make_ctx(WorkflowKind.UPLOAD)

    with pytest.raises(ArchiveUnavailable):
        await run_upload_workflow(deps, ctx)

    assert store.status_of(6) == DocumentStatus.NEW
    assert not ctx.completed


@pytest.mark.asyncio
async def test_nothing_to_upload(deps, make_ctx):
    ctx = make_ctx(WorkflowKind.UPLOAD)
    await run_upload_workflow(deps, ctx)
    assert ctx.summary_line() == "0"
