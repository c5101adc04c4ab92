# -*- coding: utf-8 -*-
"""
Tests del contexto de run: líneas de estado, bitácoras y modo debug.
"""

from datetime import datetime, timezone

from coldvault.modules.vault.enums import WorkflowKind
from coldvault.modules.vault.run_context import NOTHING_TO_DO, WorkflowRunContext
from coldvault.shared.observability import audit_file_path


def test_empty_completed_run_prints_zero(make_ctx):
    ctx = make_ctx(WorkflowKind.UPLOAD)
    ctx.completed = True
    assert ctx.summary_line() == NOTHING_TO_DO


def test_failed_empty_run_still_reports(make_ctx):
    ctx = make_ctx(WorkflowKind.PURGE)
    ctx.fail(RuntimeError("caído"))
    assert ctx.summary_line().startswith("\tPurge completed: false.")
    assert ctx.errors == 1
    assert ctx.failure == "RuntimeError: caído"


def test_upload_summary_line(make_ctx):
    ctx = make_ctx(WorkflowKind.UPLOAD)
    ctx.documents, ctx.orphans, ctx.completed = 3, 1, True
    ctx.record_error("boom", document_id=2)
    assert ctx.summary_line() == "\tUpload completed: true.\tDocuments: 3.\tErrors: 1.\tOrphans: 1."


def test_purge_and_delete_summary_lines(make_ctx):
    purge = make_ctx(WorkflowKind.PURGE)
    purge.documents, purge.purged_remote, purge.others, purge.completed = 4, 3, 1, True
    assert purge.summary_line() == (
        "\tPurge completed: true.\tDocuments: 4.\tDocuments purged in AWS: 3."
        "\tAll others: 1.\tErrors: 0."
    )

    delete = make_ctx(WorkflowKind.DELETE)
    delete.documents, delete.deleted, delete.orphans, delete.completed = 2, 1, 1, True
    assert delete.summary_line() == (
        "\tDelete completed: true.\tDocuments: 2.\tErrors: 0.\tDeletes: 1.\tOrphans: 1."
    )


def test_inventory_summary_is_never_zero(make_ctx):
    ctx = make_ctx(WorkflowKind.INVENTORY)
    ctx.completed = True
    ctx.last_inventory_request = datetime(2026, 9, 4, 10, 0, tzinfo=timezone.utc)
    assert ctx.summary_line() == (
        "\tInventory completed: true.\tLast Job Request: 2026-09-04T10:00:00+00:00."
        "\tProcessed: 0.\tRestores: 0.\tErrors: 0."
    )


def test_debug_mode_logs_errors_without_counting(make_ctx, log_dir):
    ctx = make_ctx(WorkflowKind.DELETE, debug=True)
    ctx.record_error("no se pudo borrar", document_id=8)
    ctx.close()

    assert ctx.errors == 0
    content = audit_file_path(log_dir, "vault-delete", "errors").read_text(encoding="utf-8")
    assert "docId:8 no se pudo borrar" in content


def test_orphan_and_delete_entries_are_written(make_ctx, log_dir):
    ctx = make_ctx(WorkflowKind.DELETE)
    ctx.record_orphan(5, "arch-5", "DeleteOrphanScenarioOne")
    ctx.record_deleted(6, "arch-6", "DeleteNormalScenarioOne")
    ctx.close()

    orphans = audit_file_path(log_dir, "vault-delete", "orphans").read_text(encoding="utf-8")
    deletes = audit_file_path(log_dir, "vault-delete", "deletes").read_text(encoding="utf-8")
    assert "docId:5,archiveId:arch-5,scenario:DeleteOrphanScenarioOne" in orphans
    assert "docId:6,archiveId:arch-6,scenario:DeleteNormalScenarioOne" in deletes
    assert (ctx.orphans, ctx.deleted) == (1, 1)


def test_restore_context_uses_inventory_prefix(vault_settings):
    ctx = WorkflowRunContext.from_settings(WorkflowKind.RESTORE, vault_settings)
    try:
        assert ctx.log_prefix == vault_settings.log_prefix_for("inventory")
        assert ctx.workflow == WorkflowKind.RESTORE
    finally:
        ctx.close()


def test_to_stats_reports_failure(make_ctx):
    ctx = make_ctx(WorkflowKind.UPLOAD)
    ctx.documents = 2
    ctx.fail(ValueError("x"))
    ctx.finish()
    stats = ctx.to_stats()
    assert stats["job_id"] == "vault_upload"
    assert stats["completed"] is False
    assert stats["error"] == "ValueError: x"
    assert stats["duration_ms"] >= 0
