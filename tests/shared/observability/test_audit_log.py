# -*- coding: utf-8 -*-
"""
Tests de las bitácoras de auditoría diarias.
"""

import logging
from datetime import date

import pytest

from coldvault.shared.observability import (
    audit_file_path,
    close_audit_logger,
    format_document_entry,
    get_audit_logger,
)


def test_audit_file_name(tmp_path):
    path = audit_file_path(tmp_path, "vault-upload", "errors", date(2026, 9, 4))
    assert path == tmp_path / "vault-upload-errors-2026-09-04.log"


def test_invalid_kind_is_rejected(tmp_path):
    with pytest.raises(ValueError):
        get_audit_logger("vault-upload", "metrics", tmp_path)


def test_lines_are_written_and_not_propagated(tmp_path, caplog):
    logger = get_audit_logger("vault-purge", "orphans", tmp_path)
    with caplog.at_level(logging.INFO):
        logger.info(format_document_entry(1, "arch-1", "PurgeOrphanScenarioOne"))
    close_audit_logger(logger)

    content = audit_file_path(tmp_path, "vault-purge", "orphans").read_text(encoding="utf-8")
    assert content.rstrip().endswith("docId:1,archiveId:arch-1,scenario:PurgeOrphanScenarioOne")
    assert "PurgeOrphanScenarioOne" not in caplog.text
    assert logger.handlers == []


def test_reopening_does_not_duplicate_handlers(tmp_path):
    first = get_audit_logger("vault-delete", "deletes", tmp_path)
    second = get_audit_logger("vault-delete", "deletes", tmp_path, debug=True)
    assert first is second
    assert len(second.handlers) == 2
    close_audit_logger(second)


def test_without_log_dir_uses_null_handler():
    logger = get_audit_logger("vault-inventory", "jobs", None)
    assert isinstance(logger.handlers[0], logging.NullHandler)
    close_audit_logger(logger)
