# -*- coding: utf-8 -*-
"""
Tests de SqlRecordStoreGateway con una sesión falsa (sin DB).

Cubre:
- Paginación LIMIT/OFFSET hasta página vacía
- Mapeo de fallos de conexión a StoreUnavailable
- Mapeo de errores SQL a StoreLogicalError (rollback)
- Lectura de (row_count, return_code)
"""

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from coldvault.modules.vault.enums import DocumentStatus, WorkflowKind
from coldvault.modules.vault.errors import StoreLogicalError, StoreUnavailable
from coldvault.modules.vault.repositories import SqlRecordStoreGateway


class FakeResult:
    def __init__(self, rows, scalar=None):
        self._rows = rows
        self._scalar = scalar

    def mappings(self):
        return self

    def all(self):
        return self._rows

    def first(self):
        return self._rows[0] if self._rows else None

    def scalar(self):
        return self._scalar


class FakeSession:
    def __init__(self, results=None, error=None):
        self.results = list(results or [])
        self.error = error
        self.executed = []
        self.committed = 0
        self.rolled_back = 0

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    async def execute(self, sql, params=None):
        self.executed.append(params)
        if self.error is not None:
            raise self.error
        return self.results.pop(0) if self.results else FakeResult([])

    async def commit(self):
        self.committed += 1

    async def rollback(self):
        self.rolled_back += 1


def _gateway(session, page_size=2):
    return SqlRecordStoreGateway(lambda: session, page_sizes={WorkflowKind.UPLOAD: page_size})


@pytest.mark.asyncio
async def test_fetch_candidates_pages_until_empty():
    session = FakeSession([
        FakeResult([{"document_id": 1, "status": "NEW"}, {"document_id": 2, "status": "NEW"}]),
        FakeResult([{"document_id": 3, "status": "NEW", "file_type": "JPG"}]),
        FakeResult([]),
    ])
    rows = await _gateway(session).fetch_candidates(WorkflowKind.UPLOAD)

    assert [r.document_id for r in rows] == [1, 2, 3]
    assert rows[2].file_type == "jpg"
    assert [p["offset"] for p in session.executed] == [0, 2, 4]
    assert all(p["limit"] == 2 for p in session.executed)


@pytest.mark.asyncio
async def test_connection_failure_is_store_unavailable():
    error = OperationalError("SELECT 1", {}, ConnectionRefusedError("refused"))
    with pytest.raises(StoreUnavailable) as exc_info:
        await _gateway(FakeSession(error=error)).fetch_candidates(WorkflowKind.UPLOAD)
    assert exc_info.value.routine == "fn_get_docs_to_upload"


@pytest.mark.asyncio
async def test_update_status_reads_return_code():
    session = FakeSession([FakeResult([{"row_count": 0, "return_code": 3}])])
    result = await _gateway(session).update_status(7, DocumentStatus.NEW, DocumentStatus.ARCHIVED)

    assert result.row_count == 0 and result.return_code == 3
    assert session.executed[0] == {"document_id": 7, "expected_status": "NEW", "new_status": "ARCHVD"}
    assert session.committed == 1


@pytest.mark.asyncio
async def test_routine_without_row_is_no_data():
    result = await _gateway(FakeSession([FakeResult([])])).mark_purged(4)
    assert result.return_code == 1403


@pytest.mark.asyncio
async def test_sql_error_rolls_back_as_logical_error():
    session = FakeSession(error=IntegrityError("INSERT", {}, Exception("duplicate")))
    with pytest.raises(StoreLogicalError) as exc_info:
        await _gateway(session).delete_document_records(4)
    assert exc_info.value.return_code == 9
    assert exc_info.value.document_id == 4
    assert session.rolled_back == 1


@pytest.mark.asyncio
async def test_archive_settings_json_is_parsed():
    session = FakeSession([FakeResult([], scalar='{"accessKeyId": "AK", "region": "us-west-2"}')])
    settings = await _gateway(session).get_archive_settings()
    assert settings == {"accessKeyId": "AK", "region": "us-west-2"}


@pytest.mark.asyncio
async def test_empty_date_range_is_none():
    session = FakeSession([FakeResult([{"min_date": None, "max_date": None}])])
    assert await _gateway(session).get_purged_date_range() is None


@pytest.mark.asyncio
async def test_batch_update_uses_expanding_ids():
    class RowCountResult(FakeResult):
        rowcount = 2

    session = FakeSession([RowCountResult([])])
    gateway = _gateway(session)

    assert await gateway.batch_update_status([], DocumentStatus.PURGED, DocumentStatus.DELETED) == 0
    assert session.executed == []

    assert await gateway.batch_update_status([4, 5], DocumentStatus.PURGED, DocumentStatus.DELETED) == 2
    assert session.executed[0] == {"ids": [4, 5], "expected_status": "PURGED", "new_status": "DELETD"}
