# -*- coding: utf-8 -*-
"""
Tests de restauración desde la bóveda.

Cubre:
- solicitud de jobs archive-retrieval para PENDING RESTORE
- escritura en el NAS solo si el tree hash coincide
- payload corrupto: sin archivo y el documento sigue en RESTORE REQUESTED
"""

import pytest
from conftest import make_job, make_row, utc

from coldvault.modules.vault.enums import DocumentStatus, WorkflowKind
from coldvault.modules.vault.services import RestoreService, build_retrieval_job_parameters
from coldvault.modules.vault.services.restore_service import latest_job_by_archive
from coldvault.shared.utils import calculate_tree_hash_bytes

PAYLOAD = b"%PDF-1.4 contenido restaurado"


def _pending_restore(store, document_id=7, archive_id="arch-7", checksum=None):
    row = make_row(
        document_id,
        DocumentStatus.PENDING_RESTORE,
        archive_id=archive_id,
        checksum=checksum or calculate_tree_hash_bytes(PAYLOAD),
    )
    return store.add_document(row)


@pytest.fixture
def service(store, archive, resolver, make_ctx):
    return RestoreService(store, archive, resolver, make_ctx(WorkflowKind.RESTORE), concurrency_limit=2)


def test_retrieval_job_parameters():
    assert build_retrieval_job_parameters("arch-7", 7) == {
        "Type": "archive-retrieval",
        "ArchiveId": "arch-7",
        "Description": "Restore DocId: 7",
    }


def test_latest_job_by_archive_keeps_newest():
    jobs = [
        make_job("old", "ArchiveRetrieval", "Succeeded", utc(2026, 9, 1), ArchiveId="a"),
        make_job("new", "ArchiveRetrieval", "Succeeded", utc(2026, 9, 2), ArchiveId="a"),
        make_job("none", "ArchiveRetrieval", "Succeeded", utc(2026, 9, 3)),
    ]
    assert {k: v.job_id for k, v in latest_job_by_archive(jobs).items()} == {"a": "new"}


@pytest.mark.asyncio
async def test_request_restores_initiates_jobs(service, store, archive):
    _pending_restore(store)
    store.add_document(make_row(8, DocumentStatus.PENDING_RESTORE))

    assert await service.request_restores() == 1

    assert archive.initiated == [build_retrieval_job_parameters("arch-7", 7)]
    assert store.status_of(7) == DocumentStatus.RESTORE_REQUESTED
    assert store.status_of(8) == DocumentStatus.PENDING_RESTORE
    assert service.ctx.errors == 1
    assert service.ctx.documents == 2


@pytest.mark.asyncio
async def test_complete_restore_writes_file(service, store, archive, resolver):
    row = _pending_restore(store)
    await service.request_restores()
    archive.job_outputs["job-1"] = PAYLOAD
    job = make_job("job-1", "ArchiveRetrieval", "Succeeded", utc(2026, 9, 4), ArchiveId="arch-7")

    assert await service.complete_restores([job]) == 1

    path = resolver.path_for(row.document_type, row.resolved_file_system_id, row.file_type)
    assert path.read_bytes() == PAYLOAD
    assert store.status_of(7) == DocumentStatus.ARCHIVED
    assert service.ctx.restored == 1


@pytest.mark.asyncio
async def test_corrupted_payload_is_not_written(service, store, archive, resolver):
    row = _pending_restore(store)
    await service.request_restores()
    archive.job_outputs["job-1"] = PAYLOAD + b"corrupto"
    job = make_job("job-1", "ArchiveRetrieval", "Succeeded", utc(2026, 9, 4), ArchiveId="arch-7")

    assert await service.complete_restores([job]) == 0

    path = resolver.path_for(row.document_type, row.resolved_file_system_id, row.file_type)
    assert not path.exists()
    assert store.status_of(7) == DocumentStatus.RESTORE_REQUESTED
    assert service.ctx.errors == 1


@pytest.mark.asyncio
async def test_restore_without_recorded_checksum_is_not_written(service, store, archive, resolver):
    row = store.add_document(make_row(7, DocumentStatus.PENDING_RESTORE, archive_id="arch-7"))
    await service.request_restores()
    archive.job_outputs["job-1"] = PAYLOAD
    job = make_job(
        "job-1", "ArchiveRetrieval", "Succeeded", utc(2026, 9, 4),
        ArchiveId="arch-7", ArchiveSHA256TreeHash=calculate_tree_hash_bytes(PAYLOAD),
    )

    assert await service.complete_restores([job]) == 0

    path = resolver.path_for(row.document_type, row.resolved_file_system_id, row.file_type)
    assert not path.exists()
    assert store.status_of(7) == DocumentStatus.RESTORE_REQUESTED
    assert service.ctx.errors == 1


@pytest.mark.asyncio
async def test_expired_job_output_is_recorded(service, store, archive):
    _pending_restore(store)
    await service.request_restores()
    job = make_job("job-1", "ArchiveRetrieval", "Succeeded", utc(2026, 9, 4), ArchiveId="arch-7")

    assert await service.complete_restores([job]) == 0
    assert store.status_of(7) == DocumentStatus.RESTORE_REQUESTED
    assert service.ctx.errors == 1


@pytest.mark.asyncio
async def test_nothing_pending_skips_listing(service, store):
    assert await service.complete_restores([]) == 0
    assert ("fn_get_restore_jobs", None) not in store.calls
