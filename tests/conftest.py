# -*- coding: utf-8 -*-
"""
tests/conftest.py

Config global de tests para ColdVault.

- PYTHON_ENV=test antes de importar la configuración
- FakeArchiveClient: bóveda en memoria con el contrato de ArchiveClient
- InMemoryRecordStore como almacén de registros
- NAS temporal (Docs/Photos) bajo tmp_path
"""

import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional

import pytest

os.environ.setdefault("PYTHON_ENV", "test")

from coldvault.modules.vault.adapters import ArchiveClient  # noqa: E402
from coldvault.modules.vault.dependencies import VaultDependencies  # noqa: E402
from coldvault.modules.vault.enums import DocumentStatus, DocumentType, WorkflowKind  # noqa: E402
from coldvault.modules.vault.errors import ArchiveNotFound  # noqa: E402
from coldvault.modules.vault.repositories import InMemoryRecordStore  # noqa: E402
from coldvault.modules.vault.run_context import WorkflowRunContext  # noqa: E402
from coldvault.modules.vault.schemas import DocumentRow, JobOutput, JobReference, UploadResult  # noqa: E402
from coldvault.modules.vault.services import LocationResolver  # noqa: E402
from coldvault.shared.config.settings_testing import EnvTestingSettings  # noqa: E402


# -----------------------------------------------------------------------------
# Bóveda falsa
# -----------------------------------------------------------------------------
class FakeArchiveClient(ArchiveClient):
    """Bóveda en memoria. Registra cada llamada para las aserciones."""

    def __init__(self):
        self.archives: Dict[str, bytes] = {}
        self.jobs: List[JobReference] = []
        self.job_outputs: Dict[str, bytes] = {}
        self.initiated: List[dict] = []
        self.deleted: List[str] = []
        self.uploaded: List[str] = []
        self.returned_checksum: Optional[str] = None
        self.closed = False
        self._failures: Dict[str, Exception] = {}

    def fail_next(self, operation: str, exc: Exception) -> None:
        self._failures[operation] = exc

    def _maybe_fail(self, operation: str) -> None:
        exc = self._failures.pop(operation, None)
        if exc is not None:
            raise exc

    async def describe_vault(self):
        self._maybe_fail("describe_vault")
        return {"VaultName": "coldvault-test", "NumberOfArchives": len(self.archives)}

    async def upload_archive(self, key, body, checksum=None):
        self._maybe_fail("upload_archive")
        archive_id = f"archive-{key}"
        self.archives[archive_id] = body
        self.uploaded.append(key)
        return UploadResult(
            archive_id=archive_id,
            checksum=self.returned_checksum or checksum or self.compute_checksum(body),
        )

    async def delete_archive(self, archive_id):
        self._maybe_fail("delete_archive")
        self.deleted.append(archive_id)
        if archive_id not in self.archives:
            raise ArchiveNotFound("delete_archive", archive_id)
        del self.archives[archive_id]

    async def initiate_job(self, job_parameters):
        self._maybe_fail("initiate_job")
        self.initiated.append(job_parameters)
        return f"job-{len(self.initiated)}"

    async def get_job_output(self, job_id):
        self._maybe_fail("get_job_output")
        if job_id not in self.job_outputs:
            raise ArchiveNotFound("get_job_output", job_id)
        return JobOutput(status_code=200, body=self.job_outputs[job_id])

    async def list_jobs(self):
        self._maybe_fail("list_jobs")
        return list(self.jobs)

    async def close(self):
        self.closed = True


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------
def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def make_row(document_id: int, status: DocumentStatus, **overrides) -> DocumentRow:
    data = {
        "document_id": document_id,
        "document_type": DocumentType.DOCUMENT,
        "file_system_id": f"ab{document_id:06d}",
        "file_type": "pdf",
        "status": status,
        "filename": f"doc-{document_id}.pdf",
        "parid": 900 + document_id,
    }
    data.update(overrides)
    return DocumentRow(**data)


def write_nas_file(nas_root: Path, row: DocumentRow, content: bytes = b"contenido") -> Path:
    resolver = LocationResolver(nas_root)
    path = resolver.path_for(row.document_type, row.resolved_file_system_id, row.file_type)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def make_job(job_id: str, action: str, status: str, created: datetime, **extra) -> JobReference:
    payload = {
        "JobId": job_id,
        "Action": action,
        "StatusCode": status,
        "CreationDate": created.isoformat(),
        "Completed": status == "Succeeded",
    }
    payload.update(extra)
    return JobReference.model_validate(payload)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def log_dir(tmp_path) -> Path:
    return tmp_path / "logs"


@pytest.fixture
def nas_root(tmp_path) -> Path:
    root = tmp_path / "nas"
    (root / "Docs").mkdir(parents=True)
    (root / "Photos").mkdir(parents=True)
    return root


@pytest.fixture
def vault_settings(nas_root, log_dir) -> EnvTestingSettings:
    return EnvTestingSettings(
        nas_parent_path=nas_root,
        log_dir=log_dir,
        archive_max_concurrency=2,
    )


@pytest.fixture
def store() -> InMemoryRecordStore:
    return InMemoryRecordStore(nas_path=None)


@pytest.fixture
def archive() -> FakeArchiveClient:
    return FakeArchiveClient()


@pytest.fixture
def resolver(nas_root) -> LocationResolver:
    return LocationResolver(nas_root)


@pytest.fixture
def deps(store, archive, resolver, vault_settings) -> VaultDependencies:
    return VaultDependencies(store=store, archive=archive, resolver=resolver, settings=vault_settings)


@pytest.fixture
def make_ctx(log_dir):
    created: List[WorkflowRunContext] = []

    def _make(kind: WorkflowKind, debug: bool = False) -> WorkflowRunContext:
        ctx = WorkflowRunContext(workflow=kind, log_prefix=f"vault-{kind.value}", log_dir=log_dir, debug=debug)
        created.append(ctx)
        return ctx

    yield _make
    for ctx in created:
        ctx.close()
