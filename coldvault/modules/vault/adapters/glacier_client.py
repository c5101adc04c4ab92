# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/adapters/glacier_client.py

Cliente de la bóveda (Amazon S3 Glacier) sobre aioboto3.

Construcción en dos fases:
1. GlacierArchiveClient(...)            → constructor plano, sin I/O
2. await client.connect()               → abre el cliente y valida con DescribeVault

connect_archive_client(settings, store) resuelve credenciales una sola vez
(settings; si faltan, fn_get_aws_settings del almacén) y devuelve el cliente
conectado. El cliente vive lo que dura el proceso; no hay re-autenticación
automática si las credenciales expiran (ArchiveAuthExpired aborta el run).

Mapeo de errores de botocore:
- ResourceNotFoundException            → ArchiveNotFound
- token expirado / firma / acceso      → ArchiveAuthExpired
- cualquier otro ClientError/BotoCore  → ArchiveUnavailable

Autor: ColdVault Team
Fecha: 06/09/2026
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import AsyncExitStack
from typing import Any, Dict, List, Optional

import aioboto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError, NoCredentialsError

from coldvault.modules.vault.errors import ArchiveAuthExpired, ArchiveNotFound, ArchiveUnavailable
from coldvault.modules.vault.schemas import JobOutput, JobReference, UploadResult
from coldvault.shared.utils import calculate_tree_hash_bytes

_logger = logging.getLogger("vault.glacier_client")

NOT_FOUND_CODES = frozenset({"ResourceNotFoundException"})
AUTH_CODES = frozenset({
    "ExpiredToken",
    "ExpiredTokenException",
    "InvalidSignatureException",
    "SignatureDoesNotMatch",
    "UnrecognizedClientException",
    "InvalidClientTokenId",
    "MissingAuthenticationTokenException",
    "AccessDeniedException",
})


def translate_client_error(operation: str, exc: Exception, identifier: str = "") -> Exception:
    """Traduce una excepción de botocore a la taxonomía del módulo vault."""
    if isinstance(exc, ClientError):
        code = (exc.response or {}).get("Error", {}).get("Code", "")
        if code in NOT_FOUND_CODES:
            return ArchiveNotFound(operation, identifier or code)
        if code in AUTH_CODES:
            return ArchiveAuthExpired(operation, code)
        return ArchiveUnavailable(operation, code, str(exc)[:200])
    if isinstance(exc, NoCredentialsError):
        return ArchiveAuthExpired(operation, "NoCredentials")
    return ArchiveUnavailable(operation, type(exc).__name__, str(exc)[:200])


# ═══════════════════════════════════════════════════════════════════════════════
# CONTRATO
# ═══════════════════════════════════════════════════════════════════════════════

class ArchiveClient(ABC):
    """Operaciones sobre la bóveda que usan los workflows."""

    @abstractmethod
    async def describe_vault(self) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def upload_archive(self, key: str, body: bytes, checksum: Optional[str] = None) -> UploadResult:
        """
        Sube `body` con la descripción "DocId: {key}".

        Args:
            key: Identificador del documento
            body: Contenido completo
            checksum: Tree hash precalculado (se calcula si falta)
        """
        ...

    @abstractmethod
    async def delete_archive(self, archive_id: str) -> None:
        ...

    @abstractmethod
    async def initiate_job(self, job_parameters: Dict[str, Any]) -> str:
        """Inicia un job (archive-retrieval | inventory-retrieval) y devuelve su jobId."""
        ...

    @abstractmethod
    async def get_job_output(self, job_id: str) -> JobOutput:
        ...

    @abstractmethod
    async def list_jobs(self) -> List[JobReference]:
        ...

    def compute_checksum(self, data: bytes) -> str:
        """SHA-256 tree hash de `data`."""
        return calculate_tree_hash_bytes(data)

    async def close(self) -> None:
        return None


# ═══════════════════════════════════════════════════════════════════════════════
# IMPLEMENTACIÓN aioboto3
# ═══════════════════════════════════════════════════════════════════════════════

class GlacierArchiveClient(ArchiveClient):

    def __init__(
        self,
        vault_name: str,
        account_id: str = "-",
        region_name: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
        session_token: Optional[str] = None,
        connect_timeout: float = 10.0,
        read_timeout: float = 300.0,
    ) -> None:
        self.vault_name = vault_name
        self.account_id = account_id
        self.region_name = region_name
        self._session = aioboto3.Session(
            aws_access_key_id=access_key_id,
            aws_secret_access_key=secret_access_key,
            aws_session_token=session_token,
            region_name=region_name,
        )
        self._config = BotoConfig(
            connect_timeout=connect_timeout,
            read_timeout=read_timeout,
            retries={"max_attempts": 3, "mode": "standard"},
        )
        self._exit_stack: Optional[AsyncExitStack] = None
        self._client = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _vault_params(self) -> Dict[str, str]:
        return {"accountId": self.account_id, "vaultName": self.vault_name}

    def _require_client(self):
        if self._client is None:
            raise ArchiveUnavailable("client", "NotConnected", "connect() no ha sido invocado")
        return self._client

    async def connect(self) -> "GlacierArchiveClient":
        """Abre el cliente Glacier y valida el acceso a la bóveda."""
        if self._client is not None:
            return self
        stack = AsyncExitStack()
        try:
            self._client = await stack.enter_async_context(
                self._session.client("glacier", config=self._config)
            )
        except (ClientError, BotoCoreError) as e:
            await stack.aclose()
            raise translate_client_error("connect", e) from e
        self._exit_stack = stack

        try:
            vault = await self.describe_vault()
        except Exception:
            await self.close()
            raise
        _logger.info(
            "glacier_client_connected: vault=%s region=%s archives=%s",
            self.vault_name, self.region_name, vault.get("NumberOfArchives"),
        )
        return self

    async def close(self) -> None:
        if self._exit_stack is not None:
            await self._exit_stack.aclose()
        self._exit_stack = None
        self._client = None

    async def describe_vault(self) -> Dict[str, Any]:
        client = self._require_client()
        try:
            return await client.describe_vault(**self._vault_params())
        except (ClientError, BotoCoreError) as e:
            raise translate_client_error("describe_vault", e, self.vault_name) from e

    async def upload_archive(self, key: str, body: bytes, checksum: Optional[str] = None) -> UploadResult:
        client = self._require_client()
        checksum = checksum or self.compute_checksum(body)
        try:
            response = await client.upload_archive(
                **self._vault_params(),
                archiveDescription=f"DocId: {key}",
                checksum=checksum,
                body=body,
            )
        except (ClientError, BotoCoreError) as e:
            raise translate_client_error("upload_archive", e, str(key)) from e
        return UploadResult(
            archive_id=response["archiveId"],
            checksum=response.get("checksum") or checksum,
            location=response.get("location"),
        )

    async def delete_archive(self, archive_id: str) -> None:
        client = self._require_client()
        try:
            await client.delete_archive(**self._vault_params(), archiveId=archive_id)
        except (ClientError, BotoCoreError) as e:
            raise translate_client_error("delete_archive", e, archive_id) from e

    async def initiate_job(self, job_parameters: Dict[str, Any]) -> str:
        client = self._require_client()
        try:
            response = await client.initiate_job(**self._vault_params(), jobParameters=job_parameters)
        except (ClientError, BotoCoreError) as e:
            raise translate_client_error("initiate_job", e, job_parameters.get("Type", "")) from e
        return response["jobId"]

    async def get_job_output(self, job_id: str) -> JobOutput:
        client = self._require_client()
        try:
            response = await client.get_job_output(**self._vault_params(), jobId=job_id)
            body = await response["body"].read()
        except (ClientError, BotoCoreError) as e:
            raise translate_client_error("get_job_output", e, job_id) from e
        return JobOutput(
            status_code=response.get("status", 200),
            body=body,
            checksum=response.get("checksum"),
            content_type=response.get("contentType"),
        )

    async def list_jobs(self) -> List[JobReference]:
        client = self._require_client()
        jobs: List[JobReference] = []
        marker: Optional[str] = None
        try:
            while True:
                params = self._vault_params()
                if marker:
                    params["marker"] = marker
                response = await client.list_jobs(**params)
                jobs.extend(JobReference.model_validate(job) for job in response.get("JobList", []))
                marker = response.get("Marker")
                if not marker:
                    break
        except (ClientError, BotoCoreError) as e:
            raise translate_client_error("list_jobs", e, self.vault_name) from e
        _logger.debug("glacier_list_jobs: vault=%s jobs=%d", self.vault_name, len(jobs))
        return jobs


# ═══════════════════════════════════════════════════════════════════════════════
# FÁBRICA
# ═══════════════════════════════════════════════════════════════════════════════

def _pick(data: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = data.get(key)
        if value:
            return value
    return None


async def connect_archive_client(settings, store=None) -> GlacierArchiveClient:
    """
    Construye y conecta el cliente de la bóveda.

    Credenciales: AWS_ACCESS_KEY_ID/AWS_SECRET_ACCESS_KEY de settings; si no
    están definidas, el JSON de fn_get_aws_settings del almacén
    (accessKeyId, secretAccessKey, sessionToken, region).

    Raises:
        ArchiveAuthExpired: credenciales rechazadas
        ArchiveUnavailable: bóveda inaccesible
    """
    access_key = settings.aws_access_key_id
    secret = settings.aws_secret_access_key.get_secret_value() if settings.aws_secret_access_key else None
    token = None
    region = settings.aws_region

    if not access_key and store is not None:
        stored = await store.get_archive_settings()
        access_key = _pick(stored, "accessKeyId", "aws_access_key_id")
        secret = _pick(stored, "secretAccessKey", "aws_secret_access_key")
        token = _pick(stored, "sessionToken", "aws_session_token")
        region = region or _pick(stored, "region", "region_name")
        _logger.info("glacier_credentials_from_store: region=%s", region)

    client = GlacierArchiveClient(
        vault_name=settings.vault_name,
        account_id=settings.aws_account_id,
        region_name=region,
        access_key_id=access_key,
        secret_access_key=secret,
        session_token=token,
    )
    return await client.connect()


__all__ = [
    "ArchiveClient",
    "GlacierArchiveClient",
    "connect_archive_client",
    "translate_client_error",
]

# Fin del archivo coldvault/modules/vault/adapters/glacier_client.py
