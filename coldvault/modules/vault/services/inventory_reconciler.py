# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/services/inventory_reconciler.py

Motor de reconciliación de inventario.

Compara los documentos PURGED del almacén contra el inventario que
entrega la bóveda y marca como DELETD los que ya no aparecen en él:

    confirmados = {archive_id locales} − {ArchiveId del inventario}

Flujo por job de inventario exitoso:
1. get_job_output → JSON {InventoryDate, ArchiveList[]}
2. fetch_purged_documents(InventoryDate, CreationDate del job)
3. compute_confirmed_deleted (función pura)
4. flag_inventory_deleted (tabla de documentos + tabla de campos, una transacción)

Política ante conteos distintos entre ambas tablas:
- warning con ambos conteos
- se reaplica UNA vez la actualización idempotente de la tabla de campos
- si siguen distintos: error con los ids y reconcile_mismatches += 1
- el run nunca se aborta por esta causa

Re-ejecutar la reconciliación sobre el mismo inventario no cambia nada:
los documentos ya marcados dejan de ser PURGED y no vuelven a compararse.

Autor: ColdVault Team
Fecha: 08/09/2026
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set

from pydantic import ValidationError

from coldvault.modules.vault.adapters import ArchiveClient
from coldvault.modules.vault.enums import (
    ArchiveJobStatus,
    ArchiveJobType,
    DocumentStatus,
    TransitionOutcome,
    WorkflowKind,
    next_status,
)
from coldvault.modules.vault.errors import ArchiveNotFound, StoreLogicalError
from coldvault.modules.vault.repositories import RecordStoreGateway, raise_for_return_code
from coldvault.modules.vault.run_context import WorkflowRunContext
from coldvault.modules.vault.schemas import (
    DateRange,
    InventoryFlagResult,
    InventoryPayload,
    JobReference,
    PartitionedJobs,
)
from coldvault.modules.vault.schemas.date_range import format_iso

_logger = logging.getLogger("vault.inventory_reconciler")


# ═══════════════════════════════════════════════════════════════════════════════
# FUNCIONES PURAS
# ═══════════════════════════════════════════════════════════════════════════════

def partition_jobs(
    jobs: Iterable[JobReference],
    now: Optional[datetime] = None,
    cooldown_hours: int = 7,
) -> PartitionedJobs:
    """
    Parte el listado de jobs de la bóveda.

    - in_flight_inventory: InventoryRetrieval sin éxito todavía, creados
      hace menos de `cooldown_hours` (bloquean una nueva solicitud)
    - inventory_succeeded: InventoryRetrieval en Succeeded
    - retrieval_succeeded: ArchiveRetrieval en Succeeded
    """
    now = now or datetime.now(timezone.utc)
    cooldown = timedelta(hours=cooldown_hours)
    partitioned = PartitionedJobs()

    for job in jobs:
        if job.succeeded:
            if job.is_inventory:
                partitioned.inventory_succeeded.append(job)
            elif job.is_archive_retrieval:
                partitioned.retrieval_succeeded.append(job)
            continue
        if job.is_inventory and job.status_code != ArchiveJobStatus.FAILED:
            if abs(now - job.creation_date) < cooldown:
                partitioned.in_flight_inventory.append(job)

    _logger.debug(
        "jobs_partitioned: in_flight=%d inventories=%d retrievals=%d",
        len(partitioned.in_flight_inventory),
        len(partitioned.inventory_succeeded),
        len(partitioned.retrieval_succeeded),
    )
    return partitioned


def compute_confirmed_deleted(
    local: Mapping[int, Optional[str]],
    remote_archive_ids: Iterable[str],
) -> Set[int]:
    """
    Documentos cuyo archive_id ya no figura en el inventario remoto.

    Args:
        local: document_id → archive_id (de metadata)
        remote_archive_ids: ArchiveId presentes en el inventario

    Returns:
        Set de document_id confirmados como borrados en la bóveda.
        Los documentos sin archive_id no se pueden confirmar y se omiten.
    """
    remote = set(remote_archive_ids)
    confirmed: Set[int] = set()
    for document_id, archive_id in local.items():
        if not archive_id:
            _logger.warning("reconcile_missing_archive_id: document_id=%s", document_id)
            continue
        if archive_id not in remote:
            confirmed.add(document_id)
    return confirmed


def parse_inventory(body: bytes) -> InventoryPayload:
    """
    Parsea la salida JSON de un job InventoryRetrieval.

    Raises:
        ValueError: JSON inválido o sin InventoryDate
    """
    try:
        data = json.loads(body)
        return InventoryPayload.model_validate(data)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        raise ValueError(f"Inventario inválido: {str(e)[:200]}") from e


def build_inventory_job_parameters(window: DateRange, requested_at: datetime) -> Dict[str, Any]:
    """jobParameters de InitiateJob para un inventario acotado a `window`."""
    return {
        "Type": ArchiveJobType.INVENTORY_RETRIEVAL.value,
        "Format": "JSON",
        "Description": f"Inventory requested on {format_iso(requested_at)}",
        "InventoryRetrievalParameters": {
            "StartDate": window.iso_start,
            "EndDate": window.iso_end,
        },
    }


# ═══════════════════════════════════════════════════════════════════════════════
# MOTOR
# ═══════════════════════════════════════════════════════════════════════════════

class InventoryReconciler:
    """Reconciliación de inventarios y solicitud de nuevos inventarios."""

    def __init__(
        self,
        store: RecordStoreGateway,
        archive: ArchiveClient,
        ctx: WorkflowRunContext,
    ):
        self.store = store
        self.archive = archive
        self.ctx = ctx

    async def reconcile_job(self, job: JobReference) -> Set[int]:
        """
        Reconcilia un inventario terminado.

        Un inventario expirado (ArchiveNotFound) o ilegible se registra
        como error y se omite; los demás jobs siguen.

        Returns:
            Set de document_id marcados en este job.
        """
        try:
            output = await self.archive.get_job_output(job.job_id)
            payload = parse_inventory(output.body)
        except ArchiveNotFound as e:
            self.ctx.record_error(f"inventory output not found: jobId={job.job_id} {e}")
            return set()
        except ValueError as e:
            self.ctx.record_error(f"inventory output unreadable: jobId={job.job_id} {e}")
            return set()

        purged = await self.store.fetch_purged_documents(payload.inventory_date, job.creation_date)
        self.ctx.processed += len(purged)

        local = {doc.document_id: doc.resolved_archive_id for doc in purged}
        confirmed = compute_confirmed_deleted(local, payload.archive_ids)

        _logger.info(
            "inventory_compared: job_id=%s inventory_date=%s remote=%d local=%d confirmed=%d",
            job.job_id, payload.inventory_date.isoformat(),
            len(payload.archive_list), len(local), len(confirmed),
        )
        if confirmed:
            await self.apply_confirmed_deleted(sorted(confirmed))
        return confirmed

    async def apply_confirmed_deleted(self, document_ids: List[int]) -> InventoryFlagResult:
        """PURGED → DELETD en ambas tablas, aplicando la política de reparación."""
        next_status(WorkflowKind.INVENTORY, DocumentStatus.PURGED, TransitionOutcome.ABSENT_FROM_INVENTORY)

        result = await self.store.flag_inventory_deleted(document_ids)
        self.ctx.confirmed_deleted += result.archive_rows

        if result.consistent:
            return result

        _logger.warning(
            "inventory_flag_count_mismatch: archive_rows=%d field_rows=%d",
            result.archive_rows, result.field_rows,
        )
        reflagged = await self.store.reflag_field_deleted(document_ids)
        repaired = InventoryFlagResult(
            archive_rows=result.archive_rows,
            field_rows=result.field_rows + reflagged,
        )
        if not repaired.consistent:
            self.ctx.reconcile_mismatches += 1
            _logger.error(
                "inventory_flag_mismatch_unrepaired: archive_rows=%d field_rows=%d ids=%s",
                repaired.archive_rows, repaired.field_rows, document_ids,
            )
        return repaired

    async def request_inventory(self, window: DateRange) -> Optional[str]:
        """
        Solicita un inventario para `window` y sella el jobId en los
        documentos PURGED de la ventana.

        Returns:
            jobId solicitado, o None si el sellado falló (queda registrado).
        """
        requested_at = datetime.now(timezone.utc)
        job_id = await self.archive.initiate_job(build_inventory_job_parameters(window, requested_at))
        self.ctx.last_inventory_request = requested_at
        _logger.info("inventory_requested: job_id=%s window=%s", job_id, window)

        try:
            stamp = await self.store.stamp_inventory_job(job_id, window)
            raise_for_return_code("fn_upd_purged_jobid", stamp)
        except StoreLogicalError as e:
            self.ctx.record_error(f"inventory job stamp failed: jobId={job_id} {e}")
            return None
        return job_id


__all__ = [
    "InventoryReconciler",
    "build_inventory_job_parameters",
    "compute_confirmed_deleted",
    "parse_inventory",
    "partition_jobs",
]
# Fin del archivo coldvault/modules/vault/services/inventory_reconciler.py
