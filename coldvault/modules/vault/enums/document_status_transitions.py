# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/enums/document_status_transitions.py

Mapa de transiciones válidas para DocumentStatus y tabla de decisión
por workflow (next_status).

Reglas de transición:
- NEW               → ARCHVD | DELETD_OS2        (subida o huérfano)
- ARCHVD            → PENDING PURGE | PENDING RESTORE (actores externos)
- PENDING PURGE     → PURGED | DELETD_NS2        (purga remota o sin archive_id)
- PURGED            → DELETD                     (ausente en inventario)
- DELETD, DELETD_*  → REMOVED                    (borrado local)
- PENDING RESTORE   → RESTORE REQUESTED          (job de recuperación iniciado)
- RESTORE REQUESTED → ARCHVD                     (archivo restaurado)
- REMOVED           → (terminal)

Autor: ColdVault Team
Fecha: 03/09/2026
"""

from enum import StrEnum
from typing import Dict, Set, Tuple

from coldvault.modules.vault.errors import InvalidStatusTransition

from .document_status_enum import DocumentStatus
from .work_scenario_enum import WorkflowKind


# Mapa de transiciones válidas: estado_origen → {estados_destino_permitidos}
VALID_STATUS_TRANSITIONS: Dict[DocumentStatus, Set[DocumentStatus]] = {
    DocumentStatus.NEW: {
        DocumentStatus.ARCHIVED,
        DocumentStatus.DELETED_ORPHAN_SCENARIO_TWO,
    },
    DocumentStatus.ARCHIVED: {
        DocumentStatus.PENDING_PURGE,
        DocumentStatus.PENDING_RESTORE,
    },
    DocumentStatus.PENDING_PURGE: {
        DocumentStatus.PURGED,
        DocumentStatus.DELETED_NORMAL_SCENARIO_TWO,
    },
    DocumentStatus.PURGED: {
        DocumentStatus.DELETED,
    },
    DocumentStatus.DELETED: {DocumentStatus.REMOVED},
    DocumentStatus.DELETED_NORMAL_SCENARIO_TWO: {DocumentStatus.REMOVED},
    DocumentStatus.DELETED_ORPHAN_SCENARIO_TWO: {DocumentStatus.REMOVED},
    DocumentStatus.PENDING_RESTORE: {
        DocumentStatus.RESTORE_REQUESTED,
    },
    DocumentStatus.RESTORE_REQUESTED: {
        DocumentStatus.ARCHIVED,
    },
    DocumentStatus.REMOVED: set(),  # Estado terminal
}


class TransitionOutcome(StrEnum):
    """Resultado de procesar un documento dentro de un workflow."""
    UPLOADED = "uploaded"
    FILE_MISSING = "file_missing"
    REMOTE_DELETED = "remote_deleted"
    REMOTE_NOT_FOUND = "remote_not_found"
    NO_ARCHIVE = "no_archive"
    ABSENT_FROM_INVENTORY = "absent_from_inventory"
    REMOVED = "removed"
    RETRIEVAL_REQUESTED = "retrieval_requested"
    RESTORED = "restored"


# (workflow, outcome) → estado destino; el origen se valida contra VALID_STATUS_TRANSITIONS
_WORKFLOW_TARGETS: Dict[Tuple[WorkflowKind, TransitionOutcome], DocumentStatus] = {
    (WorkflowKind.UPLOAD, TransitionOutcome.UPLOADED): DocumentStatus.ARCHIVED,
    (WorkflowKind.UPLOAD, TransitionOutcome.FILE_MISSING): DocumentStatus.DELETED_ORPHAN_SCENARIO_TWO,
    (WorkflowKind.PURGE, TransitionOutcome.REMOTE_DELETED): DocumentStatus.PURGED,
    (WorkflowKind.PURGE, TransitionOutcome.REMOTE_NOT_FOUND): DocumentStatus.PURGED,
    (WorkflowKind.PURGE, TransitionOutcome.NO_ARCHIVE): DocumentStatus.DELETED_NORMAL_SCENARIO_TWO,
    (WorkflowKind.INVENTORY, TransitionOutcome.ABSENT_FROM_INVENTORY): DocumentStatus.DELETED,
    (WorkflowKind.DELETE, TransitionOutcome.REMOVED): DocumentStatus.REMOVED,
    (WorkflowKind.RESTORE, TransitionOutcome.RETRIEVAL_REQUESTED): DocumentStatus.RESTORE_REQUESTED,
    (WorkflowKind.RESTORE, TransitionOutcome.RESTORED): DocumentStatus.ARCHIVED,
}

# Estado de origen exigido por cada workflow
_WORKFLOW_PRECONDITIONS: Dict[Tuple[WorkflowKind, TransitionOutcome], Set[DocumentStatus]] = {
    (WorkflowKind.UPLOAD, TransitionOutcome.UPLOADED): {DocumentStatus.NEW},
    (WorkflowKind.UPLOAD, TransitionOutcome.FILE_MISSING): {DocumentStatus.NEW},
    (WorkflowKind.PURGE, TransitionOutcome.REMOTE_DELETED): {DocumentStatus.PENDING_PURGE},
    (WorkflowKind.PURGE, TransitionOutcome.REMOTE_NOT_FOUND): {DocumentStatus.PENDING_PURGE},
    (WorkflowKind.PURGE, TransitionOutcome.NO_ARCHIVE): {DocumentStatus.PENDING_PURGE},
    (WorkflowKind.INVENTORY, TransitionOutcome.ABSENT_FROM_INVENTORY): {DocumentStatus.PURGED},
    (WorkflowKind.DELETE, TransitionOutcome.REMOVED): {
        DocumentStatus.DELETED,
        DocumentStatus.DELETED_NORMAL_SCENARIO_TWO,
        DocumentStatus.DELETED_ORPHAN_SCENARIO_TWO,
    },
    (WorkflowKind.RESTORE, TransitionOutcome.RETRIEVAL_REQUESTED): {DocumentStatus.PENDING_RESTORE},
    (WorkflowKind.RESTORE, TransitionOutcome.RESTORED): {DocumentStatus.RESTORE_REQUESTED},
}


def is_valid_status_transition(
    from_status: DocumentStatus,
    to_status: DocumentStatus,
) -> bool:
    """
    Valida si una transición de estado es permitida.

    Args:
        from_status: Estado actual.
        to_status: Estado destino.

    Returns:
        True si la transición es válida, False en caso contrario.
    """
    if from_status not in VALID_STATUS_TRANSITIONS:
        return False
    return to_status in VALID_STATUS_TRANSITIONS[from_status]


def get_allowed_transitions(from_status: DocumentStatus) -> Set[DocumentStatus]:
    """
    Obtiene los estados permitidos desde un estado dado.

    Args:
        from_status: Estado actual.

    Returns:
        Set de estados permitidos como destino.
    """
    return VALID_STATUS_TRANSITIONS.get(from_status, set())


def validate_status_transition(
    from_status: DocumentStatus,
    to_status: DocumentStatus,
) -> None:
    """
    Valida una transición de estado, lanzando excepción si no es válida.

    Args:
        from_status: Estado actual.
        to_status: Estado destino.

    Raises:
        InvalidStatusTransition: Si la transición no es válida.
    """
    if not is_valid_status_transition(from_status, to_status):
        allowed = get_allowed_transitions(from_status)
        allowed_str = ", ".join(sorted(s.value for s in allowed)) if allowed else "ninguno"
        raise InvalidStatusTransition(
            from_status,
            to_status,
            f"Transición de estado inválida: '{from_status.value}' → '{to_status.value}'. "
            f"Transiciones permitidas desde '{from_status.value}': {allowed_str}",
        )


def next_status(
    workflow: WorkflowKind,
    current: DocumentStatus,
    outcome: TransitionOutcome,
) -> DocumentStatus:
    """
    Función pura de decisión: estado siguiente de un documento según
    el workflow que lo procesa y el resultado obtenido.

    Args:
        workflow: Workflow en curso.
        current: Estado actual del documento.
        outcome: Resultado del procesamiento.

    Returns:
        Estado destino.

    Raises:
        InvalidStatusTransition: Si la combinación no está en la tabla o
            el estado actual no cumple la precondición del workflow.
    """
    key = (workflow, outcome)
    target = _WORKFLOW_TARGETS.get(key)
    if target is None:
        raise InvalidStatusTransition(
            current, None,
            f"Resultado '{outcome.value}' no aplica al workflow '{workflow.value}'",
        )
    if current not in _WORKFLOW_PRECONDITIONS[key]:
        raise InvalidStatusTransition(
            current, target,
            f"Workflow '{workflow.value}' no procesa documentos en estado '{current.value}'",
        )
    validate_status_transition(current, target)
    return target


__all__ = [
    "VALID_STATUS_TRANSITIONS",
    "TransitionOutcome",
    "is_valid_status_transition",
    "get_allowed_transitions",
    "validate_status_transition",
    "next_status",
]

# Fin del archivo coldvault/modules/vault/enums/document_status_transitions.py
