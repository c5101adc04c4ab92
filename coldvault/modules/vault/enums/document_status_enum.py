# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/enums/document_status_enum.py

Enum: DocumentStatus
Estado del ciclo de vida de un documento respecto a la bóveda.

⚠️ DISTINCIÓN SEMÁNTICA:
- DocumentStatus: estado del ciclo de vida (columna status).
- file_type: SOLO la extensión real del archivo (pdf, jpg, ...).
  Ningún estado se codifica en file_type.

Valores:
- NEW               : documento sin registro de archivo en la bóveda
- ARCHVD            : archivado en la bóveda
- PENDING PURGE     : marcado (externamente) para purga
- PURGED            : borrado solicitado en la bóveda, pendiente de confirmar por inventario
- DELETD            : confirmado ausente en el inventario, listo para borrado local
- DELETD_NS2        : purga sin archive_id resoluble (escenario normal dos)
- DELETD_OS2        : huérfano, archivo ausente en el NAS al subir
- PENDING RESTORE   : marcado (externamente) para restaurar desde la bóveda
- RESTORE REQUESTED : job de recuperación iniciado en la bóveda
- REMOVED           : pseudo-estado; el registro fue eliminado físicamente

Autor: ColdVault Team
Fecha: 03/09/2026
"""

from enum import StrEnum


class DocumentStatus(StrEnum):
    """Estados del ciclo de vida de un documento archivado."""
    NEW = "NEW"
    ARCHIVED = "ARCHVD"
    PENDING_PURGE = "PENDING PURGE"
    PURGED = "PURGED"
    DELETED = "DELETD"
    DELETED_NORMAL_SCENARIO_TWO = "DELETD_NS2"
    DELETED_ORPHAN_SCENARIO_TWO = "DELETD_OS2"
    PENDING_RESTORE = "PENDING RESTORE"
    RESTORE_REQUESTED = "RESTORE REQUESTED"
    REMOVED = "REMOVED"

    @property
    def is_deleted(self) -> bool:
        """True para DELETD y sus variantes de escenario."""
        return self in DELETED_STATUSES


DELETED_STATUSES = frozenset({
    DocumentStatus.DELETED,
    DocumentStatus.DELETED_NORMAL_SCENARIO_TWO,
    DocumentStatus.DELETED_ORPHAN_SCENARIO_TWO,
})


__all__ = ["DocumentStatus", "DELETED_STATUSES"]
# Fin del archivo coldvault/modules/vault/enums/document_status_enum.py
