# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/enums/work_scenario_enum.py

Enums de clasificación de trabajo:
- WorkflowKind: workflows programables (upload, purge, inventory, delete)
  más restore, que corre como sub-flujo del inventario.
- WorkScenario: clasificación del candidato devuelta por el almacén
  (columna procedure de las rutinas de candidatos).
- DocumentType: categoría fija del documento (document | photo).

Autor: ColdVault Team
Fecha: 03/09/2026
"""

from enum import StrEnum


class WorkflowKind(StrEnum):
    UPLOAD = "upload"
    PURGE = "purge"
    INVENTORY = "inventory"
    DELETE = "delete"
    RESTORE = "restore"


# Workflows con timer propio en el scheduler
SCHEDULED_WORKFLOWS = (
    WorkflowKind.UPLOAD,
    WorkflowKind.PURGE,
    WorkflowKind.INVENTORY,
    WorkflowKind.DELETE,
)


class WorkScenario(StrEnum):
    """Escenarios devueltos por las rutinas de candidatos."""
    UPLOAD = "Upload"
    PURGE_NORMAL_ONE = "PurgeNormalScenarioOne"
    PURGE_NORMAL_TWO = "PurgeNormalScenarioTwo"
    PURGE_ORPHAN_ONE = "PurgeOrphanScenarioOne"
    DELETE_NORMAL_ONE = "DeleteNormalScenarioOne"
    DELETE_NORMAL_TWO = "DeleteNormalScenarioTwo"
    DELETE_ORPHAN_ONE = "DeleteOrphanScenarioOne"
    DELETE_ORPHAN_TWO = "DeleteOrphanScenarioTwo"
    RESTORE = "Restore"

    @property
    def is_orphan(self) -> bool:
        return "Orphan" in self.value

    @property
    def requires_remote_delete(self) -> bool:
        """Escenarios de purga que borran el archivo en la bóveda."""
        return self in (WorkScenario.PURGE_NORMAL_ONE, WorkScenario.PURGE_ORPHAN_ONE)


class DocumentType(StrEnum):
    DOCUMENT = "document"
    PHOTO = "photo"


__all__ = [
    "WorkflowKind",
    "SCHEDULED_WORKFLOWS",
    "WorkScenario",
    "DocumentType",
]
# Fin del archivo coldvault/modules/vault/enums/work_scenario_enum.py
