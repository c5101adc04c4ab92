# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/jobs/runner.py

Punto único de ejecución de un workflow.

execute_workflow(kind) crea el WorkflowRunContext, abre las dependencias
(salvo que se inyecten), ejecuta el workflow y cierra el contexto. Un
error de nivel run deja completed=False y queda registrado; nunca se
propaga a quien dispara el run.

Autor: ColdVault Team
Fecha: 11/09/2026
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Dict, Optional, Union

from coldvault.modules.vault.enums import WorkflowKind
from coldvault.modules.vault.errors import VaultError
from coldvault.modules.vault.run_context import WorkflowRunContext
from coldvault.shared.config import BaseAppSettings, get_settings

from .delete_job import run_delete_workflow
from .inventory_job import run_inventory_workflow, run_restore_workflow
from .purge_job import run_purge_workflow
from .upload_job import run_upload_workflow

_logger = logging.getLogger("vault.jobs.runner")

# Código de salida del proceso hijo cuando el run terminó (con o sin errores)
RUN_COMPLETED_EXIT_CODE = 1

WorkflowFn = Callable[..., Awaitable[WorkflowRunContext]]

WORKFLOWS: Dict[WorkflowKind, WorkflowFn] = {
    WorkflowKind.UPLOAD: run_upload_workflow,
    WorkflowKind.PURGE: run_purge_workflow,
    WorkflowKind.INVENTORY: run_inventory_workflow,
    WorkflowKind.DELETE: run_delete_workflow,
    WorkflowKind.RESTORE: run_restore_workflow,
}


async def execute_workflow(
    kind: Union[WorkflowKind, str],
    deps=None,
    settings: Optional[BaseAppSettings] = None,
) -> WorkflowRunContext:
    """
    Ejecuta un run completo de `kind`.

    Args:
        kind: upload | purge | inventory | delete | restore
        deps: VaultDependencies ya construidas (tests); None → open_vault_dependencies
        settings: Configuración (default: get_settings())

    Returns:
        WorkflowRunContext finalizado.
    """
    kind = WorkflowKind(kind)
    settings = settings or (deps.settings if deps is not None else get_settings())
    workflow = WORKFLOWS[kind]
    ctx = WorkflowRunContext.from_settings(kind, settings)

    _logger.info("vault_workflow_start: kind=%s debug=%s", kind.value, ctx.debug)
    try:
        if deps is not None:
            await workflow(deps, ctx)
        else:
            from coldvault.modules.vault.dependencies import open_vault_dependencies

            async with open_vault_dependencies(settings) as opened:
                await workflow(opened, ctx)
    except VaultError as e:
        _logger.error("vault_workflow_aborted: kind=%s error=%s", kind.value, str(e)[:300])
        ctx.fail(e)
    except Exception as e:
        _logger.error("vault_workflow_error: kind=%s error=%s", kind.value, str(e)[:300], exc_info=True)
        ctx.fail(e)
    finally:
        ctx.finish()
        ctx.close()

    _logger.info(
        "vault_workflow_done: kind=%s completed=%s documents=%d errors=%d duration_ms=%.2f",
        kind.value, ctx.completed, ctx.documents, ctx.errors, ctx.duration_ms,
    )
    return ctx


__all__ = ["RUN_COMPLETED_EXIT_CODE", "WORKFLOWS", "execute_workflow"]
# Fin del archivo coldvault/modules/vault/jobs/runner.py
