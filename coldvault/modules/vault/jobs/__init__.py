# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/jobs/__init__.py

Workflows del módulo vault y su registro en el scheduler.
"""

from .delete_job import run_delete_workflow
from .inventory_job import run_inventory_workflow, run_restore_workflow
from .purge_job import run_purge_workflow
from .registry import WorkflowTrigger, job_id_for, register_vault_jobs
from .runner import RUN_COMPLETED_EXIT_CODE, WORKFLOWS, execute_workflow
from .upload_job import run_upload_workflow

__all__ = [
    "RUN_COMPLETED_EXIT_CODE",
    "WORKFLOWS",
    "WorkflowTrigger",
    "execute_workflow",
    "job_id_for",
    "register_vault_jobs",
    "run_delete_workflow",
    "run_inventory_workflow",
    "run_purge_workflow",
    "run_restore_workflow",
    "run_upload_workflow",
]
