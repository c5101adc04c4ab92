# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/services/__init__.py

Servicios del módulo vault: resolución de rutas, reconciliación de
inventario y restauración.
"""

from .fan_out import process_work_map
from .inventory_reconciler import (
    InventoryReconciler,
    build_inventory_job_parameters,
    compute_confirmed_deleted,
    parse_inventory,
    partition_jobs,
)
from .location_resolver import LocationResolver
from .restore_service import RestoreService, build_retrieval_job_parameters

__all__ = [
    "InventoryReconciler",
    "LocationResolver",
    "RestoreService",
    "build_inventory_job_parameters",
    "build_retrieval_job_parameters",
    "compute_confirmed_deleted",
    "parse_inventory",
    "partition_jobs",
    "process_work_map",
]
