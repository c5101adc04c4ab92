# -*- coding: utf-8 -*-
"""
coldvault/shared/scheduler/__init__.py

Programación de workflows usando APScheduler.

Autor: ColdVault Team
Fecha: 12/09/2026
"""

from .process_runner import ProcessResult, last_output_line, run_module_process
from .scheduler_service import SchedulerService, cron_trigger, get_scheduler
from .single_flight import SingleFlightGuard

__all__ = [
    "ProcessResult",
    "SchedulerService",
    "SingleFlightGuard",
    "cron_trigger",
    "get_scheduler",
    "last_output_line",
    "run_module_process",
]
