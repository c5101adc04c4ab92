# -*- coding: utf-8 -*-
"""
coldvault/shared/scheduler/scheduler_service.py

Servicio de programación de workflows usando APScheduler.

Cada job se registra con una expresión cron de 5 campos en la zona
horaria configurada (SCHEDULER_TIMEZONE). Valores por defecto de los jobs:
coalesce=True, max_instances=1, misfire_grace_time=30.

Autor: ColdVault Team
Fecha: 12/09/2026
"""

import logging
from typing import Any, Callable, Dict, List, Optional

from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

logger = logging.getLogger(__name__)


def cron_trigger(cron_expression: str, timezone: str = "UTC") -> CronTrigger:
    """
    CronTrigger a partir de una expresión de 5 campos.

    Raises:
        ValueError: si la expresión no tiene 5 campos
    """
    parts = cron_expression.split()
    if len(parts) != 5:
        raise ValueError(f"Expresión cron inválida (requiere 5 campos): '{cron_expression}'")
    minute, hour, day, month, day_of_week = parts
    return CronTrigger(
        minute=minute,
        hour=hour,
        day=day,
        month=month,
        day_of_week=day_of_week,
        timezone=timezone,
    )


class SchedulerService:
    """
    Servicio de programación de workflows.

    Funcionalidades:
    - Registro de jobs por expresión cron
    - Pausa / reanudación del temporizador de un job mientras corre
    - Consulta de jobs y próximo disparo
    """

    def __init__(self, timezone: str = "UTC"):
        jobstores = {
            "default": MemoryJobStore()
        }
        executors = {
            "default": AsyncIOExecutor()
        }
        job_defaults = {
            "coalesce": True,  # Combinar ejecuciones perdidas
            "max_instances": 1,  # Una instancia por job
            "misfire_grace_time": 30  # Tolerar 30s de retraso
        }

        self.timezone = timezone
        self._scheduler = AsyncIOScheduler(
            jobstores=jobstores,
            executors=executors,
            job_defaults=job_defaults,
            timezone=timezone,
        )
        self._started = False
        logger.info("scheduler_initialized: timezone=%s", timezone)

    def start(self) -> None:
        """Inicia el scheduler (requiere un event loop en ejecución)."""
        if not self._started:
            self._scheduler.start()
            self._started = True
            logger.info("scheduler_started: jobs=%d", len(self._scheduler.get_jobs()))

    def shutdown(self, wait: bool = True) -> None:
        """
        Detiene el scheduler.

        Args:
            wait: Si True, espera a que terminen los jobs en ejecución
        """
        if self._started:
            self._scheduler.shutdown(wait=wait)
            self._started = False
            logger.info("scheduler_stopped")

    def add_cron_job(
        self,
        func: Callable,
        job_id: str,
        cron_expression: str,
        **kwargs: Any,
    ) -> str:
        """
        Agrega un job que se ejecuta según expresión cron.

        Args:
            func: Corrutina a ejecutar
            job_id: ID único del job
            cron_expression: Expresión cron completa (5 campos)
            **kwargs: Argumentos para func

        Returns:
            ID del job agregado
        """
        trigger = cron_trigger(cron_expression, self.timezone)
        self._scheduler.add_job(
            func=func,
            trigger=trigger,
            id=job_id,
            name=job_id,
            replace_existing=True,
            kwargs=kwargs,
        )
        logger.info("scheduler_job_added: job_id=%s cron='%s'", job_id, cron_expression)
        return job_id

    def remove_job(self, job_id: str) -> bool:
        """
        Elimina un job programado.

        Returns:
            True si se eliminó, False si no existía
        """
        try:
            self._scheduler.remove_job(job_id)
        except JobLookupError:
            logger.warning("scheduler_job_missing: job_id=%s action=remove", job_id)
            return False
        logger.info("scheduler_job_removed: job_id=%s", job_id)
        return True

    def pause_job(self, job_id: str) -> bool:
        try:
            self._scheduler.pause_job(job_id)
        except JobLookupError:
            logger.warning("scheduler_job_missing: job_id=%s action=pause", job_id)
            return False
        logger.debug("scheduler_job_paused: job_id=%s", job_id)
        return True

    def resume_job(self, job_id: str) -> bool:
        try:
            self._scheduler.resume_job(job_id)
        except JobLookupError:
            logger.warning("scheduler_job_missing: job_id=%s action=resume", job_id)
            return False
        logger.debug("scheduler_job_resumed: job_id=%s", job_id)
        return True

    def get_jobs(self) -> List[Dict[str, Any]]:
        """Lista de jobs programados con información básica."""
        return [
            {
                "id": job.id,
                "name": job.name,
                "next_run": job.next_run_time,
                "trigger": str(job.trigger),
            }
            for job in self._scheduler.get_jobs()
        ]

    def get_job_status(self, job_id: str) -> Optional[Dict[str, Any]]:
        """
        Estado de un job específico.

        Returns:
            Dict con información del job o None si no existe
        """
        job = self._scheduler.get_job(job_id)
        if job is None:
            return None
        return {
            "id": job.id,
            "name": job.name,
            "next_run": job.next_run_time,
            "trigger": str(job.trigger),
            "paused": job.next_run_time is None,
        }

    @property
    def is_running(self) -> bool:
        return self._started and self._scheduler.running


# Singleton del scheduler
_scheduler_instance: Optional[SchedulerService] = None


def get_scheduler(timezone: Optional[str] = None) -> SchedulerService:
    """
    Obtiene la instancia global del scheduler (singleton).

    Args:
        timezone: Zona horaria (solo se usa en la primera llamada;
            default: SCHEDULER_TIMEZONE de settings)
    """
    global _scheduler_instance
    if _scheduler_instance is None:
        if timezone is None:
            from coldvault.shared.config import get_settings
            timezone = get_settings().scheduler_timezone
        _scheduler_instance = SchedulerService(timezone=timezone)
    return _scheduler_instance


__all__ = ["SchedulerService", "cron_trigger", "get_scheduler"]
# Fin del archivo coldvault/shared/scheduler/scheduler_service.py
