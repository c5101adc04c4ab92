# -*- coding: utf-8 -*-
"""
coldvault/shared/scheduler/single_flight.py

Guardia de vuelo único por tipo de workflow.

- Un asyncio.Lock por tipo: nunca hay dos runs del mismo tipo a la vez.
- Un segundo disparo mientras hay un run en vuelo espera el lock (se
  difiere, no se descarta ni corre en paralelo).
- Mientras el run está en vuelo el temporizador del job queda en pausa
  y se reanuda al terminar, también ante error.
- Cualquier excepción del run se registra aquí y se devuelve una línea
  de fallo; el servicio sigue vivo.

Autor: ColdVault Team
Fecha: 12/09/2026
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, Optional

_logger = logging.getLogger("scheduler.single_flight")


class SingleFlightGuard:

    def __init__(self, scheduler=None):
        """
        Args:
            scheduler: SchedulerService cuyos jobs se pausan durante el run
                (None → sin pausa, p. ej. ejecución manual)
        """
        self._scheduler = scheduler
        self._locks: Dict[str, asyncio.Lock] = {}

    def lock_for(self, kind: str) -> asyncio.Lock:
        lock = self._locks.get(kind)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[kind] = lock
        return lock

    def is_running(self, kind: str) -> bool:
        lock = self._locks.get(kind)
        return lock is not None and lock.locked()

    async def run(
        self,
        kind: str,
        runner: Callable[[], Awaitable[str]],
        job_id: Optional[str] = None,
    ) -> str:
        """
        Ejecuta `runner` bajo el lock de `kind`.

        Args:
            kind: Tipo de workflow
            runner: Corrutina sin argumentos que devuelve la línea de estado
            job_id: Job del scheduler a pausar mientras corre

        Returns:
            Línea de estado del run, o una línea de fallo si lanzó excepción.
        """
        lock = self.lock_for(kind)
        if lock.locked():
            _logger.info("single_flight_deferred: kind=%s", kind)

        async with lock:
            paused = self._pause(job_id)
            _logger.debug("single_flight_acquired: kind=%s paused=%s", kind, paused)
            try:
                return await runner()
            except Exception as e:
                _logger.error(
                    "single_flight_run_failed: kind=%s error=%s",
                    kind, str(e)[:300], exc_info=True,
                )
                return f"\t{kind.capitalize()} failed: {type(e).__name__}."
            finally:
                if paused:
                    self._scheduler.resume_job(job_id)

    def _pause(self, job_id: Optional[str]) -> bool:
        if self._scheduler is None or job_id is None:
            return False
        return self._scheduler.pause_job(job_id)


__all__ = ["SingleFlightGuard"]
# Fin del archivo coldvault/shared/scheduler/single_flight.py
