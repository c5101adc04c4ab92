# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/services/fan_out.py

Procesamiento concurrente acotado de un mapa de trabajo.

Cada documento se procesa bajo un asyncio.Semaphore. Los errores de nivel
fila los maneja el propio worker; el primer error de nivel run detiene
el arranque de documentos pendientes (los que ya están en vuelo terminan)
y se relanza al final.

Autor: ColdVault Team
Fecha: 07/09/2026
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Dict, List, TypeVar

from coldvault.modules.vault.errors import RunLevelError

_logger = logging.getLogger("vault.fan_out")

T = TypeVar("T")


async def process_work_map(
    work_map: Dict[int, T],
    worker: Callable[[T], Awaitable[None]],
    concurrency_limit: int,
) -> None:
    """
    Ejecuta `worker` por cada elemento del mapa de trabajo.

    Args:
        work_map: document_id → elemento
        worker: Corrutina por documento
        concurrency_limit: Máximo de documentos en vuelo

    Raises:
        RunLevelError: el primero que haya ocurrido
        Exception: cualquier error no clasificado que haya escapado de un worker
    """
    semaphore = asyncio.Semaphore(max(1, concurrency_limit))
    aborted = asyncio.Event()

    async def _run_one(document_id: int, item: T) -> None:
        async with semaphore:
            if aborted.is_set():
                return
            try:
                await worker(item)
            except RunLevelError:
                aborted.set()
                raise

    document_ids: List[int] = list(work_map)
    results = await asyncio.gather(
        *[_run_one(doc_id, work_map[doc_id]) for doc_id in document_ids],
        return_exceptions=True,
    )

    failures = [
        (doc_id, result)
        for doc_id, result in zip(document_ids, results)
        if isinstance(result, BaseException)
    ]
    for doc_id, exc in failures:
        _logger.error("work_item_failed: document_id=%s error=%s", doc_id, str(exc)[:200])

    run_level = [exc for _, exc in failures if isinstance(exc, RunLevelError)]
    if run_level:
        raise run_level[0]
    if failures:
        raise failures[0][1]


__all__ = ["process_work_map"]
# Fin del archivo coldvault/modules/vault/services/fan_out.py
