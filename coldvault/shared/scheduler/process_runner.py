# -*- coding: utf-8 -*-
"""
coldvault/shared/scheduler/process_runner.py

Ejecución de un run en un intérprete hijo (SCHEDULER_ISOLATION=process).

El hijo escribe sus logs en stderr y una sola línea de estado final en
stdout; aquí se devuelve esa última línea junto con el código de salida.

Autor: ColdVault Team
Fecha: 12/09/2026
"""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from typing import Sequence

_logger = logging.getLogger("scheduler.process_runner")


@dataclass(frozen=True)
class ProcessResult:
    returncode: int
    last_line: str


def last_output_line(stdout: bytes) -> str:
    """Última línea no vacía de stdout, sin el salto de línea final."""
    lines = [line.rstrip("\r") for line in stdout.decode("utf-8", errors="replace").split("\n")]
    for line in reversed(lines):
        if line.strip():
            return line
    return ""


async def run_module_process(module: str, args: Sequence[str]) -> ProcessResult:
    """
    Ejecuta `python -m {module} {args}` y espera a que termine.

    Returns:
        ProcessResult con el código de salida y la última línea de stdout.
    """
    proc = await asyncio.create_subprocess_exec(
        sys.executable, "-m", module, *args,
        stdout=asyncio.subprocess.PIPE,
    )
    _logger.info("child_process_started: pid=%s module=%s args=%s", proc.pid, module, list(args))
    stdout, _ = await proc.communicate()

    result = ProcessResult(returncode=proc.returncode, last_line=last_output_line(stdout))
    _logger.info(
        "child_process_exited: pid=%s returncode=%s line=%r",
        proc.pid, result.returncode, result.last_line,
    )
    return result


__all__ = ["ProcessResult", "last_output_line", "run_module_process"]
# Fin del archivo coldvault/shared/scheduler/process_runner.py
