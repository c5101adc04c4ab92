# -*- coding: utf-8 -*-
"""
coldvault/shared/observability/audit_log.py

Bitácoras de auditoría por workflow.

Cada workflow escribe en archivos diarios independientes del logging
de aplicación:

    {LOG_DIR}/{prefix}-{kind}-{YYYY-MM-DD}.log

kind ∈ {errors, orphans, deletes, jobs}. Formato de línea:

    2026-09-04 10:15:00 docId:123,archiveId:abc,scenario:DeleteNormalScenarioOne

En modo debug cada línea se replica en consola (stderr).

Autor: ColdVault Team
Fecha: 04/09/2026
"""

from __future__ import annotations

import logging
import sys
from datetime import date
from pathlib import Path
from typing import Optional

AUDIT_KINDS = ("errors", "orphans", "deletes", "jobs")

_AUDIT_FORMAT = "%(asctime)s %(message)s"
_AUDIT_DATEFMT = "%Y-%m-%d %H:%M:%S"


def audit_file_path(log_dir: Path, prefix: str, kind: str, day: Optional[date] = None) -> Path:
    day = day or date.today()
    return Path(log_dir) / f"{prefix}-{kind}-{day:%Y-%m-%d}.log"


def get_audit_logger(
    prefix: str,
    kind: str,
    log_dir: Optional[Path],
    debug: bool = False,
) -> logging.Logger:
    """
    Devuelve un logger de auditoría con su FileHandler diario.

    Args:
        prefix: Prefijo del workflow (p. ej. "vault-upload")
        kind: errors | orphans | deletes | jobs
        log_dir: Carpeta de bitácoras. None → sin archivo (NullHandler)
        debug: Replica las líneas en consola

    Returns:
        logging.Logger con propagate=False
    """
    if kind not in AUDIT_KINDS:
        raise ValueError(f"Tipo de bitácora inválido: {kind}")

    logger = logging.getLogger(f"coldvault.audit.{prefix}.{kind}")
    logger.setLevel(logging.INFO)
    logger.propagate = False
    close_audit_logger(logger)

    formatter = logging.Formatter(_AUDIT_FORMAT, datefmt=_AUDIT_DATEFMT)

    if log_dir is None:
        logger.addHandler(logging.NullHandler())
    else:
        path = audit_file_path(Path(log_dir), prefix, kind)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8", delay=True)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if debug:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(formatter)
        logger.addHandler(console)

    return logger


def close_audit_logger(logger: logging.Logger) -> None:
    """Cierra y desacopla todos los handlers del logger."""
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def format_document_entry(document_id, archive_id, scenario) -> str:
    return f"docId:{document_id},archiveId:{archive_id},scenario:{scenario}"


__all__ = [
    "AUDIT_KINDS",
    "audit_file_path",
    "get_audit_logger",
    "close_audit_logger",
    "format_document_entry",
]
# Fin del archivo coldvault/shared/observability/audit_log.py
