# -*- coding: utf-8 -*-
"""
coldvault/shared/config/logging_config.py

Configuración centralizada de logging para ColdVault.
Soporta formato plain (desarrollo) y json (producción).

Las bitácoras de auditoría por workflow (errors/orphans/deletes/jobs)
se configuran aparte en coldvault/shared/observability/audit_log.py.

Autor: ColdVault Team
Fecha: 02/09/2026
"""

import logging.config
from typing import Literal


def setup_logging(
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO",
    fmt: Literal["plain", "pretty", "json"] = "plain",
    stream: str = "ext://sys.stderr",
) -> None:
    """
    Configura el sistema de logging de la aplicación.

    Args:
        level: Nivel de logging (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        fmt: Formato de salida (plain, pretty, json)
        stream: Destino del handler de consola. Por defecto stderr, porque
            stdout queda reservado a la línea final de estado de cada run.

    Ejemplos:
        >>> setup_logging("INFO", "plain")
        >>> setup_logging("WARNING", "json")
    """
    use_json = fmt == "json"

    handlers = {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "json" if use_json else fmt if fmt == "pretty" else "default",
            "stream": stream,
        }
    }

    formatters = {
        "default": {
            "format": "%(levelname)s [%(name)s]: %(message)s"
        },
        "pretty": {
            "format": "%(asctime)s %(levelname)-8s [%(name)s]: %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
        "json": {
            "()": "pythonjsonlogger.json.JsonFormatter",
            "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
        },
    }

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "handlers": handlers,
        "root": {
            "handlers": ["console"],
            "level": level.upper(),
        },
        "loggers": {
            # botocore es muy verboso en DEBUG
            "botocore": {"level": "WARNING"},
            "aiobotocore": {"level": "WARNING"},
            "apscheduler": {"level": "INFO"},
        },
    }

    logging.config.dictConfig(logging_config)


__all__ = ["setup_logging"]
# Fin del archivo coldvault/shared/config/logging_config.py
