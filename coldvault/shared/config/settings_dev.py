# -*- coding: utf-8 -*-
"""
coldvault/shared/config/settings_dev.py

Overrides para entorno de DESARROLLO (dev) usando Pydantic v2.
Hereda de BaseAppSettings y ajusta únicamente valores específicos
del ambiente local de desarrollo.

Autor: ColdVault Team
Fecha: 02/09/2026
"""

from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class DevSettings(BaseAppSettings):
    """Configuración para entorno de desarrollo."""

    # Entorno
    python_env: str = "development"

    # Logging
    log_level: str = "DEBUG"
    log_format: str = "plain"  # formato legible en consola

    # Base de datos
    db_sslmode: str = "disable"  # en desarrollo no se requiere SSL

    # Scheduler: sin subprocesos para depurar con breakpoints
    scheduler_isolation: str = "inline"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


__all__ = ["DevSettings"]

# Fin del archivo coldvault/shared/config/settings_dev.py
