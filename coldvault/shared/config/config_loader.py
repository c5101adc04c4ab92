# -*- coding: utf-8 -*-
"""
coldvault/shared/config/config_loader.py

Carga dinámica de configuración según PYTHON_ENV.
Ejecuta validaciones de coherencia y cachea la instancia (singleton).

Autor: ColdVault Team
Actualizado: 02/09/2026
"""

from functools import lru_cache
import os

from .settings_base import BaseAppSettings
from .settings_dev import DevSettings
from .settings_testing import EnvTestingSettings
from .settings_prod import ProdSettings


@lru_cache(maxsize=1)
def get_settings() -> BaseAppSettings:
    """
    Devuelve la configuración apropiada según PYTHON_ENV.

    Carga la subclase correcta (Dev/Test/Prod), ejecuta validaciones
    de coherencia y cachea el resultado como singleton.

    Returns:
        BaseAppSettings: Instancia de configuración para el entorno actual

    Raises:
        ValueError: Si las validaciones fallan
    """
    env = os.getenv("PYTHON_ENV", "development").lower()

    if env == "production":
        settings = ProdSettings()
    elif env == "test":
        settings = EnvTestingSettings()
    else:
        settings = DevSettings()

    settings._security_checks()

    return settings


__all__ = ["get_settings"]
# Fin del archivo
