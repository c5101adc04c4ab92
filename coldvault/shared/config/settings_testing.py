# -*- coding: utf-8 -*-
"""
coldvault/shared/config/settings_testing.py

Overrides para entorno de PRUEBAS (test) usando Pydantic v2.
Busca ser determinista: logging moderado, base de datos aislada,
bóveda de pruebas y ejecución inline de los workflows.

Autor: ColdVault Team
Fecha: 02/09/2026
"""

from pydantic import SecretStr
from pydantic_settings import SettingsConfigDict

from .settings_base import BaseAppSettings


class EnvTestingSettings(BaseAppSettings):
    # --- Identidad de entorno ---
    python_env: str = "test"

    # --- Logging en test: menos ruido ---
    log_level: str = "WARNING"
    log_format: str = "pretty"

    # --- Base de datos: usar DB separada para pruebas ---
    db_name: str = "coldvault_test"

    # --- Bóveda y credenciales dummy (nunca se conecta en tests unitarios) ---
    vault_name: str = "coldvault-test"
    aws_region: str = "us-east-1"
    aws_access_key_id: str = "AKIATESTDUMMY"
    aws_secret_access_key: SecretStr = SecretStr("test-secret-dummy")

    # --- Workflows en el mismo proceso ---
    scheduler_isolation: str = "inline"
    scheduler_timezone: str = "UTC"

    model_config = SettingsConfigDict(
        env_file=".env.test",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


__all__ = ["EnvTestingSettings"]
# Fin del archivo coldvault/shared/config/settings_testing.py
