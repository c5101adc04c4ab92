# -*- coding: utf-8 -*-
"""
coldvault/shared/config/settings_base.py

Base de configuración (Pydantic v2) para ColdVault.
- Esta clase NO instancia singletons ni resuelve .env; eso lo hace config_loader.
- Es la base para settings_dev.py, settings_testing.py y settings_prod.py.

Autor: ColdVault Team
Fecha: 02/09/2026
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import Field, SecretStr, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Tipos de entorno soportados
EnvName = Literal["development", "test", "production"]
IsolationMode = Literal["process", "inline"]


class BaseAppSettings(BaseSettings):
    # =========================
    # Núcleo de la aplicación
    # =========================
    python_env: EnvName = Field(default="development", validation_alias="PYTHON_ENV")
    app_name: str = Field(default="ColdVault", validation_alias="APP_NAME")
    app_version: str = Field(default="0.1.0", validation_alias="APP_VERSION")
    # En modo debug los errores no se contabilizan y las bitácoras se replican en consola
    debug: bool = Field(default=False, validation_alias="DEBUG_MODE")

    # =========================
    # Base de datos (PostgreSQL)
    # =========================
    db_user: str = Field(default="postgres", validation_alias="DB_USER")
    db_password: SecretStr = Field(default=SecretStr("postgres"), validation_alias="DB_PASSWORD")
    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="coldvault", validation_alias="DB_NAME")
    db_schema: str = Field(default="vault", validation_alias="DB_SCHEMA")
    db_echo_sql: bool = Field(default=False, validation_alias="DB_ECHO_SQL")
    db_sslmode: str = Field(default="prefer", validation_alias="DB_SSLMODE")  # prefer|require|disable
    db_connect_timeout_s: float = Field(default=10.0, validation_alias="DB_CONNECT_TIMEOUT_S")
    db_command_timeout_s: float = Field(default=120.0, validation_alias="DB_COMMAND_TIMEOUT_S")
    db_url: Optional[str] = Field(default=None, validation_alias="DB_URL")

    @computed_field  # type: ignore[misc]
    @property
    def database_url(self) -> str:
        """
        Genera la URL de conexión completa para SQLAlchemy + asyncpg.
        Prioriza DB_URL si existe, sino construye desde componentes individuales.
        """
        from urllib.parse import quote_plus

        if self.db_url:
            return (
                self.db_url.replace("postgres://", "postgresql+asyncpg://")
                .replace("postgresql://", "postgresql+asyncpg://")
            )

        pw = quote_plus(self.db_password.get_secret_value())
        return (
            f"postgresql+asyncpg://{self.db_user}:{pw}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # =========================
    # Bóveda Glacier (AWS)
    # =========================
    vault_name: str = Field(default="coldvault-documents", validation_alias="VAULT_NAME")
    aws_account_id: str = Field(default="-", validation_alias="AWS_ACCOUNT_ID")
    aws_region: Optional[str] = Field(default=None, validation_alias="AWS_REGION")
    # Si faltan las llaves se leen del almacén (fn_get_aws_settings)
    aws_access_key_id: Optional[str] = Field(default=None, validation_alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[SecretStr] = Field(default=None, validation_alias="AWS_SECRET_ACCESS_KEY")
    archive_max_concurrency: int = Field(default=4, ge=1, validation_alias="ARCHIVE_MAX_CONCURRENCY")

    # =========================
    # NAS / filesystem
    # =========================
    # Si falta, se lee del almacén (fn_get_nas_path)
    nas_parent_path: Optional[Path] = Field(default=None, validation_alias="NAS_PARENT_PATH")
    nas_documents_dir: str = Field(default="Docs", validation_alias="NAS_DOCUMENTS_DIR")
    nas_photos_dir: str = Field(default="Photos", validation_alias="NAS_PHOTOS_DIR")

    # =========================
    # Lotes por workflow (max rows por página)
    # =========================
    upload_fetch_max_rows: int = Field(default=1000, ge=1, validation_alias="UPLOAD_FETCH_MAX_ROWS")
    purge_fetch_max_rows: int = Field(default=100000, ge=1, validation_alias="PURGE_FETCH_MAX_ROWS")
    delete_fetch_max_rows: int = Field(default=1000, ge=1, validation_alias="DELETE_FETCH_MAX_ROWS")
    inventory_fetch_max_rows: int = Field(default=1000, ge=1, validation_alias="INVENTORY_FETCH_MAX_ROWS")
    restore_fetch_max_rows: int = Field(default=200, ge=1, validation_alias="RESTORE_FETCH_MAX_ROWS")

    # =========================
    # Inventario
    # =========================
    inventory_request_cooldown_hours: int = Field(default=7, ge=0, validation_alias="INVENTORY_REQUEST_COOLDOWN_HOURS")
    inventory_max_window_days: int = Field(default=2, ge=1, validation_alias="INVENTORY_MAX_WINDOW_DAYS")

    # =========================
    # Scheduler
    # =========================
    upload_cron: str = Field(default="*/15 * * * *", validation_alias="UPLOAD_CRON")
    purge_cron: str = Field(default="*/45 * * * *", validation_alias="PURGE_CRON")
    delete_cron: str = Field(default="*/45 * * * *", validation_alias="DELETE_CRON")
    inventory_cron: str = Field(default="0 */6 * * *", validation_alias="INVENTORY_CRON")
    scheduler_timezone: str = Field(default="America/New_York", validation_alias="SCHEDULER_TIMEZONE")
    scheduler_isolation: IsolationMode = Field(default="process", validation_alias="SCHEDULER_ISOLATION")
    upload_job_enabled: bool = Field(default=True, validation_alias="UPLOAD_JOB_ENABLED")
    purge_job_enabled: bool = Field(default=True, validation_alias="PURGE_JOB_ENABLED")
    delete_job_enabled: bool = Field(default=True, validation_alias="DELETE_JOB_ENABLED")
    inventory_job_enabled: bool = Field(default=True, validation_alias="INVENTORY_JOB_ENABLED")

    # =========================
    # Observabilidad / Logging
    # =========================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_format: Literal["json", "pretty", "plain"] = Field(default="pretty", validation_alias="LOG_FORMAT")
    log_dir: Path = Field(default=Path("logs"), validation_alias="LOG_DIR")
    log_prefix_upload: str = Field(default="vault-upload", validation_alias="LOG_PREFIX_UPLOAD")
    log_prefix_purge: str = Field(default="vault-purge", validation_alias="LOG_PREFIX_PURGE")
    log_prefix_inventory: str = Field(default="vault-inventory", validation_alias="LOG_PREFIX_INVENTORY")
    log_prefix_delete: str = Field(default="vault-delete", validation_alias="LOG_PREFIX_DELETE")
    log_prefix_service: str = Field(default="vault-service", validation_alias="LOG_PREFIX_SERVICE")

    # ===== Helpers de entorno =====
    @computed_field  # type: ignore[misc]
    @property
    def is_dev(self) -> bool:
        return self.python_env == "development"

    @computed_field  # type: ignore[misc]
    @property
    def is_test(self) -> bool:
        return self.python_env == "test"

    @computed_field  # type: ignore[misc]
    @property
    def is_prod(self) -> bool:
        return self.python_env == "production"

    @field_validator("upload_cron", "purge_cron", "delete_cron", "inventory_cron")
    @classmethod
    def _validate_cron(cls, v: str) -> str:
        if len(v.split()) != 5:
            raise ValueError(f"Expresión cron inválida (requiere 5 campos): {v!r}")
        return v

    def log_prefix_for(self, workflow: str) -> str:
        """Prefijo de bitácora para un workflow (upload|purge|inventory|delete|service)."""
        return getattr(self, f"log_prefix_{workflow}")

    def fetch_max_rows_for(self, workflow: str) -> int:
        """Tamaño de página de candidatos para un workflow."""
        return getattr(self, f"{workflow}_fetch_max_rows")

    def _security_checks(self) -> None:
        """
        Validaciones mínimas de coherencia.
        Se invoca desde config_loader tras instanciar el settings.
        """
        import logging
        logger = logging.getLogger(__name__)

        if self.is_prod:
            if self.db_sslmode != "require":
                raise ValueError("DB_SSLMODE debe ser 'require' en producción")
            if self.debug:
                raise ValueError("DEBUG_MODE no puede estar activo en producción")

        if bool(self.aws_access_key_id) != bool(self.aws_secret_access_key):
            raise ValueError("AWS_ACCESS_KEY_ID y AWS_SECRET_ACCESS_KEY deben definirse juntas")

        if self.is_dev and not self.aws_access_key_id:
            logger.info("settings_aws_keys_missing: credentials will be read from the record store")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


__all__ = ["BaseAppSettings", "EnvName", "IsolationMode"]
# Fin del archivo coldvault/shared/config/settings_base.py
