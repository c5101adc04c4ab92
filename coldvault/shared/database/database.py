# -*- coding: utf-8 -*-
"""
coldvault/shared/database/database.py

SQLAlchemy + asyncpg para el almacén de registros (PostgreSQL).
NullPool: cada run de workflow es corto y abre sesiones bajo demanda.

Provee:
- engine (create_async_engine)
- SessionLocal (async_sessionmaker)
- check_database_health()

Notas:
- Timeouts a nivel de conexión (asyncpg: timeout, command_timeout).
- search_path apunta al schema de rutinas del almacén (DB_SCHEMA).
"""

from __future__ import annotations

import asyncio
import logging

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from coldvault.shared.config import settings

logger = logging.getLogger(__name__)

# Silenciar errores ruidosos de cierre de conexiones de NullPool
logging.getLogger("sqlalchemy.pool.impl.NullPool").setLevel(logging.CRITICAL)


DB_ECHO_SQL = bool(settings.db_echo_sql)
DB_CONNECT_TIMEOUT_S: float = float(settings.db_connect_timeout_s)
DB_COMMAND_TIMEOUT_S: float = float(settings.db_command_timeout_s)
DB_SCHEMA: str = settings.db_schema

connect_args = {
    "server_settings": {"search_path": f"{DB_SCHEMA},public"},
    "timeout": DB_CONNECT_TIMEOUT_S,
    "command_timeout": DB_COMMAND_TIMEOUT_S,
}

if settings.db_sslmode == "require":
    connect_args["ssl"] = "require"

logger.debug(
    "db_engine_config: host=%s db=%s schema=%s echo=%s",
    settings.db_host, settings.db_name, DB_SCHEMA, DB_ECHO_SQL,
)

engine = create_async_engine(
    settings.database_url,
    poolclass=NullPool,
    echo=DB_ECHO_SQL,
    connect_args=connect_args,
)

# ── Session factory
SessionLocal = async_sessionmaker(
    bind=engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


# ── Health check
async def check_database_health(timeout_s: float = 3.0, sql: str = "SELECT 1") -> bool:
    """
    Verifica conectividad a la base de datos.

    Args:
        timeout_s: Tiempo máximo de espera en segundos
        sql: Query SQL a ejecutar (default: "SELECT 1")

    Returns:
        True si la conexión es exitosa, False en caso contrario
    """
    try:
        async with asyncio.timeout(timeout_s):
            async with engine.connect() as conn:
                await conn.execute(text(sql))
        return True
    except Exception as e:
        logger.warning("db_health_check_failed: %s", str(e)[:200])
        return False


__all__ = [
    "engine",
    "SessionLocal",
    "check_database_health",
]
# Fin del archivo coldvault/shared/database/database.py
