# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/dependencies.py

Ensamblado de colaboradores de un run:
- almacén de registros (SqlRecordStoreGateway sobre SessionLocal)
- ruta del NAS (settings o fn_get_nas_path) y LocationResolver validado
- cliente de la bóveda conectado (dos fases)

    async with open_vault_dependencies() as deps:
        ctx = await run_upload_workflow(deps, ctx)

El cliente de la bóveda se cierra al salir del contexto, también ante error.

Autor: ColdVault Team
Fecha: 09/09/2026
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Optional

from coldvault.modules.vault.adapters import ArchiveClient, connect_archive_client
from coldvault.modules.vault.errors import FilesystemNotFound, StoreUnavailable
from coldvault.modules.vault.repositories import RecordStoreGateway, SqlRecordStoreGateway
from coldvault.modules.vault.services import LocationResolver
from coldvault.shared.config import BaseAppSettings, get_settings

_logger = logging.getLogger("vault.dependencies")


@dataclass
class VaultDependencies:
    store: RecordStoreGateway
    archive: ArchiveClient
    resolver: LocationResolver
    settings: BaseAppSettings


@asynccontextmanager
async def open_vault_dependencies(
    settings: Optional[BaseAppSettings] = None,
) -> AsyncIterator[VaultDependencies]:
    """
    Construye las dependencias reales de un run.

    Raises:
        StoreUnavailable: el almacén no responde
        FilesystemNotFound: no hay ruta de NAS o faltan las carpetas raíz
        ArchiveUnavailable / ArchiveAuthExpired: la bóveda no valida
    """
    settings = settings or get_settings()

    # Import diferido: el engine se crea al importar el módulo de base de datos
    from coldvault.shared.database.database import SessionLocal, check_database_health

    if not await check_database_health():
        raise StoreUnavailable("check_database_health", "SELECT 1 sin respuesta")
    store = SqlRecordStoreGateway.from_settings(SessionLocal, settings)

    nas_path = settings.nas_parent_path or await store.get_nas_path()
    if not nas_path:
        raise FilesystemNotFound("<NAS_PARENT_PATH sin definir>")
    resolver = LocationResolver.from_settings(settings, nas_path)
    resolver.validate_roots()

    archive = await connect_archive_client(settings, store)
    _logger.info("vault_dependencies_ready: nas=%s vault=%s", nas_path, settings.vault_name)
    try:
        yield VaultDependencies(store=store, archive=archive, resolver=resolver, settings=settings)
    finally:
        await archive.close()


__all__ = ["VaultDependencies", "open_vault_dependencies"]
# Fin del archivo coldvault/modules/vault/dependencies.py
