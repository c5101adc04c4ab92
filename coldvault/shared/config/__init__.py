# -*- coding: utf-8 -*-
"""
coldvault/shared/config/__init__.py

Punto único de acceso a la configuración:
    from coldvault.shared.config import settings

El objeto `settings` es un proxy perezoso: no instancia la configuración
al importar (evita validaciones prematuras en tests) y delega cada
atributo en get_settings().
"""

from __future__ import annotations

from typing import Any, Callable

from .config_loader import get_settings
from .logging_config import setup_logging
from .settings_base import BaseAppSettings


class _SettingsProxy:
    __slots__ = ("_base_getter",)

    def __init__(self, base_getter: Callable[[], BaseAppSettings]) -> None:
        object.__setattr__(self, "_base_getter", base_getter)

    def _get_base(self) -> BaseAppSettings:
        return object.__getattribute__(self, "_base_getter")()

    def __getattr__(self, name: str) -> Any:
        return getattr(self._get_base(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._get_base(), name, value)


# Singleton accesible como `settings` (lazy-load via getter)
settings = _SettingsProxy(get_settings)

__all__ = ["settings", "get_settings", "setup_logging", "BaseAppSettings"]
# Fin del archivo
