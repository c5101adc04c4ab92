# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/schemas/date_range.py

Ventana de fechas (purga / restauración) con sus tres representaciones:
- ISO-8601 extendido sin milisegundos  → 2020-06-15T16:00:00Z (solicitud de inventario)
- cadena "UTC" local                    → 06-15-2020 16:00:00
- cadena nativa del almacén (NLS)       → 15-JUN-20 16:00:00

Las tres se derivan de start/end, por lo que la normalización las
mantiene siempre coherentes.

Autor: ColdVault Team
Fecha: 03/09/2026
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone

from coldvault.modules.vault.errors import InventoryWindowInvalid

_MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


def _as_utc(value: datetime) -> datetime:
    """Fechas naive se interpretan como UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_iso(value: datetime) -> str:
    return _as_utc(value).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_utc(value: datetime) -> str:
    return _as_utc(value).strftime("%m-%d-%Y %H:%M:%S")


def format_nls(value: datetime) -> str:
    v = _as_utc(value)
    return f"{v.day:02d}-{_MONTHS[v.month - 1]}-{v.year % 100:02d} {v:%H:%M:%S}"


@dataclass(frozen=True)
class DateRange:
    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        object.__setattr__(self, "start", _as_utc(self.start))
        object.__setattr__(self, "end", _as_utc(self.end))

    # ── representaciones ──
    @property
    def iso_start(self) -> str:
        return format_iso(self.start)

    @property
    def iso_end(self) -> str:
        return format_iso(self.end)

    @property
    def utc_start(self) -> str:
        return format_utc(self.start)

    @property
    def utc_end(self) -> str:
        return format_utc(self.end)

    @property
    def nls_start(self) -> str:
        return format_nls(self.start)

    @property
    def nls_end(self) -> str:
        return format_nls(self.end)

    @property
    def span(self) -> timedelta:
        return self.end - self.start

    def normalized(self, max_days: int = 2) -> "DateRange":
        """
        Acota la ventana para limitar el tamaño del inventario.

        - start == end          → end = start + 1 día (la bóveda exige rango > 0)
        - end - start > max     → end = start + max_days
        - en otro caso          → sin cambios

        Raises:
            InventoryWindowInvalid: si end < start.
        """
        if self.end < self.start:
            raise InventoryWindowInvalid(self.iso_start, self.iso_end)
        if self.span == timedelta(0):
            return replace(self, end=self.start + timedelta(days=1))
        if self.span > timedelta(days=max_days):
            return replace(self, end=self.start + timedelta(days=max_days))
        return self

    def as_dict(self) -> dict:
        return {
            "ISO8601": {"StartDate": self.iso_start, "EndDate": self.iso_end},
            "UTC": {"StartDate": self.utc_start, "EndDate": self.utc_end},
            "NLS": {"StartDate": self.nls_start, "EndDate": self.nls_end},
        }

    def __str__(self) -> str:
        return f"{self.iso_start}..{self.iso_end}"


__all__ = ["DateRange", "format_iso", "format_utc", "format_nls"]
# Fin del archivo coldvault/modules/vault/schemas/date_range.py
