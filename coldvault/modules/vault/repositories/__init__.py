# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/repositories/__init__.py

Acceso al almacén de registros.
"""

from .inmemory import InMemoryRecordStore
from .record_store_gateway import RecordStoreGateway, SqlRecordStoreGateway, raise_for_return_code

__all__ = [
    "RecordStoreGateway",
    "SqlRecordStoreGateway",
    "InMemoryRecordStore",
    "raise_for_return_code",
]
