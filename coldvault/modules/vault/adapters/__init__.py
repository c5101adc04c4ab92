# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/adapters/__init__.py

Adaptadores a servicios externos (bóveda Glacier).
"""

from .glacier_client import ArchiveClient, GlacierArchiveClient, connect_archive_client, translate_client_error

__all__ = [
    "ArchiveClient",
    "GlacierArchiveClient",
    "connect_archive_client",
    "translate_client_error",
]
