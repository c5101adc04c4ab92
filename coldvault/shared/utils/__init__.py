# -*- coding: utf-8 -*-
"""
coldvault/shared/utils/__init__.py

Utilidades compartidas (checksums, escritura atómica).
"""

from .checksum_utils import calculate_tree_hash_bytes
from .file_io import atomic_write_bytes, remove_file_if_exists

__all__ = [
    "calculate_tree_hash_bytes",
    "atomic_write_bytes",
    "remove_file_if_exists",
]
