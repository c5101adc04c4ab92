# -*- coding: utf-8 -*-
"""
coldvault/shared/utils/checksum_utils.py

SHA-256 tree hash de Glacier. El cálculo se delega en botocore
(calculate_tree_hash), el mismo algoritmo que usa la bóveda: hojas
SHA-256 de 1 MiB combinadas por pares hasta la raíz.

Autor: ColdVault Team
Fecha: 04/09/2026
"""

import io

from botocore.utils import calculate_tree_hash


def calculate_tree_hash_bytes(data: bytes) -> str:
    """
    Calcula el tree hash de datos binarios.

    Args:
        data: Datos binarios

    Returns:
        Tree hash en formato hexadecimal
    """
    return calculate_tree_hash(io.BytesIO(data))


__all__ = ["calculate_tree_hash_bytes"]
# Fin del archivo coldvault/shared/utils/checksum_utils.py
