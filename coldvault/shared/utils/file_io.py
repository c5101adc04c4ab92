# -*- coding: utf-8 -*-
"""
coldvault/shared/utils/file_io.py

Utilidades de archivo para el NAS:
- atomic_write_bytes: escritura atómica (temporal en la misma carpeta + os.replace)
- remove_file_if_exists: borrado que distingue "borrado" de "no existía"

Autor: ColdVault Team
Fecha: 04/09/2026
"""

import logging
import os
import tempfile
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


def atomic_write_bytes(target: Union[str, Path], data: bytes) -> Path:
    """
    Escribe `data` en `target` de forma atómica.

    El temporal se crea en la carpeta destino para que os.replace no
    cruce sistemas de archivos. Si algo falla, el temporal se elimina y
    el destino queda intacto.

    Args:
        target: Ruta final del archivo
        data: Contenido

    Returns:
        Path final escrito
    """
    target = Path(target)
    target.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".part", dir=target.parent)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(data)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, target)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise

    logger.debug("atomic_write_done: path=%s bytes=%d", target, len(data))
    return target


def remove_file_if_exists(file_path: Union[str, Path]) -> bool:
    """
    Elimina un archivo.

    Returns:
        True si se eliminó, False si no existía.

    Raises:
        PermissionError / OSError: si existe pero no se puede eliminar.
    """
    try:
        Path(file_path).unlink()
        return True
    except FileNotFoundError:
        return False


__all__ = ["atomic_write_bytes", "remove_file_if_exists"]
# Fin del archivo coldvault/shared/utils/file_io.py
