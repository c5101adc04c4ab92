# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/services/location_resolver.py

Resolución de rutas en el NAS.

    {nas}/{Docs|Photos}/{fsid[0:2]}/{fsid}.{file_type}

La miniatura de un archivo vive en la misma carpeta: {stem}-th{suffix}.

Autor: ColdVault Team
Fecha: 06/09/2026
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Union

from coldvault.modules.vault.enums import DocumentType
from coldvault.modules.vault.errors import FilesystemAccessDenied, FilesystemNotFound

_logger = logging.getLogger("vault.location_resolver")


class LocationResolver:

    def __init__(
        self,
        nas_parent_path: Union[str, Path],
        documents_dir: str = "Docs",
        photos_dir: str = "Photos",
    ):
        self.nas_parent_path = Path(nas_parent_path)
        self.roots = {
            DocumentType.DOCUMENT: self.nas_parent_path / documents_dir,
            DocumentType.PHOTO: self.nas_parent_path / photos_dir,
        }

    @classmethod
    def from_settings(cls, settings, nas_parent_path: Union[str, Path]) -> "LocationResolver":
        return cls(nas_parent_path, settings.nas_documents_dir, settings.nas_photos_dir)

    def path_for(self, document_type: DocumentType, file_system_id: str, file_type: str) -> Path:
        """Ruta esperada, sin comprobar existencia."""
        if not file_system_id:
            raise FilesystemNotFound(f"<sin file_system_id> ({document_type})")
        root = self.roots[DocumentType(document_type)]
        suffix = f".{file_type}" if file_type else ""
        return root / file_system_id[:2] / f"{file_system_id}{suffix}"

    def resolve(self, document_type: DocumentType, file_system_id: str, file_type: str) -> Path:
        """
        Ruta de un archivo existente y legible.

        Raises:
            FilesystemNotFound: el archivo no existe
            FilesystemAccessDenied: existe pero no es legible
        """
        path = self.path_for(document_type, file_system_id, file_type)
        if not path.is_file():
            raise FilesystemNotFound(path)
        if not os.access(path, os.R_OK):
            raise FilesystemAccessDenied(path, "read permission denied")
        return path

    @staticmethod
    def thumbnail_for(path: Union[str, Path]) -> Path:
        path = Path(path)
        return path.with_name(f"{path.stem}-th{path.suffix}")

    def validate_roots(self) -> None:
        """
        Verifica que existan las carpetas raíz de documentos y fotos.

        Raises:
            FilesystemNotFound: si alguna no existe (aborta el run)
        """
        for doc_type, root in self.roots.items():
            if not root.is_dir():
                _logger.error("nas_root_missing: type=%s path=%s", doc_type.value, root)
                raise FilesystemNotFound(root)
        _logger.debug("nas_roots_ok: parent=%s", self.nas_parent_path)


__all__ = ["LocationResolver"]
# Fin del archivo coldvault/modules/vault/services/location_resolver.py
