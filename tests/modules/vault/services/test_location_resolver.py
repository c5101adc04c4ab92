# -*- coding: utf-8 -*-
"""
Tests de resolución de rutas en el NAS.
"""

import os

import pytest

from coldvault.modules.vault.enums import DocumentType
from coldvault.modules.vault.errors import FilesystemAccessDenied, FilesystemNotFound
from coldvault.modules.vault.services import LocationResolver


def test_path_layout(resolver, nas_root):
    assert resolver.path_for(DocumentType.DOCUMENT, "ab000001", "pdf") == nas_root / "Docs" / "ab" / "ab000001.pdf"
    assert resolver.path_for(DocumentType.PHOTO, "cd000002", "jpg") == nas_root / "Photos" / "cd" / "cd000002.jpg"
    assert resolver.path_for(DocumentType.DOCUMENT, "ef000003", None).name == "ef000003"


def test_missing_file_system_id(resolver):
    with pytest.raises(FilesystemNotFound):
        resolver.path_for(DocumentType.DOCUMENT, "", "pdf")


def test_resolve_existing_and_missing(resolver):
    path = resolver.path_for(DocumentType.DOCUMENT, "ab000001", "pdf")
    with pytest.raises(FilesystemNotFound):
        resolver.resolve(DocumentType.DOCUMENT, "ab000001", "pdf")

    path.parent.mkdir(parents=True)
    path.write_bytes(b"x")
    assert resolver.resolve(DocumentType.DOCUMENT, "ab000001", "pdf") == path


def test_unreadable_file_is_access_denied(resolver, monkeypatch):
    path = resolver.path_for(DocumentType.DOCUMENT, "ab000001", "pdf")
    path.parent.mkdir(parents=True)
    path.write_bytes(b"x")
    monkeypatch.setattr(os, "access", lambda *_: False)
    with pytest.raises(FilesystemAccessDenied):
        resolver.resolve(DocumentType.DOCUMENT, "ab000001", "pdf")


def test_thumbnail_name():
    assert LocationResolver.thumbnail_for("/nas/Photos/ab/ab01.jpg").name == "ab01-th.jpg"


def test_validate_roots(tmp_path, resolver):
    resolver.validate_roots()
    with pytest.raises(FilesystemNotFound):
        LocationResolver(tmp_path / "missing").validate_roots()


def test_from_settings_uses_configured_dirs(vault_settings, tmp_path):
    settings = vault_settings.model_copy(update={"nas_photos_dir": "Fotos"})
    resolver = LocationResolver.from_settings(settings, tmp_path)
    assert resolver.roots[DocumentType.PHOTO] == tmp_path / "Fotos"
