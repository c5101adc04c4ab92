# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/__init__.py

Módulo vault: subida, purga, inventario, borrado y restauración de
documentos contra la bóveda.

Los submódulos se importan directamente (enums, schemas, repositories,
adapters, services, jobs) para no acoplar su orden de carga.
"""
