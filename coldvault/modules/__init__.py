# -*- coding: utf-8 -*-
"""
coldvault/modules/__init__.py

Módulos de dominio.
"""
