# -*- coding: utf-8 -*-
"""
coldvault/shared/__init__.py

Infraestructura compartida: configuración, base de datos, scheduler,
observabilidad y utilidades.
"""
