# -*- coding: utf-8 -*-
"""
coldvault/shared/database/__init__.py

Acceso al almacén de registros (PostgreSQL vía SQLAlchemy async).
El engine se crea al importar database.py; este paquete no lo importa
de forma anticipada para que los tests puedan usar el almacén en memoria
sin configurar una base de datos.
"""

__all__: list[str] = []
