# -*- coding: utf-8 -*-
"""
coldvault

Ciclo de vida de documentos entre el NAS y la bóveda Glacier.
"""

__version__ = "0.1.0"
