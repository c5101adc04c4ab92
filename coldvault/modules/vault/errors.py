# -*- coding: utf-8 -*-
"""
coldvault/modules/vault/errors.py

Excepciones de dominio para el módulo vault.

Dos familias:
- RowLevelError: afecta a un solo documento. Se captura en la frontera
  por documento, se registra con el document_id y el run continúa.
- RunLevelError: impide continuar el run completo (almacén caído,
  bóveda inaccesible, credenciales expiradas, ventana inválida).

ArchiveNotFound queda fuera de ambas: quien la recibe decide si es
éxito (borrado de archivo ya inexistente) o fallo (salida de job).

Autor: ColdVault Team
Fecha: 03/09/2026
"""

from typing import Optional


class VaultError(Exception):
    """Base de todas las excepciones del módulo vault."""


class RowLevelError(VaultError):
    """Error acotado a un documento; el run continúa."""


class RunLevelError(VaultError):
    """Error que aborta el run en curso."""


# ─────────────────────────── almacén de registros ───────────────────────────

class StoreUnavailable(RunLevelError):
    """Se lanza cuando no hay conexión con el almacén o el driver falla."""
    def __init__(self, routine: str, detail: str = ""):
        self.routine = routine
        self.detail = detail
        super().__init__(f"Almacén no disponible en '{routine}': {detail}".rstrip(": "))


class StoreLogicalError(RowLevelError):
    """Se lanza cuando una rutina del almacén devuelve un código distinto de 0."""
    def __init__(self, routine: str, document_id: Optional[int], return_code: int, row_count: int = 0):
        self.routine = routine
        self.document_id = document_id
        self.return_code = return_code
        self.row_count = row_count
        super().__init__(
            f"Rutina '{routine}' devolvió código {return_code} "
            f"(document_id={document_id}, filas={row_count})"
        )


# ─────────────────────────────── bóveda ─────────────────────────────────────

class ArchiveUnavailable(RunLevelError):
    """Se lanza ante cualquier fallo de la bóveda que no sea NotFound ni de credenciales."""
    def __init__(self, operation: str, code: str = "", detail: str = ""):
        self.operation = operation
        self.code = code
        self.detail = detail
        super().__init__(f"Bóveda no disponible en '{operation}' [{code}]: {detail}")


class ArchiveAuthExpired(RunLevelError):
    """Se lanza cuando las credenciales de la bóveda expiraron o son inválidas."""
    def __init__(self, operation: str, code: str = ""):
        self.operation = operation
        self.code = code
        super().__init__(f"Credenciales de la bóveda inválidas o expiradas en '{operation}' [{code}]")


class ArchiveNotFound(VaultError):
    """Se lanza cuando el archivo o job solicitado no existe en la bóveda."""
    def __init__(self, operation: str, identifier: str):
        self.operation = operation
        self.identifier = identifier
        super().__init__(f"Recurso no encontrado en la bóveda ({operation}): {identifier}")


# ─────────────────────────────── filesystem ─────────────────────────────────

class FilesystemNotFound(RowLevelError):
    """Se lanza cuando el archivo (o carpeta raíz) no existe en el NAS."""
    def __init__(self, path):
        self.path = path
        super().__init__(f"Archivo no encontrado: {path}")


class FilesystemAccessDenied(RowLevelError):
    """Se lanza cuando el archivo existe pero no se puede leer."""
    def __init__(self, path, detail: str = ""):
        self.path = path
        self.detail = detail
        super().__init__(f"Acceso denegado: {path} {detail}".rstrip())


# ─────────────────────────────── integridad ─────────────────────────────────

class ChecksumMismatch(RowLevelError):
    """Se lanza cuando el tree hash calculado no coincide con el registrado."""
    def __init__(self, document_id: Optional[int], expected: Optional[str], actual: str):
        self.document_id = document_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Checksum no coincide (document_id={document_id}): "
            f"esperado={expected} calculado={actual}"
        )


class InvalidStatusTransition(RowLevelError):
    """Se lanza cuando se intenta una transición de estado inválida."""
    def __init__(self, from_status, to_status, message=None):
        self.from_status = from_status
        self.to_status = to_status
        default_msg = f"Transición inválida: {from_status} → {to_status}"
        super().__init__(message or default_msg)


class InventoryWindowInvalid(RunLevelError):
    """Se lanza cuando la ventana de inventario termina antes de empezar."""
    def __init__(self, start, end):
        self.start = start
        self.end = end
        super().__init__(f"Ventana de inventario inválida: {start} > {end}")


__all__ = [
    "VaultError",
    "RowLevelError",
    "RunLevelError",
    "StoreUnavailable",
    "StoreLogicalError",
    "ArchiveUnavailable",
    "ArchiveAuthExpired",
    "ArchiveNotFound",
    "FilesystemNotFound",
    "FilesystemAccessDenied",
    "ChecksumMismatch",
    "InvalidStatusTransition",
    "InventoryWindowInvalid",
]

# Fin del archivo coldvault/modules/vault/errors.py
