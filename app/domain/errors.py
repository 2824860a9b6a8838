# app/domain/errors.py
from typing import Dict, List


class InvoiceError(Exception):
    """Base de todos los errores de negocio del servicio de facturas."""


class ValidationFailed(InvoiceError):
    """
    El payload no cumple las reglas de negocio.
    `violations` es un dict: {'campo': ['mensaje', ...]}
    """
    def __init__(self, violations: Dict[str, List[str]]):
        self.violations = violations
        super().__init__(self.summary())

    def summary(self) -> str:
        messages = [msg for msgs in self.violations.values() for msg in msgs]
        if not messages:
            return "The given data was invalid."
        remaining = len(messages) - 1
        if remaining == 0:
            return messages[0]
        suffix = "error" if remaining == 1 else "errors"
        return f"{messages[0]} (and {remaining} more {suffix})"


class NotFound(InvoiceError):
    def __init__(self, invoice_id: int):
        self.invoice_id = invoice_id
        super().__init__("Invoice not found")


class Unsupported(InvoiceError):
    def __init__(self, operation: str):
        self.operation = operation
        super().__init__("Not implemented")


class ExecutionConflict(InvoiceError):
    """Una escritura condicional no afectó ninguna fila (actualización concurrente)."""
    def __init__(self, invoice_id: int):
        self.invoice_id = invoice_id
        super().__init__(f"Invoice {invoice_id} was modified concurrently.")


class StorageUnavailable(InvoiceError):
    def __init__(self, message: str = "Storage is unavailable."):
        super().__init__(message)


class DuplicateNumberError(InvoiceError):
    """El Record Store rechazó la escritura por el índice único de `number`."""
    def __init__(self, number: str):
        self.number = number
        super().__init__(f"Invoice number {number!r} already exists.")
