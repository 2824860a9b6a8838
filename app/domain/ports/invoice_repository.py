# app/domain/ports/invoice_repository.py
from abc import ABC, abstractmethod
from typing import Optional

from app.domain.models.invoice import Invoice, InvoicePage, InvoicePayload, InvoiceStatus


class InvoiceRepository(ABC):
    """
    Contrato del Record Store. Es el único dueño del estado persistido de
    las facturas y debe garantizar la unicidad de `number` a nivel de almacenamiento.
    """

    @abstractmethod
    def find_by_id(self, invoice_id: int) -> Optional[Invoice]:
        """Busca una factura por su ID."""
        pass

    @abstractmethod
    def find_by_number(self, number: str) -> Optional[Invoice]:
        """Busca una factura por su número (coincidencia exacta)."""
        pass

    @abstractmethod
    def create(self, payload: InvoicePayload) -> Invoice:
        """
        Inserta la factura y retorna el registro con su ID asignado.
        Lanza DuplicateNumberError si el número ya existe.
        """
        pass

    @abstractmethod
    def update_if_status(self, invoice_id: int, expected_status: InvoiceStatus, payload: InvoicePayload) -> Invoice:
        """
        Reemplaza todos los campos solo si la factura sigue en `expected_status`.
        Lanza ExecutionConflict si ninguna fila fue afectada y
        DuplicateNumberError si el número ya pertenece a otra factura.
        Retorna el registro releído del almacenamiento.
        """
        pass

    @abstractmethod
    def paginate(self, page: int, per_page: int) -> InvoicePage:
        """Listado ordenado por `created_at` descendente."""
        pass
