# app/application/use_cases/create_invoice.py
import logging
from typing import Any, Dict

from app.domain.errors import DuplicateNumberError, ValidationFailed
from app.domain.models.invoice import Invoice
from app.domain.ports.invoice_repository import InvoiceRepository
from app.domain.services.invoice_validation import NUMBER_TAKEN_MESSAGE, validate_invoice


class CreateInvoiceUseCase:
    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    def execute(self, data: Dict[str, Any]) -> Invoice:
        """
        Valida el payload completo (incluida la unicidad del número) y
        persiste la factura. El estado por defecto es 'pending'.
        """
        try:
            payload = validate_invoice(data, number_lookup=self.invoice_repo.find_by_number)
        except ValidationFailed as e:
            logging.info(f"Factura rechazada en la creación: {sorted(e.violations)}")
            raise

        try:
            invoice = self.invoice_repo.create(payload)
        except DuplicateNumberError:
            # Otra petición insertó el mismo número entre la validación y la escritura
            logging.warning(f"[{payload.number}] Conflicto de unicidad al insertar.")
            raise ValidationFailed({'number': [NUMBER_TAKEN_MESSAGE]})

        logging.info(f"[invoice {invoice.id}] Factura {invoice.number} creada.")
        return invoice
