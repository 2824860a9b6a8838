# app/application/use_cases/update_invoice.py
import logging
from typing import Any, Dict

from app.domain.errors import DuplicateNumberError, ExecutionConflict, NotFound, ValidationFailed
from app.domain.models.invoice import Invoice
from app.domain.ports.invoice_repository import InvoiceRepository
from app.domain.services.invoice_validation import NUMBER_TAKEN_MESSAGE, validate_invoice
from app.domain.services.transition_guard import ensure_can_update


class UpdateInvoiceUseCase:
    MAX_ATTEMPTS = 2

    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    def _load(self, invoice_id: int) -> Invoice:
        invoice = self.invoice_repo.find_by_id(invoice_id)
        if invoice is None:
            raise NotFound(invoice_id)
        return invoice

    def execute(self, invoice_id: int, data: Dict[str, Any]) -> Invoice:
        """
        Reemplaza todos los campos de una factura en estado 'pending'.

        La escritura es condicional al estado leído; si otra petición cambió la
        factura en el medio, se relee y se reintenta una vez antes de propagar
        ExecutionConflict.
        """
        for attempt in range(1, self.MAX_ATTEMPTS + 1):
            current = self._load(invoice_id)
            ensure_can_update(current)

            try:
                payload = validate_invoice(
                    data,
                    number_lookup=self.invoice_repo.find_by_number,
                    exclude_id=invoice_id,
                    replacement=True,
                )
            except ValidationFailed as e:
                logging.info(f"[invoice {invoice_id}] Actualización rechazada: {sorted(e.violations)}")
                raise

            try:
                invoice = self.invoice_repo.update_if_status(invoice_id, current.status, payload)
            except DuplicateNumberError:
                logging.warning(f"[invoice {invoice_id}] Conflicto de unicidad con el número {payload.number}.")
                raise ValidationFailed({'number': [NUMBER_TAKEN_MESSAGE]})
            except ExecutionConflict:
                logging.warning(f"[invoice {invoice_id}] Escritura concurrente detectada (intento {attempt}).")
                if attempt == self.MAX_ATTEMPTS:
                    raise
                continue

            logging.info(f"[invoice {invoice_id}] Factura actualizada.")
            return invoice
