# app/application/use_cases/delete_invoice.py
import logging

from app.domain.errors import Unsupported


class DeleteInvoiceUseCase:
    """Las facturas nunca se eliminan: la operación siempre se rechaza sin tocar el almacenamiento."""

    def execute(self, invoice_id: int) -> None:
        logging.info(f"[invoice {invoice_id}] Intento de eliminación rechazado.")
        raise Unsupported("delete")
