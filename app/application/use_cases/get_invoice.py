# app/application/use_cases/get_invoice.py
from app.domain.errors import NotFound
from app.domain.models.invoice import Invoice
from app.domain.ports.invoice_repository import InvoiceRepository


class GetInvoiceUseCase:
    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    def execute(self, invoice_id: int) -> Invoice:
        invoice = self.invoice_repo.find_by_id(invoice_id)
        if invoice is None:
            raise NotFound(invoice_id)
        return invoice
