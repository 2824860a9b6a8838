# app/application/use_cases/list_invoices.py
from app.domain.errors import ValidationFailed
from app.domain.models.invoice import InvoicePage
from app.domain.ports.invoice_repository import InvoiceRepository


class ListInvoicesUseCase:
    def __init__(self, invoice_repo: InvoiceRepository):
        self.invoice_repo = invoice_repo

    def execute(self, page: int, per_page: int) -> InvoicePage:
        """Listado paginado, las facturas más recientes primero."""
        violations = {}
        if page < 1:
            violations['page'] = ["The page field must be at least 1."]
        if per_page < 1:
            violations['per_page'] = ["The per page field must be at least 1."]
        if violations:
            raise ValidationFailed(violations)
        return self.invoice_repo.paginate(page=page, per_page=per_page)
