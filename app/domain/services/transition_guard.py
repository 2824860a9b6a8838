# app/domain/services/transition_guard.py
from app.domain.errors import ValidationFailed
from app.domain.models.invoice import Invoice, InvoiceStatus

# Estados desde los que una factura puede modificarse
MUTABLE_STATES = frozenset({InvoiceStatus.PENDING})

NOT_PENDING_MESSAGE = "Only invoices with pending status can be updated."


def can_update(status: InvoiceStatus) -> bool:
    return InvoiceStatus(status) in MUTABLE_STATES


def ensure_can_update(invoice: Invoice) -> None:
    """
    Se evalúa sobre el estado actual de la factura, antes de aplicar el
    payload entrante. No se consulta al crear.
    """
    if not can_update(invoice.status):
        raise ValidationFailed({'status': [NOT_PENDING_MESSAGE]})
