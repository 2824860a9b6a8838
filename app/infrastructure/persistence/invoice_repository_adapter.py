# app/infrastructure/persistence/invoice_repository_adapter.py
import functools
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.domain.errors import DuplicateNumberError, ExecutionConflict, StorageUnavailable
from app.domain.models.invoice import Invoice, InvoicePage, InvoicePayload, InvoiceStatus
from app.domain.ports.invoice_repository import InvoiceRepository
from .models import InvoiceRecord, utcnow


def _storage_errors(method):
    """Traduce la caída de la base de datos a StorageUnavailable."""
    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except OperationalError as e:
            logging.error(f"Base de datos no disponible en {method.__name__}.", exc_info=True)
            raise StorageUnavailable() from e
    return wrapper


class SQLAlchemyInvoiceRepository(InvoiceRepository):
    def __init__(self, db: Session):
        self.db = db

    def _values(self, payload: InvoicePayload) -> dict:
        values = payload.model_dump()
        values['status'] = payload.status.value
        return values

    @_storage_errors
    def find_by_id(self, invoice_id: int) -> Optional[Invoice]:
        record = self.db.query(InvoiceRecord).filter(InvoiceRecord.id == invoice_id).first()
        return Invoice.model_validate(record) if record else None

    @_storage_errors
    def find_by_number(self, number: str) -> Optional[Invoice]:
        record = self.db.query(InvoiceRecord).filter(InvoiceRecord.number == number).first()
        return Invoice.model_validate(record) if record else None

    @_storage_errors
    def create(self, payload: InvoicePayload) -> Invoice:
        record = InvoiceRecord(**self._values(payload))
        try:
            # SAVEPOINT: un fallo del índice único no invalida la sesión completa
            with self.db.begin_nested():
                self.db.add(record)
                self.db.flush()
        except IntegrityError as e:
            raise DuplicateNumberError(payload.number) from e
        self.db.refresh(record)
        return Invoice.model_validate(record)

    @_storage_errors
    def update_if_status(self, invoice_id: int, expected_status: InvoiceStatus, payload: InvoicePayload) -> Invoice:
        values = self._values(payload)
        values['updated_at'] = utcnow()
        try:
            with self.db.begin_nested():
                affected = self.db.query(InvoiceRecord)\
                    .filter(InvoiceRecord.id == invoice_id)\
                    .filter(InvoiceRecord.status == InvoiceStatus(expected_status).value)\
                    .update(values, synchronize_session=False)
        except IntegrityError as e:
            raise DuplicateNumberError(payload.number) from e

        if affected != 1:
            raise ExecutionConflict(invoice_id)

        # Releemos la fila desde la base de datos
        self.db.expire_all()
        record = self.db.query(InvoiceRecord).filter(InvoiceRecord.id == invoice_id).one()
        return Invoice.model_validate(record)

    @_storage_errors
    def paginate(self, page: int, per_page: int) -> InvoicePage:
        query = self.db.query(InvoiceRecord)
        total = query.count()
        records = query\
            .order_by(InvoiceRecord.created_at.desc(), InvoiceRecord.id.desc())\
            .offset((page - 1) * per_page)\
            .limit(per_page)\
            .all()
        return InvoicePage(
            items=[Invoice.model_validate(r) for r in records],
            page=page,
            per_page=per_page,
            total=total,
        )
