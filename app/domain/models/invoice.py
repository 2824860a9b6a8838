# app/domain/models/invoice.py
from pydantic import BaseModel, Field, ConfigDict, PlainSerializer, field_validator
from typing import Annotated, List, Optional
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum

import config

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("9999999999999.99")  # columna decimal(15, 2)

# En JSON los importes viajan como números
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def round_money(value: Decimal) -> Decimal:
    """Redondeo half-up a 2 decimales, igual en ambos lados de cualquier comparación."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


class InvoiceStatus(str, Enum):
    """Estados posibles de una factura."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class InvoicePayload(BaseModel):
    """
    Datos aceptados para crear una factura. Cualquier campo desconocido del
    payload se ignora; solo se persiste este conjunto fijo de atributos.
    """
    number: str = Field(min_length=1, max_length=255)
    supplier_name: str = Field(min_length=1, max_length=255)
    supplier_tax_id: str = Field(min_length=1, max_length=255)
    net_amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    vat_amount: Decimal = Field(ge=0, le=MAX_AMOUNT)
    gross_amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    currency: str = Field(default=config.DEFAULT_CURRENCY, min_length=3, max_length=3)
    status: InvoiceStatus = InvoiceStatus.PENDING
    issue_date: date
    due_date: date

    model_config = ConfigDict(
        extra='ignore',
        str_strip_whitespace=True,
    )

    @field_validator('net_amount', 'vat_amount', 'gross_amount', mode='after')
    @classmethod
    def _normalize_amount(cls, value: Decimal) -> Decimal:
        return round_money(value)


class InvoiceReplacement(InvoicePayload):
    """Reemplazo completo para una actualización: todos los campos son obligatorios."""
    currency: str = Field(min_length=3, max_length=3)
    status: InvoiceStatus


class Invoice(BaseModel):
    """Factura tal como la guarda el Record Store."""
    id: int
    number: str
    supplier_name: str
    supplier_tax_id: str
    net_amount: Money
    vat_amount: Money
    gross_amount: Money
    currency: str
    status: InvoiceStatus
    issue_date: date
    due_date: date
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class InvoicePage(BaseModel):
    """Una página del listado ordenado, con sus datos de paginación."""
    items: List[Invoice]
    page: int = Field(ge=1)
    per_page: int = Field(ge=1)
    total: int

    @property
    def last_page(self) -> int:
        return max(1, -(-self.total // self.per_page))
