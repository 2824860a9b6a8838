# app/infrastructure/api/routers/invoices_router.py
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query, Request
from pydantic import BaseModel
from sqlalchemy.orm import Session

import config
from app.application.use_cases.create_invoice import CreateInvoiceUseCase
from app.application.use_cases.delete_invoice import DeleteInvoiceUseCase
from app.application.use_cases.get_invoice import GetInvoiceUseCase
from app.application.use_cases.list_invoices import ListInvoicesUseCase
from app.application.use_cases.update_invoice import UpdateInvoiceUseCase
from app.domain.models.invoice import Invoice, InvoicePage
from app.domain.ports.invoice_repository import InvoiceRepository
from app.infrastructure.persistence.database import get_db
from app.infrastructure.persistence.invoice_repository_adapter import SQLAlchemyInvoiceRepository

router = APIRouter(prefix="/invoices", tags=["Invoices"])


# --- Envoltorio de paginación ---

class PageMeta(BaseModel):
    current_page: int
    per_page: int
    total: int
    last_page: int


class PageLinks(BaseModel):
    first: str
    last: str
    prev: Optional[str] = None
    next: Optional[str] = None


class PaginatedInvoices(BaseModel):
    data: List[Invoice]
    meta: PageMeta
    links: PageLinks


def build_envelope(request: Request, page: InvoicePage) -> PaginatedInvoices:
    def url(number: int) -> str:
        return str(request.url.include_query_params(page=number, per_page=page.per_page))

    last_page = page.last_page
    return PaginatedInvoices(
        data=page.items,
        meta=PageMeta(
            current_page=page.page,
            per_page=page.per_page,
            total=page.total,
            last_page=last_page,
        ),
        links=PageLinks(
            first=url(1),
            last=url(last_page),
            prev=url(page.page - 1) if page.page > 1 else None,
            next=url(page.page + 1) if page.page < last_page else None,
        ),
    )


# --- Dependencias ---

def get_invoice_repository(db: Session = Depends(get_db)) -> InvoiceRepository:
    return SQLAlchemyInvoiceRepository(db)


# --- Endpoints ---

@router.get("", response_model=PaginatedInvoices, summary="Listar facturas")
def list_invoices(
    request: Request,
    page: int = Query(1, ge=1),
    per_page: int = Query(config.DEFAULT_PER_PAGE, ge=1, le=config.MAX_PER_PAGE),
    repo: InvoiceRepository = Depends(get_invoice_repository),
):
    result = ListInvoicesUseCase(repo).execute(page=page, per_page=per_page)
    return build_envelope(request, result)


@router.get("/{invoice_id}", response_model=Invoice, summary="Obtener una factura")
def get_invoice(invoice_id: int, repo: InvoiceRepository = Depends(get_invoice_repository)):
    return GetInvoiceUseCase(repo).execute(invoice_id)


@router.post("", response_model=Invoice, status_code=201, summary="Crear una factura")
def create_invoice(
    payload: Dict[str, Any] = Body(...),
    repo: InvoiceRepository = Depends(get_invoice_repository),
):
    """
    El cuerpo se recibe como dict crudo: el motor de validación reporta todas
    las violaciones juntas, incluidas las reglas entre campos.
    """
    return CreateInvoiceUseCase(repo).execute(payload)


@router.put("/{invoice_id}", response_model=Invoice, summary="Reemplazar una factura pendiente")
def update_invoice(
    invoice_id: int,
    payload: Dict[str, Any] = Body(...),
    repo: InvoiceRepository = Depends(get_invoice_repository),
):
    return UpdateInvoiceUseCase(repo).execute(invoice_id, payload)


@router.delete("/{invoice_id}", summary="Eliminar una factura (no soportado)")
def delete_invoice(invoice_id: int):
    DeleteInvoiceUseCase().execute(invoice_id)
