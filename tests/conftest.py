import os
from datetime import date, timedelta
from itertools import count

# database.py exige DATABASE_URL al importarse
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.domain.models.invoice import InvoicePayload, InvoiceStatus
from app.infrastructure.persistence import database
from app.infrastructure.persistence import models  # noqa: F401
from app.infrastructure.persistence.invoice_repository_adapter import SQLAlchemyInvoiceRepository
from main import app

_numbers = count(1)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database.Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def repo(db_session):
    return SQLAlchemyInvoiceRepository(db_session)


@pytest.fixture
def client(session_factory, monkeypatch):
    monkeypatch.setattr(database, "SessionLocal", session_factory)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def invoice_data(**overrides):
    """Payload válido; los importes cuadran y el vencimiento es 7 días después de la emisión."""
    issue_date = date(2025, 2, 10)
    data = {
        "number": f"INV-2025-{next(_numbers):04d}",
        "supplier_name": 'ТОВ "Альфа Консалтинг"',
        "supplier_tax_id": "1234567890",
        "net_amount": 1000.00,
        "vat_amount": 200.00,
        "gross_amount": 1200.00,
        "currency": "UAH",
        "status": "pending",
        "issue_date": issue_date.isoformat(),
        "due_date": (issue_date + timedelta(days=7)).isoformat(),
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_invoice(session_factory):
    """Inserta facturas directamente en el almacenamiento, en su propia transacción."""
    def factory(status=InvoiceStatus.PENDING, **overrides):
        payload = InvoicePayload.model_validate(invoice_data(status=InvoiceStatus(status).value, **overrides))
        session = session_factory()
        try:
            invoice = SQLAlchemyInvoiceRepository(session).create(payload)
            session.commit()
            return invoice
        finally:
            session.close()
    return factory


@pytest.fixture
def build_payload():
    return invoice_data
