from datetime import date
from decimal import Decimal

import pytest

from app.domain.errors import ValidationFailed
from app.domain.models.invoice import Invoice, InvoiceReplacement, InvoiceStatus
from app.domain.services.invoice_validation import (
    DUE_DATE_MESSAGE,
    GROSS_AMOUNT_MESSAGE,
    NUMBER_TAKEN_MESSAGE,
    check_gross_amount,
    validate_invoice,
)


def no_invoices(number):
    return None


def existing(invoice_id, number):
    return Invoice(
        id=invoice_id,
        number=number,
        supplier_name="Existing supplier",
        supplier_tax_id="2222222222",
        net_amount=Decimal("100.00"),
        vat_amount=Decimal("20.00"),
        gross_amount=Decimal("120.00"),
        currency="UAH",
        status=InvoiceStatus.PENDING,
        issue_date=date(2025, 2, 10),
        due_date=date(2025, 2, 20),
    )


def violations_for(data, **kwargs):
    kwargs.setdefault("number_lookup", no_invoices)
    with pytest.raises(ValidationFailed) as exc_info:
        validate_invoice(data, **kwargs)
    return exc_info.value.violations


def test_valid_payload_is_normalized(build_payload):
    payload = validate_invoice(
        build_payload(number="  INV-1  ", net_amount="10000", vat_amount=2000, gross_amount=12000.0),
        number_lookup=no_invoices,
    )

    assert payload.number == "INV-1"
    assert payload.net_amount == Decimal("10000.00")
    assert payload.gross_amount == Decimal("12000.00")
    assert payload.issue_date == date(2025, 2, 10)


def test_status_and_currency_default_on_create(build_payload):
    data = build_payload()
    del data["status"]
    del data["currency"]

    payload = validate_invoice(data, number_lookup=no_invoices)

    assert payload.status == InvoiceStatus.PENDING
    assert payload.currency == "UAH"


def test_unknown_fields_are_ignored(build_payload):
    payload = validate_invoice(build_payload(id=99, approved_by="someone"), number_lookup=no_invoices)

    assert "approved_by" not in payload.model_dump()
    assert "id" not in payload.model_dump()


def test_gross_must_equal_net_plus_vat(build_payload):
    violations = violations_for(build_payload(net_amount=10000.00, vat_amount=2000.00, gross_amount=13000.00))

    assert violations == {"gross_amount": [GROSS_AMOUNT_MESSAGE]}


def test_gross_check_runs_even_when_other_fields_fail(build_payload):
    violations = violations_for(build_payload(supplier_name="", gross_amount=1.00))

    assert "supplier_name" in violations
    assert violations["gross_amount"] == [GROSS_AMOUNT_MESSAGE]


def test_gross_comparison_is_not_float_equality():
    # 0.1 + 0.2 != 0.3 en coma flotante
    assert check_gross_amount({"net_amount": 0.1, "vat_amount": 0.2, "gross_amount": 0.3}) is None


def test_gross_comparison_rounds_half_up():
    assert check_gross_amount({"net_amount": "10.005", "vat_amount": "0", "gross_amount": "10.01"}) is None
    assert check_gross_amount({"net_amount": "10.004", "vat_amount": "0", "gross_amount": "10.01"}) == GROSS_AMOUNT_MESSAGE


def test_due_date_before_issue_date(build_payload):
    violations = violations_for(build_payload(issue_date="2025-02-10", due_date="2025-02-01"))

    assert violations == {"due_date": [DUE_DATE_MESSAGE]}


def test_due_date_equal_to_issue_date_is_accepted(build_payload):
    payload = validate_invoice(build_payload(issue_date="2025-02-10", due_date="2025-02-10"), number_lookup=no_invoices)

    assert payload.due_date == payload.issue_date


def test_all_field_violations_are_collected(build_payload):
    violations = violations_for(build_payload(
        supplier_name="   ",
        supplier_tax_id="x" * 256,
        net_amount=0,
        vat_amount=-1,
        currency="US",
        status="paid",
        issue_date="not-a-date",
    ))

    assert violations["supplier_name"] == ["The supplier name field is required."]
    assert violations["supplier_tax_id"] == ["The supplier tax id field must not be greater than 255 characters."]
    assert violations["net_amount"] == ["The net amount field must be greater than 0."]
    assert violations["vat_amount"] == ["The vat amount field must be greater than or equal to 0."]
    assert violations["currency"] == ["The currency field must be 3 characters."]
    assert violations["status"] == ["The selected status is invalid."]
    assert violations["issue_date"] == ["The issue date field must be a valid date."]


def test_missing_fields_are_reported(build_payload):
    violations = violations_for({"number": "INV-9"})

    for field in ("supplier_name", "supplier_tax_id", "net_amount", "vat_amount", "gross_amount", "issue_date", "due_date"):
        assert violations[field] == [f"The {field.replace('_', ' ')} field is required."]
    assert "status" not in violations
    assert "currency" not in violations


def test_replacement_requires_every_field(build_payload):
    data = build_payload()
    del data["status"]
    del data["currency"]

    violations = violations_for(data, replacement=True)

    assert violations == {
        "currency": ["The currency field is required."],
        "status": ["The status field is required."],
    }


def test_replacement_returns_replacement_model(build_payload):
    payload = validate_invoice(build_payload(), number_lookup=no_invoices, replacement=True)

    assert isinstance(payload, InvoiceReplacement)


def test_number_must_be_unique(build_payload):
    lookup = lambda number: existing(1, number)

    violations = violations_for(build_payload(number="INV-UNIQUE-001"), number_lookup=lookup)

    assert violations == {"number": [NUMBER_TAKEN_MESSAGE]}


def test_number_uniqueness_excludes_own_id(build_payload):
    lookup = lambda number: existing(1, number)

    payload = validate_invoice(build_payload(number="INV-UNIQUE-001"), number_lookup=lookup, exclude_id=1)

    assert payload.number == "INV-UNIQUE-001"


def test_non_object_payload():
    violations = violations_for(["not", "a", "dict"])

    assert violations == {"payload": ["The payload must be a JSON object."]}


def test_amount_over_column_precision(build_payload):
    violations = violations_for(build_payload(net_amount="10000000000000", vat_amount=0, gross_amount="10000000000000"))

    assert "net_amount" in violations
    assert "gross_amount" in violations


@pytest.mark.parametrize("gross_amount", [1e30, -1e30, "1e40"])
def test_out_of_range_gross_is_a_field_violation(build_payload, gross_amount):
    violations = violations_for(build_payload(gross_amount=gross_amount))

    assert list(violations) == ["gross_amount"]
    assert GROSS_AMOUNT_MESSAGE not in violations["gross_amount"]


def test_out_of_range_amounts_skip_the_gross_check():
    assert check_gross_amount({"net_amount": 1e30, "vat_amount": 0, "gross_amount": 1e30}) is None
    assert check_gross_amount({"net_amount": 100, "vat_amount": 20, "gross_amount": 1e30}) is None
