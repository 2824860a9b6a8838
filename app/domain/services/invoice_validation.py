# app/domain/services/invoice_validation.py
"""
Motor de validación de facturas.

Funciones puras: reciben el payload candidato y retornan el payload
normalizado, o lanzan ValidationFailed con TODAS las violaciones encontradas.
La única consulta externa es la verificación de unicidad del número, que se
recibe como callable para no acoplar el motor al almacenamiento.
"""
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Callable, Dict, List, Optional, Tuple, Type

from pydantic import Field, TypeAdapter, ValidationError

from app.domain.errors import ValidationFailed
from app.domain.models.invoice import (
    Invoice,
    InvoicePayload,
    InvoiceReplacement,
    MAX_AMOUNT,
    round_money,
)

NumberLookup = Callable[[str], Optional[Invoice]]

GROSS_AMOUNT_MESSAGE = "Gross amount must equal net_amount + vat_amount."
DUE_DATE_MESSAGE = "The due date field must be a date after or equal to issue date."
NUMBER_TAKEN_MESSAGE = "The number has already been taken."

# Acotado: fuera de este rango quantize() falla; la violación la reporta check_fields
_decimal_adapter = TypeAdapter(Annotated[Decimal, Field(ge=-MAX_AMOUNT, le=MAX_AMOUNT)])
_date_adapter = TypeAdapter(date)

# --- Mensajes por tipo de error de pydantic ---
_MESSAGES = {
    'missing': "The {label} field is required.",
    'string_type': "The {label} field must be a string.",
    'string_too_short': "The {label} field is required.",
    'string_too_long': "The {label} field must not be greater than {max_length} characters.",
    'decimal_parsing': "The {label} field must be a number.",
    'decimal_type': "The {label} field must be a number.",
    'finite_number': "The {label} field must be a number.",
    'greater_than': "The {label} field must be greater than {gt}.",
    'greater_than_equal': "The {label} field must be greater than or equal to {ge}.",
    'less_than_equal': "The {label} field must not be greater than {le}.",
    'enum': "The selected {label} is invalid.",
    'date_parsing': "The {label} field must be a valid date.",
    'date_type': "The {label} field must be a valid date.",
    'date_from_datetime_parsing': "The {label} field must be a valid date.",
    'date_from_datetime_inexact': "The {label} field must be a valid date.",
}


# currency tiene longitud exacta
_FIELD_MESSAGES = {
    ('currency', 'string_too_short'): "The {label} field must be 3 characters.",
    ('currency', 'string_too_long'): "The {label} field must be 3 characters.",
}


def _label(field: str) -> str:
    return field.replace('_', ' ')


def _message_for(error: dict) -> str:
    field = str(error['loc'][0]) if error['loc'] else 'payload'
    template = _FIELD_MESSAGES.get((field, error['type'])) or _MESSAGES.get(error['type'])
    if template is None:
        return error['msg']
    context = error.get('ctx') or {}
    return template.format(label=_label(field), **context)


def _add(violations: Dict[str, List[str]], field: str, message: str) -> None:
    messages = violations.setdefault(field, [])
    if message not in messages:
        messages.append(message)


def _coerce(adapter: TypeAdapter, value: Any) -> Any:
    """Convierte un valor aislado; None si no es interpretable."""
    if value is None:
        return None
    try:
        return adapter.validate_python(value)
    except ValidationError:
        return None


def check_fields(data: Dict[str, Any], model: Type[InvoicePayload]) -> Tuple[Optional[InvoicePayload], Dict[str, List[str]]]:
    """Presencia, tipo y formato de cada atributo."""
    violations: Dict[str, List[str]] = {}
    try:
        return model.model_validate(data), violations
    except ValidationError as exc:
        for error in exc.errors():
            field = str(error['loc'][0]) if error['loc'] else 'payload'
            _add(violations, field, _message_for(error))
        return None, violations


def check_due_date(data: Dict[str, Any]) -> Optional[str]:
    issue_date = _coerce(_date_adapter, data.get('issue_date'))
    due_date = _coerce(_date_adapter, data.get('due_date'))
    if issue_date is None or due_date is None:
        return None
    if due_date < issue_date:
        return DUE_DATE_MESSAGE
    return None


def check_gross_amount(data: Dict[str, Any]) -> Optional[str]:
    """
    gross debe ser igual a net + vat. Ambos lados se redondean a 2 decimales
    (half-up) sobre Decimal antes de comparar.
    """
    net = _coerce(_decimal_adapter, data.get('net_amount'))
    vat = _coerce(_decimal_adapter, data.get('vat_amount'))
    gross = _coerce(_decimal_adapter, data.get('gross_amount'))
    if net is None or vat is None or gross is None:
        return None
    if round_money(gross) != round_money(net + vat):
        return GROSS_AMOUNT_MESSAGE
    return None


def check_number_unique(number: Any, number_lookup: NumberLookup, exclude_id: Optional[int] = None) -> Optional[str]:
    if not isinstance(number, str) or not number.strip():
        return None
    existing = number_lookup(number.strip())
    if existing is not None and existing.id != exclude_id:
        return NUMBER_TAKEN_MESSAGE
    return None


def validate_invoice(
    data: Any,
    *,
    number_lookup: NumberLookup,
    exclude_id: Optional[int] = None,
    replacement: bool = False,
) -> InvoicePayload:
    """
    Ejecuta todas las reglas en orden y acumula las violaciones.
    Con `replacement=True` se exige el conjunto completo de campos (actualización).
    """
    if not isinstance(data, dict):
        raise ValidationFailed({'payload': ["The payload must be a JSON object."]})

    model = InvoiceReplacement if replacement else InvoicePayload
    payload, violations = check_fields(data, model)

    due_date_error = check_due_date(data)
    if due_date_error:
        _add(violations, 'due_date', due_date_error)

    gross_error = check_gross_amount(data)
    if gross_error:
        _add(violations, 'gross_amount', gross_error)

    number_error = check_number_unique(data.get('number'), number_lookup, exclude_id)
    if number_error:
        _add(violations, 'number', number_error)

    if violations:
        raise ValidationFailed(violations)
    return payload
