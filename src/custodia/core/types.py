"""Shared type aliases and value coercion used across custodia."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from custodia.core.exceptions import ValidationError

Number = Decimal | int | float | str
DateLike = date | datetime | str


def to_decimal(value: object, field_name: str = "value") -> Decimal:
    """Convert *value* to Decimal via ``str()`` so floats keep their printed digits.

    Raises ValidationError for None, booleans, non-numeric text, NaN and infinities.
    """
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required")
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number, got {value!r}")
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation:
            raise ValidationError(f"{field_name} must be a number, got {value!r}") from None
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be finite, got {value!r}")
    return result


def to_date(value: object, field_name: str = "date") -> date:
    """Coerce a date, datetime (time dropped) or ISO ``YYYY-MM-DD`` string to a calendar day."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            # A time part is allowed only as a full ISO timestamp
            if len(text) > 10 and text[10] in "T ":
                return datetime.fromisoformat(text).date()
            return date.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO date (YYYY-MM-DD), got {value!r}") from None
    raise ValidationError(f"{field_name} must be a date, got {value!r}")
