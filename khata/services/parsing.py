"""
Parsing of untyped form fields

Form posts arrive as strings. Blank optional fields fall back to ``default``;
anything unparsable raises InvalidFormValue, reported as "invalid_input".
"""

import re
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Optional

from khata.core.exceptions import InvalidFormValue

_MONTH = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

_MISSING = object()

# Money and quantity columns are DECIMAL(12, 2)
CENT = Decimal("0.01")


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_int(value, field: str, default=_MISSING, minimum: Optional[int] = None) -> int:
    if _blank(value):
        if default is _MISSING:
            raise InvalidFormValue(f"{field} is required")
        return default
    try:
        number = int(str(value).strip())
    except ValueError:
        raise InvalidFormValue(f"{field} must be a whole number") from None
    if minimum is not None and number < minimum:
        raise InvalidFormValue(f"{field} must be at least {minimum}")
    return number


def parse_decimal(value, field: str, default=_MISSING) -> Decimal:
    if _blank(value):
        if default is _MISSING:
            raise InvalidFormValue(f"{field} is required")
        return default
    try:
        number = Decimal(str(value).strip())
    except InvalidOperation:
        raise InvalidFormValue(f"{field} must be a number") from None
    if not number.is_finite():
        raise InvalidFormValue(f"{field} must be a number")
    try:
        return to_amount(number)
    except InvalidOperation:
        raise InvalidFormValue(f"{field} is too large") from None


def parse_date(value, field: str = "date") -> date:
    if _blank(value):
        raise InvalidFormValue(f"{field} is required")
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise InvalidFormValue(f"{field} must be YYYY-MM-DD") from None


def parse_month(value, field: str = "month") -> str:
    """YYYY-MM"""
    text = "" if value is None else str(value).strip()
    if not _MONTH.match(text):
        raise InvalidFormValue(f"{field} must be YYYY-MM")
    return text


def parse_id(value, field: str = "id") -> int:
    return parse_int(value, field, minimum=1)


def clean_optional(value) -> Optional[str]:
    """Blank strings become None"""
    if _blank(value):
        return None
    return str(value).strip()


def to_amount(value: Decimal) -> Decimal:
    """Round half up to the 2-decimal scale the columns store"""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
