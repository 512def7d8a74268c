# shop_manager/utils/validators.py
from __future__ import annotations

import math

from ..errors import ValidationError


def non_empty(text: str) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text and str(text).strip())


def require_text(value, label: str) -> str:
    """
    Return the stripped text, or raise ValidationError if it is empty or
    spans more than one line (each record is stored on a single line).
    """
    if not non_empty(value):
        raise ValidationError(f"{label} cannot be empty.")
    text = str(value).strip()
    if "\n" in text or "\r" in text:
        raise ValidationError(f"{label} must be a single line.")
    return text


# ---- Numeric parsing & validators ----

def try_parse_float(x):
    """
    Best-effort parse to float.

    Returns:
        (ok: bool, value: float|None)

    ok == False means parsing failed and value is None.
    """
    try:
        return True, float(x)
    except (TypeError, ValueError):
        return False, None


def parse_int(x, label: str, *, minimum: int | None = None, maximum: int | None = None) -> int:
    """
    Strict parse to int within [minimum, maximum] (either bound optional).
    Raises ValidationError naming the field on failure.
    """
    try:
        val = int(str(x).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{label} must be a whole number, got '{x}'.") from None
    if minimum is not None and val < minimum:
        raise ValidationError(f"{label} must be at least {minimum}.")
    if maximum is not None and val > maximum:
        raise ValidationError(f"{label} must be at most {maximum}.")
    return val


def parse_money(x, label: str, *, minimum: float = 0.0) -> float:
    """
    Strict parse of a currency amount, rounded to cents and >= minimum.
    """
    ok, val = try_parse_float(x)
    if not ok or val is None or not math.isfinite(val):
        raise ValidationError(f"{label} must be a number, got '{x}'.")
    if val < minimum:
        raise ValidationError(f"{label} must be at least {minimum:.2f}.")
    return round(val, 2)


def one_of(value, choices, label: str) -> str:
    """Return `value` if it is one of `choices` (exact match), else raise ValidationError."""
    text = (value or "").strip()
    if text not in choices:
        raise ValidationError(f"{label} must be one of: {', '.join(choices)} (got '{value}').")
    return text
