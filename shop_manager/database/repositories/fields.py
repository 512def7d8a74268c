# shop_manager/database/repositories/fields.py
"""
Field conversion shared by the entity dataclasses.

Only the id has to be well-formed for a line to count as a record. Every other
column converts leniently: a blank or malformed number reads as 0, as earlier
releases did. A damaged column therefore never hides (or, on rewrite, drops)
an otherwise valid record.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from ...utils.helpers import money_field

_log = logging.getLogger(__name__)


def pad(fields: Sequence[str], count: int) -> List[str]:
    """Right-pad with empty strings so short legacy lines still unpack."""
    out = list(fields[:count])
    out.extend([""] * (count - len(out)))
    return out


def record_id(value: str) -> int:
    """Strict: the id column decides whether a line is a record at all."""
    return int(value.strip())


def as_int(value: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        _log.debug("as_int: %r is not an integer; reading as 0", value)
        return 0


def as_float(value: str) -> float:
    try:
        return float(value.strip())
    except ValueError:
        _log.debug("as_float: %r is not a number; reading as 0", value)
        return 0.0


def as_flag(value: str) -> bool:
    return as_int(value) != 0


def flag(value: bool) -> str:
    return "1" if value else "0"


__all__ = ["pad", "record_id", "as_int", "as_float", "as_flag", "flag", "money_field"]
