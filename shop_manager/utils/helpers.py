# shop_manager/utils/helpers.py
from datetime import datetime
import logging
from typing import Union, Optional

from ..constants import TIMESTAMP_FORMAT

NumberLike = Union[float, int, str]

_log = logging.getLogger(__name__)


def now_str() -> str:
    """Return the current local time as 'YYYY-MM-DD HH:MM:SS'."""
    return datetime.now().strftime(TIMESTAMP_FORMAT)


def money_field(v: float) -> str:
    """Serialize a currency amount for storage (two decimals, no separators)."""
    return f"{float(v):.2f}"


def fmt_money(
    v: NumberLike,
    places: int = 2,
    *,
    strict: bool = False,
    sentinel: Optional[str] = None,
) -> str:
    """
    Format a number as money with thousands separators and a fixed number of decimals.

    Behavior on parse failure:
      - By default (strict=False, sentinel=None), returns str(v).
      - If `sentinel` is provided (e.g., "N/A"), returns that sentinel instead.
      - If `strict=True`, raises ValueError on parse failures.
    """
    try:
        x = float(v)
    except (TypeError, ValueError) as e:
        _log.debug("fmt_money: failed to parse %r as float: %s", v, e)
        if strict:
            raise ValueError(f"Could not parse {v!r} as a number.") from e
        return str(sentinel) if sentinel is not None else str(v)
    return f"{x:,.{places}f}"
