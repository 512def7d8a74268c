"""
shop_manager/database/codec.py

Purpose
-------
Convert one record <-> one line of delimited text.

Public interface
----------------
- encode_line(values) -> str
- split_line(line) -> list[str]
- decode_field(line, index) -> str | None

Notes
-----
- Fields are separated by DELIMITER. A value containing the delimiter, a quote
  or a line break is wrapped in quotes, with embedded quotes doubled.
- Decoding walks the line one character at a time and tracks whether it is
  inside a quoted section, so a delimiter between quotes is field content.
- An empty field ("a,,b") decodes to "" and is distinct from a missing field
  (index past the end of the line), which decodes to None.
- Lines written by older builds may carry quotes inside an unquoted field, or
  text after a closing quote. Both are kept literally rather than rejected.
"""

from __future__ import annotations

from typing import Iterable, List, Optional

__all__ = [
    "DELIMITER",
    "QUOTE",
    "CodecError",
    "encode_field",
    "encode_line",
    "split_line",
    "decode_field",
]

DELIMITER = ","
QUOTE = '"'

_NEEDS_QUOTING = (DELIMITER, QUOTE, "\n", "\r")

# decoder states
_FIELD_START = 0
_UNQUOTED = 1
_QUOTED = 2
_QUOTE_IN_QUOTED = 3  # saw a quote while quoted: either an escape or the closing quote


class CodecError(ValueError):
    """Raised when a line cannot be split into fields (unterminated quote)."""
    pass


# ----------------------------
# Encoding
# ----------------------------

def encode_field(value: object) -> str:
    """Serialize a single value; None becomes an empty field."""
    text = "" if value is None else str(value)
    if any(ch in text for ch in _NEEDS_QUOTING):
        return QUOTE + text.replace(QUOTE, QUOTE * 2) + QUOTE
    return text


def encode_line(values: Iterable[object]) -> str:
    """Join values into one line (no trailing newline)."""
    return DELIMITER.join(encode_field(v) for v in values)


# ----------------------------
# Decoding
# ----------------------------

def _strip_eol(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    return line


def split_line(line: str) -> List[str]:
    """
    Split a line into unquoted, unescaped field values.

    Raises CodecError if a quoted field is never closed.
    """
    text = _strip_eol(line)
    fields: List[str] = []
    buf: List[str] = []
    state = _FIELD_START

    for ch in text:
        if state == _FIELD_START:
            if ch == QUOTE:
                state = _QUOTED
            elif ch == DELIMITER:
                fields.append("")
            else:
                buf.append(ch)
                state = _UNQUOTED
        elif state == _UNQUOTED:
            if ch == DELIMITER:
                fields.append("".join(buf))
                buf = []
                state = _FIELD_START
            else:
                buf.append(ch)
        elif state == _QUOTED:
            if ch == QUOTE:
                state = _QUOTE_IN_QUOTED
            else:
                buf.append(ch)
        else:  # _QUOTE_IN_QUOTED
            if ch == QUOTE:
                buf.append(QUOTE)
                state = _QUOTED
            elif ch == DELIMITER:
                fields.append("".join(buf))
                buf = []
                state = _FIELD_START
            else:
                buf.append(ch)
                state = _UNQUOTED

    if state == _QUOTED:
        raise CodecError(f"Unterminated quoted field in line: {text!r}")

    fields.append("".join(buf))
    return fields


def decode_field(line: str, index: int) -> Optional[str]:
    """
    Return the value of the zero-based field `index`, or None when the line has
    fewer fields than that.
    """
    if index < 0:
        raise ValueError(f"Field index must be non-negative, got {index}.")
    fields = split_line(line)
    if index >= len(fields):
        return None
    return fields[index]
