"""Numeric value helpers for the BASIC interpreter.

All BASIC variables hold IEEE double values (Python floats). This module
converts between those values and the text the user sees or types.
"""

from __future__ import annotations

import math


def to_string(value: float) -> str:
    """Convert a numeric value to its display form for PRINT.

    Integral values below 1e16 are shown without a fractional part (`3`,
    not `3.0`); everything else uses repr for a concise round-trip
    representation, so large magnitudes print as `1e+16` rather than as
    a long run of digits.
    """
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def parse_number(text: str) -> float:
    """Parse user input (INPUT statement) into a numeric value.

    Surrounding whitespace is ignored and an empty reply reads as 0.
    Raises ValueError if the text is not a plain decimal number.
    """
    text = text.strip()
    if not text:
        return 0.0
    try:
        value = float(text)
    except ValueError:
        raise ValueError(f'cannot parse number from {text!r}')
    if not math.isfinite(value):
        raise ValueError(f'cannot parse number from {text!r}')
    return value
