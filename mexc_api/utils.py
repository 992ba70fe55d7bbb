"""
MEXC API - Utilities.

============================================================
PURPOSE
============================================================
Small pure helpers shared by every module:
- Clock: millisecond nonce for signed requests
- Numeric decoder: string-or-number JSON fields to float
- Decimal formatting for prices and quantities on the wire

============================================================
"""

import math
import re
import time
from decimal import Decimal
from typing import Any, Optional

from .errors import DecodeError, DecodeErrorReason


# ASCII decimal with optional exponent, or the nan/inf spellings
_NUMBER_PATTERN = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)


# ============================================================
# CLOCK
# ============================================================

def timestamp_ms() -> int:
    """
    Current wall-clock time in milliseconds since the Unix epoch.

    Used as the nonce of every signed request. The exchange checks it
    against its receive window, so no offset or jitter is applied.
    """
    return int(time.time() * 1000)


# ============================================================
# NUMERIC DECODER
# ============================================================

def parse_float(value: Any, field: Optional[str] = None) -> float:
    """
    Decode a JSON value the exchange may send as string, number or null.

    Args:
        value: Decoded JSON value
        field: Field name for error context

    Returns:
        The value as float; null decodes to 0.0

    Raises:
        DecodeError: INVALID_NUMBER for unparseable strings,
            INVALID_TYPE for bool, array or object
    """
    if value is None:
        return 0.0

    # bool is an int subclass and must be rejected first
    if isinstance(value, bool):
        raise DecodeError(
            DecodeErrorReason.INVALID_TYPE,
            f"Expected string or number, got {type(value).__name__}",
            field=field,
        )

    if isinstance(value, str):
        if not _NUMBER_PATTERN.fullmatch(value):
            raise DecodeError(
                DecodeErrorReason.INVALID_NUMBER,
                f"Cannot parse {value!r} as a number",
                field=field,
            )
        return float(value)

    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            raise DecodeError(
                DecodeErrorReason.INVALID_NUMBER,
                "Number does not fit in a 64-bit float",
                field=field,
            )

    raise DecodeError(
        DecodeErrorReason.INVALID_TYPE,
        f"Expected string or number, got {type(value).__name__}",
        field=field,
    )


# ============================================================
# FORMATTING
# ============================================================

def format_number(value: float) -> str:
    """
    Render a number as a plain decimal string.

    Never uses exponent notation (the exchange rejects ``9.512e-05``)
    and drops a trailing ``.0`` so ``5.0`` is sent as ``5``.
    """
    if isinstance(value, bool) or not math.isfinite(value):
        raise ValueError(f"Cannot format {value!r} as a decimal")

    text = format(Decimal(repr(float(value))), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def round_down(value: float, decimals: int) -> float:
    """Floor a value to the given number of decimals (for lot sizing)."""
    factor = 10 ** decimals
    return math.floor(value * factor) / factor
