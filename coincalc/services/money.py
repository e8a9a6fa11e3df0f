"""Money display helpers.

Centralized so the form and any other renderer use identical rounding
(half-up) and grouping. The engine itself never rounds.
"""

from __future__ import annotations
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP


def _quantize(value: float, places: int) -> Decimal:
    step = Decimal(1).scaleb(-places)
    amount = Decimal(str(value))
    try:
        return amount.quantize(step, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the decimal context holds; show it unrounded
        return amount


def format_idr(value: float) -> str:
    """Rupiah with no fraction digits and dot grouping, e.g. ``Rp 7.200.000``."""
    amount = _quantize(value, 0)
    sign = "-" if amount < 0 else ""
    grouped = f"{abs(amount):,.0f}".replace(",", ".")
    return f"{sign}Rp {grouped}"


def format_usdt(value: float, max_fraction_digits: int = 6) -> str:
    """Up to six fraction digits, trailing zeros dropped, e.g. ``6,703.288 USDT``."""
    amount = _quantize(value, max_fraction_digits)
    text = f"{amount:,.{max_fraction_digits}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return f"{text} USDT"


def format_rate(value: float) -> str:
    """Plain number text for the rate field: ``16250`` or ``16250.5``."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
