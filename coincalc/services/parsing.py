"""Input normalizer: free-text form values to tagged numbers.

Commas are grouping separators only (``"8,578"`` is 8578, never 8.578).
Anything that is not a plain decimal literal comes back as an invalid
``ParsedNumber`` instead of NaN, so it cannot leak into arithmetic.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from coincalc.models.valuation import RawInputs

# Optional sign, digits with optional fraction ("5", "5.", ".5"), optional exponent.
_DECIMAL_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


@dataclass(frozen=True)
class ParsedNumber:
    value: Optional[float]

    @classmethod
    def valid(cls, value: float) -> "ParsedNumber":
        return cls(value=value)

    @classmethod
    def invalid(cls) -> "ParsedNumber":
        return cls(value=None)

    @property
    def is_valid(self) -> bool:
        return self.value is not None


@dataclass(frozen=True)
class ParsedQuantities:
    price: ParsedNumber
    holding: ParsedNumber
    daily_accrual: ParsedNumber
    rate: ParsedNumber


def parse_number(raw: Optional[str]) -> ParsedNumber:
    if not raw:
        return ParsedNumber.valid(0.0)
    cleaned = raw.replace(",", "").strip()
    if not cleaned:
        return ParsedNumber.valid(0.0)
    if not _DECIMAL_RE.fullmatch(cleaned):
        return ParsedNumber.invalid()
    value = float(cleaned)
    if not math.isfinite(value):
        # e.g. "1e999" overflows to inf
        return ParsedNumber.invalid()
    return ParsedNumber.valid(value)


def normalize(raw: "RawInputs") -> ParsedQuantities:
    return ParsedQuantities(
        price=parse_number(raw.price),
        holding=parse_number(raw.holding),
        daily_accrual=parse_number(raw.daily_accrual),
        rate=parse_number(raw.rate),
    )
