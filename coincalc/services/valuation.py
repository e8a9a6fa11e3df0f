"""Valuation & projection engine.

Pure functions: no I/O, no shared state. Validation runs field by field in
form order (price, holding, daily accrual, rate) and the first failure is
returned as a ``ValidationFailure`` inside the outcome; nothing is raised.

Projection is optional. It is added only when the daily accrual is positive
and the target date parses as an ISO calendar date; otherwise the result
simply has no projection fields. A target date that is today or already past
still yields a projection, with zero added days. Totals that overflow to
infinity are reported as ``ValueOverflow`` after the field checks.
"""

from __future__ import annotations

import logging
import math
from datetime import date
from typing import Optional, Union

from coincalc.models.valuation import (
    ErrorCode,
    RawInputs,
    ValidationFailure,
    ValuationOutcome,
    ValuationResult,
)
from coincalc.services.parsing import ParsedNumber, normalize

logger = logging.getLogger("coincalc.valuation")

Quantity = Union[float, ParsedNumber]


def _unwrap(q: Quantity) -> Optional[float]:
    if isinstance(q, ParsedNumber):
        return q.value
    return q


def _is_non_negative(v: Optional[float]) -> bool:
    return v is not None and math.isfinite(v) and v >= 0


def parse_target_date(text: Optional[str]) -> Optional[date]:
    """Return the calendar date for an ISO ``YYYY-MM-DD`` string, else None."""
    if not text or not text.strip():
        return None
    try:
        return date.fromisoformat(text.strip())
    except ValueError:
        return None


def days_until(target: date, today: date) -> int:
    # Both ends are whole calendar days, so the day difference is already the ceiling
    return max((target - today).days, 0)


def _fail(code: ErrorCode) -> ValuationOutcome:
    logger.debug("valuation rejected", extra={"error_code": code.value})
    return ValuationOutcome(error=ValidationFailure.of(code))


def compute(
    price: Quantity,
    holding: Quantity,
    daily_accrual: Quantity,
    rate: Quantity,
    target_date: Optional[str] = None,
    *,
    today: Optional[date] = None,
) -> ValuationOutcome:
    p = _unwrap(price)
    h = _unwrap(holding)
    d = _unwrap(daily_accrual)
    r = _unwrap(rate)

    if not _is_non_negative(p):
        return _fail(ErrorCode.INVALID_PRICE)
    if not _is_non_negative(h):
        return _fail(ErrorCode.INVALID_HOLDING)
    if not _is_non_negative(d):
        return _fail(ErrorCode.INVALID_ACCRUAL)
    if r is None or not math.isfinite(r) or r <= 0:
        return _fail(ErrorCode.INVALID_RATE)

    total_base = p * h
    fields = {
        "total_base_value": total_base,
        "total_fiat_value": total_base * r,
    }

    target = parse_target_date(target_date)
    if d > 0 and target is not None:
        days = days_until(target, today or date.today())
        projected_base = (h + d * days) * p
        fields.update(
            projected_base_value=projected_base,
            projected_fiat_value=projected_base * r,
            days_projected=days,
        )
        logger.debug("projection computed", extra={"days_projected": days})

    # finite inputs can still multiply out to inf (e.g. 1e200 * 1e200)
    if not all(math.isfinite(v) for k, v in fields.items() if k != "days_projected"):
        return _fail(ErrorCode.VALUE_OVERFLOW)

    return ValuationOutcome(result=ValuationResult(**fields))


def evaluate(raw: RawInputs, *, today: Optional[date] = None) -> ValuationOutcome:
    """Parse the raw form values and run ``compute`` on them."""
    q = normalize(raw)
    return compute(
        q.price,
        q.holding,
        q.daily_accrual,
        q.rate,
        raw.target_date,
        today=today,
    )
