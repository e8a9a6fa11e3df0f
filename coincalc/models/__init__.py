"""Pydantic domain models for the coin asset calculator."""

from .constants import (
    BASE_UNIT,
    FIAT_CURRENCY,
    FALLBACK_RATE,
    DEFAULT_PRICE,
    RESET_VALUES,
    SAMPLE_VALUES,
)  # re-export
from .valuation import (
    RawInputs,
    ValuationResult,
    ErrorCode,
    ValidationFailure,
    ValuationOutcome,
)
from .rates import RateOutcome, RateState

__all__ = [
    "BASE_UNIT",
    "FIAT_CURRENCY",
    "FALLBACK_RATE",
    "DEFAULT_PRICE",
    "RESET_VALUES",
    "SAMPLE_VALUES",
    "RawInputs",
    "ValuationResult",
    "ErrorCode",
    "ValidationFailure",
    "ValuationOutcome",
    "RateOutcome",
    "RateState",
]
