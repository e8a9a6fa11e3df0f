from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class RawInputs(BaseModel):
    """Form values exactly as typed; nothing is validated here."""

    price: str = ""
    holding: str = ""
    daily_accrual: str = ""
    rate: str = ""
    target_date: str = Field("", description="ISO date (YYYY-MM-DD); empty = no projection")

    @field_validator("price", "holding", "daily_accrual", "rate", "target_date", mode="before")
    @classmethod
    def as_text(cls, v: Any) -> str:
        # JSON callers may send bare numbers; the normalizer works on text
        if v is None:
            return ""
        if isinstance(v, bool):
            raise ValueError("expected text or number")
        if isinstance(v, (int, float)):
            return repr(v)
        return v


class ValuationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    total_base_value: float
    total_fiat_value: float
    projected_base_value: Optional[float] = None
    projected_fiat_value: Optional[float] = None
    days_projected: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def projection_all_or_nothing(self) -> "ValuationResult":
        group = (self.projected_base_value, self.projected_fiat_value, self.days_projected)
        if any(v is None for v in group) and not all(v is None for v in group):
            raise ValueError("projection fields must be set together")
        return self

    @property
    def has_projection(self) -> bool:
        return self.days_projected is not None


class ErrorCode(str, Enum):
    INVALID_PRICE = "InvalidPrice"
    INVALID_HOLDING = "InvalidHolding"
    INVALID_ACCRUAL = "InvalidAccrual"
    INVALID_RATE = "InvalidRate"
    VALUE_OVERFLOW = "ValueOverflow"


ERROR_MESSAGES = {
    ErrorCode.INVALID_PRICE: "Enter a valid price per coin (USDT).",
    ErrorCode.INVALID_HOLDING: "Enter a valid number of coins.",
    ErrorCode.INVALID_ACCRUAL: "Enter a valid number of coins per day (0 to skip the projection).",
    ErrorCode.INVALID_RATE: "Enter a valid USD to IDR rate (e.g. 15000).",
    ErrorCode.VALUE_OVERFLOW: "The numbers are too large to value; check the price, coins and rate.",
}


@dataclass(frozen=True)
class ValidationFailure:
    code: ErrorCode
    message: str

    @classmethod
    def of(cls, code: ErrorCode) -> "ValidationFailure":
        return cls(code=code, message=ERROR_MESSAGES[code])


@dataclass(frozen=True)
class ValuationOutcome:
    """Either a result or the first validation failure, never both."""

    result: Optional[ValuationResult] = None
    error: Optional[ValidationFailure] = None

    def __post_init__(self) -> None:
        if (self.result is None) == (self.error is None):
            raise ValueError("outcome needs exactly one of result / error")

    @property
    def ok(self) -> bool:
        return self.result is not None
