from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

RateSource = Literal["remote", "fallback"]


class RateOutcome(BaseModel):
    model_config = ConfigDict(frozen=True)

    rate: float = Field(..., gt=0)
    source: RateSource
    reason: Optional[str] = None

    @model_validator(mode="after")
    def reason_only_for_fallback(self) -> "RateOutcome":
        if self.source == "fallback" and not self.reason:
            raise ValueError("fallback outcome needs a reason")
        if self.source == "remote" and self.reason is not None:
            raise ValueError("remote outcome carries no reason")
        return self


class RateState(BaseModel):
    """Current rate text shown in the form plus fetch status."""

    model_config = ConfigDict(frozen=True)

    rate: str
    loading: bool = False
    error: Optional[str] = None
    source: Optional[RateSource] = None
