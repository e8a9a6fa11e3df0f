from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel

from coincalc.models.rates import RateOutcome, RateState
from coincalc.services.rates.state_service import RateStateService

"""Rates router: read the current USD->IDR rate state and trigger a refresh.

Endpoints:
    - GET /api/rate           -> current RateState
    - POST /api/rate/refresh  -> {outcome, state}; outcome is null when a fetch
                                 is already running (no second fetch is started)
"""

router = APIRouter(prefix="/api/rate", tags=["rates"])


def get_rate_state_service(request: Request) -> RateStateService:
    return request.app.state.rate_state


class RefreshOut(BaseModel):
    outcome: Optional[RateOutcome] = None
    state: RateState


@router.get("", response_model=RateState, summary="Current exchange rate state")
async def current_rate(svc: RateStateService = Depends(get_rate_state_service)):
    return svc.snapshot()


@router.post("/refresh", response_model=RefreshOut, summary="Fetch the live rate again")
async def refresh_rate(svc: RateStateService = Depends(get_rate_state_service)):
    if svc.loading:
        return RefreshOut(outcome=None, state=svc.snapshot())
    outcome = await svc.refresh()
    return RefreshOut(outcome=outcome, state=svc.snapshot())
