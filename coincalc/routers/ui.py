from datetime import date, timedelta
from pathlib import Path
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from starlette import status

from coincalc.models.constants import (
    BASE_UNIT,
    DEFAULT_PRICE,
    FIAT_CURRENCY,
    RESET_VALUES,
    SAMPLE_VALUES,
)
from coincalc.models.valuation import RawInputs, ValuationOutcome
from coincalc.routers.rates import get_rate_state_service
from coincalc.services.money import format_idr, format_usdt
from coincalc.services.parsing import parse_number
from coincalc.services.rates.state_service import RateStateService
from coincalc.services.valuation import evaluate

router = APIRouter(tags=["ui"])

templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent.parent / "templates"))
templates.env.filters["idr"] = format_idr
templates.env.filters["usdt"] = format_usdt


def one_month_after(d: date) -> date:
    """Same day next month; a day the month lacks rolls over (Jan 31 -> Mar 3)."""
    year, month = (d.year + 1, 1) if d.month == 12 else (d.year, d.month + 1)
    return date(year, month, 1) + timedelta(days=d.day - 1)


def _render(
    request: Request,
    svc: RateStateService,
    values: Dict[str, str],
    outcome: Optional[ValuationOutcome] = None,
) -> HTMLResponse:
    rate_state = svc.snapshot()
    daily = parse_number(values.get("daily_accrual"))
    context: Dict[str, Any] = {
        "app_name": request.app.title,
        "values": values,
        "result": outcome.result if outcome else None,
        "error": outcome.error.message if outcome and outcome.error else None,
        "rate_state": rate_state,
        "daily_accrual": daily.value if daily.is_valid else None,
        "base_unit": BASE_UNIT,
        "fiat_currency": FIAT_CURRENCY,
    }
    return templates.TemplateResponse(request, "index.html", context)


def _initial_values(svc: RateStateService) -> Dict[str, str]:
    return {
        "price": DEFAULT_PRICE,
        "holding": "",
        "daily_accrual": "",
        "target_date": "",
        "rate": svc.snapshot().rate,
    }


@router.get("/", response_class=HTMLResponse)
async def form_page(
    request: Request, svc: RateStateService = Depends(get_rate_state_service)
):
    return _render(request, svc, _initial_values(svc))


@router.post("/", response_class=HTMLResponse)
async def form_submit(
    request: Request,
    price: str = Form(""),
    holding: str = Form(""),
    daily_accrual: str = Form(""),
    rate: str = Form(""),
    target_date: str = Form(""),
    svc: RateStateService = Depends(get_rate_state_service),
):
    raw = RawInputs(
        price=price,
        holding=holding,
        daily_accrual=daily_accrual,
        rate=rate,
        target_date=target_date,
    )
    outcome = evaluate(raw)
    return _render(request, svc, raw.model_dump(), outcome)


@router.post("/reset", response_class=HTMLResponse)
async def form_reset(
    request: Request, svc: RateStateService = Depends(get_rate_state_service)
):
    return _render(request, svc, dict(RESET_VALUES))


@router.get("/sample", response_class=HTMLResponse)
async def form_sample(
    request: Request, svc: RateStateService = Depends(get_rate_state_service)
):
    values = dict(SAMPLE_VALUES)
    values["target_date"] = one_month_after(date.today()).isoformat()
    values["rate"] = svc.snapshot().rate
    return _render(request, svc, values)


@router.post("/refresh-rate")
async def form_refresh_rate(svc: RateStateService = Depends(get_rate_state_service)):
    if not svc.loading:
        await svc.refresh()
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
