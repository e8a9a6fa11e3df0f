from fastapi import APIRouter
from fastapi.responses import JSONResponse
from starlette import status

from coincalc.models.valuation import RawInputs
from coincalc.services.valuation import evaluate

router = APIRouter(prefix="/api", tags=["valuation"])


@router.post(
    "/valuation",
    summary="Value a coin holding and optionally project it to a date",
    responses={422: {"description": "First invalid field (InvalidPrice, InvalidHolding, ...)"}},
)
async def value_holding(payload: RawInputs):
    outcome = evaluate(payload)
    if outcome.error is not None:
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"error": outcome.error.code.value, "detail": outcome.error.message},
        )
    # projection fields are left out entirely when there is no projection
    return JSONResponse(content=outcome.result.model_dump(exclude_none=True))
