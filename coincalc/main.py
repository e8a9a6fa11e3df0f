from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import health, rates, ui, valuation
from .services.rates.state_service import RateStateService


def create_app(
    settings_override: Settings | None = None,
    rate_state: RateStateService | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests.
    rate_state: inject a prepared RateStateService (e.g. one whose provider uses
    a mock transport); built from settings otherwise.
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)
    state_service = rate_state or RateStateService.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Seed the rate field once; a failed fetch leaves the fallback in place
        if settings.fetch_rate_on_startup:
            await app.state.rate_state.refresh()
        else:
            logging.getLogger("coincalc").info("start-up rate fetch disabled")
        yield

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.rate_state = state_service

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(rates.router)
    app.include_router(valuation.router)
    app.include_router(ui.router)

    return app


app = create_app()
