"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll_core import __version__
from payroll_core.api.routes import health_router, payroll_router, tax_rules_router
from payroll_core.config import get_settings
from payroll_core.database import create_all, dispose_db, init_db
from payroll_core.exceptions import (
    EmployeeNotFoundError,
    InvalidEmployeeState,
    InvalidPeriodInput,
    InvalidTaxRuleSetError,
    PayrollError,
    PayrollRecordExistsError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[PayrollError], int] = {
    EmployeeNotFoundError: status.HTTP_404_NOT_FOUND,
    PayrollRecordExistsError: status.HTTP_409_CONFLICT,
    InvalidEmployeeState: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidPeriodInput: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidTaxRuleSetError: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    engine, _ = init_db()
    logger.info("Payroll API starting (engine %s)", get_settings().engine_version)
    if get_settings().debug:
        await create_all(engine)
    yield
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Payroll Core API",
        description="Payroll calculation with progressive tax brackets",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayrollError)
    async def payroll_exception_handler(
        request: Request, exc: PayrollError
    ) -> JSONResponse:
        """Map payroll errors to client error responses."""
        status_code = ERROR_STATUS.get(type(exc), status.HTTP_400_BAD_REQUEST)
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(
            status_code=status_code,
            content={
                "detail": str(exc),
                "code": exc.code,
                "context": exc.context(),
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(payroll_router, prefix="/api/v1")
    app.include_router(tax_rules_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
