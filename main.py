"""
MessMate FastAPI Application
Main entry point: logging, middleware, exception handlers and routers
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
import uvicorn
from contextlib import asynccontextmanager
import anyio

from api.routes import (
    health,
    users,
    mess,
    meals,
    expenses,
    deposits,
    dashboard,
    analytics,
    reports,
)
from domain.models import init_database
from app.config import settings
from api.middleware import (
    RequestLoggingMiddleware,
    validation_exception_handler,
    http_exception_handler,
    app_exception_handler,
    general_exception_handler,
)
from api.responses import ErrorResponse
from app.exceptions import AppError

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper()), format=settings.log_format
)
_logger = logging.getLogger("messmate.main")


async def _init_database_with_retry() -> None:
    """Create the schema, waiting for the database to accept connections"""
    attempts = settings.db_init_attempts
    for attempt in range(1, attempts + 1):
        try:
            # create_all blocks; keep it off the event loop
            await anyio.to_thread.run_sync(init_database)
            return
        except Exception as exc:
            if attempt == attempts:
                _logger.error(f"db_init_failed attempts={attempts} error={exc}")
                raise
            _logger.warning(f"db_init_retry attempt={attempt}/{attempts} error={exc}")
            await anyio.sleep(settings.db_init_delay_sec)


@asynccontextmanager
async def lifespan(app: FastAPI):
    _logger.info(
        f"startup app={settings.app_name} version={settings.app_version} "
        f"environment={settings.environment.value}"
    )
    await _init_database_with_retry()
    try:
        yield
    finally:
        _logger.info(f"shutdown app={settings.app_name}")


app = FastAPI(
    title=settings.api_title,
    version=settings.app_version,
    description=settings.api_description,
    lifespan=lifespan,
    debug=settings.debug,
    openapi_url=(
        f"{settings.api_prefix}/openapi.json" if not settings.is_production() else None
    ),
    docs_url=f"{settings.api_prefix}/docs" if not settings.is_production() else None,
    redoc_url=f"{settings.api_prefix}/redoc" if not settings.is_production() else None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

app.add_middleware(RequestLoggingMiddleware)

EXCEPTION_HANDLERS = {
    RequestValidationError: validation_exception_handler,
    StarletteHTTPException: http_exception_handler,
    AppError: app_exception_handler,
    Exception: general_exception_handler,
}
for exc_class, handler in EXCEPTION_HANDLERS.items():
    app.add_exception_handler(exc_class, handler)

# Every service error is rendered with the same envelope
ERROR_RESPONSES = {
    status_code: {"model": ErrorResponse}
    for status_code in (400, 401, 403, 404, 409, 500)
}

for module in (health, users, mess, meals, expenses, deposits, dashboard, analytics, reports):
    app.include_router(
        module.router,
        prefix=settings.api_prefix,
        responses=ERROR_RESPONSES if module is not health else None,
    )


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development(),
        log_level=settings.log_level.lower(),
    )
