"""
Request logging middleware and the exception handlers that render every
failure in the MessMate error envelope.
"""

import time
import logging
from uuid import uuid4

from fastapi import Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from api.responses import error_response
from app.exceptions import AppError

logger = logging.getLogger("messmate.middleware")

REQUEST_ID_HEADER = "X-Request-ID"


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request with its id, caller and duration"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        caller = request.headers.get("X-User-ID", "-")

        logger.info(
            f"request_started request_id={request_id} caller={caller} "
            f"method={request.method} path={request.url.path}"
        )
        start_time = time.perf_counter()

        try:
            response: Response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"request_failed request_id={request_id} method={request.method} "
                f"path={request.url.path} error={exc} "
                f"duration={time.perf_counter() - start_time:.4f}s",
                exc_info=True,
            )
            raise

        process_time = time.perf_counter() - start_time
        logger.info(
            f"request_completed request_id={request_id} method={request.method} "
            f"path={request.url.path} status={response.status_code} "
            f"duration={process_time:.4f}s"
        )
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


# ============================================================================
# Error Handlers
# ============================================================================


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        f"validation_failed request_id={_request_id(request)} "
        f"path={request.url.path} errors={len(errors)}"
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=error_response(
            "VALIDATION_ERROR", "Request validation failed", details={"errors": errors}
        ),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Routing errors (unknown path, wrong method) and explicit HTTPExceptions"""
    logger.warning(
        f"http_error request_id={_request_id(request)} path={request.url.path} "
        f"status={exc.status_code} detail={exc.detail}"
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(f"HTTP_{exc.status_code}", str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def app_exception_handler(request: Request, exc: AppError):
    """Service-layer errors carry their own status code and error code"""
    logger.warning(
        f"service_error request_id={_request_id(request)} method={request.method} "
        f"path={request.url.path} error={exc.__class__.__name__} "
        f"code={exc.code} message={exc.message}"
    )
    error = exc.to_dict()
    return JSONResponse(
        status_code=exc.http_status,
        content=error_response(
            error["code"], error["message"], details=jsonable_encoder(error.get("details"))
        ),
    )


async def general_exception_handler(request: Request, exc: Exception):
    logger.exception(
        f"unhandled_error request_id={_request_id(request)} path={request.url.path} error={exc}"
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_response("INTERNAL_SERVER_ERROR", "An unexpected error occurred"),
    )
