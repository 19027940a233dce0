from collections.abc import Awaitable, Callable
from dataclasses import dataclass
import re
import time

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import sentry_sdk
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError
from starlette.responses import Response

from loggers import get_logger
from src.core.errors.handlers import format_error_response

logger = get_logger(__name__)
timing_logger = get_logger("src.request.timing", plain_format=True)

UNEXPECTED_ERROR_DETAIL = "Unexpected error"
SLOW_REQUEST_SECONDS = 2.0
MODERATE_REQUEST_SECONDS = 0.5

SECURITY_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "same-origin",
    "Content-Security-Policy": "frame-ancestors 'none'",
}


@dataclass(slots=True)
class PostgresqlErrorHandlingResult:
    response: JSONResponse
    send_to_sentry: bool
    is_server_error: bool


def _server_error(message: str = UNEXPECTED_ERROR_DETAIL) -> JSONResponse:
    return JSONResponse(
        status_code=500, content=format_error_response("Server error", message)
    )


def register_middlewares(app: FastAPI) -> None:
    """Registers all custom middlewares in proper order"""

    @app.middleware("http")
    async def security_headers_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        response = await call_next(request)
        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    @app.middleware("http")
    async def request_timing_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = time.perf_counter() - start_time

        if process_time < MODERATE_REQUEST_SECONDS:
            log, category = timing_logger.info, "[FAST]"
        elif process_time < SLOW_REQUEST_SECONDS:
            log, category = timing_logger.warning, "[MODERATE]"
        else:
            log, category = timing_logger.warning, "[SLOW]"

        log(
            "%s %s %s |%.3fs|%s",
            category,
            request.method,
            request.url.path,
            process_time,
            response.status_code,
        )
        return response

    @app.middleware("http")
    async def database_error_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except IntegrityError as exc:
            handled_result = handle_postgresql_error(exc)
            log_message = f"Integrity error at {request.url.path}: {exc.orig}"
            if handled_result.is_server_error:
                logger.error(log_message, exc_info=True)
            else:
                logger.info(log_message)
            if handled_result.send_to_sentry:
                sentry_sdk.capture_exception(exc)
            return handled_result.response
        except OperationalError as exc:
            logger.error(
                "Database connection error at %s: %s", request.url.path, exc.orig
            )
            sentry_sdk.capture_exception(exc)
            return _server_error("Database connection error. Please try again later.")
        except ProgrammingError as exc:
            logger.error("SQL error at %s: %s", request.url.path, exc.orig)
            sentry_sdk.capture_exception(exc)
            return _server_error("Database query error.")

    @app.middleware("http")
    async def unexpected_error_middleware(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.exception("Unexpected error at %s: %s", request.url.path, exc)
            sentry_sdk.capture_exception(exc)
            return _server_error()


def handle_postgresql_error(
    error: IntegrityError,
) -> PostgresqlErrorHandlingResult:
    """
    Translate a PostgreSQL IntegrityError into an HTTP response.

    Unique violations (a concurrent signup on the same email, for instance)
    become 409, foreign key violations 400. Everything else is a server error
    that is reported to Sentry.
    """
    orig_error = error.orig
    sqlstate = getattr(orig_error, "sqlstate", None)
    detail_message = getattr(orig_error, "detail", None)
    raw_message = str(orig_error)

    if not detail_message:
        if "DETAIL:" in raw_message:
            detail_message = raw_message.split("DETAIL:")[-1].strip()
        else:
            detail_message = "No additional details provided."

    if sqlstate == "23505":  # UniqueViolation
        match = re.search(r"\(([^)]+)\)", detail_message)
        field = match.group(1) if match else detail_message
        return PostgresqlErrorHandlingResult(
            response=JSONResponse(
                status_code=409,
                content=format_error_response(
                    "Instance already exists", f"Duplicate value for {field}"
                ),
            ),
            send_to_sentry=False,
            is_server_error=False,
        )
    if sqlstate == "23503":  # ForeignKeyViolation
        return PostgresqlErrorHandlingResult(
            response=JSONResponse(
                status_code=400,
                content=format_error_response("Bad request", detail_message),
            ),
            send_to_sentry=False,
            is_server_error=False,
        )

    return PostgresqlErrorHandlingResult(
        response=_server_error(),
        send_to_sentry=True,
        is_server_error=True,
    )
