"""
Error types shared by the counting features, plus the FastAPI handlers that
turn them into JSON responses.

Clients get a short message only; database details stay in the logs.
"""

from __future__ import annotations

import asyncpg
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

# Failures that mean "the datastore could not do it", as opposed to bad input.
# OSError also covers TimeoutError (statement and pool-acquire timeouts).
STORAGE_EXCEPTIONS: tuple[type[BaseException], ...] = (
    asyncpg.PostgresError,
    asyncpg.InterfaceError,
    OSError,
)


class ConfigurationError(RuntimeError):
    pass


class CounterError(Exception):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CounterError):
    status_code = status.HTTP_400_BAD_REQUEST


class StorageError(CounterError):
    pass


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request."

    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query")]
    field = ".".join(loc)
    if first.get("type") == "json_invalid":
        return "Invalid JSON body."
    if first.get("type") == "missing":
        return f"{field or 'body'} is required"
    msg = str(first.get("msg") or "invalid value")
    # pydantic prefixes messages raised from validators.
    msg = msg.removeprefix("Value error, ")
    if not field or msg.startswith(field):
        return msg
    return f"{field}: {msg}"


async def _counter_error_handler(request: Request, exc: CounterError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": _first_validation_message(exc)},
    )


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CounterError, _counter_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
