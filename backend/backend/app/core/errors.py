"""Domain errors and the JSON failure envelope the handhelds expect."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class PickError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(PickError):
    status_code = 400


class NotFoundError(PickError):
    status_code = 404


class PersistenceError(PickError):
    status_code = 500


def error_response(status_code: int, message: str, *, headers: dict[str, str] | None = None) -> JSONResponse:
    payload = {"success": False, "error": message, "statusCode": status_code}
    return JSONResponse(status_code=status_code, content=payload, headers=headers)


async def _pick_error_handler(request: Request, exc: PickError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message)


async def _http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, detail, headers=exc.headers)


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        loc = ".".join(str(p) for p in errors[0].get("loc", ()) if p != "body")
        message = f"Invalid request body: {loc} {errors[0].get('msg', '')}".strip()
    else:
        message = "Invalid request body"
    return error_response(400, message)


def install_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PickError, _pick_error_handler)
    app.add_exception_handler(HTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
