"""
Error envelope - every failure leaves the API as
``{"success": false, "error": "<message>", ...}``.

Routers raise ``HTTPException`` with either a string detail or a dict
detail holding ``error`` plus extra envelope fields. Domain exceptions
that escape a router are mapped to their HTTP status here.
"""

import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from mixerai.exceptions import (
    AIServiceError,
    ConflictError,
    ForeignKeyError,
    NotFoundError,
    RepositoryError,
)

logger = logging.getLogger(__name__)

GENERIC_ERROR = "An unexpected error occurred. Please try again later."


def error_body(error: Any) -> Dict[str, Any]:
    if isinstance(error, dict):
        body = {"success": False}
        body.update(error)
        return body
    return {"success": False, "error": str(error)}


def handle_api_error(exc: Exception, message: str, status_code: int = 500) -> JSONResponse:
    """
    Log ``exc`` and return the error envelope with ``message``.

    5xx responses are logged with the traceback; 4xx only as a warning.
    """
    if status_code >= 500:
        logger.error(f"{message}: {exc}", exc_info=exc)
    else:
        logger.warning(f"{message}: {exc}")
    return JSONResponse(status_code=status_code, content=error_body(message))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"Invalid request body for {request.method} {request.url.path}: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "error": "Invalid request body",
            "details": jsonable_encoder(exc.errors()),
        },
    )


async def repository_exception_handler(request: Request, exc: RepositoryError) -> JSONResponse:
    if isinstance(exc, NotFoundError):
        status_code = 404
    elif isinstance(exc, ConflictError):
        status_code = 409
    elif isinstance(exc, ForeignKeyError):
        status_code = 400
    else:
        status_code = 500

    if status_code == 500:
        logger.error(f"Database error on {request.method} {request.url.path}: {exc}", exc_info=exc)
        return JSONResponse(status_code=500, content=error_body("A database error occurred."))
    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=status_code, content=error_body(exc.message))


async def ai_exception_handler(request: Request, exc: AIServiceError) -> JSONResponse:
    logger.error(f"AI service failure on {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content=error_body(str(exc)))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    return handle_api_error(exc, GENERIC_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(RepositoryError, repository_exception_handler)
    app.add_exception_handler(AIServiceError, ai_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
