"""
Errores de dominio y handlers globales para respuestas de error consistentes.

Todas las respuestas de error tienen la forma `{"message": str}` (más
`request_id` cuando está disponible).
"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class AppError(Exception):
    """Error de dominio con status HTTP asociado."""

    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = HTTP_401_UNAUTHORIZED
    default_message = "Invalid token"


class InvalidInput(AppError):
    status_code = HTTP_400_BAD_REQUEST
    default_message = "Validation error"


class NotFound(AppError):
    status_code = HTTP_404_NOT_FOUND
    default_message = "Not found"


def _req_id(request: Request) -> str | None:
    return getattr(getattr(request, "state", object()), "request_id", None)


def _body(request: Request, message: str, **extra: Any) -> Dict[str, Any]:
    body: Dict[str, Any] = {"message": message, **extra}
    rid = _req_id(request)
    if rid:
        body["request_id"] = rid
    return body


def _validation_message(errors: list) -> str:
    # Primer error legible: "title: String should have at most 100 characters"
    if not errors:
        return "Validation error"
    first = errors[0]
    loc = [str(p) for p in first.get("loc", ()) if p != "body"]
    msg = first.get("msg") or "Validation error"
    return f"{'.'.join(loc)}: {msg}" if loc else msg


def register_exception_handlers(app: FastAPI) -> None:
    log = logging.getLogger("notes.errors")

    @app.exception_handler(AppError)
    async def _app_error_handler(request: Request, exc: AppError):
        return JSONResponse(status_code=exc.status_code, content=_body(request, exc.message))

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content=_body(request, exc.detail or "HTTP error"))

    @app.exception_handler(RequestValidationError)
    async def _validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        content = _body(request, _validation_message(errors), errors=_jsonable_errors(errors))
        return JSONResponse(status_code=HTTP_400_BAD_REQUEST, content=content)

    @app.exception_handler(Exception)
    async def _generic_handler(request: Request, exc: Exception):
        log.exception("Unhandled error request_id=%s", _req_id(request))
        return JSONResponse(status_code=HTTP_500_INTERNAL_SERVER_ERROR, content=_body(request, "Internal server error"))


def _jsonable_errors(errors: list) -> list:
    # `ctx` puede contener la excepción original (no serializable)
    out = []
    for e in errors:
        item = {k: v for k, v in e.items() if k not in ("ctx", "input", "url")}
        item["loc"] = [str(p) for p in item.get("loc", ())]
        out.append(item)
    return out
