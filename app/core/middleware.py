"""
Middlewares de aplicación: request id, logging por petición y CORS.

El request id viaja en `X-Request-Id` (entrada y salida) y también en el cuerpo
de los errores (`request_id`), para que el frontend pueda citarlo al reportar
un fallo.
"""
import logging
import re
import time
import uuid
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings

REQUEST_ID_HEADER = "X-Request-Id"
# Ids propagados por proxies/clientes; cualquier otra cosa se reemplaza
_REQUEST_ID_RE = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

# Sondas de liveness del orquestador: no ensuciar el log en INFO
_QUIET_PATHS = {f"{settings.api_prefix_normalized}/health"}


def incoming_request_id(value: str | None) -> str:
    """Reutiliza el id recibido si es seguro de loguear; si no, genera uno."""
    if value and _REQUEST_ID_RE.match(value):
        return value
    return uuid.uuid4().hex


class RequestIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        rid = incoming_request_id(request.headers.get(REQUEST_ID_HEADER))
        request.state.request_id = rid
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = rid
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Una línea por petición; 5xx en WARNING, health en DEBUG."""

    def __init__(self, app: FastAPI) -> None:
        super().__init__(app)
        self.log = logging.getLogger("notes.request")

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        status = 500  # si call_next lanza, la respuesta final es el 500 genérico
        try:
            response = await call_next(request)
            status = response.status_code
            return response
        finally:
            dt_ms = int((time.perf_counter() - start) * 1000)
            rid = getattr(request.state, "request_id", None)
            path = request.url.path
            if status >= 500:
                level = logging.WARNING
            elif path in _QUIET_PATHS:
                level = logging.DEBUG
            else:
                level = logging.INFO
            self.log.log(
                level,
                "method=%s path=%s status=%s latency_ms=%s request_id=%s",
                request.method, path, status, dt_ms, rid,
            )


def add_middlewares(app: FastAPI) -> None:
    # El login local usa cookie de sesión: credentials=True salvo que se abran
    # todos los orígenes (el navegador no acepta `*` con credenciales).
    cors_kwargs = dict(
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", REQUEST_ID_HEADER],
        expose_headers=[REQUEST_ID_HEADER],
        allow_credentials=True,
    )
    if settings.cors_allow_any:
        cors_kwargs["allow_origins"] = []
        cors_kwargs["allow_origin_regex"] = ".*"
        cors_kwargs["allow_credentials"] = False
    app.add_middleware(CORSMiddleware, **cors_kwargs)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(LoggingMiddleware)
