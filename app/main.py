"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
from fastapi import FastAPI
import logging
import uvicorn

from app.core.config import settings
from app.infrastructure.db.mongo import init_mongo, close_mongo, db_ready
from app.infrastructure.db.bootstrap import ensure_collections
from app.infrastructure.http.firebase_token_client import build_token_verifier
from app.api.router import api_router
from app.core.logging import setup_logging
from app.core.middleware import add_middlewares
from app.core.exceptions import register_exception_handlers

_log = logging.getLogger("notes.startup")

setup_logging(settings.log_level)
app = FastAPI(title=settings.app_name)

add_middlewares(app)
register_exception_handlers(app)


# Startup
@app.on_event("startup")
def on_startup():
    # Verificador de tokens: una instancia por proceso, inyectada vía Depends
    app.state.token_verifier = build_token_verifier()
    init_mongo()
    # Garantiza colecciones/índices/validadores mínimos si hay conexión
    if db_ready():
        ensure_collections()
    else:
        _log.warning("Mongo no listo; omitiendo ensure_collections()")


@app.on_event("shutdown")
def on_shutdown():
    close_mongo()


# Monta routers bajo el prefijo configurado
app.include_router(api_router, prefix=settings.api_prefix_normalized)


def run() -> None:
    """Console script `notes-api`."""
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)
