"""
Configuración de logging: jerarquía `notes.*` de la app, Uvicorn y las
librerías de infraestructura (pymongo, google-auth).
"""
import logging

APP_LOGGER = "notes"

# Librerías muy verbosas en DEBUG (heartbeats de Mongo, descarga de
# certificados de Firebase): nunca por debajo de INFO/WARNING
_NOISY = {
    "pymongo": logging.INFO,
    "google.auth": logging.WARNING,
    "urllib3": logging.WARNING,
}


def resolve_level(level: str | None) -> int | None:
    """Nombre de nivel (cualquier capitalización) -> int; None si no existe."""
    resolved = logging.getLevelName((level or "").strip().upper())
    return resolved if isinstance(resolved, int) else None


def setup_logging(level: str = "INFO") -> int:
    resolved = resolve_level(level)
    unknown = resolved is None
    if unknown:
        resolved = logging.INFO
    logging.basicConfig(
        level=resolved,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    logging.getLogger(APP_LOGGER).setLevel(resolved)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).setLevel(resolved)
    for name, floor in _NOISY.items():
        logging.getLogger(name).setLevel(max(resolved, floor))
    if unknown:
        logging.getLogger(f"{APP_LOGGER}.startup").warning("LOG_LEVEL desconocido %r; usando INFO", level)
    return resolved
