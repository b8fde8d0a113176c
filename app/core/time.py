"""
Helpers de fecha/hora. Todo timestamp persistido o expuesto va en UTC.
"""
from __future__ import annotations

import threading
from datetime import datetime, timedelta, timezone
from typing import Optional

_MS = timedelta(milliseconds=1)
_lock = threading.Lock()
_last: Optional[datetime] = None


def now_utc() -> datetime:
    """Hora actual en UTC, truncada a milisegundos (precisión de BSON).

    Estrictamente creciente dentro del proceso: dos llamadas en el mismo
    milisegundo (o con el reloj retrocediendo) se separan 1 ms, de modo que
    una escritura posterior siempre ordena después por `updated_at`.
    """
    global _last
    now = datetime.now(timezone.utc)
    now = now.replace(microsecond=(now.microsecond // 1000) * 1000)
    with _lock:
        if _last is not None and now <= _last:
            now = _last + _MS
        _last = now
    return now


def as_utc(value: datetime) -> datetime:
    """Normaliza a UTC aware (pymongo sin `tz_aware` devuelve datetimes naive en UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)
