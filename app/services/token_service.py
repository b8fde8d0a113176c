"""
Creación y verificación del JWT de sesión local (login email + password).

El token viaja en una cookie httpOnly; no se guarda estado en el servidor.
"""
from datetime import datetime, timedelta, timezone
from typing import Any, Dict
from uuid import uuid4

import jwt as pyjwt

from app.core.config import settings


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


def _secret() -> str:
    if not settings.jwt_secret:
        raise RuntimeError("Falta JWT_SECRET en configuración")
    return settings.jwt_secret


def create_session_token(*, user: Dict[str, Any]) -> str:
    """
    Genera un JWT válido por SESSION_EXPIRE_DAYS.
    Claims: sub(user_id), email, iat, exp, jti.
    """
    now = _now_utc()
    exp = now + timedelta(days=settings.session_expire_days)
    payload = {
        "sub": str(user["_id"]),
        "email": user.get("email"),
        "iat": int(now.timestamp()),
        "exp": int(exp.timestamp()),
        "jti": str(uuid4()),
    }
    return pyjwt.encode(payload, _secret(), algorithm=settings.jwt_algorithm)


def verify_session_token(token: str) -> Dict[str, Any]:
    """
    Decodifica y valida firma/expiración. Devuelve payload.
    Lanza `jwt.PyJWTError` si el token no es válido.
    """
    if not settings.jwt_secret:
        # Sin secreto no hay sesiones locales posibles
        raise pyjwt.InvalidTokenError("JWT_SECRET no configurado")
    return pyjwt.decode(
        token,
        key=settings.jwt_secret,
        algorithms=[settings.jwt_algorithm],
        options={"require": ["sub", "exp"]},
    )
