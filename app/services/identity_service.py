"""
Resolución de identidad: convierte una credencial entrante en el usuario local.

Dos caminos producen la misma `ResolvedIdentity`:
- Bearer token emitido por Firebase (verificado por un `TokenVerifier`);
  el usuario local se crea la primera vez que se ve su email.
- Cookie de sesión local (JWT propio emitido en /auth/login).

Hacia el cliente todo fallo de verificación es "Invalid token"; el motivo
concreto solo va al log.
"""
import logging
from typing import Any, Dict, Optional

import jwt as pyjwt
from pydantic import BaseModel, ConfigDict

from app.core.exceptions import Unauthenticated
from app.infrastructure.http.firebase_token_client import IdentityTokenError, TokenVerifier
from app.repositories import user_repo
from app.services.auth_service import unusable_password_hash
from app.services.token_service import verify_session_token

_log = logging.getLogger("notes.auth")

BEARER_PREFIX = "Bearer "


class ResolvedIdentity(BaseModel):
    model_config = ConfigDict(frozen=True)

    user_id: str
    email: str
    name: Optional[str] = None


def _identity(user: Dict[str, Any]) -> ResolvedIdentity:
    return ResolvedIdentity(user_id=str(user["_id"]), email=user["email"], name=user.get("name"))


def extract_bearer(authorization: Optional[str]) -> str:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        raise Unauthenticated("No token provided")
    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        raise Unauthenticated("No token provided")
    return token


def resolve_bearer(authorization: Optional[str], verifier: TokenVerifier) -> ResolvedIdentity:
    token = extract_bearer(authorization)
    try:
        claims = verifier.verify(token)
    except IdentityTokenError as e:
        _log.warning("Bearer token rechazado: %s", e)
        raise Unauthenticated("Invalid token")

    email = user_repo.normalize_email(str(claims.get("email") or ""))
    if not email:
        _log.warning("Bearer token sin claim email uid=%s", claims.get("sub"))
        raise Unauthenticated("Invalid token")

    def _defaults() -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "name": (claims.get("name") or "").strip() or email.split("@")[0],
            "auth_provider": "firebase",
            "password_hash": unusable_password_hash(),
        }
        uid = claims.get("sub") or claims.get("user_id")
        if uid:
            doc["firebase_uid"] = str(uid)
        return doc

    user = user_repo.resolve_or_provision(email, _defaults)
    return _identity(user)


def resolve_session(token: str) -> ResolvedIdentity:
    try:
        payload = verify_session_token(token)
    except pyjwt.PyJWTError as e:
        _log.info("Cookie de sesión inválida: %s", e)
        raise Unauthenticated("Invalid token")
    user = user_repo.get_user_by_id(str(payload["sub"]))
    if not user:
        _log.info("Sesión de usuario inexistente sub=%s", payload["sub"])
        raise Unauthenticated("Invalid token")
    return _identity(user)
