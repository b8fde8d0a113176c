"""
Dependencias reutilizables para routers (FastAPI Depends).

- `get_token_verifier`: capacidad de verificación creada en el startup.
- `get_identity`: resuelve la credencial de la petición a `ResolvedIdentity`.
Mantener esta capa delgada: la lógica vive en `identity_service`.
"""
from typing import Optional

from fastapi import Depends, Header, Request

from app.core.config import settings
from app.core.exceptions import Unauthenticated
from app.infrastructure.http.firebase_token_client import TokenVerifier, build_token_verifier
from app.services import identity_service
from app.services.identity_service import ResolvedIdentity


def get_token_verifier(request: Request) -> TokenVerifier:
    verifier = getattr(request.app.state, "token_verifier", None)
    if verifier is None:
        # Normalmente lo crea el startup; sirve de respaldo si no corrió
        verifier = build_token_verifier()
        request.app.state.token_verifier = verifier
    return verifier


def get_identity(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> ResolvedIdentity:
    # El header Authorization tiene prioridad sobre la cookie de sesión
    if authorization is not None:
        return identity_service.resolve_bearer(authorization, verifier)
    session = request.cookies.get(settings.session_cookie_name)
    if session:
        return identity_service.resolve_session(session)
    raise Unauthenticated("Authentication required")
