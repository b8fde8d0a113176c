"""
Verificación de ID Tokens de Firebase (autoridad de identidad externa).

Usa `google.oauth2.id_token.verify_firebase_token` con el `firebase_project_id`
configurado como audiencia. El frontend envía el ID token obtenido del SDK de
Firebase en `Authorization: Bearer <token>`.

La verificación se expone como capacidad inyectable (`TokenVerifier`): se crea
una instancia al arrancar y se guarda en `app.state.token_verifier`.
"""
import logging
from typing import Any, Dict, Protocol

from google.auth import exceptions as gexceptions
from google.auth.transport import requests as grequests
from google.oauth2 import id_token

from app.core.config import settings


class IdentityTokenError(Exception):
    pass


class TokenVerifier(Protocol):
    def verify(self, token: str) -> Dict[str, Any]:
        """Devuelve los claims del token o lanza `IdentityTokenError`."""
        ...


_log = logging.getLogger("notes.auth")


class _TimeoutRequest(grequests.Request):
    """Transporte de google-auth con timeout por defecto acotado."""

    def __init__(self, timeout: float) -> None:
        super().__init__()
        self._timeout = timeout

    def __call__(self, url, method="GET", body=None, headers=None, timeout=None, **kwargs):
        return super().__call__(
            url,
            method=method,
            body=body,
            headers=headers,
            timeout=timeout or self._timeout,
            **kwargs,
        )


class FirebaseTokenVerifier:
    def __init__(
        self,
        project_id: str | None,
        *,
        timeout_seconds: float = 10.0,
        clock_skew_seconds: int = 60,
    ) -> None:
        self.project_id = project_id
        self.clock_skew_seconds = clock_skew_seconds
        self._request = _TimeoutRequest(timeout_seconds)

    @property
    def issuer(self) -> str:
        return f"https://securetoken.google.com/{self.project_id}"

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Verifica un Firebase ID Token y devuelve sus claims si es válido.
        Requiere `project_id` configurado. Si no se pueden descargar los
        certificados de Google se propaga `TransportError` (no es culpa del token).
        """
        if not self.project_id:
            raise IdentityTokenError("Falta FIREBASE_PROJECT_ID en configuración")
        try:
            claims = id_token.verify_firebase_token(
                token,
                self._request,
                audience=self.project_id,
                clock_skew_in_seconds=self.clock_skew_seconds,
            )
        except gexceptions.TransportError:
            # Sin certificados de Google no se puede juzgar el token: no es un 401
            _log.error("No se pudieron obtener los certificados de Firebase", exc_info=True)
            raise
        except Exception as e:
            # Firma, expiración, audiencia, formato
            _log.info("Firebase ID Token rechazado: %s", e)
            raise IdentityTokenError("Token de Firebase inválido") from e
        if not claims:
            raise IdentityTokenError("Token de Firebase sin claims")
        if claims.get("iss") != self.issuer:
            raise IdentityTokenError("Emisor no válido")
        return claims


def build_token_verifier() -> FirebaseTokenVerifier:
    """Construye el verificador a partir de `settings` (una vez por proceso)."""
    if not settings.firebase_configured:
        _log.warning("FIREBASE_PROJECT_ID no configurado; todos los Bearer tokens serán rechazados")
    return FirebaseTokenVerifier(
        settings.firebase_project_id,
        timeout_seconds=settings.firebase_timeout_seconds,
        clock_skew_seconds=settings.firebase_clock_skew_seconds,
    )
