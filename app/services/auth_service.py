"""
Lógica de autenticación local: registro, login y hashing de contraseñas.
"""
from typing import Any, Dict, Tuple
import logging
import secrets

from argon2 import PasswordHasher
from argon2.exceptions import VerificationError, InvalidHashError
from argon2.low_level import Type
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import InvalidInput, Unauthenticated
from app.repositories import user_repo as repo
from app.services.token_service import create_session_token

_log = logging.getLogger("notes.auth")

ph = PasswordHasher(time_cost=2, memory_cost=51200, parallelism=2, hash_len=32, salt_len=16, type=Type.ID)


def hash_password(password: str) -> str:
    return ph.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return ph.verify(password_hash, password)
    except (VerificationError, InvalidHashError):
        return False


def unusable_password_hash() -> str:
    """Hash de un secreto aleatorio que nadie conoce (usuarios externos)."""
    return hash_password(secrets.token_hex(32))


def register_local(*, email: str, password: str, name: str) -> Dict[str, Any]:
    """Crea un usuario `local`. Email duplicado -> InvalidInput."""
    try:
        return repo.insert_user(
            {
                "email": email,
                "name": name,
                "password_hash": hash_password(password),
                "auth_provider": "local",
            }
        )
    except DuplicateKeyError:
        raise InvalidInput("Email already registered")


def login_local(*, email: str, password: str) -> Tuple[Dict[str, Any], str]:
    """Valida credenciales y devuelve (usuario, token de sesión)."""
    u = repo.find_user_by_email(email)
    # Los usuarios provisionados por Firebase tienen un hash inutilizable
    if not u or u.get("auth_provider") != "local":
        raise Unauthenticated("Invalid credentials")
    if not verify_password(password, u.get("password_hash") or ""):
        _log.info("Password incorrecto para user_id=%s", u["_id"])
        raise Unauthenticated("Invalid credentials")
    return u, create_session_token(user=u)
