"""Perfil del usuario autenticado (/auth/me)."""
from typing import Any, Dict

from app.core.exceptions import NotFound
from app.repositories import user_repo
from app.services.identity_service import ResolvedIdentity


def get_profile(identity: ResolvedIdentity) -> Dict[str, Any]:
    u = user_repo.get_user_by_id(identity.user_id)
    if not u:
        raise NotFound("User not found")
    return u


def update_profile(identity: ResolvedIdentity, *, name: str) -> Dict[str, Any]:
    u = user_repo.update_user_name(identity.user_id, name)
    if not u:
        raise NotFound("User not found")
    return u
