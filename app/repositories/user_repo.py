"""Repo de la colección `users` (email único, siempre en minúsculas)."""
import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.time import now_utc
from app.infrastructure.db.mongo import get_db

COLLECTION = "users"

_log = logging.getLogger("notes.auth")


def _now() -> datetime:
    return now_utc()


def _oid(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def find_user_by_email(email: str) -> Optional[Dict[str, Any]]:
    """Busca usuario por email (comparación en minúsculas)."""
    return get_db()[COLLECTION].find_one({"email": normalize_email(email)})


def get_user_by_id(user_id: str) -> Optional[Dict[str, Any]]:
    oid = _oid(user_id)
    if oid is None:
        return None
    return get_db()[COLLECTION].find_one({"_id": oid})


def insert_user(doc: Dict[str, Any]) -> Dict[str, Any]:
    """Inserta usuario con timestamps y devuelve el documento guardado.

    Lanza `DuplicateKeyError` si el email ya existe (índice único).
    """
    data = dict(doc)
    now = _now()
    data["email"] = normalize_email(data["email"])
    data.setdefault("created_at", now)
    data["updated_at"] = now
    res = get_db()[COLLECTION].insert_one(data)
    data["_id"] = res.inserted_id
    return data


def resolve_or_provision(email: str, build_defaults: Callable[[], Dict[str, Any]]) -> Dict[str, Any]:
    """Devuelve el usuario con ese email, creándolo si no existe.

    `build_defaults` solo se evalúa cuando hay que crear. Si dos peticiones
    concurrentes intentan crear el mismo email, el índice único rechaza la
    segunda inserción y esta relee el registro que ganó la carrera.
    """
    email = normalize_email(email)
    found = find_user_by_email(email)
    if found:
        return found
    doc = dict(build_defaults())
    doc["email"] = email
    try:
        created = insert_user(doc)
        _log.info("Usuario provisionado email=%s id=%s", email, created["_id"])
        return created
    except DuplicateKeyError:
        _log.info("Conflicto al provisionar email=%s; releyendo", email)
        found = find_user_by_email(email)
        if not found:
            raise
        return found


def update_user_name(user_id: str, name: str) -> Optional[Dict[str, Any]]:
    """Actualiza el nombre y devuelve el documento resultante (o None)."""
    oid = _oid(user_id)
    if oid is None:
        return None
    return get_db()[COLLECTION].find_one_and_update(
        {"_id": oid},
        {"$set": {"name": name, "updated_at": _now()}},
        return_document=ReturnDocument.AFTER,
    )
