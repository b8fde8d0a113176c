"""
Bootstrap de la base Mongo: define y aplica validadores (JSON Schema) e índices.
Se ejecuta al inicio de la app para asegurar colecciones mínimas y consistencia.
No tumba la app si algo falla; deja warnings en casos no críticos.
"""
from __future__ import annotations

from typing import Any, Dict, List
import logging
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import PyMongoError
from app.infrastructure.db.mongo import get_db

_log = logging.getLogger("notes.mongo.bootstrap")

USERS = "users"
NOTES = "notes"

USER_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["email", "name", "password_hash", "auth_provider", "created_at", "updated_at"],
    "properties": {
        "email": {"bsonType": "string", "minLength": 3, "description": "lowercase"},
        "name": {"bsonType": "string", "minLength": 1},
        "password_hash": {"bsonType": "string"},
        "auth_provider": {"bsonType": "string", "enum": ["local", "firebase"]},
        "firebase_uid": {"bsonType": "string"},
        "created_at": {"bsonType": "date"},
        "updated_at": {"bsonType": "date"},
    },
    "additionalProperties": True,
}

NOTE_VALIDATOR: Dict[str, Any] = {
    "bsonType": "object",
    "required": ["title", "content", "user_id", "tags", "is_public", "created_at", "updated_at"],
    "properties": {
        "title": {"bsonType": "string", "minLength": 1, "maxLength": 100},
        "content": {"bsonType": "string", "minLength": 1},
        "user_id": {"bsonType": "objectId"},
        "tags": {"bsonType": "array", "items": {"bsonType": "string"}},
        "is_public": {"bsonType": "bool"},
        "created_at": {"bsonType": "date"},
        "updated_at": {"bsonType": "date"},
    },
    "additionalProperties": True,
}


def _collmod_or_create(name: str, validator: Dict[str, Any] | None) -> None:
    db = get_db()
    try:
        if name not in db.list_collection_names():
            if validator:
                db.create_collection(name, validator={"$jsonSchema": validator})
            else:
                db.create_collection(name)
        elif validator:
            db.command({
                "collMod": name,
                "validator": {"$jsonSchema": validator},
                "validationLevel": "moderate",
            })
    except PyMongoError as e:
        # No aborta el arranque; solo deja sin validator estricto.
        _log.warning("No se pudo aplicar validator en '%s': %s", name, e)


def _ensure_indexes(name: str, indexes: List[Dict[str, Any]]) -> None:
    coll = get_db()[name]
    for ix in indexes:
        spec = dict(ix)
        keys = spec.pop("keys")
        try:
            coll.create_index(keys, **spec)
        except PyMongoError as e:
            # Ignora fallas de índice (e.g., datos no únicos previos)
            _log.warning("No se pudo crear índice en '%s' (%s): %s", name, keys, e)


def ensure_collections() -> None:
    """
    Garantiza colecciones, validadores e índices mínimos.

    El índice único de `users.email` es el que resuelve la carrera de
    auto-provisión (ver `user_repo.resolve_or_provision`).
    """
    _collmod_or_create(USERS, USER_VALIDATOR)
    _ensure_indexes(
        USERS,
        [
            {"keys": [("email", ASCENDING)], "unique": True, "name": "uniq_email"},
        ],
    )

    _collmod_or_create(NOTES, NOTE_VALIDATOR)
    _ensure_indexes(
        NOTES,
        [
            {"keys": [("user_id", ASCENDING), ("updated_at", DESCENDING)], "name": "ix_user_updated"},
            {"keys": [("tags", ASCENDING)], "name": "ix_tags"},
            {"keys": [("is_public", ASCENDING)], "name": "ix_is_public"},
        ],
    )
    _log.info("Colecciones e índices verificados")
