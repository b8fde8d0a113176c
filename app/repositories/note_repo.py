"""Repo de la colección `notes`.

Toda lectura o escritura filtra por (`_id`, `user_id`): un id de nota por sí
solo nunca da acceso. Las mutaciones aplican el filtro dentro de la misma
operación (find_one_and_update / delete_one), sin leer antes.
"""
from typing import Dict, Any, List, Optional
from datetime import datetime

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import DESCENDING, ReturnDocument

from app.core.time import now_utc
from app.infrastructure.db.mongo import get_db

COLLECTION = "notes"


def _now() -> datetime:
    return now_utc()


def _oid(value: str) -> Optional[ObjectId]:
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def _owned(note_id: str, user_id: str) -> Optional[Dict[str, Any]]:
    """Filtro de propiedad; None si algún id no es un ObjectId válido."""
    nid, uid = _oid(note_id), _oid(user_id)
    if nid is None or uid is None:
        return None
    return {"_id": nid, "user_id": uid}


def insert_note(user_id: str, doc: Dict[str, Any]) -> Dict[str, Any]:
    """Inserta nota con defaults y devuelve el documento guardado."""
    data = dict(doc)
    now = _now()
    data["user_id"] = ObjectId(user_id)
    data.setdefault("tags", [])
    data.setdefault("is_public", False)
    data["created_at"] = now
    data["updated_at"] = now
    res = get_db()[COLLECTION].insert_one(data)
    data["_id"] = res.inserted_id
    return data


def list_notes(user_id: str) -> List[Dict[str, Any]]:
    """Notas del usuario, más recientemente actualizadas primero.

    `updated_at` es estrictamente creciente por proceso (`now_utc`); entre
    réplicas distintas puede empatar al milisegundo y entonces decide el
    `_id` (la nota creada después va primero).
    """
    uid = _oid(user_id)
    if uid is None:
        return []
    cursor = get_db()[COLLECTION].find({"user_id": uid}).sort(
        [("updated_at", DESCENDING), ("_id", DESCENDING)]
    )
    return list(cursor)


def get_note(note_id: str, user_id: str) -> Optional[Dict[str, Any]]:
    filtro = _owned(note_id, user_id)
    if filtro is None:
        return None
    return get_db()[COLLECTION].find_one(filtro)


def update_note(note_id: str, user_id: str, changes: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Aplica `changes` si la nota pertenece al usuario; devuelve la versión nueva."""
    filtro = _owned(note_id, user_id)
    if filtro is None:
        return None
    fields = {k: v for k, v in changes.items() if k not in ("_id", "user_id", "created_at")}
    fields["updated_at"] = _now()
    return get_db()[COLLECTION].find_one_and_update(
        filtro,
        {"$set": fields},
        return_document=ReturnDocument.AFTER,
    )


def delete_note(note_id: str, user_id: str) -> bool:
    filtro = _owned(note_id, user_id)
    if filtro is None:
        return False
    res = get_db()[COLLECTION].delete_one(filtro)
    return res.deleted_count == 1
