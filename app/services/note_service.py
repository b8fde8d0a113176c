"""
Service layer for notes: operaciones siempre acotadas al usuario resuelto.

Una nota inexistente y una nota de otro usuario producen el mismo NotFound.
"""
from typing import Dict, Any, List

from app.core.exceptions import NotFound
from app.repositories import note_repo
from app.services.identity_service import ResolvedIdentity

NOT_FOUND = "Note not found"


def list_notes(identity: ResolvedIdentity) -> List[Dict[str, Any]]:
    return note_repo.list_notes(identity.user_id)


def create_note(identity: ResolvedIdentity, data: Dict[str, Any]) -> Dict[str, Any]:
    # El dueño siempre es la identidad resuelta, nunca lo que mande el cliente
    data = {k: v for k, v in data.items() if k != "user_id"}
    return note_repo.insert_note(identity.user_id, data)


def get_note(identity: ResolvedIdentity, note_id: str) -> Dict[str, Any]:
    note = note_repo.get_note(note_id, identity.user_id)
    if note is None:
        raise NotFound(NOT_FOUND)
    return note


def update_note(identity: ResolvedIdentity, note_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
    note = note_repo.update_note(note_id, identity.user_id, changes)
    if note is None:
        raise NotFound(NOT_FOUND)
    return note


def delete_note(identity: ResolvedIdentity, note_id: str) -> None:
    if not note_repo.delete_note(note_id, identity.user_id):
        raise NotFound(NOT_FOUND)
