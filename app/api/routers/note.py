"""
Endpoints para `notes`: CRUD acotado al usuario autenticado.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from app.api.deps import get_identity
from app.api.schemas.note import MessageOut, NoteCreate, NoteOut, NoteUpdate
from app.services import note_service
from app.services.identity_service import ResolvedIdentity


router = APIRouter(prefix="/notes", tags=["Notes"])


@router.get(
    "",
    response_model=List[NoteOut],
    summary="Listar notas",
    description="Notas del usuario, más recientemente actualizadas primero.",
)
def list_notes(identity: ResolvedIdentity = Depends(get_identity)) -> List[NoteOut]:
    return [NoteOut.from_doc(d) for d in note_service.list_notes(identity)]


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteOut,
    summary="Crear nota",
    description="Crea una nota; el dueño es siempre el usuario autenticado.",
)
def create_note(payload: NoteCreate, identity: ResolvedIdentity = Depends(get_identity)) -> NoteOut:
    doc = note_service.create_note(identity, payload.model_dump())
    return NoteOut.from_doc(doc)


@router.get("/{note_id}", response_model=NoteOut, summary="Obtener nota")
def get_note(note_id: str, identity: ResolvedIdentity = Depends(get_identity)) -> NoteOut:
    return NoteOut.from_doc(note_service.get_note(identity, note_id))


@router.put("/{note_id}", response_model=NoteOut, summary="Actualizar nota")
def update_note(
    note_id: str,
    payload: NoteUpdate,
    identity: ResolvedIdentity = Depends(get_identity),
) -> NoteOut:
    return NoteOut.from_doc(note_service.update_note(identity, note_id, payload.changes()))


@router.delete("/{note_id}", response_model=MessageOut, summary="Eliminar nota")
def delete_note(note_id: str, identity: ResolvedIdentity = Depends(get_identity)) -> MessageOut:
    note_service.delete_note(identity, note_id)
    return MessageOut(message="Note deleted successfully")
