"""
Esquemas Pydantic para la colección `users`.

Reglas clave:
- `email` se guarda siempre en minúsculas.
- `password_hash` nunca sale en una respuesta.
"""
from datetime import datetime
from typing import Annotated, Any, Dict

from pydantic import BaseModel, ConfigDict, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from app.core.time import as_utc

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]


class UserOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    email: str
    name: str
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "UserOut":
        return cls(
            id=str(doc["_id"]),
            email=doc["email"],
            name=doc.get("name") or "",
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )


class UserProfileUpdate(BaseModel):
    name: Name
