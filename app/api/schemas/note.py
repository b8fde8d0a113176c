"""
Esquemas Pydantic para `notes`.

JSON hacia el cliente en camelCase (`isPublic`, `userId`, `createdAt`...);
en Mongo los campos se guardan en snake_case.
"""
from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, field_validator
from pydantic.alias_generators import to_camel

from app.core.time import as_utc

TITLE_MAX_LENGTH = 100

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=TITLE_MAX_LENGTH)]
Content = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
Tag = Annotated[str, StringConstraints(strip_whitespace=True)]


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoteCreate(_CamelModel):
    # Campos extra (p. ej. userId) se ignoran: el dueño lo fija el servidor
    title: Title
    content: Content
    tags: List[Tag] = Field(default_factory=list)
    is_public: bool = False


class NoteUpdate(_CamelModel):
    title: Title
    content: Content
    tags: Optional[List[Tag]] = None
    is_public: Optional[bool] = None

    def changes(self) -> Dict[str, Any]:
        """Campos a escribir; `tags`/`isPublic` omitidos no se tocan."""
        return self.model_dump(exclude_none=True)


class NoteOut(_CamelModel):
    id: str
    title: str
    content: str
    user_id: str
    tags: List[str]
    is_public: bool
    created_at: datetime
    updated_at: datetime

    @field_validator("created_at", "updated_at")
    @classmethod
    def _to_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    @classmethod
    def from_doc(cls, doc: Dict[str, Any]) -> "NoteOut":
        return cls(
            id=str(doc["_id"]),
            title=doc["title"],
            content=doc["content"],
            user_id=str(doc["user_id"]),
            tags=list(doc.get("tags") or []),
            is_public=bool(doc.get("is_public", False)),
            created_at=doc["created_at"],
            updated_at=doc["updated_at"],
        )


class MessageOut(BaseModel):
    message: str
