"""Payloads de autenticación local (email + password)."""
from typing import Annotated

from pydantic import BaseModel, EmailStr, StringConstraints

from app.api.schemas.user import Name

Password = Annotated[str, StringConstraints(min_length=6, max_length=256)]


class RegisterPayload(BaseModel):
    email: EmailStr
    password: Password
    name: Name


class LoginLocalPayload(BaseModel):
    email: EmailStr
    password: Annotated[str, StringConstraints(min_length=1)]
