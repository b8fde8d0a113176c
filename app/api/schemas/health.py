from pydantic import BaseModel


class HealthOut(BaseModel):
    status: str
    message: str


class DbHealthOut(BaseModel):
    status: str
    mongo: bool
