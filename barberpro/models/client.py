from typing import Optional
from datetime import datetime
from sqlmodel import SQLModel, Field

from barberpro.util.time import utcnow


class ClientBase(SQLModel):
    name: str
    whatsapp: str


class Client(ClientBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    email: str = Field(index=True, unique=True)
    password_hash: str

    # url em /uploads/clients/<id>/...
    profile_photo: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)


class ClientCreate(ClientBase):
    email: str
    password: str
