from typing import TYPE_CHECKING, List, Optional
from datetime import datetime
from sqlalchemy import Text
from sqlmodel import SQLModel, Field, Relationship

from barberpro.util.time import utcnow

if TYPE_CHECKING:
    from barberpro.models.photo import Photo


class ProfessionalBase(SQLModel):
    name: str
    profession: str  # "Barbeiro", "Cabeleireira"...
    specialties: str
    whatsapp: str
    instagram: Optional[str] = None
    address: Optional[str] = None
    bio: Optional[str] = Field(default=None, sa_type=Text)


class Professional(ProfessionalBase, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    email: str = Field(index=True, unique=True)
    password_hash: str

    # url em /uploads/professionals/<id>/...
    profile_photo: Optional[str] = None

    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    # galeria: no máximo 6 fotos
    photos: List["Photo"] = Relationship(
        back_populates="professional",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "order_by": "Photo.id"},
    )


class ProfessionalCreate(ProfessionalBase):
    email: str
    password: str
