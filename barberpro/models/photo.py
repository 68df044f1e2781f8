from typing import TYPE_CHECKING, Optional
from datetime import datetime
from sqlmodel import SQLModel, Field, Relationship

from barberpro.util.time import utcnow

if TYPE_CHECKING:
    from barberpro.models.professional import Professional


class Photo(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)

    url: str
    professional_id: int = Field(foreign_key="professional.id", index=True)

    created_at: datetime = Field(default_factory=utcnow)

    professional: Optional["Professional"] = Relationship(back_populates="photos")
