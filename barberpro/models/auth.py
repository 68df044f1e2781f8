from dataclasses import dataclass
from sqlmodel import SQLModel


PROFESSIONAL = "professional"
CLIENT = "client"
ACCOUNT_KINDS = (PROFESSIONAL, CLIENT)


@dataclass(frozen=True)
class Identity:
    """Quem está chamando, extraído do token."""

    id: int
    kind: str  # "professional" ou "client"


class LoginRequest(SQLModel):
    email: str
    password: str
