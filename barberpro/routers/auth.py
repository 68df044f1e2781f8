from fastapi import APIRouter, Depends, status
from sqlmodel import Session

from barberpro.config import Settings
from barberpro.core.security import create_access_token
from barberpro.database import get_session
from barberpro.dependencies import get_app_settings
from barberpro.models.auth import CLIENT, PROFESSIONAL, Identity, LoginRequest
from barberpro.models.client import ClientCreate
from barberpro.models.professional import ProfessionalCreate
from barberpro.services import accounts

router = APIRouter(prefix="/auth", tags=["auth"])


# =========================
# PROFISSIONAL
# =========================
@router.post("/register-professional")
def register_professional(
    payload: ProfessionalCreate,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    professional = accounts.create_professional(session, payload)
    token = create_access_token(Identity(id=professional.id, kind=PROFESSIONAL), settings)

    return {
        "profissional": accounts.public_professional(professional, include_email=True),
        "token": token,
    }


@router.post("/login-professional")
def login_professional(
    credentials: LoginRequest,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    identity = accounts.authenticate(session, PROFESSIONAL, credentials.email, credentials.password)
    professional = accounts.get_professional(session, identity.id)

    return {
        "profissional": accounts.public_professional(professional, include_email=True),
        "token": create_access_token(identity, settings),
    }


# =========================
# CLIENTE
# =========================
@router.post("/register-client", status_code=status.HTTP_201_CREATED)
def register_client(
    payload: ClientCreate,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    client = accounts.create_client(session, payload)
    token = create_access_token(Identity(id=client.id, kind=CLIENT), settings)

    return {"cliente": accounts.public_client(client), "token": token}


@router.post("/login-client")
def login_client(
    credentials: LoginRequest,
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
):
    identity = accounts.authenticate(session, CLIENT, credentials.email, credentials.password)
    client = accounts.get_client(session, identity.id)

    return {"cliente": accounts.public_client(client), "token": create_access_token(identity, settings)}
