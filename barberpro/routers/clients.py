from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlmodel import Session

from barberpro.config import Settings
from barberpro.core.security import get_current_identity
from barberpro.database import get_session
from barberpro.dependencies import get_app_settings, get_upload_binder
from barberpro.models.auth import CLIENT, Identity
from barberpro.services import accounts
from barberpro.services.uploads import UploadBinder, read_upload

router = APIRouter(prefix="/clients", tags=["clients"])


@router.get("/{client_id}")
def get_client(
    client_id: int,
    session: Session = Depends(get_session),
    current: Identity = Depends(get_current_identity),
):
    # nunca devolve a senha
    return accounts.public_client(accounts.get_client(session, client_id))


@router.post("/{client_id}/profile-photo")
def upload_profile_photo(
    client_id: int,
    profile_photo: Optional[UploadFile] = File(None, alias="profilePhoto"),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    binder: UploadBinder = Depends(get_upload_binder),
    current: Identity = Depends(get_current_identity),
):
    incoming = read_upload(profile_photo, settings.max_upload_size_bytes)

    url = binder.bind_profile_photo(
        session,
        CLIENT,
        client_id,
        incoming.content if incoming else None,
        incoming.filename if incoming else "",
    )
    return {"profilePhoto": url}
