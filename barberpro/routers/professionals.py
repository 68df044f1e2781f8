from typing import List, Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlmodel import Session

from barberpro.config import Settings
from barberpro.core.security import get_current_identity
from barberpro.database import get_session
from barberpro.dependencies import get_app_settings, get_upload_binder
from barberpro.models.auth import PROFESSIONAL, Identity
from barberpro.services import accounts
from barberpro.services.uploads import UploadBinder, read_upload

router = APIRouter(prefix="/professionals", tags=["professionals"])


# Obs: as rotas abaixo exigem token, mas não conferem se o token é do dono do {professional_id}.


@router.get("")
def list_professionals(
    session: Session = Depends(get_session),
    current: Identity = Depends(get_current_identity),
):
    return [accounts.public_professional(p) for p in accounts.list_professionals(session)]


@router.get("/{professional_id}")
def get_professional(
    professional_id: int,
    session: Session = Depends(get_session),
    current: Identity = Depends(get_current_identity),
):
    return accounts.public_professional(accounts.get_professional(session, professional_id))


@router.post("/{professional_id}/profile-photo")
def upload_profile_photo(
    professional_id: int,
    profile_photo: Optional[UploadFile] = File(None, alias="profilePhoto"),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    binder: UploadBinder = Depends(get_upload_binder),
    current: Identity = Depends(get_current_identity),
):
    incoming = read_upload(profile_photo, settings.max_upload_size_bytes)

    url = binder.bind_profile_photo(
        session,
        PROFESSIONAL,
        professional_id,
        incoming.content if incoming else None,
        incoming.filename if incoming else "",
    )
    return {"profilePhoto": url}


@router.post("/{professional_id}/photos")
def upload_photos(
    professional_id: int,
    photos: Optional[List[UploadFile]] = File(None),
    session: Session = Depends(get_session),
    settings: Settings = Depends(get_app_settings),
    binder: UploadBinder = Depends(get_upload_binder),
    current: Identity = Depends(get_current_identity),
):
    incoming = []
    for upload in photos or []:
        f = read_upload(upload, settings.max_upload_size_bytes)
        if f is not None:
            incoming.append(f)

    urls = binder.bind_gallery_photos(session, professional_id, incoming)
    return {"photoUrls": urls}
