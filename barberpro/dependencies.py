from typing import TYPE_CHECKING

from fastapi import Request

from barberpro.config import Settings

if TYPE_CHECKING:
    from barberpro.services.uploads import UploadBinder


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upload_binder(request: Request) -> "UploadBinder":
    return request.app.state.upload_binder
