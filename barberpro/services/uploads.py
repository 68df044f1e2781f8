"""
Uploads de fotos
================

Grava o arquivo em `<upload_dir>/<professionals|clients>/<id>/` e liga a url
resultante à conta (foto de perfil) ou à galeria do profissional.
"""

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from fastapi import UploadFile
from sqlmodel import Session, func, select

from barberpro.config import Settings
from barberpro.core.exceptions import FileTooLarge, GalleryFull, NoFileProvided, ProfessionalNotFound
from barberpro.models.auth import CLIENT, PROFESSIONAL
from barberpro.models.photo import Photo
from barberpro.models.professional import Professional
from barberpro.services import accounts


logger = logging.getLogger(__name__)

KIND_DIRECTORIES = {PROFESSIONAL: "professionals", CLIENT: "clients"}

CHUNK_SIZE = 64 * 1024


@dataclass
class IncomingFile:
    filename: str
    content: bytes


def read_upload(upload: Optional[UploadFile], max_bytes: int) -> Optional[IncomingFile]:
    """Lê o arquivo do multipart em blocos, barrando o que passar de `max_bytes`.

    Retorna None quando nada foi enviado (campo ausente ou arquivo vazio).
    """
    if upload is None:
        return None

    chunks = []
    total = 0
    while True:
        chunk = upload.file.read(CHUNK_SIZE)
        if not chunk:
            break
        total += len(chunk)
        if total > max_bytes:
            raise FileTooLarge(max_bytes // (1024 * 1024))
        chunks.append(chunk)

    if total == 0:
        return None

    return IncomingFile(filename=upload.filename or "", content=b"".join(chunks))


def _safe_name(original_name: str) -> str:
    # só o nome-base: nada de "../" vindo do cliente
    name = os.path.basename((original_name or "").replace("\\", "/")).strip()
    return name or "foto"


class UploadBinder:
    def __init__(self, upload_dir: str, max_gallery_photos: int = 6, url_prefix: str = "/uploads"):
        self.root = Path(upload_dir)
        self.max_gallery_photos = max_gallery_photos
        self.url_prefix = url_prefix.rstrip("/")

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadBinder":
        return cls(settings.upload_dir, max_gallery_photos=settings.max_gallery_photos)

    def ensure_storage_location(self, kind: str, account_id: int) -> Path:
        directory = self.root / KIND_DIRECTORIES[kind] / str(account_id)
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def _store(self, directory: Path, kind: str, account_id: int, original_name: str, content: bytes) -> Tuple[Path, str]:
        # timestamp em ms + nome original (colisão no mesmo ms é aceita)
        filename = f"{int(time.time() * 1000)}-{_safe_name(original_name)}"
        path = directory / filename
        path.write_bytes(content)
        url = f"{self.url_prefix}/{KIND_DIRECTORIES[kind]}/{account_id}/{filename}"
        return path, url

    def _count_photos(self, session: Session, professional_id: int) -> int:
        return session.exec(
            select(func.count(Photo.id)).where(Photo.professional_id == professional_id)
        ).one()

    def photo_urls(self, session: Session, professional_id: int) -> List[str]:
        return list(
            session.exec(
                select(Photo.url)
                .where(Photo.professional_id == professional_id)
                .order_by(Photo.id)
            ).all()
        )

    # =========================
    # FOTO DE PERFIL
    # =========================
    def bind_profile_photo(
        self,
        session: Session,
        kind: str,
        account_id: int,
        file_bytes: Optional[bytes],
        original_name: str,
    ) -> str:
        accounts.get_by_id(session, kind, account_id)

        if not file_bytes:
            raise NoFileProvided()

        directory = self.ensure_storage_location(kind, account_id)
        path, url = self._store(directory, kind, account_id, original_name, file_bytes)

        try:
            accounts.set_profile_photo(session, kind, account_id, url)
        except Exception:
            session.rollback()
            path.unlink(missing_ok=True)
            raise

        logger.info("Foto de perfil de %s %s: %s", kind, account_id, url)
        return url

    # =========================
    # GALERIA (PROFISSIONAL)
    # =========================
    def bind_gallery_photos(
        self,
        session: Session,
        professional_id: int,
        files: Sequence[IncomingFile],
    ) -> List[str]:
        """Adiciona fotos à galeria e devolve todas as urls do profissional.

        Contagem, gravação e insert rodam numa transação só. O profissional é
        travado com FOR UPDATE onde o banco suporta; como o SQLite ignora esse
        lock, a contagem é refeita depois do flush, já segurando o lock de
        escrita, e a transação é desfeita se o limite estourar.
        """
        files = [f for f in files if f.content]
        written: List[Path] = []

        try:
            professional = session.exec(
                select(Professional)
                .where(Professional.id == professional_id)
                .with_for_update()
            ).first()
            if professional is None:
                raise ProfessionalNotFound()

            if not files:
                raise NoFileProvided()

            current = self._count_photos(session, professional_id)
            if current + len(files) > self.max_gallery_photos:
                logger.info(
                    "Galeria cheia para profissional %s (%s + %s)",
                    professional_id, current, len(files),
                )
                raise GalleryFull(self.max_gallery_photos)

            directory = self.ensure_storage_location(PROFESSIONAL, professional_id)
            for incoming in files:
                path, url = self._store(directory, PROFESSIONAL, professional_id, incoming.filename, incoming.content)
                written.append(path)
                session.add(Photo(url=url, professional_id=professional_id))

            session.flush()
            if self._count_photos(session, professional_id) > self.max_gallery_photos:
                logger.info("Galeria estourou em upload concorrente (profissional %s)", professional_id)
                raise GalleryFull(self.max_gallery_photos)

            session.commit()
        except Exception:
            session.rollback()
            for path in written:
                path.unlink(missing_ok=True)
            raise

        logger.info("%s foto(s) adicionadas ao profissional %s", len(files), professional_id)
        return self.photo_urls(session, professional_id)
