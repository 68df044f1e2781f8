import logging
from typing import Any, Dict, Iterable, List, Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from barberpro.core.exceptions import (
    ClientNotFound,
    DuplicateEmail,
    InvalidCredentials,
    MissingField,
    ProfessionalNotFound,
)
from barberpro.core.security import get_password_hash, pwd_context, verify_password
from barberpro.models.auth import CLIENT, PROFESSIONAL, Identity
from barberpro.models.client import Client, ClientCreate
from barberpro.models.photo import Photo  # noqa: F401  (relacionamento Professional.photos)
from barberpro.models.professional import Professional, ProfessionalCreate
from barberpro.util.time import utcnow


logger = logging.getLogger(__name__)

Account = Union[Professional, Client]

REQUIRED_PROFESSIONAL_FIELDS = ("name", "profession", "specialties", "whatsapp", "email", "password")
REQUIRED_CLIENT_FIELDS = ("name", "whatsapp", "email", "password")

_MODELS = {PROFESSIONAL: Professional, CLIENT: Client}
_NOT_FOUND = {PROFESSIONAL: ProfessionalNotFound, CLIENT: ClientNotFound}


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _model_for(kind: str):
    try:
        return _MODELS[kind]
    except KeyError:
        raise ValueError(f"tipo de conta inválido: {kind!r}")


def _check_required(data: Dict[str, Any], required: Iterable[str]) -> None:
    # string vazia conta como ausente
    for field in required:
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise MissingField(field)


def _insert_account(session: Session, account: Account) -> Account:
    model = type(account)
    email = account.email

    session.add(account)
    try:
        session.commit()
    except IntegrityError:
        session.rollback()
        # corrida entre o select e o insert: só vira DuplicateEmail se o e-mail já existe
        if _email_taken(session, model, email):
            raise DuplicateEmail()
        raise
    session.refresh(account)
    return account


def _email_taken(session: Session, model, email: str) -> bool:
    return session.exec(select(model).where(model.email == email)).first() is not None


# =========================
# CADASTRO
# =========================

def create_professional(session: Session, payload: ProfessionalCreate) -> Professional:
    _check_required(payload.model_dump(), REQUIRED_PROFESSIONAL_FIELDS)

    email = normalize_email(payload.email)
    if _email_taken(session, Professional, email):
        raise DuplicateEmail()

    professional = Professional(
        name=payload.name,
        profession=payload.profession,
        specialties=payload.specialties,
        whatsapp=payload.whatsapp,
        instagram=payload.instagram,
        address=payload.address,
        bio=payload.bio,
        email=email,
        password_hash=get_password_hash(payload.password),
    )
    professional = _insert_account(session, professional)

    logger.info("Profissional %s cadastrado", professional.id)
    return professional


def create_client(session: Session, payload: ClientCreate) -> Client:
    _check_required(payload.model_dump(), REQUIRED_CLIENT_FIELDS)

    email = normalize_email(payload.email)
    if _email_taken(session, Client, email):
        raise DuplicateEmail()

    client = Client(
        name=payload.name,
        whatsapp=payload.whatsapp,
        email=email,
        password_hash=get_password_hash(payload.password),
    )
    client = _insert_account(session, client)

    logger.info("Cliente %s cadastrado", client.id)
    return client


# =========================
# LOGIN
# =========================

def authenticate(session: Session, kind: str, email: str, password: str) -> Identity:
    """Mesmo erro para e-mail desconhecido e senha errada."""
    model = _model_for(kind)
    account = session.exec(
        select(model).where(model.email == normalize_email(email))
    ).first()

    if account is None:
        # gasta o mesmo tempo de um verify real
        pwd_context.dummy_verify()
        logger.warning("Login %s recusado", kind)
        raise InvalidCredentials()

    if not verify_password(password, account.password_hash):
        logger.warning("Login %s recusado", kind)
        raise InvalidCredentials()

    logger.info("Login %s %s", kind, account.id)
    return Identity(id=account.id, kind=kind)


# =========================
# LEITURA
# =========================

def get_by_id(session: Session, kind: str, account_id: int) -> Account:
    account = session.get(_model_for(kind), account_id)
    if account is None:
        raise _NOT_FOUND[kind]()
    return account


def get_professional(session: Session, professional_id: int) -> Professional:
    return get_by_id(session, PROFESSIONAL, professional_id)


def get_client(session: Session, client_id: int) -> Client:
    return get_by_id(session, CLIENT, client_id)


def list_professionals(session: Session) -> List[Professional]:
    # sem paginação
    return session.exec(
        select(Professional)
        .options(selectinload(Professional.photos))
        .order_by(Professional.id)
    ).all()


# =========================
# FOTO DE PERFIL
# =========================

def set_profile_photo(session: Session, kind: str, account_id: int, url: str) -> None:
    # não apaga a foto anterior do disco
    account = get_by_id(session, kind, account_id)
    account.profile_photo = url
    account.updated_at = utcnow()
    session.add(account)
    session.commit()


# =========================
# FORMATO DE RESPOSTA (sem senha)
# =========================

def public_professional(professional: Professional, include_email: bool = False) -> Dict[str, Any]:
    data = {
        "id": professional.id,
        "name": professional.name,
        "profession": professional.profession,
        "specialties": professional.specialties,
        "whatsapp": professional.whatsapp,
        "instagram": professional.instagram,
        "address": professional.address,
        "bio": professional.bio,
        "profilePhoto": professional.profile_photo,
        "photos": [{"url": photo.url} for photo in professional.photos],
    }
    if include_email:
        data["email"] = professional.email
    return data


def public_client(client: Client) -> Dict[str, Any]:
    return {
        "id": client.id,
        "name": client.name,
        "whatsapp": client.whatsapp,
        "email": client.email,
        "profilePhoto": client.profile_photo,
    }
