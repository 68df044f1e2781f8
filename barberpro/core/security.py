import logging
from datetime import timedelta
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from barberpro.config import Settings
from barberpro.core.exceptions import InvalidToken, MissingToken
from barberpro.dependencies import get_app_settings
from barberpro.models.auth import ACCOUNT_KINDS, Identity
from barberpro.util.time import utcnow


logger = logging.getLogger(__name__)


# =========================
# HASH DE SENHA
# =========================

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=10)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # hash corrompido/vazio conta como senha errada
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


# =========================
# TOKEN JWT
# =========================

def create_access_token(
    identity: Identity,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    expire = utcnow() + expires_delta
    to_encode = {
        "sub": str(identity.id),
        "kind": identity.kind,
        "exp": expire,
    }

    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> Identity:
    """Valida assinatura e expiração. Qualquer falha vira InvalidToken, sem detalhe."""
    if not token:
        raise InvalidToken()

    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise InvalidToken()

    sub = payload.get("sub")
    kind = payload.get("kind")
    if sub is None or kind not in ACCOUNT_KINDS:
        raise InvalidToken()

    try:
        account_id = int(sub)
    except (TypeError, ValueError):
        raise InvalidToken()

    return Identity(id=account_id, kind=kind)


# =========================
# IDENTIDADE AUTENTICADA
# =========================

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    settings: Settings = Depends(get_app_settings),
) -> Identity:
    # Obs: não confere se identity.id bate com o {id} da rota.
    # Qualquer token válido age sobre qualquer conta (ver DESIGN.md).
    if credentials is None or not credentials.credentials:
        raise MissingToken()

    try:
        identity = decode_access_token(credentials.credentials, settings)
    except InvalidToken:
        logger.info("Token rejeitado em %s", request.url.path)
        raise

    request.state.identity = identity
    return identity
