"""
Exceções de domínio
===================

Cada erro sabe seu status HTTP; os handlers em `barberpro.main` só
convertem para `{"detail": ...}`.

    MarketplaceError
    ├── MissingField          400
    ├── DuplicateEmail        400
    ├── NoFileProvided        400
    ├── GalleryFull           400
    ├── InvalidCredentials    401
    ├── MissingToken          401
    ├── InvalidToken          401
    ├── NotFound              404
    │   ├── ProfessionalNotFound
    │   └── ClientNotFound
    ├── FileTooLarge          413
    └── UnexpectedFailure     500
"""

from typing import Dict, Optional

from fastapi import status


class MarketplaceError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    message: str = "Erro inesperado."
    headers: Optional[Dict[str, str]] = None

    def __init__(self, message: Optional[str] = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"detail": self.message}


class MissingField(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Campos obrigatórios faltando."

    def __init__(self, field: Optional[str] = None):
        super().__init__()
        self.field = field


class DuplicateEmail(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "E-mail já cadastrado. Faça login ou use outro e-mail."


class NoFileProvided(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Nenhuma foto enviada."


class GalleryFull(MarketplaceError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, limit: int = 6):
        self.limit = limit
        super().__init__(f"Máximo de {limit} fotos por profissional.")


class InvalidCredentials(MarketplaceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Credenciais inválidas"


class MissingToken(MarketplaceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Token ausente"
    headers = {"WWW-Authenticate": "Bearer"}


class InvalidToken(MarketplaceError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Token inválido"
    headers = {"WWW-Authenticate": "Bearer"}


class NotFound(MarketplaceError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Registro não encontrado."


class ProfessionalNotFound(NotFound):
    message = "Profissional não encontrado."


class ClientNotFound(NotFound):
    message = "Cliente não encontrado."


class FileTooLarge(MarketplaceError):
    status_code = 413

    def __init__(self, max_mb: int):
        self.max_mb = max_mb
        super().__init__(f"Arquivo muito grande. Máximo: {max_mb}MB.")


class UnexpectedFailure(MarketplaceError):
    pass
