"""
Configuração da aplicação
=========================

Tudo que vem do ambiente (.env ou variáveis) passa por aqui. O objeto
`Settings` é construído uma vez no start do processo e entregue para
`create_app`, que repassa para banco, tokens e uploads.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL


DEFAULT_JWT_SECRET = "barberprosecret"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # =========================
    # BANCO DE DADOS
    # =========================
    database_url: Optional[str] = Field(
        default=None,
        description="URL SQLAlchemy completa. Tem prioridade sobre os DB_*",
    )
    db_dialect: str = "sqlite"
    db_host: Optional[str] = None
    db_port: Optional[int] = None
    db_name: Optional[str] = None
    db_user: Optional[str] = None
    db_pass: Optional[str] = None

    # =========================
    # JWT
    # =========================
    # sem JWT_SECRET no ambiente cai no segredo fixo (fraco, mas é o comportamento conhecido)
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = Field(default=120, ge=1)

    # =========================
    # UPLOADS
    # =========================
    upload_dir: str = "uploads"
    max_upload_size_mb: int = Field(default=10, ge=1)
    max_gallery_photos: int = Field(default=6, ge=1)

    # =========================
    # SERVIDOR
    # =========================
    cors_origins: List[str] = ["https://click-beatiful.netlify.app"]
    host: str = "0.0.0.0"
    port: int = 3000
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url

        if self.db_name:
            drivername = self.db_dialect
            if drivername == "postgres":
                drivername = "postgresql"
            return URL.create(
                drivername=drivername,
                username=self.db_user,
                password=self.db_pass,
                host=self.db_host,
                port=self.db_port,
                database=self.db_name,
            ).render_as_string(hide_password=False)

        return "sqlite:///./barberpro.db"

    @property
    def max_upload_size_bytes(self) -> int:
        return self.max_upload_size_mb * 1024 * 1024

    @property
    def uses_default_secret(self) -> bool:
        return self.jwt_secret == DEFAULT_JWT_SECRET


@lru_cache()
def get_settings() -> Settings:
    """Settings do processo (lidas uma vez). Em testes use `get_settings.cache_clear()`."""
    return Settings()
