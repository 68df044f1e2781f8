from typing import Iterator

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from barberpro.config import Settings


def make_engine(settings: Settings) -> Engine:
    url = settings.sqlalchemy_url

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        # banco em memória: todas as sessões precisam da mesma conexão
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    return create_engine(url, pool_pre_ping=True)


def create_db_and_tables(engine: Engine) -> None:
    # registra as tabelas no metadata antes do create_all
    from barberpro.models import client, photo, professional  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session(request: Request) -> Iterator[Session]:
    with Session(request.app.state.engine) as session:
        yield session
