from typing import Callable, Dict, Generator

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from barberpro.config import Settings
from barberpro.database import create_db_and_tables, make_engine
from barberpro.main import create_app
from barberpro.services.uploads import UploadBinder


ANA = {
    "name": "Ana",
    "profession": "Barber",
    "specialties": "fade",
    "whatsapp": "+551199999999",
    "email": "ana@x.com",
    "password": "secret1",
}

BRUNO = {
    "name": "Bruno",
    "whatsapp": "+551188888888",
    "email": "bruno@x.com",
    "password": "secret2",
}


@pytest.fixture
def settings(tmp_path) -> Settings:
    """In-memory database and a throwaway upload directory; no .env lookup."""
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        jwt_secret="test-secret",
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app) -> Generator[TestClient, None, None]:
    # context manager runs the lifespan, which creates the tables
    with TestClient(app) as c:
        yield c


@pytest.fixture
def session(settings) -> Generator[Session, None, None]:
    engine = make_engine(settings)
    create_db_and_tables(engine)
    with Session(engine) as s:
        yield s
    engine.dispose()


@pytest.fixture
def binder(settings) -> UploadBinder:
    return UploadBinder.from_settings(settings)


def auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register_professional(client) -> Callable[..., dict]:
    def _register(**overrides) -> dict:
        payload = {**ANA, **overrides}
        response = client.post("/auth/register-professional", json=payload)
        assert response.status_code == 200, response.text
        return response.json()

    return _register


@pytest.fixture
def register_client(client) -> Callable[..., dict]:
    def _register(**overrides) -> dict:
        payload = {**BRUNO, **overrides}
        response = client.post("/auth/register-client", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return _register
