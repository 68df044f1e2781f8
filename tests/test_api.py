from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from barberpro.core.exceptions import FileTooLarge
from barberpro.core.security import create_access_token
from barberpro.main import create_app
from barberpro.models.auth import PROFESSIONAL, Identity

from conftest import ANA, BRUNO, auth_headers


def _photo(name: str, content: bytes = b"jpeg"):
    return (name, content, "image/jpeg")


# =========================
# CENÁRIOS PONTA A PONTA
# =========================

def test_register_login_and_fetch_professional(client):
    register = client.post("/auth/register-professional", json=ANA)
    assert register.status_code == 200
    body = register.json()
    assert body["token"]
    assert body["profissional"]["email"] == "ana@x.com"
    assert "password" not in body["profissional"]
    assert "password_hash" not in body["profissional"]
    professional_id = body["profissional"]["id"]

    login = client.post("/auth/login-professional", json={"email": "ana@x.com", "password": "secret1"})
    assert login.status_code == 200
    token = login.json()["token"]
    assert token

    detail = client.get(f"/professionals/{professional_id}", headers=auth_headers(token))
    assert detail.status_code == 200
    assert detail.json()["photos"] == []
    assert detail.json()["name"] == "Ana"
    assert detail.json()["profilePhoto"] is None


def test_six_photos_then_gallery_full(client, register_professional):
    body = register_professional()
    professional_id = body["profissional"]["id"]
    headers = auth_headers(body["token"])

    files = [("photos", _photo(f"foto{i}.jpg")) for i in range(6)]
    response = client.post(f"/professionals/{professional_id}/photos", files=files, headers=headers)
    assert response.status_code == 200
    urls = response.json()["photoUrls"]
    assert len(urls) == 6

    extra = client.post(
        f"/professionals/{professional_id}/photos",
        files=[("photos", _photo("extra.jpg"))],
        headers=headers,
    )
    assert extra.status_code == 400
    assert extra.json() == {"detail": "Máximo de 6 fotos por profissional."}

    detail = client.get(f"/professionals/{professional_id}", headers=headers)
    assert [p["url"] for p in detail.json()["photos"]] == urls


def test_four_then_three_photos_keeps_original_four(client, register_professional):
    body = register_professional()
    professional_id = body["profissional"]["id"]
    headers = auth_headers(body["token"])

    first = client.post(
        f"/professionals/{professional_id}/photos",
        files=[("photos", _photo(f"a{i}.jpg")) for i in range(4)],
        headers=headers,
    )
    assert len(first.json()["photoUrls"]) == 4

    second = client.post(
        f"/professionals/{professional_id}/photos",
        files=[("photos", _photo(f"b{i}.jpg")) for i in range(3)],
        headers=headers,
    )
    assert second.status_code == 400

    detail = client.get(f"/professionals/{professional_id}", headers=headers)
    assert [p["url"] for p in detail.json()["photos"]] == first.json()["photoUrls"]


# =========================
# CADASTRO / LOGIN
# =========================

def test_register_professional_twice(client, register_professional):
    register_professional()
    response = client.post("/auth/register-professional", json=ANA)
    assert response.status_code == 400
    assert response.json() == {"detail": "E-mail já cadastrado. Faça login ou use outro e-mail."}


def test_register_professional_missing_field(client):
    payload = {k: v for k, v in ANA.items() if k != "whatsapp"}
    response = client.post("/auth/register-professional", json=payload)
    assert response.status_code == 400
    assert response.json() == {"detail": "Campos obrigatórios faltando."}


def test_register_professional_blank_field(client):
    response = client.post("/auth/register-professional", json={**ANA, "name": ""})
    assert response.status_code == 400
    assert response.json() == {"detail": "Campos obrigatórios faltando."}


def test_register_client_returns_201(client):
    response = client.post("/auth/register-client", json=BRUNO)
    assert response.status_code == 201
    body = response.json()
    assert body["token"]
    assert body["cliente"]["email"] == "bruno@x.com"
    assert "password_hash" not in body["cliente"]


def test_register_client_duplicate(client, register_client):
    register_client()
    response = client.post("/auth/register-client", json=BRUNO)
    assert response.status_code == 400


def test_client_and_professional_may_share_email(client, register_professional):
    register_professional()
    response = client.post("/auth/register-client", json={**BRUNO, "email": ANA["email"]})
    assert response.status_code == 201


def test_login_failures_are_indistinguishable(client, register_client):
    register_client()

    wrong_password = client.post("/auth/login-client", json={"email": "bruno@x.com", "password": "nope"})
    unknown_email = client.post("/auth/login-client", json={"email": "fulano@x.com", "password": "secret2"})

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Credenciais inválidas"}


def test_login_client(client, register_client):
    created = register_client()
    response = client.post("/auth/login-client", json={"email": "BRUNO@x.com", "password": "secret2"})
    assert response.status_code == 200
    assert response.json()["cliente"]["id"] == created["cliente"]["id"]


# =========================
# AUTH GATEWAY
# =========================

def test_protected_route_without_token(client):
    response = client.get("/professionals")
    assert response.status_code == 401
    assert response.json() == {"detail": "Token ausente"}
    assert response.headers["www-authenticate"] == "Bearer"


@pytest.mark.parametrize("header", ["Bearer abc", "Bearer a.b.c"])
def test_protected_route_with_bad_token(client, header):
    response = client.get("/professionals", headers={"Authorization": header})
    assert response.status_code == 401
    assert response.json() == {"detail": "Token inválido"}


def test_protected_route_with_expired_token(client, settings, register_professional):
    body = register_professional()
    expired = create_access_token(
        Identity(id=body["profissional"]["id"], kind=PROFESSIONAL),
        settings,
        expires_delta=timedelta(seconds=-1),
    )
    response = client.get("/professionals", headers=auth_headers(expired))
    assert response.status_code == 401
    assert response.json() == {"detail": "Token inválido"}


def test_any_valid_token_reaches_other_accounts(client, register_professional, register_client):
    # comportamento conhecido: o guard não confere dono do {id}
    professional = register_professional()
    client_body = register_client()

    response = client.post(
        f"/professionals/{professional['profissional']['id']}/photos",
        files=[("photos", _photo("intruso.jpg"))],
        headers=auth_headers(client_body["token"]),
    )
    assert response.status_code == 200


# =========================
# LISTAGEM / DETALHE
# =========================

def test_list_professionals(client, register_professional):
    ana = register_professional()
    register_professional(name="Carla", email="carla@x.com")

    response = client.get("/professionals", headers=auth_headers(ana["token"]))
    assert response.status_code == 200
    assert [p["name"] for p in response.json()] == ["Ana", "Carla"]
    assert all("email" not in p and "password_hash" not in p for p in response.json())


def test_professional_not_found(client, register_professional):
    token = register_professional()["token"]
    response = client.get("/professionals/999", headers=auth_headers(token))
    assert response.status_code == 404
    assert response.json() == {"detail": "Profissional não encontrado."}


def test_client_detail_has_no_password(client, register_client):
    body = register_client()
    client_id = body["cliente"]["id"]

    response = client.get(f"/clients/{client_id}", headers=auth_headers(body["token"]))
    assert response.status_code == 200
    assert set(response.json()) == {"id", "name", "whatsapp", "email", "profilePhoto"}


def test_client_not_found(client, register_client):
    token = register_client()["token"]
    response = client.get("/clients/999", headers=auth_headers(token))
    assert response.status_code == 404


# =========================
# UPLOADS
# =========================

def test_professional_profile_photo_is_served(client, register_professional):
    body = register_professional()
    professional_id = body["profissional"]["id"]
    headers = auth_headers(body["token"])

    response = client.post(
        f"/professionals/{professional_id}/profile-photo",
        files={"profilePhoto": _photo("rosto.jpg", b"conteudo")},
        headers=headers,
    )
    assert response.status_code == 200
    url = response.json()["profilePhoto"]
    assert url.startswith(f"/uploads/professionals/{professional_id}/")

    served = client.get(url)
    assert served.status_code == 200
    assert served.content == b"conteudo"

    detail = client.get(f"/professionals/{professional_id}", headers=headers)
    assert detail.json()["profilePhoto"] == url


def test_client_profile_photo(client, register_client):
    body = register_client()
    client_id = body["cliente"]["id"]
    headers = auth_headers(body["token"])

    response = client.post(
        f"/clients/{client_id}/profile-photo",
        files={"profilePhoto": _photo("eu.jpg")},
        headers=headers,
    )
    assert response.status_code == 200
    url = response.json()["profilePhoto"]
    assert url.startswith(f"/uploads/clients/{client_id}/")

    detail = client.get(f"/clients/{client_id}", headers=headers)
    assert detail.json()["profilePhoto"] == url


def test_profile_photo_without_file(client, register_professional):
    body = register_professional()
    professional_id = body["profissional"]["id"]
    headers = auth_headers(body["token"])

    response = client.post(f"/professionals/{professional_id}/profile-photo", headers=headers)
    assert response.status_code == 400
    assert response.json() == {"detail": "Nenhuma foto enviada."}

    detail = client.get(f"/professionals/{professional_id}", headers=headers)
    assert detail.json()["profilePhoto"] is None


def test_gallery_without_files(client, register_professional):
    body = register_professional()
    response = client.post(
        f"/professionals/{body['profissional']['id']}/photos",
        headers=auth_headers(body["token"]),
    )
    assert response.status_code == 400
    assert response.json() == {"detail": "Nenhuma foto enviada."}


def test_gallery_for_unknown_professional(client, register_professional):
    token = register_professional()["token"]
    response = client.post(
        "/professionals/999/photos",
        files=[("photos", _photo("a.jpg"))],
        headers=auth_headers(token),
    )
    assert response.status_code == 404


def test_oversized_upload_is_rejected(settings):
    small = settings.model_copy(update={"max_upload_size_mb": 1})
    with TestClient(create_app(small)) as client:
        body = client.post("/auth/register-client", json=BRUNO).json()
        response = client.post(
            f"/clients/{body['cliente']['id']}/profile-photo",
            files={"profilePhoto": _photo("grande.jpg", b"x" * (1024 * 1024 + 1))},
            headers=auth_headers(body["token"]),
        )

    assert response.status_code == 413
    assert response.json() == {"detail": "Arquivo muito grande. Máximo: 1MB."}


def test_payload_too_large_status():
    assert FileTooLarge(10).status_code == 413
    assert FileTooLarge(10).to_dict() == {"detail": "Arquivo muito grande. Máximo: 10MB."}


# =========================
# CORS
# =========================

def test_cors_preflight_from_allowed_origin(client):
    response = client.options(
        "/professionals",
        headers={
            "Origin": "https://click-beatiful.netlify.app",
            "Access-Control-Request-Method": "GET",
            "Access-Control-Request-Headers": "Authorization",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://click-beatiful.netlify.app"
    assert "GET" in response.headers["access-control-allow-methods"]


def test_cors_preflight_from_other_origin_is_refused(client):
    response = client.options(
        "/professionals",
        headers={"Origin": "https://outro.example.com", "Access-Control-Request-Method": "GET"},
    )

    assert response.status_code == 400
    assert "access-control-allow-origin" not in response.headers



# =========================
# ERROS INESPERADOS
# =========================

def test_unexpected_failure_is_generic_500(settings, monkeypatch):
    from barberpro.services import accounts

    def explode(session):
        raise RuntimeError("senha do banco: hunter2")

    monkeypatch.setattr(accounts, "list_professionals", explode)

    app = create_app(settings)
    with TestClient(app, raise_server_exceptions=False) as client:
        token = client.post("/auth/register-professional", json=ANA).json()["token"]
        response = client.get("/professionals", headers=auth_headers(token))

    assert response.status_code == 500
    assert response.json() == {"detail": "Erro inesperado."}
    assert "hunter2" not in response.text


def test_root(client):
    assert client.get("/").status_code == 200
