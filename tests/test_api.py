from datetime import timedelta

from sqlmodel import Session

from app.auth.jwt import create_access_token
from app.model.base import utc_now
from app.repository import invite as invite_repo
from tests.factories import TEST_PASSWORD, bearer


def _register(client, email, name="Usuário"):
    res = client.post("/api/auth/register", json={"email": email, "password": TEST_PASSWORD, "name": name})
    assert res.status_code == 201, res.text
    return res.json()["data"]


def _login(client, email, password=TEST_PASSWORD):
    res = client.post("/api/auth/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["data"]


def _sindico_token(client, email="sindico@example.com", cnpj="11.111.111/0001-11"):
    """Registra, cria condomínio e devolve (token com tenant ativo, tenant_id)."""
    _register(client, email, name="Síndico")
    orphan = _login(client, email)["token"]
    res = client.post(
        "/api/tenants/create",
        json={"name": "Condomínio Azul", "cnpj": cnpj},
        headers=bearer(orphan),
    )
    assert res.status_code == 201, res.text
    tenant_id = res.json()["data"]["id"]
    res = client.post(f"/api/auth/switch-tenant/{tenant_id}", headers=bearer(orphan))
    assert res.status_code == 200, res.text
    return res.json()["data"]["token"], tenant_id


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json()["status"] == "healthy"


def test_register_hides_password_hash(client):
    data = _register(client, "ana@example.com")
    assert data["email"] == "ana@example.com"
    assert "password_hash" not in data


def test_register_duplicate_email_is_bad_request(client):
    _register(client, "ana@example.com")
    res = client.post(
        "/api/auth/register", json={"email": "ana@example.com", "password": TEST_PASSWORD, "name": "Ana"}
    )
    assert res.status_code == 400
    assert res.json() == {"error": "Bad Request", "message": "email already registered"}


def test_invalid_body_uses_error_envelope(client):
    res = client.post("/api/auth/register", json={"email": "not-an-email", "password": "x"})
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "Bad Request"
    assert body["message"]


def test_bad_credentials_are_unauthorized(client):
    _register(client, "ana@example.com")
    res = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "errada"})
    assert res.status_code == 401
    assert res.json() == {"error": "Unauthorized", "message": "invalid email or password"}


def test_missing_and_invalid_token(client):
    res = client.get("/api/units")
    assert res.status_code == 401
    assert res.json()["error"] == "Unauthorized"

    res = client.get("/api/units", headers=bearer("garbage"))
    assert res.status_code == 401
    assert res.json()["message"] == "invalid or expired token"


def test_orphan_token_cannot_reach_tenant_routes(client):
    _register(client, "ana@example.com")
    token = _login(client, "ana@example.com")["token"]

    res = client.get("/api/units", headers=bearer(token))
    assert res.status_code == 403
    assert res.json()["error"] == "Forbidden"

    # Rotas que não exigem tenant ativo
    assert client.get("/api/users/me/tenants", headers=bearer(token)).status_code == 200
    assert client.get("/api/invites/me", headers=bearer(token)).status_code == 200
    assert client.get("/api/account", headers=bearer(token)).status_code == 200


def test_admin_routes_require_admin_role(client, settings):
    token, _ = _sindico_token(client)
    res = client.get("/api/tenants", headers=bearer(token))
    assert res.status_code == 403

    admin_token = create_access_token(settings.jwt, user_id=1, email="admin@example.com", tenant_id=1, role="admin")
    res = client.post("/api/tenants", json={"name": "Beta", "cnpj": "22"}, headers=bearer(admin_token))
    assert res.status_code == 201
    tenant_id = res.json()["data"]["id"]

    res = client.get("/api/tenants", headers=bearer(admin_token))
    assert {t["cnpj"] for t in res.json()["data"]} == {"11.111.111/0001-11", "22"}

    res = client.put(f"/api/tenants/{tenant_id}", json={"name": "Beta II"}, headers=bearer(admin_token))
    assert res.json()["data"]["name"] == "Beta II"

    res = client.get("/api/tenants/cnpj/22", headers=bearer(admin_token))
    assert res.json()["data"]["id"] == tenant_id

    res = client.delete(f"/api/tenants/{tenant_id}", headers=bearer(admin_token))
    assert res.json() == {"message": "tenant deleted successfully"}
    assert client.get(f"/api/tenants/{tenant_id}", headers=bearer(admin_token)).status_code == 404


def test_self_service_tenant_then_invite_flow(client, email_sender):
    token, tenant_id = _sindico_token(client)

    res = client.post("/api/invites", json={"email": "novo@example.com", "role": "morador"}, headers=bearer(token))
    assert res.status_code == 201, res.text
    invite = res.json()["data"]
    assert invite["status"] == "pending"
    assert invite["tenant_id"] == tenant_id

    # Email enviado em background com o link do convite
    assert len(email_sender.sent) == 1
    assert email_sender.sent[0]["to"] == "novo@example.com"
    assert f"http://app.test/invites/{invite['token']}" in email_sender.sent[0]["html"]

    res = client.post("/api/invites", json={"email": "novo@example.com", "role": "morador"}, headers=bearer(token))
    assert res.status_code == 400

    public = client.get(f"/api/invites/{invite['token']}").json()["data"]
    assert public["tenant_name"] == "Condomínio Azul"

    res = client.post(
        f"/api/invites/{invite['token']}/accept",
        json={"name": "Novo Morador", "password": "novasenha"},
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["email"] == "novo@example.com"

    login = _login(client, "novo@example.com", password="novasenha")
    assert login["token"]
    assert login["requires_tenant_selection"] is False

    tenant_invites = client.get("/api/tenants/invites", headers=bearer(token)).json()["data"]
    assert [i["status"] for i in tenant_invites] == ["accepted"]


def test_invite_email_failure_does_not_fail_request(client, email_sender):
    token, _ = _sindico_token(client)
    email_sender.fail = True
    res = client.post("/api/invites", json={"email": "novo@example.com", "role": "morador"}, headers=bearer(token))
    assert res.status_code == 201


def test_expired_invite_reports_expired_status(client, engine):
    token, _ = _sindico_token(client)
    invite = client.post(
        "/api/invites", json={"email": "novo@example.com", "role": "morador"}, headers=bearer(token)
    ).json()["data"]

    with Session(engine) as session:
        row = invite_repo.get_by_token(session, invite["token"])
        row.expires_at = utc_now() - timedelta(days=1)
        session.add(row)
        session.commit()

    assert client.get(f"/api/invites/{invite['token']}").json()["data"]["status"] == "expired"
    res = client.post(f"/api/invites/{invite['token']}/accept", json={"name": "X", "password": "123456"})
    assert res.status_code == 400
    assert res.json()["message"] == "invite has expired"


def test_cancel_invite(client):
    token, _ = _sindico_token(client)
    invite = client.post(
        "/api/invites", json={"email": "novo@example.com", "role": "morador"}, headers=bearer(token)
    ).json()["data"]

    res = client.delete(f"/api/invites/{invite['id']}", headers=bearer(token))
    assert res.json() == {"message": "invite cancelled successfully"}

    res = client.post(f"/api/invites/{invite['token']}/accept", json={"name": "X", "password": "123456"})
    assert res.json()["message"] == "invite is cancelled"


def test_units_are_scoped_to_token_tenant(client):
    token_a, tenant_a = _sindico_token(client, "a@example.com", cnpj="1")
    token_b, _ = _sindico_token(client, "b@example.com", cnpj="2")

    res = client.post("/api/units", json={"number": "101", "block": "A"}, headers=bearer(token_a))
    assert res.status_code == 201
    unit_id = res.json()["data"]["id"]
    assert res.json()["data"]["tenant_id"] == tenant_a

    assert client.post("/api/units", json={"number": "101"}, headers=bearer(token_b)).status_code == 201
    assert client.post("/api/units", json={"number": "101"}, headers=bearer(token_a)).status_code == 400

    assert client.get(f"/api/units/{unit_id}", headers=bearer(token_b)).status_code == 404
    assert client.put(f"/api/units/{unit_id}", json={"block": "Z"}, headers=bearer(token_b)).status_code == 404

    res = client.get("/api/units/number/101", headers=bearer(token_a))
    assert res.json()["data"]["id"] == unit_id

    res = client.get("/api/units", params={"block": "A"}, headers=bearer(token_a))
    assert [u["number"] for u in res.json()["data"]] == ["101"]

    assert client.delete(f"/api/units/{unit_id}", headers=bearer(token_a)).status_code == 200
    assert client.get(f"/api/units/{unit_id}", headers=bearer(token_a)).status_code == 404


def test_users_list_and_membership_routes(client):
    token, tenant_id = _sindico_token(client)
    invite = client.post(
        "/api/invites", json={"email": "novo@example.com", "role": "morador"}, headers=bearer(token)
    ).json()["data"]
    client.post(f"/api/invites/{invite['token']}/accept", json={"name": "Novo", "password": "novasenha"})

    res = client.get("/api/users", params={"page": 1, "per_page": 1}, headers=bearer(token))
    body = res.json()
    assert body["total"] == 2
    assert body["page"] == 1
    assert body["per_page"] == 1
    assert body["total_pages"] == 2
    assert len(body["data"]) == 1

    morador = client.get("/api/users", params={"search": "novo"}, headers=bearer(token)).json()["data"][0]
    assert morador["role"] == "morador"

    # Morador não pode alterar vínculos
    morador_token = _login(client, "novo@example.com", password="novasenha")["token"]
    res = client.patch(
        f"/api/users/{morador['id']}/membership", json={"is_active": False}, headers=bearer(morador_token)
    )
    assert res.status_code == 403

    res = client.patch(f"/api/users/{morador['id']}/membership", json={"is_active": False}, headers=bearer(token))
    assert res.status_code == 200
    assert res.json()["data"]["is_active"] is False

    res = client.delete(f"/api/users/{morador['id']}", headers=bearer(token))
    assert res.status_code == 200
    assert client.get(f"/api/users/{morador['id']}", headers=bearer(token)).status_code == 404


def test_documents_upload_download_move(client, storage):
    token, tenant_id = _sindico_token(client)
    folder = client.post("/api/folders", json={"name": "Atas"}, headers=bearer(token)).json()["data"]

    res = client.post(
        "/api/documents/upload",
        files={"file": ("ata.pdf", b"%PDF-1.4 conteudo", "application/pdf")},
        data={"folder_id": str(folder["id"])},
        headers=bearer(token),
    )
    assert res.status_code == 201, res.text
    document = res.json()["data"]
    assert document["folder_id"] == folder["id"]
    assert document["content_type"] == "application/pdf"
    assert len(storage.objects) == 1

    res = client.get(f"/api/documents/{document['id']}/download", headers=bearer(token))
    link = res.json()["data"]
    assert link["expires_in"] == 900
    assert link["url"].startswith("https://storage.test/tenants/")

    res = client.patch(f"/api/documents/{document['id']}/move", json={"folder_id": None}, headers=bearer(token))
    assert res.json()["data"]["folder_id"] is None

    listed = client.get("/api/documents", params={"folder_id": folder["id"]}, headers=bearer(token)).json()["data"]
    assert listed == []

    assert client.delete(f"/api/documents/{document['id']}", headers=bearer(token)).status_code == 200
    assert storage.objects == {}


def test_upload_too_large_is_rejected(client, storage):
    token, _ = _sindico_token(client)
    res = client.post(
        "/api/documents/upload",
        files={"file": ("grande.bin", b"x" * (10 * 1024 * 1024 + 1), "application/octet-stream")},
        headers=bearer(token),
    )
    assert res.status_code == 400
    assert res.json()["message"] == "file size exceeds maximum of 10MB"
    assert storage.objects == {}


def test_account_routes(client):
    _register(client, "ana@example.com", name="Ana")
    token = _login(client, "ana@example.com")["token"]

    res = client.patch("/api/account", json={"name": "Ana Maria", "phone": "1199"}, headers=bearer(token))
    assert res.json()["data"]["name"] == "Ana Maria"

    res = client.patch(
        "/api/account/password",
        json={"old_password": TEST_PASSWORD, "new_password": "outrasenha"},
        headers=bearer(token),
    )
    assert res.json() == {"message": "password updated successfully"}
    _login(client, "ana@example.com", password="outrasenha")


def test_login_with_tenant_selection(client):
    token, tenant_id = _sindico_token(client)
    single = _login(client, "sindico@example.com")
    # Um único tenant ativo: token direto, sem seleção
    assert single["token"]
    assert single["requires_tenant_selection"] is False

    res = client.post(
        "/api/tenants/create",
        json={"name": "Segundo", "cnpj": "99"},
        headers=bearer(token),
    )
    assert res.status_code == 201

    choice = _login(client, "sindico@example.com")
    assert choice["token"] is None
    assert choice["requires_tenant_selection"] is True
    assert len(choice["tenants"]) == 2

    res = client.post(
        f"/api/auth/login/tenant/{tenant_id}",
        json={"email": "sindico@example.com", "password": TEST_PASSWORD},
    )
    assert res.status_code == 200
    assert res.json()["data"]["token"]


def test_unit_update_with_null_clears_field(client):
    token, _ = _sindico_token(client)
    unit = client.post(
        "/api/units", json={"number": "101", "block": "A", "owner_name": "Maria"}, headers=bearer(token)
    ).json()["data"]

    res = client.put(f"/api/units/{unit['id']}", json={"block": None}, headers=bearer(token))
    assert res.status_code == 200
    assert res.json()["data"]["block"] is None
    assert res.json()["data"]["owner_name"] == "Maria"
