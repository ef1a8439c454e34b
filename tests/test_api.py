import time

import pytest

from database.db_manager import add_account, list_accounts

RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


@pytest.fixture()
def frozen_time(monkeypatch):
    monkeypatch.setattr(time, "time", lambda: 59.0)


def _create(client, **body):
    return client.post("/api/accounts", json=body)


def test_create_and_list_account(client, frozen_time):
    resp = _create(client, label="RFC", secret=RFC_SECRET, issuer="Example")
    assert resp.status_code == 201
    assert resp.get_json()["success"] is True
    account_id = resp.get_json()["id"]

    resp = client.get("/api/accounts")
    assert resp.status_code == 200
    assert resp.get_json() == [{
        "id": account_id,
        "label": "RFC",
        "issuer": "Example",
        "secret": RFC_SECRET,
        "code": "287082",
        "remaining": 1,
        "period": 30,
    }]


def test_create_normalizes_secret_and_label(client, db_path):
    resp = _create(client, label="  GitHub ", secret="jbsw y3dp ehpk 3pxp")
    assert resp.status_code == 201

    [account] = list_accounts(db_path=db_path)
    assert account["label"] == "GitHub"
    assert account["secret"] == "JBSWY3DPEHPK3PXP"
    assert account["issuer"] == ""


@pytest.mark.parametrize("body", [
    {},
    {"label": "GitHub"},
    {"secret": RFC_SECRET},
    {"label": "   ", "secret": RFC_SECRET},
    {"label": "GitHub", "secret": "   "},
])
def test_create_requires_label_and_secret(client, body):
    resp = _create(client, **body)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Label and secret are required"}


def test_create_without_json_body(client):
    resp = client.post("/api/accounts", data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_create_rejects_invalid_secret(client, db_path):
    resp = _create(client, label="Broken", secret="!!!!")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid secret key"}
    assert list_accounts(db_path=db_path) == []


def test_list_marks_unusable_stored_secret(client, db_path):
    add_account("Broken", "!!!!", db_path=db_path)
    resp = client.get("/api/accounts")
    assert resp.status_code == 200
    [account] = resp.get_json()
    assert account["code"] is None


def test_list_empty(client):
    assert client.get("/api/accounts").get_json() == []


def test_delete_account(client, db_path):
    account_id = _create(client, label="RFC", secret=RFC_SECRET).get_json()["id"]

    resp = client.delete(f"/api/accounts/{account_id}")
    assert resp.status_code == 200
    assert resp.get_json() == {"success": True}
    assert list_accounts(db_path=db_path) == []

    resp = client.delete(f"/api/accounts/{account_id}")
    assert resp.status_code == 404
    assert "not found" in resp.get_json()["error"]


def test_account_code(client, frozen_time):
    account_id = _create(client, label="RFC", secret=RFC_SECRET).get_json()["id"]
    resp = client.get(f"/api/accounts/{account_id}/code")
    assert resp.get_json() == {"id": account_id, "code": "287082", "remaining": 1, "period": 30}


def test_unknown_account_is_404(client):
    for suffix in ("code", "otpauth_uri", "qr_code"):
        resp = client.get(f"/api/accounts/999/{suffix}")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Account 999 not found"}


def test_account_otpauth_uri(client):
    account_id = _create(client, label="alice", secret="JBSWY3DPEHPK3PXP",
                         issuer="ACME").get_json()["id"]
    resp = client.get(f"/api/accounts/{account_id}/otpauth_uri")
    assert resp.get_json()["uri"] == (
        "otpauth://totp/ACME:alice?secret=JBSWY3DPEHPK3PXP&issuer=ACME"
        "&algorithm=SHA1&digits=6&period=30"
    )


def test_account_qr_code(client):
    account_id = _create(client, label="alice", secret="JBSWY3DPEHPK3PXP").get_json()["id"]
    resp = client.get(f"/api/accounts/{account_id}/qr_code")
    assert resp.status_code == 200
    assert resp.get_json()["qr_code"].startswith("data:image/png;base64,")


def test_generate_secret(client):
    resp = client.post("/api/secrets")
    secret = resp.get_json()["secret"]
    assert len(secret) == 32
    assert _create(client, label="New", secret=secret).status_code == 201


def test_unknown_route_returns_json(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_index_lists_endpoints(client):
    endpoints = client.get("/").get_json()["endpoints"]
    assert "GET /api/accounts" in endpoints
    assert "POST /api/accounts" in endpoints
    assert "DELETE /api/accounts/<int:account_id>" in endpoints


def test_config_from_environment(monkeypatch, tmp_path):
    from backend.app import create_app

    path = str(tmp_path / "env.db")
    monkeypatch.setenv("AUTHENTICATOR_DATABASE", path)
    app = create_app()
    assert app.config["DATABASE"] == path


@pytest.mark.parametrize("body", [[1, 2], "x", 5, None])
def test_create_rejects_non_object_json(client, db_path, body):
    resp = client.post("/api/accounts", json=body)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Label and secret are required"}
    assert list_accounts(db_path=db_path) == []
