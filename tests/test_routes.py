import pytest

from database import MemoryStore
from totp_engine import Authenticator


def enroll(client, **body):
    body.setdefault("account", "alice@example.com")
    return client.post("/api/enroll", json=body)


def test_index_lists_endpoints(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert "/api/verify" in resp.get_json()["endpoints"]


def test_enroll(client):
    resp = enroll(client, issuer="MyApp")
    assert resp.status_code == 201
    data = resp.get_json()
    assert data["account"] == "alice@example.com"
    assert data["issuer"] == "MyApp"
    assert len(data["secret"]) == 32
    assert data["otpauth_uri"].startswith("otpauth://totp/MyApp:alice%40example.com?secret=" + data["secret"])


def test_enroll_uses_configured_issuer(client):
    data = enroll(client).get_json()
    assert data["issuer"] == "TOTP Demo"
    assert "issuer=TOTP%20Demo" in data["otpauth_uri"]


@pytest.mark.parametrize("body", [{}, {"account": ""}, {"account": "   "}, {"account": 5}])
def test_enroll_requires_account(client, body):
    resp = client.post("/api/enroll", json=body)
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "account is required"}


def test_enroll_rejects_non_string_issuer(client):
    resp = enroll(client, issuer=["x"])
    assert resp.status_code == 400


def test_endpoints_before_enrollment(client):
    for path in ("/api/totp", "/api/breakdown", "/api/otpauth_uri"):
        resp = client.get(path)
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "no account enrolled"}


def test_totp_and_breakdown(client):
    enroll(client)
    data = client.get("/api/totp").get_json()
    assert len(data["code"]) == 6 and data["code"].isdigit()
    assert 1 <= data["remaining"] <= 30
    assert data["period"] == 30
    assert data["digits"] == 6

    b = client.get("/api/breakdown").get_json()
    assert set(b) == {"counter", "counter_bytes", "hmac", "offset", "truncated", "code"}
    assert len(b["hmac"]) == 40
    assert 0 <= b["offset"] <= 15


def test_otpauth_uri(client):
    secret = enroll(client, issuer="MyApp").get_json()["secret"]
    uri = client.get("/api/otpauth_uri").get_json()["otpauth_uri"]
    assert f"secret={secret}" in uri
    assert "issuer=MyApp" in uri


def test_verify_then_replay(client):
    enroll(client)
    code = client.get("/api/totp").get_json()["code"]

    first = client.post("/api/verify", json={"code": code})
    assert first.get_json() == {"valid": True, "verdict": "accepted"}

    second = client.post("/api/verify", json={"code": code})
    assert second.get_json() == {"valid": False, "verdict": "replay"}


def test_clear_used_codes(client):
    enroll(client)
    code = client.get("/api/totp").get_json()["code"]
    client.post("/api/verify", json={"code": code})

    assert client.delete("/api/used_codes").get_json() == {"cleared": True}
    assert client.post("/api/verify", json={"code": code}).get_json()["valid"] is True


def test_verify_wrong_code(client):
    enroll(client)
    code = client.get("/api/totp").get_json()["code"]
    wrong = "000000" if code != "000000" else "111111"
    data = client.post("/api/verify", json={"code": wrong}).get_json()
    assert data["valid"] is False


@pytest.mark.parametrize("body", [None, {}, {"code": ""}, {"code": 123456}])
def test_verify_requires_code(client, body):
    enroll(client)
    resp = client.post("/api/verify", json=body) if body is not None else client.post("/api/verify")
    assert resp.status_code == 400


def test_store_failure_gives_generic_503(app, client, broken_store):
    auth = Authenticator(broken_store)
    auth.enroll("alice", "MyApp")
    app.extensions["totp"] = auth

    code = client.get("/api/totp").get_json()["code"]
    resp = client.post("/api/verify", json={"code": code})
    assert resp.status_code == 503
    assert resp.get_json() == {"error": "verification failed"}


def test_core_error_gives_generic_400(app, client):
    store = MemoryStore()
    app.extensions["totp"] = Authenticator(store)
    resp = client.post("/api/enroll", json={"account": "alice", "issuer": "x"})
    assert resp.status_code == 201

    # the record is fine; provoke a validation error from the engine
    app.extensions["totp"].digits = 9
    resp = client.get("/api/totp")
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "verification failed"}


def test_config_from_mapping(tmp_path):
    from backend import create_app

    app = create_app({"DB_PATH": str(tmp_path / "x.db"), "DIGITS": 8, "STEP_SECONDS": 60, "SKEW_WINDOW": 2})
    auth = app.extensions["totp"]
    assert (auth.digits, auth.step_seconds, auth.window) == (8, 60, 2)
    assert auth.guard.retention_seconds == 300


def test_config_from_environment(tmp_path, monkeypatch):
    from backend import create_app

    monkeypatch.setenv("TOTP_SKEW_WINDOW", "0")
    monkeypatch.setenv("TOTP_DB_PATH", str(tmp_path / "env.db"))
    app = create_app()
    assert app.extensions["totp"].window == 0
    assert app.config["DB_PATH"] == str(tmp_path / "env.db")


def test_retention_from_environment_is_an_integer(tmp_path, monkeypatch):
    from backend import create_app

    monkeypatch.setenv("TOTP_RETENTION_SECONDS", "120")
    app = create_app({"DB_PATH": str(tmp_path / "env.db")})
    assert app.extensions["totp"].guard.retention_seconds == 120


def test_retention_string_from_mapping(tmp_path):
    from backend import create_app

    app = create_app({"DB_PATH": str(tmp_path / "x.db"), "RETENTION_SECONDS": "120"})
    assert app.extensions["totp"].guard.retention_seconds == 120
