from datetime import timedelta

import pytest

from errors import AuthenticationError, ValidationError
from security import create_access_token, decode_access_token, hash_password, verify_password


def _register(client, email="jane@devcamper.io", password="secret1", role="publisher"):
    return client.post(
        "/api/v1/auth/register",
        json={"name": "Jane", "email": email, "password": password, "role": role},
    )


def _bearer(token):
    return {"Authorization": f"Bearer {token}"}


def test_password_hashing():
    hashed = hash_password("secret1")
    assert hashed != "secret1"
    assert verify_password("secret1", hashed)
    assert not verify_password("wrong", hashed)


def test_password_policy():
    with pytest.raises(ValidationError):
        hash_password("short")


def test_token_round_trip_and_expiry():
    assert decode_access_token(create_access_token({"sub": "abc"})) == "abc"
    expired = create_access_token({"sub": "abc"}, expires_delta=timedelta(seconds=-1))
    with pytest.raises(AuthenticationError):
        decode_access_token(expired)
    with pytest.raises(AuthenticationError):
        decode_access_token("garbage")


def test_register_login_and_me(auth_client, store):
    resp = _register(auth_client)
    assert resp.status_code == 201
    token = resp.json()["access_token"]

    me = auth_client.get("/api/v1/auth/me", headers=_bearer(token))
    assert me.status_code == 200
    assert me.json()["data"]["email"] == "jane@devcamper.io"
    assert me.json()["data"]["role"] == "publisher"
    assert "password_hash" not in me.json()["data"]

    login = auth_client.post("/api/v1/auth/login", json={"email": "jane@devcamper.io", "password": "secret1"})
    assert login.status_code == 200
    assert login.json()["token_type"] == "bearer"


def test_register_cannot_claim_admin(auth_client):
    assert _register(auth_client, role="admin").status_code == 400


def test_duplicate_email(auth_client):
    _register(auth_client)
    resp = _register(auth_client)
    assert resp.status_code == 400
    assert resp.json()["code"] == "request.validation_error"


def test_bad_credentials(auth_client):
    _register(auth_client)
    resp = auth_client.post("/api/v1/auth/login", json={"email": "jane@devcamper.io", "password": "nope123"})
    assert resp.status_code == 401
    assert auth_client.get("/api/v1/auth/me").status_code == 401
    assert auth_client.get("/api/v1/auth/me", headers=_bearer("garbage")).status_code == 401


def test_update_details_and_password(auth_client):
    token = _register(auth_client).json()["access_token"]
    resp = auth_client.put("/api/v1/auth/updatedetails", json={"name": "Janet"}, headers=_bearer(token))
    assert resp.json()["data"]["name"] == "Janet"

    resp = auth_client.put(
        "/api/v1/auth/updatepassword",
        json={"current_password": "wrong", "new_password": "another1"},
        headers=_bearer(token),
    )
    assert resp.status_code == 401

    resp = auth_client.put(
        "/api/v1/auth/updatepassword",
        json={"current_password": "secret1", "new_password": "another1"},
        headers=_bearer(token),
    )
    assert resp.status_code == 200
    login = auth_client.post("/api/v1/auth/login", json={"email": "jane@devcamper.io", "password": "another1"})
    assert login.status_code == 200


def test_token_grants_role_checked_routes(auth_client):
    token = _register(auth_client, role="user").json()["access_token"]
    resp = auth_client.get("/api/v1/users", headers=_bearer(token))
    assert resp.status_code == 403
