from datetime import datetime, timedelta, timezone

import pytest
import pydantic
from jose import jwt

from railbook import models, oauth2, schemas, utils
from railbook.config import settings
from railbook.exceptions import DuplicateCredential, InvalidCredentials, Unauthorized
from railbook.services import auth as auth_service


def test_register_then_login_issues_token(db, make_user):
    user_id = make_user("alice", "pw1")

    token, user = auth_service.login(db, "alice", "pw1")

    assert user.user_id == user_id
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    assert payload["user_id"] == user_id
    assert payload["username"] == "alice"


def test_duplicate_username_is_a_conflict(make_user):
    make_user("alice", "pw1")

    with pytest.raises(DuplicateCredential):
        make_user("alice", "other")


def test_duplicate_mobile_is_a_conflict(make_user):
    make_user("alice", "pw1", mobile_no="9876543210")

    with pytest.raises(DuplicateCredential):
        make_user("bob", "pw2", mobile_no="9876543210")


def test_password_is_stored_hashed(db, make_user):
    make_user("alice", "pw1")

    stored = db.query(models.User).filter(models.User.username == "alice").one().password
    assert stored != "pw1"
    assert utils.verify("pw1", stored)
    assert not utils.verify("pw2", stored)


def test_login_rejects_wrong_password_and_unknown_user(db, make_user):
    make_user("alice", "pw1")

    with pytest.raises(InvalidCredentials):
        auth_service.login(db, "alice", "wrong")
    with pytest.raises(InvalidCredentials):
        auth_service.login(db, "nobody", "pw1")


def test_token_lasts_eight_hours(db, make_user):
    make_user("alice", "pw1")
    token, _ = auth_service.login(db, "alice", "pw1")

    exp = jwt.get_unverified_claims(token)["exp"]
    remaining = datetime.fromtimestamp(exp, tz=timezone.utc) - datetime.now(timezone.utc)
    assert timedelta(hours=7, minutes=59) < remaining <= timedelta(hours=8)


def test_authenticate_resolves_user(db, make_user):
    user_id = make_user("alice", "pw1")
    token, _ = auth_service.login(db, "alice", "pw1")

    assert oauth2.authenticate(db, token).user_id == user_id


@pytest.mark.parametrize("token", [None, "", "not-a-jwt"])
def test_authenticate_rejects_missing_or_malformed_token(db, token):
    with pytest.raises(Unauthorized):
        oauth2.authenticate(db, token)


def test_authenticate_rejects_expired_and_foreign_tokens(db, make_user):
    user_id = make_user("alice", "pw1")
    claims = {"user_id": user_id, "username": "alice"}

    expired = jwt.encode(
        {**claims, "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
        settings.secret_key, algorithm=settings.algorithm,
    )
    forged = jwt.encode(
        {**claims, "exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        "another-secret", algorithm=settings.algorithm,
    )

    with pytest.raises(Unauthorized):
        oauth2.authenticate(db, expired)
    with pytest.raises(Unauthorized):
        oauth2.authenticate(db, forged)


def test_authenticate_rejects_token_for_unknown_user(db):
    token = oauth2.create_access_token({"user_id": 999, "username": "ghost"})

    with pytest.raises(Unauthorized):
        oauth2.authenticate(db, token)


#------------------------HTTP------------------------

def test_register_and_login_over_http(client):
    res = client.post("/api/auth/register", json={"username": "alice", "password": "pw1", "f_name": "Alice"})
    assert res.status_code == 200
    assert res.json()["message"] == "Registered"

    res = client.post("/api/auth/login", json={"username": "alice", "password": "pw1"})
    assert res.status_code == 200
    body = res.json()
    assert body["token"]
    assert body["user"] == {"user_id": 1, "username": "alice", "f_name": "Alice"}

    res = client.post("/api/auth/register", json={"username": "alice", "password": "pw2"})
    assert res.status_code == 400
    assert res.json() == {"message": "Username or mobile already exists"}


def test_bad_login_over_http(client):
    client.post("/api/auth/register", json={"username": "alice", "password": "pw1"})

    res = client.post("/api/auth/login", json={"username": "alice", "password": "nope"})
    assert res.status_code == 400
    assert res.json() == {"message": "Invalid credentials"}


def test_register_requires_username_and_password(client):
    res = client.post("/api/auth/register", json={"username": "alice", "password": "  "})
    assert res.status_code == 400

    res = client.post("/api/auth/register", json={"password": "pw1"})
    assert res.status_code == 400


def test_protected_route_needs_token(client):
    res = client.get("/api/tickets/my")
    assert res.status_code == 401
    assert res.json() == {"message": "Missing token"}
    assert res.headers["www-authenticate"] == "Bearer"

    res = client.get("/api/tickets/my", headers={"Authorization": "Bearer garbage"})
    assert res.status_code == 401


def test_password_longer_than_bcrypt_limit_is_rejected(client):
    res = client.post("/api/auth/register", json={"username": "longpw", "password": "y" * 100})
    assert res.status_code == 400
    assert "72 bytes" in res.json()["message"]

    # 72 bytes is still fine, multibyte characters count by their encoding
    res = client.post("/api/auth/register", json={"username": "longpw", "password": "y" * 72})
    assert res.status_code == 200
    res = client.post("/api/auth/register", json={"username": "unicode", "password": "é" * 37})
    assert res.status_code == 400


def test_long_password_never_reaches_the_hasher():
    with pytest.raises(pydantic.ValidationError):
        schemas.UserCreate(username="longpw", password="y" * 100)
