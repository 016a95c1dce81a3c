from datetime import datetime, timedelta
from unittest.mock import AsyncMock, patch

import pytest

from eventplanner.models import PasswordResetToken, Provider, User
from eventplanner.security_utils import create_access_token, verify_password
from tests.conftest import PASSWORD

RESET_MESSAGE = "If an account with that email exists, a password reset link has been sent."


@pytest.fixture
def reset_mail():
    with patch("eventplanner.routes.auth.send_password_reset_email", new_callable=AsyncMock) as mock:
        yield mock


def _register(client, **overrides):
    payload = {"email": "new@example.com", "password": "longenough", "name": "New Person", "accountType": "GUEST"}
    payload.update(overrides)
    return client.post("/auth/register", json=payload)


# ============================================================================
# REGISTRATION & LOGIN
# ============================================================================


@pytest.mark.parametrize(
    "account_type,role",
    [("GUEST", "GUEST"), ("USER", "GUEST"), ("HOST", "HOST"), ("host", "HOST")],
)
def test_register_roles(client, db, account_type, role):
    response = _register(client, email="Mixed@Example.com", accountType=account_type)
    assert response.status_code == 201
    user = db.query(User).one()
    assert user.email == "mixed@example.com"
    assert user.role == role
    assert verify_password("longenough", user.password_hash)


def test_register_provider_creates_profile(client, db):
    assert _register(client, accountType="PROVIDER").status_code == 400

    response = _register(client, accountType="PROVIDER", businessName="Bridge City Bands")
    assert response.status_code == 201
    provider = db.query(Provider).one()
    assert provider.business_name == "Bridge City Bands"
    assert provider.user.role == "PROVIDER"


def test_register_rejections(client, guest_user):
    assert _register(client, password="short").status_code == 400
    assert _register(client, email="not-an-email").status_code == 400
    assert _register(client, accountType="ADMIN").status_code == 400

    duplicate = _register(client, email="GUEST@example.com")
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "Email already exists"


def test_login(client, host):
    response = client.post("/auth/login", json={"email": "Host@Example.com", "password": PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["role"] == "HOST"
    assert body["name"] == "Hana Host"

    me = client.get("/profile", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.json()["user"]["email"] == "host@example.com"


def test_login_wrong_credentials(client, host):
    assert client.post("/auth/login", json={"email": host.email, "password": "wrong"}).status_code == 401
    assert client.post("/auth/login", json={"email": "nobody@example.com", "password": PASSWORD}).status_code == 401


def test_provider_login_requires_profile(client, guest_user, provider_user, provider):
    as_provider = {"password": PASSWORD, "loginType": "provider"}
    assert client.post("/auth/login", json={"email": provider_user.email, **as_provider}).status_code == 200
    assert client.post("/auth/login", json={"email": guest_user.email, **as_provider}).status_code == 401


def test_protected_routes_reject_bad_sessions(client, db):
    assert client.get("/profile").status_code == 401
    assert client.get("/profile", headers={"Authorization": "Bearer garbage"}).status_code == 401

    # Valid signature, but the user no longer exists
    ghost = create_access_token({"sub": "4242"})
    assert client.get("/profile", headers={"Authorization": f"Bearer {ghost}"}).status_code == 401


def test_role_comes_from_store_not_token(client, auth_headers, guest_user):
    forged = create_access_token({"sub": str(guest_user.id), "role": "HOST"})
    response = client.post(
        "/events",
        json={"name": "Sneaky", "startAt": "2031-01-01T10:00"},
        headers={"Authorization": f"Bearer {forged}"},
    )
    assert response.status_code == 403


# ============================================================================
# PASSWORD RESET
# ============================================================================


def test_forgot_password_requires_email(client, reset_mail):
    assert client.post("/auth/forgot-password", json={}).status_code == 400


def test_forgot_password_does_not_reveal_accounts(client, db, guest_user, reset_mail):
    unknown = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})
    known = client.post("/auth/forgot-password", json={"email": guest_user.email})

    assert unknown.status_code == known.status_code == 200
    assert unknown.json() == known.json() == {"message": RESET_MESSAGE}
    reset_mail.assert_awaited_once()
    to, link = reset_mail.await_args.args
    token = db.query(PasswordResetToken).one()
    assert to == guest_user.email
    assert link.endswith(f"/reset-password?token={token.token}")


def test_forgot_password_replaces_previous_token(client, db, guest_user, reset_mail):
    client.post("/auth/forgot-password", json={"email": guest_user.email})
    first = db.query(PasswordResetToken).one().token
    client.post("/auth/forgot-password", json={"email": guest_user.email})
    db.expire_all()

    tokens = db.query(PasswordResetToken).all()
    assert len(tokens) == 1
    assert tokens[0].token != first


def test_forgot_password_survives_mail_failure(client, db, guest_user, reset_mail):
    reset_mail.side_effect = RuntimeError("Email service not configured")
    response = client.post("/auth/forgot-password", json={"email": guest_user.email})
    assert response.status_code == 200
    assert response.json() == {"message": RESET_MESSAGE}


def test_forgot_password_token_insert_conflict(client, db, monkeypatch, guest_user, host, reset_mail):
    _issue_token(db, host.email, token="taken-token")
    monkeypatch.setattr("eventplanner.routes.auth.generate_secure_token", lambda nbytes: "taken-token")

    response = client.post("/auth/forgot-password", json={"email": guest_user.email})
    assert response.status_code == 200
    assert response.json() == {"message": RESET_MESSAGE}
    reset_mail.assert_not_awaited()

    db.expire_all()
    assert [t.email for t in db.query(PasswordResetToken)] == [host.email]


def _issue_token(db, email, expires_in=timedelta(hours=1), token="reset-token-123"):
    db.add(PasswordResetToken(email=email, token=token, expires_at=datetime.utcnow() + expires_in))
    db.commit()
    return token


def test_verify_reset_token(client, db, guest_user):
    assert client.post("/auth/verify-reset-token", json={}).status_code == 400
    assert client.post("/auth/verify-reset-token", json={"token": "unknown"}).status_code == 404

    token = _issue_token(db, guest_user.email)
    response = client.post("/auth/verify-reset-token", json={"token": token})
    assert response.status_code == 200
    assert response.json() == {"message": "Token is valid"}


def test_expired_token_is_gone_and_deleted(client, db, guest_user):
    token = _issue_token(db, guest_user.email, expires_in=timedelta(minutes=-1))

    response = client.post("/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
    assert response.status_code == 410
    assert response.json()["detail"] == "Reset token has expired"

    db.expire_all()
    assert db.query(PasswordResetToken).count() == 0
    assert client.post("/auth/verify-reset-token", json={"token": token}).status_code == 404


def test_reset_password_is_single_use(client, db, guest_user):
    token = _issue_token(db, guest_user.email)

    assert client.post("/auth/reset-password", json={"token": token, "password": "short"}).status_code == 400

    response = client.post("/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
    assert response.status_code == 200

    db.expire_all()
    assert verify_password("brand-new-pass", db.get(User, guest_user.id).password_hash)
    assert db.query(PasswordResetToken).count() == 0

    again = client.post("/auth/reset-password", json={"token": token, "password": "another-pass"})
    assert again.status_code == 404

    login = client.post("/auth/login", json={"email": guest_user.email, "password": "brand-new-pass"})
    assert login.status_code == 200
