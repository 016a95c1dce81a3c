from eventplanner.models import User
from eventplanner.security_utils import verify_password
from tests.conftest import PASSWORD


def test_get_profile_includes_business(client, auth_headers, provider_user, provider):
    response = client.get("/profile", headers=auth_headers(provider_user))
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["role"] == "PROVIDER"
    assert user["provider"]["businessName"] == "Prairie Catering"


def test_update_profile(client, auth_headers, guest_user):
    response = client.put(
        "/profile",
        json={"name": "  Gus G.  ", "email": "Gus@Example.com", "image": "data:image/png;base64,AAA"},
        headers=auth_headers(guest_user),
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["name"] == "Gus G."
    assert user["email"] == "gus@example.com"
    assert user["image"] == "data:image/png;base64,AAA"
    assert user["role"] == "GUEST"


def test_update_profile_email_taken(client, auth_headers, guest_user, host):
    response = client.put(
        "/profile", json={"name": "Gus", "email": host.email}, headers=auth_headers(guest_user)
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Email is already in use"


def test_update_business_details(client, db, auth_headers, provider_user, provider):
    response = client.put(
        "/profile",
        json={
            "name": provider_user.name,
            "email": provider_user.email,
            "business": {"businessName": "Prairie Feasts", "phone": "306-555-0199"},
        },
        headers=auth_headers(provider_user),
    )
    assert response.status_code == 200
    business = response.json()["user"]["provider"]
    assert business["businessName"] == "Prairie Feasts"
    assert business["phone"] == "306-555-0199"
    assert business["address"] is None


def test_change_password(client, db, auth_headers, guest_user):
    headers = auth_headers(guest_user)

    wrong = client.put("/profile/password", json={"currentPassword": "nope", "newPassword": "abcdef"}, headers=headers)
    assert wrong.status_code == 400
    assert wrong.json()["detail"] == "Current password is incorrect"

    too_short = client.put(
        "/profile/password", json={"currentPassword": PASSWORD, "newPassword": "abc"}, headers=headers
    )
    assert too_short.status_code == 400

    ok = client.put("/profile/password", json={"currentPassword": PASSWORD, "newPassword": "abcdef"}, headers=headers)
    assert ok.status_code == 200
    db.expire_all()
    assert verify_password("abcdef", db.get(User, guest_user.id).password_hash)


def test_health_and_map_config(client):
    assert client.get("/health").json() == {"status": "healthy"}
    assert "mapboxAccessToken" in client.get("/config/map").json()
