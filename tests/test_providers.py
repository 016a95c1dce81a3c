from eventplanner.domain.providers.seed_data import SASKATOON_PROVIDERS
from eventplanner.models import Booking, Provider, Role


def test_directory_lists_providers_with_stats(client, db, auth_headers, host, guest_user, make_user, provider, make_event):
    zed = make_user(Role.PROVIDER, business_name="Zed Sound")
    event = make_event(host)
    other_event = make_event(host, name="Other")
    db.add_all(
        [
            Booking(event_id=event.id, provider_id=provider.id, user_id=host.id, status="PENDING"),
            Booking(event_id=other_event.id, provider_id=provider.id, user_id=host.id, status="COMPLETED"),
        ]
    )
    db.commit()

    response = client.get("/providers", headers=auth_headers(guest_user))
    assert response.status_code == 200
    providers = response.json()["providers"]
    assert [p["businessName"] for p in providers] == ["Prairie Catering", "Zed Sound"]
    assert providers[0]["bookingCount"] == 2
    assert providers[0]["activeBookings"] == 1
    assert providers[0]["user"]["email"] == "provider@example.com"
    assert providers[1]["bookingCount"] == 0
    assert providers[1]["user"]["id"] == zed.id


def test_directory_requires_authentication(client):
    assert client.get("/providers").status_code == 401


def test_profile_with_booking_stats(client, db, auth_headers, host, provider_user, provider, make_event):
    event = make_event(host)
    db.add(Booking(event_id=event.id, provider_id=provider.id, user_id=host.id, status="CONFIRMED"))
    db.commit()

    response = client.get("/provider/profile", headers=auth_headers(provider_user))
    assert response.status_code == 200
    profile = response.json()["provider"]
    assert profile["businessName"] == "Prairie Catering"
    assert profile["bookingStats"] == {"total": 1, "pending": 0, "confirmed": 1, "cancelled": 0, "completed": 0}


def test_profile_is_provider_only(client, auth_headers, guest_user, make_user):
    assert client.get("/provider/profile", headers=auth_headers(guest_user)).status_code == 403
    assert client.get("/provider/profile", headers=auth_headers(make_user(Role.PROVIDER))).status_code == 404


def test_update_profile(client, db, auth_headers, provider_user, provider):
    headers = auth_headers(provider_user)
    response = client.put(
        "/provider/profile",
        json={"businessName": "Prairie Feasts", "address": "1 Main St", "phone": "306-555-0100", "email": "hi@feasts.ca"},
        headers=headers,
    )
    assert response.status_code == 200
    assert response.json()["message"] == "Provider profile updated successfully"
    assert response.json()["provider"]["businessName"] == "Prairie Feasts"

    # Omitted fields stay, explicit null clears
    cleared = client.put("/provider/profile", json={"phone": None}, headers=headers).json()["provider"]
    assert cleared["phone"] is None
    assert cleared["address"] == "1 Main St"
    assert cleared["businessName"] == "Prairie Feasts"


def test_update_profile_validation(client, auth_headers, provider_user, provider):
    headers = auth_headers(provider_user)
    assert client.put("/provider/profile", json={"businessName": ""}, headers=headers).status_code == 400
    assert client.put("/provider/profile", json={"phone": "0" * 21}, headers=headers).status_code == 400
    assert client.put("/provider/profile", json={"email": "nope"}, headers=headers).status_code == 400


def test_seed_providers(client, db):
    response = client.get("/provider/seed")
    assert response.status_code == 200
    assert len(response.json()["providers"]) == len(SASKATOON_PROVIDERS)
    assert db.query(Provider).count() == len(SASKATOON_PROVIDERS)

    again = client.get("/provider/seed").json()
    assert again["existingCount"] == len(SASKATOON_PROVIDERS)
    assert db.query(Provider).count() == len(SASKATOON_PROVIDERS)
