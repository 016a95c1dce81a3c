import pytest
from sqlalchemy.exc import IntegrityError

from eventplanner.domain.bookings.repository import BookingRepository
from eventplanner.models import Booking, Role


def _book(client, headers, event, provider):
    return client.post("/bookings", json={"eventId": event.id, "providerId": provider.id}, headers=headers)


def _set_status(client, headers, booking_id, status):
    return client.put(f"/provider/bookings/{booking_id}", json={"bookingStatus": status}, headers=headers)


def test_booking_lifecycle(client, auth_headers, host, provider_user, provider, make_event):
    event = make_event(host)
    host_headers = auth_headers(host)
    provider_headers = auth_headers(provider_user)

    response = _book(client, host_headers, event, provider)
    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Booking created successfully"
    booking = body["booking"]
    assert booking["bookingStatus"] == "PENDING"
    assert booking["event"]["name"] == event.name
    assert booking["provider"]["businessName"] == "Prairie Catering"

    duplicate = _book(client, host_headers, event, provider)
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "A booking already exists for this event and provider"

    confirmed = _set_status(client, provider_headers, booking["id"], "CONFIRMED")
    assert confirmed.status_code == 200
    assert confirmed.json()["message"] == "Booking confirmed successfully"
    assert confirmed.json()["booking"]["bookingStatus"] == "CONFIRMED"

    completed = _set_status(client, provider_headers, booking["id"], "COMPLETED")
    assert completed.status_code == 200
    assert completed.json()["booking"]["bookingStatus"] == "COMPLETED"

    rejected = _set_status(client, provider_headers, booking["id"], "CANCELLED")
    assert rejected.status_code == 400
    assert rejected.json() == {
        "detail": "Invalid status transition. Cannot change from COMPLETED to CANCELLED.",
        "currentStatus": "COMPLETED",
        "allowedTransitions": [],
    }


def test_second_user_cannot_book_same_pair(client, db, auth_headers, host, guest_user, provider, make_event):
    event = make_event(host)
    assert _book(client, auth_headers(host), event, provider).status_code == 201

    response = _book(client, auth_headers(guest_user), event, provider)
    assert response.status_code == 400
    assert response.json()["detail"] == "A booking already exists for this event and provider"
    assert db.query(Booking).count() == 1


def test_concurrent_duplicate_rejected_by_index(
    client, db, monkeypatch, auth_headers, host, guest_user, provider, make_event
):
    event = make_event(host)
    assert _book(client, auth_headers(host), event, provider).status_code == 201

    # The other request passed its pre-check before this one committed
    monkeypatch.setattr(BookingRepository, "get_active_booking", staticmethod(lambda *args: None))

    response = _book(client, auth_headers(guest_user), event, provider)
    assert response.status_code == 400
    assert response.json()["detail"] == "A booking already exists for this event and provider"
    db.expire_all()
    assert db.query(Booking).count() == 1


@pytest.mark.parametrize("status", ["PENDING", "CONFIRMED"])
def test_index_allows_one_active_booking_per_pair(db, host, provider, make_event, status):
    event = make_event(host)
    db.add(Booking(event_id=event.id, provider_id=provider.id, user_id=host.id, status="PENDING"))
    db.commit()

    db.add(Booking(event_id=event.id, provider_id=provider.id, user_id=host.id, status=status))
    with pytest.raises(IntegrityError):
        db.commit()
    db.rollback()

    db.add_all(
        [
            Booking(event_id=event.id, provider_id=provider.id, user_id=host.id, status="CANCELLED"),
            Booking(event_id=event.id, provider_id=provider.id, user_id=host.id, status="CANCELLED"),
            Booking(event_id=event.id, provider_id=provider.id, user_id=host.id, status="COMPLETED"),
        ]
    )
    db.commit()
    assert db.query(Booking).count() == 4


def test_rebooking_allowed_after_cancellation(client, auth_headers, host, provider_user, provider, make_event):
    event = make_event(host)
    booking_id = _book(client, auth_headers(host), event, provider).json()["booking"]["id"]

    assert _set_status(client, auth_headers(provider_user), booking_id, "CANCELLED").status_code == 200

    again = _book(client, auth_headers(host), event, provider)
    assert again.status_code == 201
    assert again.json()["booking"]["id"] != booking_id


def test_create_booking_missing_references(client, auth_headers, host, provider, make_event):
    event = make_event(host)
    headers = auth_headers(host)

    missing_event = client.post("/bookings", json={"eventId": 9999, "providerId": provider.id}, headers=headers)
    assert missing_event.status_code == 404
    assert missing_event.json()["detail"] == "Event not found"

    missing_provider = client.post("/bookings", json={"eventId": event.id, "providerId": 9999}, headers=headers)
    assert missing_provider.status_code == 404
    assert missing_provider.json()["detail"] == "Provider not found"


def test_create_booking_requires_authentication(client, host, provider, make_event):
    event = make_event(host)
    response = client.post("/bookings", json={"eventId": event.id, "providerId": provider.id})
    assert response.status_code == 401


def test_only_owning_provider_may_update(
    client, db, auth_headers, make_user, host, provider, make_event
):
    event = make_event(host)
    booking_id = _book(client, auth_headers(host), event, provider).json()["booking"]["id"]
    other_provider = make_user(Role.PROVIDER, business_name="Riverside Rentals")

    response = _set_status(client, auth_headers(other_provider), booking_id, "CONFIRMED")
    assert response.status_code == 403
    assert response.json()["detail"] == "Forbidden. This booking does not belong to you."

    db.expire_all()
    assert db.get(Booking, booking_id).status == "PENDING"


def test_non_provider_cannot_update(client, auth_headers, host, provider, make_event):
    event = make_event(host)
    booking_id = _book(client, auth_headers(host), event, provider).json()["booking"]["id"]

    assert _set_status(client, auth_headers(host), booking_id, "CONFIRMED").status_code == 403


def test_provider_without_profile(client, auth_headers, make_user):
    bare_provider = make_user(Role.PROVIDER)

    response = client.get("/provider/bookings", headers=auth_headers(bare_provider))
    assert response.status_code == 404
    assert response.json()["detail"] == "Provider profile not found"


def test_update_unknown_booking_and_status(client, auth_headers, host, provider_user, provider, make_event):
    headers = auth_headers(provider_user)
    assert _set_status(client, headers, 9999, "CONFIRMED").status_code == 404

    event = make_event(host)
    booking_id = _book(client, auth_headers(host), event, provider).json()["booking"]["id"]
    invalid = _set_status(client, headers, booking_id, "ARCHIVED")
    assert invalid.status_code == 400


def test_provider_booking_list_filters(client, auth_headers, host, provider_user, provider, make_event):
    first = make_event(host, name="Gala")
    second = make_event(host, name="Picnic")
    host_headers = auth_headers(host)
    provider_headers = auth_headers(provider_user)

    first_id = _book(client, host_headers, first, provider).json()["booking"]["id"]
    _book(client, host_headers, second, provider)
    _set_status(client, provider_headers, first_id, "CONFIRMED")

    all_bookings = client.get("/provider/bookings", headers=provider_headers).json()["bookings"]
    assert len(all_bookings) == 2
    assert all_bookings[0]["user"]["email"] == host.email

    confirmed = client.get("/provider/bookings?status=CONFIRMED", headers=provider_headers).json()["bookings"]
    assert [b["id"] for b in confirmed] == [first_id]

    unknown = client.get("/provider/bookings?status=BOGUS", headers=provider_headers).json()["bookings"]
    assert len(unknown) == 2


def test_my_bookings(client, auth_headers, host, guest_user, provider, make_event):
    event = make_event(host)
    _book(client, auth_headers(host), event, provider)

    mine = client.get("/bookings", headers=auth_headers(host)).json()["bookings"]
    assert len(mine) == 1
    assert client.get("/bookings", headers=auth_headers(guest_user)).json()["bookings"] == []


def test_event_with_provider_opens_pending_booking(client, auth_headers, host, provider):
    response = client.post(
        "/events",
        json={
            "name": "Wedding",
            "startAt": "2031-06-01T15:00",
            "location": "Bessborough Hotel, Saskatoon",
            "providerId": provider.id,
        },
        headers=auth_headers(host),
    )
    assert response.status_code == 201
    event_id = response.json()["event"]["id"]

    bookings = client.get("/bookings", headers=auth_headers(host)).json()["bookings"]
    assert [(b["eventId"], b["bookingStatus"]) for b in bookings] == [(event_id, "PENDING")]

    duplicate = client.post("/bookings", json={"eventId": event_id, "providerId": provider.id}, headers=auth_headers(host))
    assert duplicate.status_code == 400
