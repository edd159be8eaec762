"""HTTP surface of /api/v1/booking-rejections."""

from carebook.models import BookingStatus
from tests.helpers import actor_headers

BASE = "/api/v1/booking-rejections"


def test_request_and_approve(client, db, provider_actor, admin_actor, provider, make_booking):
    booking = make_booking(status=BookingStatus.CONFIRMED, provider=provider)

    created = client.post(
        f"{BASE}/",
        json={"booking_id": booking.id, "reason": "Clinic shift overran"},
        headers=actor_headers(provider_actor),
    )
    assert created.status_code == 201
    request_id = created.json()["id"]

    pending = client.get(f"{BASE}/pending", headers=actor_headers(admin_actor))
    assert [r["id"] for r in pending.json()] == [request_id]

    approved = client.post(
        f"{BASE}/{request_id}/approve",
        json={"admin_notes": "Reassigning"},
        headers=actor_headers(admin_actor),
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "APPROVED"

    db.refresh(booking)
    assert booking.status == BookingStatus.CANCELLED.value
    assert booking.provider_id is None


def test_deny_without_body(client, provider_actor, admin_actor, provider, make_booking):
    booking = make_booking(status=BookingStatus.CONFIRMED, provider=provider)
    created = client.post(
        f"{BASE}/",
        json={"booking_id": booking.id, "reason": "Busy"},
        headers=actor_headers(provider_actor),
    )

    denied = client.post(f"{BASE}/{created.json()['id']}/deny", headers=actor_headers(admin_actor))

    assert denied.status_code == 200
    assert denied.json()["status"] == "REJECTED"


def test_blank_reason_fails_validation(client, provider_actor, provider, make_booking):
    booking = make_booking(status=BookingStatus.CONFIRMED, provider=provider)

    response = client.post(
        f"{BASE}/",
        json={"booking_id": booking.id, "reason": "   "},
        headers=actor_headers(provider_actor),
    )

    assert response.status_code == 422


def test_provider_sees_own_requests(client, provider_actor, provider, make_booking):
    booking = make_booking(status=BookingStatus.CONFIRMED, provider=provider)
    client.post(
        f"{BASE}/",
        json={"booking_id": booking.id, "reason": "Busy"},
        headers=actor_headers(provider_actor),
    )

    response = client.get(f"{BASE}/providers/{provider.id}", headers=actor_headers(provider_actor))

    assert response.status_code == 200
    assert len(response.json()) == 1
