"""HTTP surface of /api/v1/bookings."""

from datetime import timedelta

from carebook.models import AvailabilityStatus, BookingStatus, PaymentStatus
from tests.helpers import actor_headers

BASE = "/api/v1/bookings"


def error_code(response) -> str:
    return response.json()["detail"]["code"]


class TestCreate:
    def test_customer_creates_booking(self, client, customer_actor, nursing_service, today):
        response = client.post(
            f"{BASE}/",
            json={
                "service_id": nursing_service.id,
                "scheduled_date": (today + timedelta(days=2)).isoformat(),
                "scheduled_time": "10:00",
            },
            headers=actor_headers(customer_actor),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PENDING"
        assert body["payment_status"] == "PENDING"
        assert body["provider_id"] is None
        assert body["scheduled_time"] == "10:00:00"
        assert body["total_amount"] == "1500.00"

    def test_missing_identity_headers(self, client, nursing_service, today):
        response = client.post(
            f"{BASE}/",
            json={
                "service_id": nursing_service.id,
                "scheduled_date": today.isoformat(),
                "scheduled_time": "10:00",
            },
        )
        assert response.status_code == 401

    def test_unknown_role(self, client, customer):
        response = client.get(
            f"{BASE}/", headers={"X-User-Id": customer.id, "X-User-Role": "superuser"}
        )
        assert response.status_code == 401

    def test_past_date(self, client, customer_actor, nursing_service, today):
        response = client.post(
            f"{BASE}/",
            json={
                "service_id": nursing_service.id,
                "scheduled_date": (today - timedelta(days=1)).isoformat(),
                "scheduled_time": "10:00",
            },
            headers=actor_headers(customer_actor),
        )
        assert response.status_code == 400
        assert error_code(response) == "INVALID_ARGUMENT"

    def test_unknown_fields_rejected(self, client, customer_actor, nursing_service, today):
        response = client.post(
            f"{BASE}/",
            json={
                "service_id": nursing_service.id,
                "scheduled_date": today.isoformat(),
                "scheduled_time": "10:00",
                "status": "CONFIRMED",
            },
            headers=actor_headers(customer_actor),
        )
        assert response.status_code == 422


class TestLifecycle:
    def test_provider_walks_booking_to_completion(
        self, client, provider_actor, provider, make_booking
    ):
        booking = make_booking(provider=provider)
        headers = actor_headers(provider_actor)

        for action, expected in [
            ("accept", "CONFIRMED"),
            ("start", "IN_PROGRESS"),
            ("complete", "COMPLETED"),
        ]:
            response = client.post(f"{BASE}/{booking.id}/{action}", headers=headers)
            assert response.status_code == 200, response.text
            assert response.json()["status"] == expected

    def test_complete_with_notes(self, client, admin_actor, make_booking):
        booking = make_booking(status=BookingStatus.IN_PROGRESS)

        response = client.post(
            f"{BASE}/{booking.id}/complete",
            json={"notes": "Dressing changed"},
            headers=actor_headers(admin_actor),
        )

        assert response.json()["notes"] == "Completion notes: Dressing changed"
        assert response.json()["completed_at"] is not None

    def test_invalid_transition_is_409(self, client, admin_actor, make_booking):
        booking = make_booking()

        response = client.post(f"{BASE}/{booking.id}/complete", headers=actor_headers(admin_actor))

        assert response.status_code == 409
        assert error_code(response) == "INVALID_TRANSITION"
        assert response.json()["detail"]["details"] == {
            "current_status": "PENDING",
            "target_status": "COMPLETED",
        }

    def test_reject_with_reason(self, client, admin_actor, make_booking):
        booking = make_booking()

        response = client.post(
            f"{BASE}/{booking.id}/reject",
            json={"reason": "No provider in area"},
            headers=actor_headers(admin_actor),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"
        assert response.json()["notes"] == "Rejection reason: No provider in area"

    def test_cancel_completed_is_422(self, client, customer_actor, make_booking):
        booking = make_booking(status=BookingStatus.COMPLETED)

        response = client.post(f"{BASE}/{booking.id}/cancel", headers=actor_headers(customer_actor))

        assert response.status_code == 422
        assert error_code(response) == "INVALID_OPERATION"

    def test_delete_cancels(self, client, customer_actor, make_booking):
        booking = make_booking()
        response = client.delete(f"{BASE}/{booking.id}", headers=actor_headers(customer_actor))
        assert response.status_code == 200
        assert response.json()["status"] == "CANCELLED"

    def test_customer_cannot_accept(self, client, customer_actor, make_booking):
        booking = make_booking()
        response = client.post(f"{BASE}/{booking.id}/accept", headers=actor_headers(customer_actor))
        assert response.status_code == 403

    def test_unknown_booking(self, client, admin_actor):
        response = client.get(
            f"{BASE}/01ARZ3NDEKTSV4RRFFQ69G5FAV", headers=actor_headers(admin_actor)
        )
        assert response.status_code == 404

    def test_reschedule(self, client, customer_actor, make_booking, today):
        booking = make_booking(status=BookingStatus.CONFIRMED)
        new_date = (today + timedelta(days=6)).isoformat()

        response = client.post(
            f"{BASE}/{booking.id}/reschedule",
            json={"scheduled_date": new_date, "scheduled_time": "17:15"},
            headers=actor_headers(customer_actor),
        )

        assert response.status_code == 200
        assert response.json()["scheduled_date"] == new_date
        assert response.json()["scheduled_time"] == "17:15:00"


class TestAdmin:
    def test_assign_and_list_available(self, client, admin_actor, provider, make_booking):
        booking = make_booking()
        headers = actor_headers(admin_actor)

        available = client.get(f"{BASE}/{booking.id}/available-providers", headers=headers)
        assert [p["id"] for p in available.json()] == [provider.id]

        response = client.post(
            f"{BASE}/{booking.id}/assign-provider",
            json={"provider_id": provider.id},
            headers=headers,
        )
        assert response.status_code == 200
        assert response.json()["provider_id"] == provider.id

        unassigned = client.get(f"{BASE}/unassigned", headers=headers)
        assert unassigned.json() == []

    def test_busy_provider_cannot_be_assigned(
        self, client, admin_actor, make_provider, nursing_service, make_booking
    ):
        busy = make_provider(
            services=[nursing_service], availability_status=AvailabilityStatus.BUSY
        )
        booking = make_booking()

        response = client.post(
            f"{BASE}/{booking.id}/assign-provider",
            json={"provider_id": busy.id},
            headers=actor_headers(admin_actor),
        )

        assert response.status_code == 422

    def test_stats(self, client, admin_actor, make_booking):
        make_booking()
        make_booking(status=BookingStatus.COMPLETED)

        response = client.get(f"{BASE}/stats", headers=actor_headers(admin_actor))

        assert response.status_code == 200
        assert response.json()["total_bookings"] == 2
        assert response.json()["by_status"]["COMPLETED"] == 1

    def test_payment_status_and_refund(self, client, admin_actor, customer_actor, make_booking):
        booking = make_booking(status=BookingStatus.CONFIRMED)

        response = client.patch(
            f"{BASE}/{booking.id}/payment-status",
            json={"payment_status": PaymentStatus.PAID.value},
            headers=actor_headers(admin_actor),
        )
        assert response.json()["payment_status"] == "PAID"

        refund = client.get(f"{BASE}/{booking.id}/refund", headers=actor_headers(customer_actor))
        assert refund.status_code == 200
        assert refund.json()["refund_percent"] == 100
        assert refund.json()["refund_amount"] == "1500.00"

    def test_customers_only_see_their_own(
        self, client, customer_actor, other_customer, make_booking
    ):
        mine = make_booking()
        make_booking(user=other_customer)

        response = client.get(f"{BASE}/", headers=actor_headers(customer_actor))

        assert [b["id"] for b in response.json()] == [mine.id]
