from tests.helpers import actor_headers


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "carebook-api"
    assert response.headers["cache-control"] == "no-store"


def test_metrics_exposes_booking_counters(client, admin_actor, make_booking):
    booking = make_booking()
    client.post(f"/api/v1/bookings/{booking.id}/accept", headers=actor_headers(admin_actor))

    response = client.get("/metrics")

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/plain")
    assert "carebook_booking_transitions_total" in response.text
    assert 'from_status="PENDING"' in response.text
