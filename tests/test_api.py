from unittest import mock

from bustrack.exceptions import StoreError
from tests.conftest import make_booking


def booking_json(booking_id="BKG1", seats=("1A",), email="x@example.com"):
    return make_booking(booking_id, seats=seats, email=email).model_dump(mode="json")


def checkout_body(seats=("1A", "1B"), **journey_overrides):
    journey = {
        "bus_id": "BUS001",
        "route_number": "101",
        "from_stop": "Majestic",
        "to_stop": "Silk Board",
        "journey_date": "2030-05-17T00:00:00.000Z",
    }
    journey.update(journey_overrides)
    return {
        "passenger": {"name": "Asha Rao", "email": "asha@example.com", "phone": "+91 98450 12345"},
        "journey": journey,
        "seats": list(seats),
        "provider": "gpay",
    }


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_cors_allows_any_origin(client):
    response = client.get("/health", headers={"Origin": "https://example.org"})

    assert response.headers["access-control-allow-origin"] == "*"


def test_create_and_fetch_booking(client):
    response = client.post("/bookings", json=booking_json("BKG42", seats=["3A", "3B"]))

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "booking_id": "BKG42",
        "message": "Booking confirmed successfully",
    }

    fetched = client.get("/bookings/BKG42").json()
    assert fetched["success"] is True
    assert fetched["booking"]["seats"] == ["3A", "3B"]
    assert fetched["booking"]["journey_date"] == "2030-05-17"


def test_unknown_booking_is_404(client):
    response = client.get("/bookings/nonexistent")

    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Booking not found"}


def test_user_bookings_in_creation_order(client):
    client.post("/bookings", json=booking_json("BKG-B", seats=["1A"]))
    client.post("/bookings", json=booking_json("BKG-A", seats=["1B"]))

    response = client.get("/user-bookings/x@example.com")

    assert response.status_code == 200
    assert [b["booking_id"] for b in response.json()["bookings"]] == ["BKG-B", "BKG-A"]


def test_user_without_bookings(client):
    assert client.get("/user-bookings/nobody@example.com").json() == {"success": True, "bookings": []}


def test_booked_seats(client):
    client.post("/bookings", json=booking_json("BKG1", seats=["1A", "1B"]))

    response = client.get("/booked-seats/BUS001/2030-05-17")

    assert response.json() == {"success": True, "seats": ["1A", "1B"]}
    assert client.get("/booked-seats/BUS002/2030-05-17").json()["seats"] == []


def test_store_failure_is_500(client):
    with mock.patch(
        "bustrack.bookings.store.BookingStore.create_booking",
        side_effect=StoreError("Failed to write to store", "disk full"),
    ):
        response = client.post("/bookings", json=booking_json())

    assert response.status_code == 500
    assert response.json() == {
        "success": False,
        "error": "Failed to create booking",
        "details": "disk full",
    }


def test_invalid_booking_body_is_500_with_details(client):
    body = booking_json()
    del body["passenger_email"]

    response = client.post("/bookings", json=body)

    assert response.status_code == 500
    data = response.json()
    assert data["success"] is False
    assert data["error"] == "Failed to create booking"
    assert [entry["loc"] for entry in data["details"]] == [["passenger_email"]]
    assert client.get("/bookings/BKG1").status_code == 404


def test_malformed_checkout_body_is_422(client):
    body = checkout_body()
    del body["seats"]

    response = client.post("/bookings/checkout", json=body)

    assert response.status_code == 422
    assert response.json()["success"] is False


def test_checkout_store_failure_is_500(client):
    with mock.patch(
        "bustrack.bookings.store.BookingStore.create_booking",
        side_effect=StoreError("Failed to write to store", "disk full"),
    ):
        response = client.post("/bookings/checkout", json=checkout_body())

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert client.get("/booked-seats/BUS001/2030-05-17").json()["seats"] == []


def test_seat_map_marks_booked_seats(client):
    client.post("/bookings", json=booking_json("BKG1", seats=["1A", "2C"]))

    response = client.get("/buses/BUS001/seat-map", params={"date": "2030-05-17", "selected": "1B"})

    assert response.status_code == 200
    data = response.json()
    assert data["total_seats"] == 40
    assert data["available_seats"] == 37
    assert len(data["rows"]) == 10
    first_row = {seat["seat_number"]: seat["status"] for seat in data["rows"][0]}
    assert first_row == {"1A": "booked", "1B": "selected", "1C": "available", "1D": "available"}


def test_checkout_books_seats(client):
    response = client.post("/bookings/checkout", json=checkout_body())

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["booking"]["total_amount"] == 50
    assert data["booking"]["payment_status"] == "completed"
    assert data["booking"]["transaction_id"].startswith("TXN")
    assert client.get("/booked-seats/BUS001/2030-05-17").json()["seats"] == ["1A", "1B"]
    assert client.get(f"/bookings/{data['booking_id']}").status_code == 200


def test_checkout_rejects_taken_seat(client):
    client.post("/bookings/checkout", json=checkout_body(seats=["1A"]))

    response = client.post("/bookings/checkout", json=checkout_body(seats=["1A", "1B"]))

    assert response.status_code == 400
    assert response.json()["details"] == ["1A"]


def test_checkout_rejects_stop_off_route(client):
    response = client.post("/bookings/checkout", json=checkout_body(to_stop="Whitefield"))

    assert response.status_code == 400
    assert response.json()["details"] == ["Whitefield"]


def test_checkout_requires_upi_id_for_other_provider(client):
    body = checkout_body()
    body["provider"] = "other"

    response = client.post("/bookings/checkout", json=body)

    assert response.status_code == 400
    assert client.get("/booked-seats/BUS001/2030-05-17").json()["seats"] == []


def test_checkout_unknown_bus(client):
    response = client.post("/bookings/checkout", json=checkout_body(bus_id="BUS999"))

    assert response.status_code == 404


def test_simulated_payment_endpoint(client):
    response = client.post("/payments/simulate", json={"amount": 75, "provider": "paytm"})

    assert response.status_code == 200
    payment = response.json()["payment"]
    assert payment["amount"] == 75
    assert payment["upi_id"] == "paytm@user"


def test_bus_listing_and_status_update(client):
    buses = client.get("/buses", params={"route_number": "101"}).json()["buses"]
    assert {b["bus_id"] for b in buses} == {"BUS001", "BUS002"}
    assert buses[0]["occupancy_level"] in {"Available", "Moderate", "Crowded"}

    response = client.put("/buses/BUS001/status", json={"status": "Maintenance"})
    assert response.status_code == 200
    assert response.json()["bus"]["current_status"] == "Maintenance"

    notifications = client.get("/notifications").json()["notifications"]
    assert notifications[0]["bus_id"] == "BUS001"
    assert notifications[0]["type"] == "breakdown"


def test_unknown_bus_is_404(client):
    response = client.get("/buses/BUS999")

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_admin_statistics(client):
    stats = client.get("/admin/statistics").json()["statistics"]

    assert stats["total_buses"] == 6
    assert stats["running_buses"] == 3


def test_routes(client):
    routes = client.get("/routes").json()["routes"]
    assert [r["route_number"] for r in routes] == ["101", "202", "303"]

    detail = client.get("/routes/202").json()
    assert detail["route"]["route_name"] == "Shivajinagar - Whitefield"
    assert len(detail["buses"]) == 2
