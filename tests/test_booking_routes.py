"""
HTTP tests for the booking endpoints.

Tests cover:
- Public booking submission and date validation
- Admin listing populated with car summaries
- Status changes and deletion
"""

from datetime import datetime, timedelta, timezone

from app.crud import car_crud


BOOKINGS = "/api/bookings"


def booking_payload(car_id, **overrides):
    pickup = datetime.now(timezone.utc) + timedelta(days=3)
    data = {
        "car_id": str(car_id),
        "user_email": "Jane@Example.com",
        "user_name": "Jane Doe",
        "user_phone": "+212600000000",
        "pickup_date": pickup.isoformat(),
        "return_date": (pickup + timedelta(days=4)).isoformat(),
        "total_price": 600,
    }
    data.update(overrides)
    return data


class TestCreateBooking:
    async def test_public_booking(self, anon_client, create_car):
        car = await create_car(["a.jpg"])
        response = await anon_client.post(BOOKINGS, json=booking_payload(car.id))

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Booking successful!"
        assert body["booking"]["status"] == "confirmed"
        assert body["booking"]["user_email"] == "jane@example.com"
        assert body["booking"]["car"]["name"] == "X5"
        assert body["booking"]["car"]["thumbnail"]["url"] == car.thumbnail.url

    async def test_unknown_car(self, anon_client):
        response = await anon_client.post(
            BOOKINGS, json=booking_payload("64b7f0c2a1b2c3d4e5f60718")
        )
        assert response.status_code == 404

    async def test_return_before_pickup(self, anon_client, create_car):
        car = await create_car(["a.jpg"])
        pickup = datetime.now(timezone.utc) + timedelta(days=3)
        response = await anon_client.post(
            BOOKINGS,
            json=booking_payload(
                car.id,
                pickup_date=pickup.isoformat(),
                return_date=(pickup - timedelta(days=1)).isoformat(),
            ),
        )
        assert response.status_code == 400
        assert response.json()["kind"] == "ValidationError"

    async def test_invalid_fields(self, anon_client):
        response = await anon_client.post(
            BOOKINGS,
            json=booking_payload("nope", user_email="not-an-email", total_price=0),
        )
        assert response.status_code == 400
        fields = {entry["field"] for entry in response.json()["fields"]}
        assert {"car_id", "user_email", "total_price"} <= fields


class TestManageBookings:
    async def test_list_requires_admin(self, anon_client):
        assert (await anon_client.get(BOOKINGS)).status_code == 401

    async def test_list_skips_bookings_of_deleted_cars(self, client, db, create_car):
        kept = await create_car(["a.jpg"], name="X5")
        gone = await create_car(["b.jpg"], name="X3")
        await client.post(BOOKINGS, json=booking_payload(kept.id))
        await client.post(BOOKINGS, json=booking_payload(gone.id))
        await car_crud.delete(db, gone.id)

        bookings = (await client.get(BOOKINGS)).json()
        assert [b["car"]["name"] for b in bookings] == ["X5"]

    async def test_status_update_and_delete(self, client, create_car):
        car = await create_car(["a.jpg"])
        booking = (await client.post(BOOKINGS, json=booking_payload(car.id))).json()["booking"]

        response = await client.patch(
            f"{BOOKINGS}/{booking['_id']}/status", json={"status": "completed"}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "completed"

        response = await client.patch(
            f"{BOOKINGS}/{booking['_id']}/status", json={"status": "lost"}
        )
        assert response.status_code == 400

        response = await client.delete(f"{BOOKINGS}/{booking['_id']}")
        assert response.json() == {"message": "Booking removed"}
        assert (await client.delete(f"{BOOKINGS}/{booking['_id']}")).status_code == 404

    async def test_finished_booking_allows_car_delete(self, client, create_car):
        car = await create_car(["a.jpg"])
        booking = (await client.post(BOOKINGS, json=booking_payload(car.id))).json()["booking"]
        assert (await client.delete(f"/api/cars/{car.id}")).status_code == 409

        await client.patch(f"{BOOKINGS}/{booking['_id']}/status", json={"status": "cancelled"})
        assert (await client.delete(f"/api/cars/{car.id}")).status_code == 200
