"""
HTTP tests for the contact form and the dashboard counters.
"""

from datetime import datetime, timedelta, timezone


CONTACT = "/api/contact"

MESSAGE = {
    "first_name": "Omar",
    "last_name": "Benali",
    "email": "Omar@Example.com",
    "phone": "0611223344",
    "inquiry_type": "Long-term rental",
    "message": "Do you offer monthly rates?",
}


class TestContact:
    async def test_submit_message(self, anon_client):
        response = await anon_client.post(CONTACT, json=MESSAGE)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Thank you for your message! We will get back to you shortly."
        assert body["data"]["email"] == "omar@example.com"
        assert body["data"]["is_read"] is False

    async def test_missing_fields(self, anon_client):
        response = await anon_client.post(CONTACT, json={"email": "omar@example.com"})
        assert response.status_code == 400
        fields = {entry["field"] for entry in response.json()["fields"]}
        assert {"first_name", "last_name", "inquiry_type", "message"} <= fields

    async def test_admin_lifecycle(self, client):
        created = (await client.post(CONTACT, json=MESSAGE)).json()["data"]

        listing = (await client.get(CONTACT)).json()
        assert listing["count"] == 1
        assert listing["items"][0]["_id"] == created["_id"]

        response = await client.patch(f"{CONTACT}/{created['_id']}/read", json={"is_read": True})
        assert response.json()["is_read"] is True

        response = await client.delete(f"{CONTACT}/{created['_id']}")
        assert response.json() == {"message": "Message deleted successfully"}
        assert (await client.get(CONTACT)).json()["count"] == 0

    async def test_unknown_message(self, client):
        response = await client.patch(
            f"{CONTACT}/64b7f0c2a1b2c3d4e5f60718/read", json={"is_read": True}
        )
        assert response.status_code == 404

    async def test_list_requires_admin(self, anon_client):
        assert (await anon_client.get(CONTACT)).status_code == 401


class TestDashboardStats:
    async def test_counters(self, client, create_car):
        car = await create_car(["a.jpg"])
        await create_car(["b.jpg"], name="X3")

        pickup = datetime.now(timezone.utc) + timedelta(days=1)
        await client.post(
            "/api/bookings",
            json={
                "car_id": str(car.id),
                "user_email": "jane@example.com",
                "user_name": "Jane",
                "user_phone": "0600000000",
                "pickup_date": pickup.isoformat(),
                "return_date": (pickup + timedelta(days=2)).isoformat(),
                "total_price": 300,
            },
        )
        first = (await client.post(CONTACT, json=MESSAGE)).json()["data"]
        await client.post(CONTACT, json=MESSAGE)
        await client.patch(f"{CONTACT}/{first['_id']}/read", json={"is_read": True})

        response = await client.get("/api/stats/dashboard")
        assert response.status_code == 200
        assert response.json() == {"total_cars": 2, "new_orders": 1, "unread_messages": 1}

    async def test_requires_admin(self, anon_client):
        assert (await anon_client.get("/api/stats/dashboard")).status_code == 401
