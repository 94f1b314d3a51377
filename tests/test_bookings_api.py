import pytest
from sqlalchemy import select

from app.cores.token import create_access_token
from app.models import Booking, Order, Profile
from tests.test_db import booking_payload


def auth_headers(user_id="user-1"):
    token = create_access_token({"user_id": user_id, "email": "g@x.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_direct_booking_requires_token(client):
    response = await client.post("/api/bookings/direct/", json=booking_payload())

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalid_token_is_rejected(client):
    response = await client.post(
        "/api/bookings/direct/", json=booking_payload(), headers={"Authorization": "Bearer nope"}
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_direct_booking_confirms_without_order(client, session_factory, gateway):
    response = await client.post("/api/bookings/direct/", json=booking_payload(), headers=auth_headers())

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["data"]["status"] == "confirmed"
    assert data["data"]["total_amount"] == 100000
    assert gateway.sessions == {}

    async with session_factory() as session:
        booking = (await session.execute(select(Booking))).scalar_one()
        orders = (await session.execute(select(Order))).scalars().all()
    assert booking.user_id == "user-1"
    assert orders == []


@pytest.mark.asyncio
async def test_direct_booking_blocks_the_slots(client):
    await client.post("/api/bookings/direct/", json=booking_payload(), headers=auth_headers())

    response = await client.post("/api/bookings/direct/", json=booking_payload(), headers=auth_headers("user-2"))

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_dashboard_lists_own_bookings(client, session_factory):
    async with session_factory() as session:
        session.add(Profile(user_id="user-1", email="g@x.com", first_name="Guru", phone="+911234567890"))
        await session.commit()
    await client.post("/api/bookings/direct/", json=booking_payload(), headers=auth_headers())
    await client.post(
        "/api/bookings/direct/",
        json=booking_payload(startTime="07:00 PM", endTime="07:30 PM", selectedSlots=["07:00 PM"], totalAmount=50000),
        headers=auth_headers("user-2"),
    )

    response = await client.get("/api/bookings/mine/", headers=auth_headers())

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["profile"]["first_name"] == "Guru"
    assert len(data["bookings"]) == 1
    assert data["bookings"][0]["start_time"] == "05:00 PM"


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}
