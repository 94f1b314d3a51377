from datetime import UTC, datetime, timedelta

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from app.cores.token import create_access_token
from app.models import Booking, Order
from app.repositories.order_repository import OrderRepository
from app.services.bookings.checkout_service import REQUIRED_FIELDS
from tests.test_db import booking_payload, tomorrow


ALIASES = {
    "facility_id": "facilityId",
    "activity_name": "activityName",
    "facility_name": "facilityName",
    "booking_date": "bookingDate",
    "start_time": "startTime",
    "end_time": "endTime",
    "selected_slots": "selectedSlots",
    "total_amount": "totalAmount",
    "customer_email": "customerEmail",
    "customer_phone": "customerPhone",
}


async def count_rows(session_factory, model):
    async with session_factory() as session:
        return (await session.execute(select(func.count()).select_from(model))).scalar_one()


@pytest.mark.asyncio
async def test_create_checkout_creates_pending_order(client, session_factory, gateway):
    response = await client.post("/api/payments/create-payment/", json=booking_payload())

    assert response.status_code == 200
    data = response.json()
    assert data["url"] == f"https://checkout.stripe.test/{data['sessionId']}"
    assert data["orderId"]

    stripe_session = gateway.sessions[data["sessionId"]]
    assert stripe_session["line_item"]["price_data"]["unit_amount"] == 100000
    assert stripe_session["line_item"]["price_data"]["currency"] == "inr"
    assert stripe_session["line_item"]["price_data"]["product_data"]["name"] == "PS5 Gaming - PS5 Station 1"
    assert stripe_session["customer_email"] == "g@x.com"
    assert stripe_session["success_url"].endswith("/booking-success?session_id={CHECKOUT_SESSION_ID}")
    assert stripe_session["metadata"]["user_id"] == "guest"

    async with session_factory() as session:
        order = (await session.execute(
            select(Order).where(Order.payment_session_id == data["sessionId"])
        )).scalar_one()
    assert order.id == data["orderId"]
    assert order.status == "pending"
    assert order.amount == 100000
    assert order.selected_slots == ["05:00 PM", "05:30 PM"]
    assert order.user_id is None
    assert await count_rows(session_factory, Booking) == 0


@pytest.mark.asyncio
async def test_create_checkout_reuses_existing_customer(client, gateway):
    gateway.customers["g@x.com"] = "cus_123"

    response = await client.post("/api/payments/create-payment/", json=booking_payload())

    assert response.status_code == 200
    stripe_session = gateway.sessions[response.json()["sessionId"]]
    assert stripe_session["customer_id"] == "cus_123"


@pytest.mark.asyncio
async def test_create_checkout_stamps_authenticated_user(client, session_factory):
    token = create_access_token({"user_id": "user-1", "email": "g@x.com"})

    response = await client.post(
        "/api/payments/create-payment/",
        json=booking_payload(),
        headers={"Authorization": f"Bearer {token}"},
    )

    assert response.status_code == 200
    async with session_factory() as session:
        order = (await session.execute(select(Order))).scalar_one()
    assert order.user_id == "user-1"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", REQUIRED_FIELDS)
@pytest.mark.parametrize("empty", [None, ""])
async def test_missing_field_is_rejected_without_order(client, session_factory, gateway, field, empty):
    value = [] if field == "selected_slots" and empty == "" else empty
    if field == "total_amount" and empty == "":
        value = 0
    payload = booking_payload(**{ALIASES[field]: value})

    response = await client.post("/api/payments/create-payment/", json=payload)

    assert response.status_code == 400
    assert "error" in response.json()
    assert gateway.sessions == {}
    assert await count_rows(session_factory, Order) == 0


@pytest.mark.asyncio
async def test_amount_must_match_selected_slots(client, session_factory, gateway):
    response = await client.post("/api/payments/create-payment/", json=booking_payload(totalAmount=50000))

    assert response.status_code == 400
    assert response.json()["error"] == "Total amount does not match the selected slots"
    assert gateway.sessions == {}


@pytest.mark.asyncio
async def test_time_range_must_match_selected_slots(client, gateway):
    response = await client.post("/api/payments/create-payment/", json=booking_payload(endTime="07:00 PM"))

    assert response.status_code == 400
    assert gateway.sessions == {}


@pytest.mark.asyncio
async def test_unavailable_facility_is_rejected(client, gateway):
    payload = booking_payload(facilityId="f2", facilityName="PS5 Station 2")

    response = await client.post("/api/payments/create-payment/", json=payload)

    assert response.status_code == 409
    assert gateway.sessions == {}


@pytest.mark.asyncio
async def test_already_booked_slot_is_rejected(client, session_factory, gateway):
    async with session_factory() as session:
        session.add(Booking(
            facility_id="f1", booking_date=tomorrow(), start_time="05:30 PM", end_time="06:00 PM",
            total_amount=50000, customer_email="other@x.com", customer_phone="1", status="confirmed",
        ))
        await session.commit()

    response = await client.post("/api/payments/create-payment/", json=booking_payload())

    assert response.status_code == 409
    assert "05:30 PM" in response.json()["error"]
    assert gateway.sessions == {}


@pytest.mark.asyncio
async def test_provider_failure_writes_no_order(client, session_factory, gateway):
    gateway.fail = True

    response = await client.post("/api/payments/create-payment/", json=booking_payload())

    assert response.status_code == 502
    assert response.json()["error"] == "Payment provider is unavailable, please try again"
    assert await count_rows(session_factory, Order) == 0


@pytest.mark.asyncio
async def test_order_write_failure_is_reported(client, session_factory, gateway, monkeypatch, caplog):
    async def broken_add(self, order):
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(OrderRepository, "add", broken_add)

    response = await client.post("/api/payments/create-payment/", json=booking_payload())

    assert response.status_code == 500
    assert response.json()["error"] == "Could not save your order, please try again"
    # la sesión de Stripe existe pero no tiene orden
    assert list(gateway.sessions) == ["cs_test_1"]
    assert "cs_test_1" in caplog.text
    assert await count_rows(session_factory, Order) == 0


@pytest.mark.asyncio
async def test_second_checkout_for_held_slots_is_rejected(client, session_factory, gateway):
    first = await client.post("/api/payments/create-payment/", json=booking_payload())
    second = await client.post(
        "/api/payments/create-payment/", json=booking_payload(customerEmail="other@x.com")
    )

    assert first.status_code == 200
    assert second.status_code == 409
    assert "05:00 PM" in second.json()["error"]
    assert list(gateway.sessions) == [first.json()["sessionId"]]
    assert await count_rows(session_factory, Order) == 1

    # solo la primera orden llega a reserva
    confirmed = await client.get("/api/bookings/success/", params={"session_id": first.json()["sessionId"]})
    assert confirmed.status_code == 200
    assert await count_rows(session_factory, Booking) == 1


@pytest.mark.asyncio
async def test_expired_pending_order_releases_its_slots(client, session_factory):
    two_hours_ago = datetime.now(UTC).replace(tzinfo=None) - timedelta(hours=2)
    async with session_factory() as session:
        session.add(Order(
            facility_id="f1", payment_session_id="cs_abandoned", booking_date=tomorrow(),
            start_time="05:00 PM", end_time="06:00 PM", selected_slots=["05:00 PM", "05:30 PM"],
            amount=100000, currency="inr", customer_email="old@x.com", customer_phone="1",
            activity_name="PS5 Gaming", facility_name="PS5 Station 1", status="pending",
            created_at=two_hours_ago,
        ))
        await session.commit()

    response = await client.post("/api/payments/create-payment/", json=booking_payload())

    assert response.status_code == 200


@pytest.mark.asyncio
async def test_same_slot_spelled_twice_is_a_duplicate(client, session_factory, gateway):
    payload = booking_payload(
        selectedSlots=["05:00 PM", "5:00 PM"], endTime="05:30 PM", totalAmount=100000
    )

    response = await client.post("/api/payments/create-payment/", json=payload)

    assert response.status_code == 400
    assert response.json()["error"] == "Duplicate time slots selected"
    assert gateway.sessions == {}
    assert await count_rows(session_factory, Order) == 0


@pytest.mark.asyncio
async def test_slot_labels_are_stored_normalized(client, session_factory):
    payload = booking_payload(selectedSlots=["5:30 PM", "5:00 PM"], startTime="5:00 PM")

    response = await client.post("/api/payments/create-payment/", json=payload)

    assert response.status_code == 200
    async with session_factory() as session:
        order = (await session.execute(select(Order))).scalar_one()
    assert order.selected_slots == ["05:30 PM", "05:00 PM"]
    assert (order.start_time, order.end_time) == ("05:00 PM", "06:00 PM")


@pytest.mark.asyncio
async def test_display_names_come_from_the_catalog(client, session_factory, gateway):
    payload = booking_payload(activityName="Free Gaming", facilityName="VIP Lounge")

    response = await client.post("/api/payments/create-payment/", json=payload)

    assert response.status_code == 200
    stripe_session = gateway.sessions[response.json()["sessionId"]]
    assert stripe_session["line_item"]["price_data"]["product_data"]["name"] == "PS5 Gaming - PS5 Station 1"
    async with session_factory() as session:
        order = (await session.execute(select(Order))).scalar_one()
    assert (order.activity_name, order.facility_name) == ("PS5 Gaming", "PS5 Station 1")
