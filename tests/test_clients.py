import asyncio
from types import SimpleNamespace

import pytest
import stripe

from checkout_service.clients import CardDeclinedError, PaymentServiceError, StripePaymentClient


@pytest.fixture
def make_client():
    created = []

    def factory(create_async, timeout=10.0):
        client = StripePaymentClient("sk_test_dummy", timeout=timeout)
        sessions = SimpleNamespace(create_async=create_async)
        client.stripe = SimpleNamespace(v1=SimpleNamespace(checkout=SimpleNamespace(sessions=sessions)))
        created.append(client)
        return client

    yield factory
    for client in created:
        asyncio.run(client.aclose())


def test_returns_session_id(make_client):
    received = []

    async def create_async(params):
        received.append(params)
        return SimpleNamespace(id="cs_test_abc")

    client = make_client(create_async)
    session_id = asyncio.run(client.create_checkout_session({"mode": "payment"}))
    assert session_id == "cs_test_abc"
    assert received == [{"mode": "payment"}]


def test_card_error_becomes_card_declined(make_client):
    async def create_async(params):
        raise stripe.CardError("Your card was declined.", None, "card_declined")

    client = make_client(create_async)
    with pytest.raises(CardDeclinedError):
        asyncio.run(client.create_checkout_session({}))


@pytest.mark.parametrize(
    "error",
    [
        stripe.APIConnectionError("Network error"),
        stripe.AuthenticationError("Invalid API Key provided"),
        stripe.InvalidRequestError("Missing line_items", "line_items"),
    ],
)
def test_other_stripe_errors_become_payment_service_error(make_client, error):
    async def create_async(params):
        raise error

    client = make_client(create_async)
    with pytest.raises(PaymentServiceError) as exc_info:
        asyncio.run(client.create_checkout_session({}))
    assert not isinstance(exc_info.value, CardDeclinedError)


def test_timeout_becomes_payment_service_error(make_client):
    async def create_async(params):
        await asyncio.sleep(5)

    client = make_client(create_async, timeout=0.05)
    with pytest.raises(PaymentServiceError, match="Timed out"):
        asyncio.run(client.create_checkout_session({}))


def test_aclose_closes_http_transport():
    client = StripePaymentClient("sk_test_dummy")
    closed = []

    async def close_async():
        closed.append(True)

    client.http_client.close_async = close_async
    asyncio.run(client.aclose())
    assert closed == [True]
