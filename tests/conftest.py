import pytest
from fastapi.testclient import TestClient

from checkout_service.config import Settings
from checkout_service.main import create_app


class FakePaymentClient:
    """Stands in for StripePaymentClient; records every session request."""

    def __init__(self, session_id="sess_abc", error=None):
        self.session_id = session_id
        self.error = error
        self.calls = []

    async def create_checkout_session(self, params):
        self.calls.append(params)
        if self.error is not None:
            raise self.error
        return self.session_id


@pytest.fixture
def settings():
    return Settings(stripe_secret_key="sk_test_dummy", frontend_url="http://shop.test/", log_file="")


@pytest.fixture
def payment_client():
    return FakePaymentClient()


@pytest.fixture
def client(settings, payment_client):
    app = create_app(settings, payment_client)
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def valid_order():
    return {
        "items": [{"id": "1", "name": "Widget", "price": 19.99, "quantity": 2}],
        "address": "12 Main St",
    }
