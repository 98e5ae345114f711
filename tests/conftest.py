"""
Pytest configuration and shared fixtures.

The Razorpay SDK is never called: routes get a PaymentService wired to an
in-memory FakeGateway through FastAPI dependency overrides.
"""
from typing import Any, Dict, Generator, List

import pytest
from fastapi.testclient import TestClient

from signalpay.api.deps import get_payment_service
from signalpay.core.config import Settings, get_settings
from signalpay.core.errors import GatewayError
from signalpay.main import app
from signalpay.services.gateway import PaymentGateway
from signalpay.services.payment_service import PaymentService

TEST_KEY_ID = "rzp_test_key"
TEST_SECRET = "testsecret"


class FakeGateway(PaymentGateway):
    """Records calls and answers like Razorpay would."""

    def __init__(self, fail_create: bool = False, fail_fetch: bool = False):
        self.fail_create = fail_create
        self.fail_fetch = fail_fetch
        self.orders: List[Dict[str, Any]] = []
        self.fetched: List[str] = []

    def create_order(self, options: Dict[str, Any]) -> Dict[str, Any]:
        self.orders.append(options)
        if self.fail_create:
            raise GatewayError("Authentication failed")
        return {
            "id": f"order_test_{len(self.orders)}",
            "entity": "order",
            "amount": options["amount"],
            "currency": options["currency"],
            "receipt": options["receipt"],
            "status": "created",
        }

    def fetch_payment(self, payment_id: str) -> Dict[str, Any]:
        self.fetched.append(payment_id)
        if self.fail_fetch:
            raise GatewayError("Connection reset by peer", transient=True)
        return {
            "id": payment_id,
            "entity": "payment",
            "amount": 49900,
            "currency": "INR",
            "status": "captured",
            "method": "upi",
            "email": "reader@example.com",
            "contact": "+919999999999",
        }


class StepClock:
    """Deterministic clock advancing one millisecond per call."""

    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        value = self.now
        self.now += 0.001
        return value


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def service(gateway: FakeGateway, clock: StepClock) -> PaymentService:
    return PaymentService(gateway, TEST_KEY_ID, TEST_SECRET, clock=clock)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(RAZORPAY_KEY_ID=TEST_KEY_ID, RAZORPAY_SECRET=TEST_SECRET, ENABLE_AUTH=False)


@pytest.fixture
def client(service: PaymentService, test_settings: Settings) -> Generator[TestClient, None, None]:
    app.dependency_overrides[get_payment_service] = lambda: service
    app.dependency_overrides[get_settings] = lambda: test_settings

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()
