"""Shared pytest fixtures for flask-paypal-checkout tests."""

import json

import httpx
import pytest
from flask import Flask

from flask_paypal_checkout import PayPalCheckout
from flask_paypal_checkout.errors import CheckoutRequestError


def capture_body(order_id="ORDER1", amount="25.00", kind="captures", status="COMPLETED"):
    """Orders v2 capture/authorize response with a single payment entry."""
    return {
        "id": order_id,
        "status": "COMPLETED",
        "purchase_units": [
            {
                "payments": {
                    kind: [
                        {
                            "id": "TXN1",
                            "amount": {"value": amount, "currency_code": "USD"},
                            "status": status,
                        }
                    ]
                }
            }
        ],
    }


class FakePayPal:
    """In-memory stand-in for the PayPal REST API behind ``httpx.MockTransport``."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.token_status = 200
        self.token_error: Exception | None = None
        self.create_response = (201, {"id": "ORDER1", "status": "CREATED"})
        self.capture_response = (201, capture_body())
        self.authorize_response = (201, capture_body(kind="authorizations", status="CREATED"))

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/v1/oauth2/token":
            if self.token_error is not None:
                raise self.token_error
            if self.token_status != 200:
                return httpx.Response(self.token_status, json={"error": "invalid_client"})
            return httpx.Response(
                200,
                json={"access_token": "A21AA-token", "token_type": "Bearer", "expires_in": 32400},
            )

        if path == "/v2/checkout/orders":
            status, body = self.create_response
        elif path.endswith("/capture"):
            status, body = self.capture_response
        elif path.endswith("/authorize"):
            status, body = self.authorize_response
        else:
            return httpx.Response(404, text="not found")

        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def calls(self, path_suffix: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(path_suffix)]

    def order_calls(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/v2/")]

    @staticmethod
    def body(request: httpx.Request):
        return json.loads(request.content)


@pytest.fixture
def fake_paypal():
    return FakePayPal()


@pytest.fixture
def http(fake_paypal):
    """Sync httpx client routed to :class:`FakePayPal`."""
    with httpx.Client(transport=httpx.MockTransport(fake_paypal.handler)) as client:
        yield client


@pytest.fixture
def app(http, monkeypatch):
    """Flask app configured with sandbox-like settings and the fake PayPal API."""
    for name in ("CLIENT_ID", "CLIENT_SECRET", "BASE_URL"):
        monkeypatch.delenv(name, raising=False)

    application = Flask(__name__)
    application.config["TESTING"] = True
    application.config["PAYPAL_CLIENT_ID"] = "test-client-id"
    application.config["PAYPAL_CLIENT_SECRET"] = "test-client-secret"
    application.config["PAYPAL_BASE_URL"] = "https://shop.example.com"

    PayPalCheckout(application, http=http)

    yield application


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()


@pytest.fixture
def ext(app):
    """The PayPalCheckout extension instance."""
    return app.extensions["paypal_checkout"]


# ---------------------------------------------------------------------------
# Client-side fakes
# ---------------------------------------------------------------------------


class FakeCheckoutApi:
    """Records server calls; responses and failures are set per test."""

    def __init__(self, events=None):
        self.events = events if events is not None else []
        self.created: list[tuple[str, str]] = []
        self.captured: list[str] = []
        self.order_id = "ORDER1"
        self.capture_result = capture_body()
        self.create_error: Exception | None = None
        self.capture_error: Exception | None = None
        self.create_gate = None
        self.capture_gate = None

    async def create_order(self, amount, payment_source):
        self.events.append("create")
        self.created.append((amount, payment_source))
        if self.create_gate is not None:
            await self.create_gate.wait()
        if self.create_error is not None:
            raise self.create_error
        return self.order_id

    async def capture_order(self, order_id):
        self.events.append("capture")
        self.captured.append(order_id)
        if self.capture_gate is not None:
            await self.capture_gate.wait()
        if self.capture_error is not None:
            raise self.capture_error
        return self.capture_result


class RecordingDisplay:
    def __init__(self):
        self.notices: list[tuple[str, str]] = []
        self.successes: list[str] = []

    def show_order_info(self, title, message):
        self.notices.append((title, message))

    def show_success(self, message):
        self.successes.append(message)

    @property
    def titles(self):
        return [title for title, _ in self.notices]


class FakeWallet:
    def __init__(self, events=None, *, eligible=True):
        self.events = events if events is not None else []
        self.config_response = {
            "isEligible": eligible,
            "countryCode": "US",
            "currencyCode": "USD",
            "supportedNetworks": ["visa", "masterCard", "amex"],
            "merchantCapabilities": ["supports3DS"],
        }
        self.config_error: Exception | None = None
        self.validate_error: Exception | None = None
        self.confirm_error: Exception | None = None
        self.confirmed_order_id = None
        self.validations: list[tuple[str, str]] = []
        self.confirmations: list[dict] = []

    async def config(self):
        if self.config_error is not None:
            raise self.config_error
        return self.config_response

    async def validate_merchant(self, *, validation_url, display_name):
        self.events.append("validate")
        self.validations.append((validation_url, display_name))
        if self.validate_error is not None:
            raise self.validate_error
        return {"merchantSession": {"id": "MERCHANT_SESSION"}}

    async def confirm_order(self, *, order_id, token, billing_contact, shipping_contact):
        self.events.append("confirm")
        self.confirmations.append(
            {
                "order_id": order_id,
                "token": token,
                "billing_contact": billing_contact,
                "shipping_contact": shipping_contact,
            }
        )
        if self.confirm_error is not None:
            raise self.confirm_error
        return {"orderID": self.confirmed_order_id or order_id}


class FakeSession:
    def __init__(self, version, request, events):
        self.version = version
        self.request = request
        self.events = events
        self.began = False
        self.aborted = False
        self.merchant_session = None
        self.payment_statuses: list[int] = []

    def begin(self):
        self.began = True

    def abort(self):
        self.events.append("abort")
        self.aborted = True

    def complete_merchant_validation(self, merchant_session):
        self.events.append("validated")
        self.merchant_session = merchant_session

    def complete_payment(self, status):
        self.events.append(f"complete_payment:{status}")
        self.payment_statuses.append(status)


class SessionFactory:
    def __init__(self, events):
        self.events = events
        self.sessions: list[FakeSession] = []

    def __call__(self, version, request):
        session = FakeSession(version, request, self.events)
        self.sessions.append(session)
        return session


@pytest.fixture
def events():
    return []


@pytest.fixture
def fake_api(events):
    return FakeCheckoutApi(events)


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def wallet(events):
    return FakeWallet(events)


@pytest.fixture
def session_factory(events):
    return SessionFactory(events)


def request_error(status=500):
    return CheckoutRequestError(f"HTTP error! status: {status}", status=status)
