"""Stateless proxy for the three Orders v2 calls used by the checkout."""

from __future__ import annotations

import uuid
from typing import Any, Callable

import httpx

from flask_paypal_checkout.auth import SANDBOX_API_BASE, AccessTokenProvider
from flask_paypal_checkout.errors import UpstreamOrderError
from flask_paypal_checkout.log import get_logger
from flask_paypal_checkout.models import CURRENCY, Order, PaymentSource
from flask_paypal_checkout.payment_source import build_payment_source

DEFAULT_AMOUNT = "10.00"


def new_request_id() -> str:
    """Return a fresh ``PayPal-Request-Id`` value."""
    return uuid.uuid4().hex


class OrderGateway:
    """Translate create / capture / authorize into signed REST calls.

    Every call fetches its own access token and performs exactly one HTTP
    round trip. Nothing is cached and nothing is retried.

    Usage::

        tokens = AccessTokenProvider(client_id, client_secret)
        gateway = OrderGateway(
            tokens,
            return_url="https://shop.example.com/checkout",
            cancel_url="https://shop.example.com/checkout",
        )
        order = gateway.create_order("25.00", "paypal")
        capture = gateway.capture_order(order.id)
    """

    def __init__(
        self,
        token_provider: AccessTokenProvider,
        *,
        return_url: str,
        cancel_url: str,
        api_base: str = SANDBOX_API_BASE,
        http: httpx.Client | None = None,
        timeout: float = 30.0,
        request_id_factory: Callable[[], str] | None = None,
        strict_payment_source: bool = False,
        logger=None,
    ) -> None:
        self.token_provider = token_provider
        self.return_url = return_url
        self.cancel_url = cancel_url
        self.api_base = api_base.rstrip("/")
        self.strict_payment_source = strict_payment_source
        self._http = http if http is not None else httpx.Client(timeout=timeout)
        self._request_id = request_id_factory or new_request_id
        self._log = get_logger("order_gateway", logger)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create_order(
        self,
        amount: str = DEFAULT_AMOUNT,
        method: Any = PaymentSource.PAYPAL.value,
    ) -> Order:
        """Create a CAPTURE-intent order for *amount* USD paid with *method*."""
        payment_source = build_payment_source(
            method,
            return_url=self.return_url,
            cancel_url=self.cancel_url,
            strict=self.strict_payment_source,
        )
        body = {
            "intent": "CAPTURE",
            "purchase_units": [
                {"amount": {"currency_code": CURRENCY, "value": amount}}
            ],
            "payment_source": payment_source,
        }
        request_id = self._request_id()
        self._log.info(
            "order_create_requested",
            amount=amount,
            payment_source=str(method),
            request_id=request_id,
        )
        data = self._post(
            "/v2/checkout/orders",
            json=body,
            headers={"PayPal-Request-Id": request_id},
        )
        return Order.from_response(
            data, amount=amount, payment_source=PaymentSource.parse(method)
        )

    def capture_order(self, order_id: str) -> dict[str, Any]:
        """Capture the payment for an approved order."""
        self._log.info("order_capture_requested", order_id=order_id)
        return self._post(f"{self._order_path(order_id)}/capture")

    def authorize_order(self, order_id: str) -> dict[str, Any]:
        """Authorize (reserve) the payment for an approved order."""
        self._log.info("order_authorize_requested", order_id=order_id)
        return self._post(f"{self._order_path(order_id)}/authorize")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _order_path(order_id: str) -> str:
        if not order_id:
            raise ValueError("order_id is required")
        return f"/v2/checkout/orders/{order_id}"

    def _post(
        self,
        path: str,
        *,
        json: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        token = self.token_provider.get_access_token()
        all_headers = {
            "Content-Type": "application/json",
            "Authorization": token.authorization,
        }
        all_headers.update(headers or {})

        try:
            response = self._http.post(
                f"{self.api_base}{path}", json=json, headers=all_headers
            )
        except httpx.HTTPError as exc:
            self._log.error("upstream_unreachable", path=path, error=str(exc))
            raise UpstreamOrderError(502, str(exc)) from exc

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> dict[str, Any]:
        if response.status_code in (200, 201):
            try:
                return response.json()
            except ValueError as exc:
                self._log.error(
                    "upstream_malformed_body", status=response.status_code, body=response.text
                )
                raise UpstreamOrderError(502, response.text) from exc

        self._log.error(
            "upstream_error",
            status=response.status_code,
            reason=response.reason_phrase,
            body=response.text,
        )
        raise UpstreamOrderError(response.status_code, response.text)
