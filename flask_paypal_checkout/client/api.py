"""Async HTTP client for the checkout server's order endpoints."""

from __future__ import annotations

from typing import Any

import httpx

from flask_paypal_checkout.errors import CheckoutRequestError


class CheckoutApi:
    """Call ``/api/checkout-orders`` and ``/api/orders/<id>/...`` on the server.

    Args:
        base_url: Root URL of the checkout server (e.g. ``http://localhost:8888``).
        api_prefix: Prefix the order blueprint is mounted under.
        http: Optional :class:`httpx.AsyncClient`; one is created when omitted.
    """

    def __init__(
        self,
        base_url: str = "",
        *,
        api_prefix: str = "/api",
        http: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        self.prefix = api_prefix.rstrip("/")
        self._http = (
            http
            if http is not None
            else httpx.AsyncClient(base_url=base_url, timeout=timeout)
        )

    async def create_order(self, amount: str, payment_source: str) -> str:
        """Create an order and return its id."""
        data = await self._post(
            f"{self.prefix}/checkout-orders",
            json={"totalAmount": amount, "paymentSource": payment_source},
        )
        order_id = data.get("id") if isinstance(data, dict) else None
        if not order_id:
            raise CheckoutRequestError("Order response has no id")
        return order_id

    async def capture_order(self, order_id: str) -> dict[str, Any]:
        return await self._post(f"{self.prefix}/orders/{order_id}/capture")

    async def authorize_order(self, order_id: str) -> dict[str, Any]:
        return await self._post(f"{self.prefix}/orders/{order_id}/authorize")

    async def aclose(self) -> None:
        await self._http.aclose()

    async def _post(self, path: str, *, json: Any = None) -> Any:
        try:
            response = await self._http.post(path, json=json)
        except httpx.HTTPError as exc:
            raise CheckoutRequestError(f"Network error: {exc}") from exc
        if not response.is_success:
            raise CheckoutRequestError(
                f"HTTP error! status: {response.status_code}",
                status=response.status_code,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise CheckoutRequestError("Invalid JSON in server response") from exc
