"""Exception hierarchy shared by the server proxy and the client orchestrator.

Server-side errors carry an HTTP ``status`` so the blueprint error handler
can pass it straight through to the response::

    try:
        gateway.capture_order(order_id)
    except CheckoutError as exc:
        return jsonify(exc.to_dict()), exc.status
"""

from __future__ import annotations

import json
from typing import Any


class CheckoutError(Exception):
    """Base class for every error raised by flask-paypal-checkout."""

    #: HTTP status used when the error reaches a view.
    status: int = 500

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status is not None:
            self.status = status

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON error body rendered by the views."""
        return {"message": self.message, "status": self.status}


class CredentialsMissing(CheckoutError):
    """Client id or secret is not configured."""

    status = 500


class UpstreamAuthError(CheckoutError):
    """The OAuth client-credentials exchange failed."""

    status = 502


class UpstreamOrderError(CheckoutError):
    """A PayPal Orders REST call returned a non-success response.

    Attributes:
        status: The upstream HTTP status, passed through unchanged.
        body: The raw upstream response body (text).
    """

    def __init__(self, status: int, body: str) -> None:
        super().__init__(body or f"PayPal API error {status}", status=status)
        self.body = body

    @property
    def details(self) -> Any:
        """The upstream body decoded as JSON, or the raw text."""
        try:
            return json.loads(self.body)
        except (ValueError, TypeError):
            return self.body

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["details"] = self.details
        return data


class UnknownPaymentSource(CheckoutError):
    """Raised in strict mode for an unrecognised payment-source tag."""

    status = 400


class CheckoutRequestError(CheckoutError):
    """A call from the client orchestrator to the checkout server failed."""


class ValidationFailed(CheckoutError):
    """The wallet merchant-validation handshake was rejected."""


class SessionAbandoned(CheckoutError):
    """The payer cancelled a wallet session. Terminal, not a failure."""
