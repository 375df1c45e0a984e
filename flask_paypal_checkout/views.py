"""Blueprint with the create, capture and authorize order routes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from flask import Blueprint, jsonify, request

from flask_paypal_checkout.errors import CheckoutError
from flask_paypal_checkout.gateway import DEFAULT_AMOUNT

if TYPE_CHECKING:
    from flask_paypal_checkout import PayPalCheckout


def read_order_request(data: Any) -> tuple[str, Any]:
    """Return ``(total_amount, payment_source)`` from a create-order body."""
    if not isinstance(data, dict):
        data = {}
    amount = data.get("totalAmount") or DEFAULT_AMOUNT
    source = data.get("paymentSource") or "paypal"
    return str(amount), source


def error_body(exc: CheckoutError) -> tuple[dict[str, Any], int]:
    """Return the JSON body and status code for an error raised by a view.

    The status is the one carried by the error: the upstream status for
    :class:`~flask_paypal_checkout.errors.UpstreamOrderError`, 500 when it
    has none of its own.
    """
    status = exc.status if exc.status else 500
    return exc.to_dict(), status


def create_blueprint(ext: "PayPalCheckout") -> Blueprint:
    """Return a Blueprint pre-configured with the extension instance."""

    bp = Blueprint("paypal_checkout", __name__)

    # ------------------------------------------------------------------
    # Create order
    # ------------------------------------------------------------------

    @bp.route("/checkout-orders", methods=["POST"])
    def create_checkout_order():
        """Create a PayPal order for the amount shown on the checkout page.

        JSON body:

        * ``totalAmount`` – decimal string (default ``"10.00"``)
        * ``paymentSource`` – ``paypal``, ``card``, ``venmo`` or ``applepay``
        """
        amount, source = read_order_request(request.get_json(silent=True))
        ext.log.info("checkout_order_requested", amount=amount, payment_source=source)
        order = ext.gateway.create_order(amount, source)
        return jsonify(order.to_dict())

    # ------------------------------------------------------------------
    # Capture / authorize
    # ------------------------------------------------------------------

    @bp.route("/orders/<order_id>/capture", methods=["POST"])
    def capture_order(order_id: str):
        """Capture an approved order."""
        ext.log.info("capture_requested", order_id=order_id)
        return jsonify(ext.gateway.capture_order(order_id))

    @bp.route("/orders/<order_id>/authorize", methods=["POST"])
    def authorize_order(order_id: str):
        """Authorize an approved order."""
        ext.log.info("authorize_requested", order_id=order_id)
        return jsonify(ext.gateway.authorize_order(order_id))

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------

    @bp.errorhandler(CheckoutError)
    def handle_checkout_error(exc: CheckoutError):
        ext.log.error(
            "checkout_request_failed",
            error=type(exc).__name__,
            status=exc.status,
            message=exc.message,
        )
        body, status = error_body(exc)
        return jsonify(body), status

    return bp
