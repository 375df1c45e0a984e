"""Async blueprint for Quart applications.

This module mirrors :mod:`flask_paypal_checkout.views` but uses ``async def``
view functions and awaits Quart's coroutine-based request helpers
(``await request.get_json()``).

It is selected automatically by
:meth:`~flask_paypal_checkout.PayPalCheckout.init_app` when the application
is a :class:`quart.Quart` instance.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from flask_paypal_checkout.errors import CheckoutError
from flask_paypal_checkout.views import error_body, read_order_request

if TYPE_CHECKING:
    from flask_paypal_checkout import PayPalCheckout


def create_async_blueprint(ext: "PayPalCheckout"):
    """Return a Quart Blueprint pre-configured with the extension instance."""
    try:
        from quart import Blueprint, jsonify, request
    except ImportError as exc:  # pragma: no cover
        raise ImportError(
            "quart is required for flask_paypal_checkout.quart_views. "
            "Install it with: pip install 'flask-paypal-checkout[quart]'"
        ) from exc

    bp = Blueprint("paypal_checkout", __name__)

    @bp.route("/checkout-orders", methods=["POST"])
    async def create_checkout_order():
        """Create a PayPal order for the amount shown on the checkout page."""
        amount, source = read_order_request(await request.get_json(silent=True))
        ext.log.info("checkout_order_requested", amount=amount, payment_source=source)
        order = ext.gateway.create_order(amount, source)
        return jsonify(order.to_dict())

    @bp.route("/orders/<order_id>/capture", methods=["POST"])
    async def capture_order(order_id: str):
        """Capture an approved order."""
        ext.log.info("capture_requested", order_id=order_id)
        return jsonify(ext.gateway.capture_order(order_id))

    @bp.route("/orders/<order_id>/authorize", methods=["POST"])
    async def authorize_order(order_id: str):
        """Authorize an approved order."""
        ext.log.info("authorize_requested", order_id=order_id)
        return jsonify(ext.gateway.authorize_order(order_id))

    @bp.errorhandler(CheckoutError)
    async def handle_checkout_error(exc: CheckoutError):
        ext.log.error(
            "checkout_request_failed",
            error=type(exc).__name__,
            status=exc.status,
            message=exc.message,
        )
        body, status = error_body(exc)
        return jsonify(body), status

    return bp


def create_async_pages_blueprint(ext: "PayPalCheckout"):
    """Return the Quart variant of :func:`~flask_paypal_checkout.pages.create_pages_blueprint`."""
    from quart import Blueprint, abort, current_app, redirect, render_template, send_file

    from flask_paypal_checkout.pages import (
        DOMAIN_ASSOCIATION_PATH,
        apply_csp,
        domain_association_file,
        sdk_url,
    )

    bp = Blueprint("paypal_pages", __name__, template_folder="templates")

    @bp.route("/")
    async def index():
        return redirect("/checkout")

    @bp.route("/checkout")
    async def checkout():
        """Render the checkout page with the client id injected."""
        client_id = current_app.config.get("PAYPAL_CLIENT_ID")
        if not client_id:
            ext.log.error("client_id_missing")
            return "PayPal configuration error", 500
        return await render_template(
            "checkout.html",
            client_id=client_id,
            sdk_url=sdk_url(client_id),
            checkout_script=current_app.config.get("PAYPAL_CHECKOUT_SCRIPT"),
        )

    @bp.route(DOMAIN_ASSOCIATION_PATH)
    async def domain_association():
        path = domain_association_file(current_app.config)
        if path is None:
            abort(404)
        return await send_file(path, mimetype="application/octet-stream")

    @bp.after_app_request
    async def content_security_policy(response):
        return apply_csp(response, current_app.config)

    return bp
