"""Checkout page, Apple Pay domain association and the CSP header."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from flask import Blueprint, abort, current_app, redirect, render_template, send_file

if TYPE_CHECKING:
    from flask_paypal_checkout import PayPalCheckout

DOMAIN_ASSOCIATION_PATH = "/.well-known/apple-developer-merchantid-domain-association"

DEFAULT_CSP = (
    "default-src 'self'; "
    "script-src 'self' 'unsafe-inline' https://www.paypal.com https://sandbox.paypal.com "
    "https://*.paypal.com https://*.paypalobjects.com; "
    "connect-src 'self' https://sandbox.paypal.com https://*.paypal.com "
    "https://api.sandbox.paypal.com https://api.paypal.com; "
    "frame-src https://sandbox.paypal.com https://*.paypal.com https://*.paypalobjects.com; "
    "img-src 'self' data: https://*.paypal.com https://*.paypalobjects.com; "
    "style-src 'self' 'unsafe-inline' https://*.paypal.com; "
    "font-src 'self' https://*.paypal.com;"
)


def sdk_url(client_id: str) -> str:
    """Return the JS SDK URL with every component the checkout page uses."""
    return (
        "https://www.paypal.com/sdk/js?components=buttons,card-fields,messages,applepay"
        f"&intent=capture&client-id={client_id}"
        "&enable-funding=venmo,paylater,applepay&currency=USD"
    )


def domain_association_file(config) -> str | None:
    """Return the configured domain-association path if the file exists."""
    path = config.get("PAYPAL_DOMAIN_ASSOCIATION_FILE")
    if path and os.path.isfile(path):
        return os.path.abspath(path)
    return None


def apply_csp(response, config):
    csp = config.get("PAYPAL_CSP")
    if csp:
        response.headers.setdefault("Content-Security-Policy", csp)
    return response


def create_pages_blueprint(ext: "PayPalCheckout") -> Blueprint:
    """Return the blueprint serving the checkout page (Flask only).

    Quart applications get :func:`~flask_paypal_checkout.quart_views.create_async_pages_blueprint`.
    """

    bp = Blueprint("paypal_pages", __name__, template_folder="templates")

    @bp.route("/")
    def index():
        return redirect("/checkout")

    @bp.route("/checkout")
    def checkout():
        """Render the checkout page with the client id injected."""
        client_id = current_app.config.get("PAYPAL_CLIENT_ID")
        if not client_id:
            ext.log.error("client_id_missing")
            return "PayPal configuration error", 500
        return render_template(
            "checkout.html",
            client_id=client_id,
            sdk_url=sdk_url(client_id),
            checkout_script=current_app.config.get("PAYPAL_CHECKOUT_SCRIPT"),
        )

    @bp.route(DOMAIN_ASSOCIATION_PATH)
    def domain_association():
        path = domain_association_file(current_app.config)
        if path is None:
            abort(404)
        return send_file(path, mimetype="application/octet-stream")

    @bp.after_app_request
    def content_security_policy(response):
        return apply_csp(response, current_app.config)

    return bp
