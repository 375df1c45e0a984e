"""flask_paypal_checkout – Flask/Quart extension for a PayPal hosted checkout."""

from __future__ import annotations

import os

from flask_paypal_checkout.auth import SANDBOX_API_BASE, AccessTokenProvider
from flask_paypal_checkout.errors import (
    CheckoutError,
    CredentialsMissing,
    UnknownPaymentSource,
    UpstreamAuthError,
    UpstreamOrderError,
)
from flask_paypal_checkout.gateway import OrderGateway
from flask_paypal_checkout.log import get_logger
from flask_paypal_checkout.pages import DEFAULT_CSP, create_pages_blueprint
from flask_paypal_checkout.version import __version__
from flask_paypal_checkout.views import create_blueprint

__all__ = [
    "PayPalCheckout",
    "CheckoutError",
    "CredentialsMissing",
    "UnknownPaymentSource",
    "UpstreamAuthError",
    "UpstreamOrderError",
    "__version__",
]

DEFAULT_BASE_URL = "https://pp-simple.onrender.com"


def _is_quart_app(app) -> bool:
    """Return ``True`` when *app* is a :class:`quart.Quart` instance."""
    try:
        from quart import Quart

        return isinstance(app, Quart)
    except ImportError:
        return False


class PayPalCheckout:
    """Flask/Quart extension that proxies PayPal Orders v2 for the checkout page.

    Usage – application factory pattern::

        from flask import Flask
        from flask_paypal_checkout import PayPalCheckout

        checkout = PayPalCheckout()

        def create_app():
            app = Flask(__name__)
            checkout.init_app(app)
            return app

    Usage – direct initialisation::

        app = Flask(__name__)
        checkout = PayPalCheckout(app)

    Usage – with Quart (async)::

        from quart import Quart

        app = Quart(__name__)
        checkout = PayPalCheckout(app)   # async API blueprint selected automatically

    Configuration keys (set on ``app.config``, environment in brackets):

    ``PAYPAL_CLIENT_ID`` [``CLIENT_ID``]
        REST app client id; also injected into the checkout page.
    ``PAYPAL_CLIENT_SECRET`` [``CLIENT_SECRET``]
        REST app secret.
    ``PAYPAL_API_BASE``
        PayPal API root (default: sandbox).
    ``PAYPAL_BASE_URL`` [``BASE_URL``]
        Public URL of this site; return/cancel URLs point at its ``/checkout``.
    ``PAYPAL_API_PREFIX``
        URL prefix for the order endpoints (default: ``"/api"``).
    ``PAYPAL_STRICT_PAYMENT_SOURCE``
        Reject unknown ``paymentSource`` tags with 400 instead of sending an
        empty fragment (default: ``False``).
    ``PAYPAL_DOMAIN_ASSOCIATION_FILE``
        Path of the Apple Pay domain-association file served under
        ``/.well-known/``.
    ``PAYPAL_CSP``
        Content-Security-Policy header value (``None`` disables the header).
    ``PAYPAL_CHECKOUT_SCRIPT``
        URL of the script that renders the buttons and card fields on
        ``/checkout``. The page only loads the SDKs without it.
    ``PAYPAL_HTTP_TIMEOUT``
        Outbound request timeout in seconds (default: ``30.0``).

    A custom *gateway* can be passed instead, e.g. in tests::

        checkout = PayPalCheckout(app, gateway=OrderGateway(tokens, ...))
    """

    def __init__(self, app=None, *, gateway=None, http=None, logger=None) -> None:
        self._gateway: OrderGateway | None = gateway
        self._http = http
        self._logger = logger

        if app is not None:
            self.init_app(app)

    # ------------------------------------------------------------------
    # Initialisation
    # ------------------------------------------------------------------

    def init_app(self, app, *, gateway=None, http=None) -> None:
        """Initialise the extension against *app* (Flask or Quart)."""
        if gateway is not None:
            self._gateway = gateway
        if http is not None:
            self._http = http

        app.config.setdefault("PAYPAL_CLIENT_ID", os.environ.get("CLIENT_ID"))
        app.config.setdefault("PAYPAL_CLIENT_SECRET", os.environ.get("CLIENT_SECRET"))
        app.config.setdefault("PAYPAL_API_BASE", SANDBOX_API_BASE)
        app.config.setdefault(
            "PAYPAL_BASE_URL", os.environ.get("BASE_URL") or DEFAULT_BASE_URL
        )
        app.config.setdefault("PAYPAL_API_PREFIX", "/api")
        app.config.setdefault("PAYPAL_STRICT_PAYMENT_SOURCE", False)
        app.config.setdefault("PAYPAL_DOMAIN_ASSOCIATION_FILE", None)
        app.config.setdefault("PAYPAL_CSP", DEFAULT_CSP)
        app.config.setdefault("PAYPAL_CHECKOUT_SCRIPT", None)
        app.config.setdefault("PAYPAL_HTTP_TIMEOUT", 30.0)

        if self._gateway is None:
            self._gateway = self._build_gateway(app.config)

        if _is_quart_app(app):
            from flask_paypal_checkout.quart_views import (
                create_async_blueprint,
                create_async_pages_blueprint,
            )

            blueprint = create_async_blueprint(self)
            pages = create_async_pages_blueprint(self)
        else:
            blueprint = create_blueprint(self)
            pages = create_pages_blueprint(self)

        app.register_blueprint(blueprint, url_prefix=app.config["PAYPAL_API_PREFIX"])
        app.register_blueprint(pages)

        app.extensions["paypal_checkout"] = self

    def _build_gateway(self, config) -> OrderGateway:
        base_url = config["PAYPAL_BASE_URL"].rstrip("/")
        timeout = config["PAYPAL_HTTP_TIMEOUT"]
        tokens = AccessTokenProvider(
            config["PAYPAL_CLIENT_ID"],
            config["PAYPAL_CLIENT_SECRET"],
            api_base=config["PAYPAL_API_BASE"],
            http=self._http,
            timeout=timeout,
            logger=self._logger,
        )
        return OrderGateway(
            tokens,
            return_url=f"{base_url}/checkout",
            cancel_url=f"{base_url}/checkout",
            api_base=config["PAYPAL_API_BASE"],
            http=self._http,
            timeout=timeout,
            strict_payment_source=config["PAYPAL_STRICT_PAYMENT_SOURCE"],
            logger=self._logger,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def gateway(self) -> OrderGateway:
        """The :class:`~flask_paypal_checkout.gateway.OrderGateway` in use."""
        if self._gateway is None:
            raise RuntimeError(
                "PayPalCheckout extension not initialised. Call init_app(app) first."
            )
        return self._gateway

    @property
    def log(self):
        """structlog logger bound to the controller component."""
        return get_logger("order_controller", self._logger)
