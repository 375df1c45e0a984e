"""Application factory for running the checkout demo on its own."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from flask import Flask

from flask_paypal_checkout import PayPalCheckout
from flask_paypal_checkout.log import configure_logging


def create_app(config: dict | None = None) -> Flask:
    """Build a Flask app with the extension registered.

    ``.env`` is loaded first so ``CLIENT_ID`` / ``CLIENT_SECRET`` /
    ``BASE_URL`` can live there during development.
    """
    load_dotenv()
    configure_logging(os.environ.get("LOG_LEVEL", "INFO"))

    app = Flask(__name__)
    if config:
        app.config.update(config)
    PayPalCheckout(app)
    return app
