"""Quart async app using flask-paypal-checkout.

Requires the quart extra::

    pip install "flask-paypal-checkout[quart]"

Run with::

    python examples/quart_app.py

Then use the same endpoints as the Flask version:

    curl -X POST http://localhost:8888/api/checkout-orders \\
         -H "Content-Type: application/json" \\
         -d '{"totalAmount": "9.99", "paymentSource": "card"}'

    curl -X POST http://localhost:8888/api/orders/ORDER_ID/authorize
"""

from quart import Quart

from flask_paypal_checkout import PayPalCheckout

app = Quart(__name__)
app.config["PAYPAL_BASE_URL"] = "http://localhost:8888"

# PayPalCheckout detects Quart and registers the async blueprints automatically
ext = PayPalCheckout(app)

if __name__ == "__main__":
    app.run(port=8888, debug=True)
