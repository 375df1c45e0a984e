"""Basic Flask app using flask-paypal-checkout against the PayPal sandbox.

Set the sandbox REST credentials first::

    export CLIENT_ID=...
    export CLIENT_SECRET=...

Run with::

    python examples/basic_app.py

Then open http://localhost:8888/checkout in your browser or use curl:

    # Create an order
    curl -X POST http://localhost:8888/api/checkout-orders \\
         -H "Content-Type: application/json" \\
         -d '{"totalAmount": "25.00", "paymentSource": "paypal"}'

    # Capture it once the payer has approved (replace ORDER_ID)
    curl -X POST http://localhost:8888/api/orders/ORDER_ID/capture
"""

from flask import Flask
from flask_paypal_checkout import PayPalCheckout

app = Flask(__name__)
app.config["PAYPAL_API_PREFIX"] = "/api"
app.config["PAYPAL_BASE_URL"] = "http://localhost:8888"

ext = PayPalCheckout(app)

if __name__ == "__main__":
    app.run(port=8888, debug=True)
