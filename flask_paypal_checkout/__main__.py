import os

from flask_paypal_checkout.app import create_app
from flask_paypal_checkout.log import get_logger

app = create_app()

if __name__ == "__main__":
    port = int(os.environ.get("PORT", "8888"))
    get_logger("server").info("server_listening", url=f"http://localhost:{port}/")
    app.run(port=port)
