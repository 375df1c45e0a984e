"""Drive the native-wallet flow with stand-in wallet objects.

Useful for watching the step order without a device. Start the server first
(``python -m flask_paypal_checkout``), then::

    python examples/wallet_flow.py
"""

import asyncio

from flask_paypal_checkout.client import CheckoutApi, ClientCheckoutOrchestrator
from flask_paypal_checkout.log import configure_logging, get_logger

log = get_logger("wallet_demo")


class DemoWallet:
    async def config(self):
        return {
            "isEligible": True,
            "countryCode": "US",
            "currencyCode": "USD",
            "supportedNetworks": ["visa", "masterCard", "amex", "discover"],
            "merchantCapabilities": ["supports3DS"],
        }

    async def validate_merchant(self, *, validation_url, display_name):
        return {"merchantSession": {"displayName": display_name}}

    async def confirm_order(self, *, order_id, token, billing_contact, shipping_contact):
        return {"orderID": order_id}


class DemoSession:
    def __init__(self, version, request):
        self.request = request

    def begin(self):
        log.info("session_begin", total=self.request["total"])

    def abort(self):
        log.info("session_aborted")

    def complete_merchant_validation(self, merchant_session):
        log.info("merchant_validated")

    def complete_payment(self, status):
        log.info("payment_completed", status=status)


async def main():
    orchestrator = ClientCheckoutOrchestrator(
        CheckoutApi("http://localhost:8888"),
        amount_source=lambda: "25.00",
        wallet=DemoWallet(),
        session_factory=DemoSession,
    )
    widgets = await orchestrator.initialize()
    if not widgets["applepay"]:
        return
    run = await orchestrator.start_wallet_session()
    await run.session.on_validate_merchant({"validationURL": "https://apple-pay-gateway.apple.com"})
    await run.session.on_payment_authorized({"payment": {"token": {}}})
    log.info("run_finished", phase=run.phase.value)


if __name__ == "__main__":
    configure_logging(json=False)
    asyncio.run(main())
