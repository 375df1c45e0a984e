"""Top-level coordinator for the checkout page widgets."""

from __future__ import annotations

from typing import Any, Callable

from flask_paypal_checkout.client.display import CheckoutDisplay, LogDisplay, current_amount
from flask_paypal_checkout.client.hosted import HostedButtonFlow, message_options
from flask_paypal_checkout.client.wallet import NativeWalletFlow, WalletSessionRun
from flask_paypal_checkout.log import get_logger
from flask_paypal_checkout.models import PaymentSource


class ClientCheckoutOrchestrator:
    """Wire the hosted widgets and the native wallet to one checkout server.

    Usage::

        orchestrator = ClientCheckoutOrchestrator(
            CheckoutApi("http://localhost:8888"),
            amount_source=lambda: page.amount,
            wallet=paypal_applepay,
            session_factory=ApplePaySession,
        )
        widgets = await orchestrator.initialize()
        paypal.Buttons(widgets["buttons"]).render("#paypal-button-container")
        if widgets["applepay"]:
            run = await orchestrator.start_wallet_session()
    """

    def __init__(
        self,
        api,
        *,
        display: CheckoutDisplay | None = None,
        amount_source: Callable[[], str] | None = None,
        wallet=None,
        session_factory=None,
        logger=None,
    ) -> None:
        self.api = api
        self.display = display if display is not None else LogDisplay(logger)
        self.amount_source = amount_source
        self._log = get_logger("checkout_orchestrator", logger)

        self.buttons = HostedButtonFlow(
            api, self.display, amount_source=amount_source, logger=logger
        )
        self.card_fields = HostedButtonFlow(
            api,
            self.display,
            amount_source=amount_source,
            default_source=PaymentSource.CARD.value,
            logger=logger,
        )
        self.wallet: NativeWalletFlow | None = None
        if wallet is not None and session_factory is not None:
            self.wallet = NativeWalletFlow(
                api,
                wallet,
                self.display,
                session_factory=session_factory,
                amount_source=amount_source,
                logger=logger,
            )

    async def initialize(self) -> dict[str, Any]:
        """Return the options for every widget that should be rendered."""
        applepay = False
        if self.wallet is not None:
            applepay = await self.wallet.check_eligibility()
        if not applepay:
            self._log.info("wallet_hidden")

        return {
            "buttons": self.buttons.button_options(),
            "card_fields": {
                "createOrder": self.card_fields.create_order,
                "onApprove": self.card_fields.on_approve,
                "onError": self.card_fields.on_error,
            },
            "messages": message_options(current_amount(self.amount_source)),
            "applepay": applepay,
        }

    async def start_wallet_session(self) -> WalletSessionRun:
        if self.wallet is None:
            raise RuntimeError("No wallet runtime configured")
        return await self.wallet.start_session()
