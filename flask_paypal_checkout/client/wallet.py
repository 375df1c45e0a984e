"""Native wallet (Apple Pay) flow.

The wallet runtime owns the session and fires three callbacks on it::

    on_validate_merchant({"validationURL": ...})
    on_payment_authorized({"payment": {"token": ..., "billingContact": ...,
                                       "shippingContact": ...}})
    on_cancel({})

:class:`NativeWalletFlow` checks eligibility once and starts one
:class:`WalletSessionRun` per button press. The run serialises its phases,
refuses authorization until merchant validation has succeeded, and stops
acting on late results once the payer has cancelled.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Callable, Protocol

from flask_paypal_checkout.client.display import (
    CheckoutDisplay,
    current_amount,
    format_transaction,
)
from flask_paypal_checkout.errors import (
    CheckoutError,
    SessionAbandoned,
    ValidationFailed,
)
from flask_paypal_checkout.log import get_logger
from flask_paypal_checkout.models import (
    NativeWalletConfig,
    PaymentSource,
    Transaction,
    WalletPaymentRequest,
)

#: ``ApplePaySession`` API version requested for every session.
SESSION_VERSION = 3

STATUS_SUCCESS = 0
STATUS_FAILURE = 1

DEFAULT_DISPLAY_NAME = "PayPal Checkout Demo"


class WalletSdk(Protocol):
    """The processor's wallet helper (``paypal.Applepay()``)."""

    async def config(self) -> dict[str, Any]: ...

    async def validate_merchant(
        self, *, validation_url: str, display_name: str
    ) -> dict[str, Any]: ...

    async def confirm_order(
        self,
        *,
        order_id: str,
        token: Any,
        billing_contact: Any,
        shipping_contact: Any,
    ) -> dict[str, Any]: ...


class WalletSession(Protocol):
    """The device wallet session (``ApplePaySession``)."""

    on_validate_merchant: Callable
    on_payment_authorized: Callable
    on_cancel: Callable

    def begin(self) -> None: ...

    def abort(self) -> None: ...

    def complete_merchant_validation(self, merchant_session: Any) -> None: ...

    def complete_payment(self, status: int) -> None: ...


class WalletPhase(str, Enum):
    STARTED = "STARTED"
    VALIDATED = "VALIDATED"
    AUTHORIZING = "AUTHORIZING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


TERMINAL_PHASES = frozenset(
    (WalletPhase.COMPLETED, WalletPhase.FAILED, WalletPhase.CANCELLED)
)


class WalletSessionRun:
    """One wallet session from ``begin()`` to a terminal phase."""

    def __init__(self, flow: "NativeWalletFlow", request: WalletPaymentRequest) -> None:
        self.flow = flow
        self.request = request
        self.session: WalletSession | None = None
        self.phase = WalletPhase.STARTED
        self.order_id: str | None = None
        self.transaction: Transaction | None = None
        self.error: Exception | None = None
        self._lock = asyncio.Lock()
        self._done = asyncio.Event()
        self._log = flow._log.bind(amount=request.amount)

    @property
    def active(self) -> bool:
        return self.phase not in TERMINAL_PHASES

    def attach(self, session: WalletSession) -> None:
        self.session = session
        session.on_validate_merchant = self.on_validate_merchant
        session.on_payment_authorized = self.on_payment_authorized
        session.on_cancel = self.on_cancel

    async def wait(self) -> WalletPhase:
        """Wait until the run reaches a terminal phase and return it."""
        await self._done.wait()
        return self.phase

    # ------------------------------------------------------------------
    # Callbacks
    # ------------------------------------------------------------------

    async def on_validate_merchant(self, event: dict[str, Any]) -> None:
        async with self._lock:
            if self.phase is not WalletPhase.STARTED:
                self._log.warning("validate_ignored", phase=self.phase.value)
                return
            validation_url = event.get("validationURL")
            self._log.info("merchant_validation_requested", validation_url=validation_url)

            try:
                result = await self.flow.wallet.validate_merchant(
                    validation_url=validation_url,
                    display_name=self.flow.display_name,
                )
                merchant_session = result["merchantSession"]
            except Exception as exc:  # noqa: BLE001
                if not self.active:
                    return
                self.session.abort()
                self._finish(
                    WalletPhase.FAILED,
                    ValidationFailed(f"Merchant validation failed: {exc}"),
                )
                self.flow.display.show_order_info(
                    "Apple Pay Error", f"Merchant validation failed: {exc}"
                )
                return

            if not self.active:
                return
            self.session.complete_merchant_validation(merchant_session)
            self.phase = WalletPhase.VALIDATED
            self._log.info("merchant_validated")

    async def on_payment_authorized(self, event: dict[str, Any]) -> None:
        async with self._lock:
            if not self.active:
                self._log.warning("authorization_ignored", phase=self.phase.value)
                return
            if self.phase is not WalletPhase.VALIDATED:
                self._log.error("authorization_before_validation", phase=self.phase.value)
                self.session.complete_payment(STATUS_FAILURE)
                self._finish(
                    WalletPhase.FAILED,
                    ValidationFailed("Payment authorized before merchant validation"),
                )
                self.flow.display.show_order_info(
                    "Apple Pay Error", "Payment failed: merchant was not validated"
                )
                return

            self.phase = WalletPhase.AUTHORIZING
            await self._authorize(event.get("payment") or {})

    def on_cancel(self, event: Any = None) -> None:
        if not self.active:
            return
        self._log.info("session_cancelled", order_id=self.order_id)
        self._finish(WalletPhase.CANCELLED, SessionAbandoned("User cancelled Apple Pay"))
        self.flow.display.show_order_info("Apple Pay Cancelled", "User cancelled Apple Pay")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _authorize(self, payment: dict[str, Any]) -> None:
        api = self.flow.api
        success_signalled = False
        try:
            order_id = await api.create_order(
                self.request.amount, PaymentSource.APPLEPAY.value
            )
            if not self.active:
                return
            self.order_id = order_id
            self._log.info("order_created", order_id=order_id)

            confirmed = await self.flow.wallet.confirm_order(
                order_id=order_id,
                token=payment.get("token"),
                billing_contact=payment.get("billingContact"),
                shipping_contact=payment.get("shippingContact"),
            )
            if not self.active:
                return
            confirmed_id = (confirmed or {}).get("orderID") or order_id
            if confirmed_id != order_id:
                raise CheckoutError(
                    f"Confirmed order {confirmed_id} does not match created order {order_id}"
                )

            self.session.complete_payment(STATUS_SUCCESS)
            success_signalled = True
            self._log.info("order_confirmed", order_id=order_id)

            result = await api.capture_order(confirmed_id)
            transaction = Transaction.from_capture(result)
        except Exception as exc:  # noqa: BLE001
            if not self.active:
                return
            if not success_signalled:
                self.session.complete_payment(STATUS_FAILURE)
            self._log.error("payment_failed", order_id=self.order_id, error=str(exc))
            self._finish(WalletPhase.FAILED, exc)
            self.flow.display.show_order_info("Apple Pay Error", f"Payment failed: {exc}")
            return

        if not self.active:
            return
        self.transaction = transaction
        self._log.info("order_captured", order_id=self.order_id, transaction_id=transaction.id)
        self._finish(WalletPhase.COMPLETED)
        self.flow.display.show_order_info(
            "Apple Pay Payment Successful", format_transaction(transaction)
        )
        self.flow.display.show_success("Apple Pay payment completed successfully!")

    def _finish(self, phase: WalletPhase, error: Exception | None = None) -> None:
        self.phase = phase
        self.error = error
        self._done.set()


class NativeWalletFlow:
    """Eligibility check plus one :class:`WalletSessionRun` per button press.

    Args:
        api: Object with async ``create_order`` / ``capture_order``.
        wallet: The processor's wallet helper (:class:`WalletSdk`).
        display: Where notices go.
        session_factory: ``session_factory(version, request_dict)`` returning a
            new :class:`WalletSession`.
        amount_source: Returns the amount currently shown on the page.
        display_name: Merchant name shown in the wallet sheet.
    """

    def __init__(
        self,
        api,
        wallet: WalletSdk,
        display: CheckoutDisplay,
        *,
        session_factory: Callable[[int, dict[str, Any]], WalletSession],
        amount_source: Callable[[], str] | None = None,
        display_name: str = DEFAULT_DISPLAY_NAME,
        logger=None,
    ) -> None:
        self.api = api
        self.wallet = wallet
        self.display = display
        self.session_factory = session_factory
        self.amount_source = amount_source
        self.display_name = display_name
        self.config: NativeWalletConfig | None = None
        self.current_run: WalletSessionRun | None = None
        self._log = get_logger("wallet_flow", logger)

    @property
    def eligible(self) -> bool:
        return self.config is not None and self.config.is_eligible

    async def check_eligibility(self) -> bool:
        """Ask the processor whether the wallet button may be shown.

        Errors count as ineligible; nothing is shown to the payer.
        """
        try:
            config = NativeWalletConfig.from_response(await self.wallet.config())
        except Exception as exc:  # noqa: BLE001
            self._log.warning("wallet_config_failed", error=str(exc))
            self.config = None
            return False

        self.config = config
        self._log.info(
            "wallet_config",
            eligible=config.is_eligible,
            country_code=config.country_code,
            supported_networks=list(config.supported_networks),
        )
        return config.is_eligible

    async def start_session(self) -> WalletSessionRun:
        """Build the payment request, create the session and ``begin()`` it."""
        if not self.eligible:
            raise RuntimeError("Native wallet is not eligible; call check_eligibility() first")

        request = WalletPaymentRequest.build(
            self.config,
            amount=current_amount(self.amount_source),
            label=self.display_name,
        )
        run = WalletSessionRun(self, request)
        try:
            session = self.session_factory(SESSION_VERSION, request.to_dict())
            run.attach(session)
            session.begin()
        except Exception as exc:
            self._log.error("session_start_failed", error=str(exc))
            self.display.show_order_info("Apple Pay Error", f"Session failed: {exc}")
            raise

        self.current_run = run
        self._log.info("session_started", amount=request.amount)
        return run
