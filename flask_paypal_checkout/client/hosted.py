"""Callbacks for the hosted buttons, card fields and pay-later message.

The hosted SDK drives this flow: it calls :meth:`HostedButtonFlow.create_order`
when the payer starts, :meth:`HostedButtonFlow.on_approve` once they approve,
and :meth:`HostedButtonFlow.on_cancel` / :meth:`HostedButtonFlow.on_error`
when the run ends early. Each ``create_order`` starts a fresh attempt; a
server result that arrives after the attempt was cancelled, failed or
replaced is dropped.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable

from flask_paypal_checkout.client.display import (
    CheckoutDisplay,
    current_amount,
    format_transaction,
)
from flask_paypal_checkout.errors import CheckoutError, SessionAbandoned
from flask_paypal_checkout.log import get_logger
from flask_paypal_checkout.models import PaymentSource, Transaction

BUTTON_STYLE = {"layout": "vertical", "color": "blue", "shape": "rect", "label": "paypal"}


class HostedFlowState(str, Enum):
    IDLE = "IDLE"
    CREATING = "CREATING"
    CREATED = "CREATED"
    CAPTURING = "CAPTURING"
    CAPTURED = "CAPTURED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


def message_options(amount: str) -> dict[str, Any]:
    """Options for the pay-later message widget."""
    return {
        "amount": amount,
        "placement": "payment",
        "style": {"layout": "text", "logo": {"type": "inline"}},
    }


class HostedButtonFlow:
    """One hosted-widget checkout.

    Args:
        api: Object with async ``create_order`` / ``capture_order``
            (normally :class:`~flask_paypal_checkout.client.api.CheckoutApi`).
        display: Where notices go.
        amount_source: Returns the amount currently shown on the page.
        default_source: Payment-source tag used when the SDK does not pass one.
    """

    def __init__(
        self,
        api,
        display: CheckoutDisplay,
        *,
        amount_source: Callable[[], str] | None = None,
        default_source: str = PaymentSource.PAYPAL.value,
        logger=None,
    ) -> None:
        self.api = api
        self.display = display
        self.amount_source = amount_source
        self.default_source = default_source
        self.state = HostedFlowState.IDLE
        self.order_id: str | None = None
        self.transaction: Transaction | None = None
        self._attempt = 0
        self._log = get_logger("hosted_flow", logger)

    def callbacks(self) -> dict[str, Callable]:
        """The callback mapping handed to ``paypal.Buttons`` / ``CardFields``."""
        return {
            "createOrder": self.create_order,
            "onApprove": self.on_approve,
            "onCancel": self.on_cancel,
            "onError": self.on_error,
        }

    def button_options(self) -> dict[str, Any]:
        return {"style": dict(BUTTON_STYLE), **self.callbacks()}

    def _current(self, attempt: int, state: HostedFlowState) -> bool:
        return attempt == self._attempt and self.state is state

    async def create_order(self, data: dict[str, Any] | None = None, actions=None) -> str:
        """Create an order on the server and return its id to the SDK.

        Raises whatever the server call raised, after showing the error, so
        the SDK aborts its UI flow. Raises :class:`SessionAbandoned` when the
        attempt was cancelled or replaced while the call was in flight.
        """
        source = (data or {}).get("paymentSource") or self.default_source
        amount = current_amount(self.amount_source)
        self._attempt += 1
        attempt = self._attempt
        self.state = HostedFlowState.CREATING
        self.order_id = None
        self.transaction = None

        try:
            order_id = await self.api.create_order(amount, source)
        except CheckoutError as exc:
            if not self._current(attempt, HostedFlowState.CREATING):
                self._log.info("late_create_error_dropped", error=str(exc))
                raise
            self.state = HostedFlowState.FAILED
            self._log.error("order_create_failed", error=str(exc))
            self.display.show_order_info("Error", f"Failed to create order: {exc}")
            raise

        if not self._current(attempt, HostedFlowState.CREATING):
            self._log.info("late_order_dropped", order_id=order_id)
            raise SessionAbandoned("Checkout attempt ended before the order was created")

        self.order_id = order_id
        self.state = HostedFlowState.CREATED
        self._log.info("order_created", order_id=order_id, amount=amount, payment_source=source)
        self.display.show_order_info("Order Created", f"Order ID: {order_id}")
        return order_id

    async def on_approve(self, data: dict[str, Any], actions=None) -> Transaction | None:
        """Capture the approved order and show the result. Never retries."""
        order_id = (data or {}).get("orderID")
        if self.state is not HostedFlowState.CREATED or not order_id or order_id != self.order_id:
            self._log.warning(
                "approve_rejected", order_id=order_id, state=self.state.value
            )
            self.display.show_order_info(
                "Error", "Failed to capture payment: order was not created by this checkout"
            )
            return None

        attempt = self._attempt
        self.state = HostedFlowState.CAPTURING
        try:
            result = await self.api.capture_order(order_id)
            transaction = Transaction.from_capture(result)
        except (CheckoutError, ValueError) as exc:
            if not self._current(attempt, HostedFlowState.CAPTURING):
                self._log.info("late_capture_error_dropped", order_id=order_id, error=str(exc))
                return None
            self.state = HostedFlowState.FAILED
            self._log.error("capture_failed", order_id=order_id, error=str(exc))
            self.display.show_order_info("Error", f"Failed to capture payment: {exc}")
            return None

        if not self._current(attempt, HostedFlowState.CAPTURING):
            self._log.warning(
                "late_capture_dropped", order_id=order_id, transaction_id=transaction.id
            )
            return None

        self.state = HostedFlowState.CAPTURED
        self.transaction = transaction
        self._log.info("order_captured", order_id=order_id, transaction_id=transaction.id)
        self.display.show_order_info("Payment Successful", format_transaction(transaction))
        self.display.show_success("Payment completed successfully!")
        return transaction

    def on_cancel(self, data: dict[str, Any] | None = None) -> None:
        self._attempt += 1
        self.state = HostedFlowState.CANCELLED
        self._log.info("payment_cancelled", order_id=self.order_id)
        self.display.show_order_info("Payment Cancelled", "User cancelled the payment")

    def on_error(self, err: Any = None) -> None:
        self._attempt += 1
        self.state = HostedFlowState.FAILED
        self._log.error("sdk_error", error=str(err))
        self.display.show_order_info(
            "Payment Error", "An error occurred during payment processing"
        )
