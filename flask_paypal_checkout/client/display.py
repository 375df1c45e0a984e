"""User-facing output of the checkout flows."""

from __future__ import annotations

from typing import Protocol

from flask_paypal_checkout.log import get_logger
from flask_paypal_checkout.models import Transaction


class CheckoutDisplay(Protocol):
    def show_order_info(self, title: str, message: str) -> None: ...

    def show_success(self, message: str) -> None: ...


class LogDisplay:
    """Display that writes every notice to structlog."""

    def __init__(self, logger=None) -> None:
        self._log = get_logger("checkout_display", logger)

    def show_order_info(self, title: str, message: str) -> None:
        self._log.info("order_info", title=title, message=message)

    def show_success(self, message: str) -> None:
        self._log.info("payment_success", message=message)


def format_transaction(transaction: Transaction) -> str:
    return (
        f"Transaction ID: {transaction.id}\n"
        f"Amount: {transaction.amount} {transaction.currency_code}\n"
        f"Status: {transaction.status}"
    )


def current_amount(amount_source) -> str:
    """Return the amount shown on the page, ``"10.00"`` when it is empty."""
    amount = amount_source() if amount_source is not None else None
    return str(amount) if amount else "10.00"
