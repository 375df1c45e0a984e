"""Map a payment-method tag to the Orders v2 ``payment_source`` fragment."""

from __future__ import annotations

from typing import Any

from flask_paypal_checkout.errors import UnknownPaymentSource
from flask_paypal_checkout.models import PaymentSource


def build_payment_source(
    method: Any,
    *,
    return_url: str,
    cancel_url: str,
    strict: bool = False,
) -> dict[str, Any]:
    """Return the ``payment_source`` fragment for *method*.

    Unrecognised tags produce an empty fragment unless *strict* is set, in
    which case :class:`~flask_paypal_checkout.errors.UnknownPaymentSource`
    is raised.
    """
    source = PaymentSource.parse(method)

    if source is PaymentSource.PAYPAL:
        return {
            "paypal": {
                "experience_context": {
                    "return_url": return_url,
                    "cancel_url": cancel_url,
                    "user_action": "PAY_NOW",
                }
            }
        }
    if source is PaymentSource.CARD:
        return {"card": {}}
    if source is PaymentSource.VENMO:
        return {"venmo": {}}
    if source is PaymentSource.APPLEPAY:
        return {"apple_pay": {}}

    if strict:
        raise UnknownPaymentSource(f"Unknown payment source: {method!r}")
    return {}
