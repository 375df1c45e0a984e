"""Value objects exchanged between the gateway, the views and the client.

Nothing here is persisted: every lifecycle call against PayPal returns a
fresh representation of the order, which is wrapped in a new :class:`Order`.
Usage::

    order = Order.from_response(gateway_json, payment_source=PaymentSource.CARD)
    order.id, order.status, order.amount

    transaction = Transaction.from_capture(capture_json)
    transaction.id, transaction.amount, transaction.currency_code
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

#: The only currency this checkout handles.
CURRENCY = "USD"


class PaymentSource(str, Enum):
    """Payment-method tags sent by the checkout page.

    The value is the wire tag used by the browser; :meth:`parse` also accepts
    the descriptive aliases (``hosted-wallet``, ``deferred-payment``, ...).
    """

    PAYPAL = "paypal"
    CARD = "card"
    VENMO = "venmo"
    APPLEPAY = "applepay"

    @classmethod
    def parse(cls, value: Any) -> "PaymentSource | None":
        """Return the member for *value*, or ``None`` if it is not recognised."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        key = value.strip().lower()
        key = _ALIASES.get(key, key)
        try:
            return cls(key)
        except ValueError:
            return None


_ALIASES = {
    "hosted-wallet": "paypal",
    "deferred-payment": "venmo",
    "native-wallet": "applepay",
    "apple_pay": "applepay",
}


class OrderStatus(str, Enum):
    """Order status values reported by the Orders v2 API."""

    CREATED = "CREATED"
    SAVED = "SAVED"
    APPROVED = "APPROVED"
    PAYER_ACTION_REQUIRED = "PAYER_ACTION_REQUIRED"
    COMPLETED = "COMPLETED"
    VOIDED = "VOIDED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> "OrderStatus":
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class AccessToken:
    """Short-lived OAuth bearer token. Treated as opaque."""

    value: str
    token_type: str = "Bearer"
    expires_in: int | None = None

    @property
    def authorization(self) -> str:
        """Value for the ``Authorization`` header."""
        return f"Bearer {self.value}"


@dataclass(frozen=True)
class Order:
    """One representation of a PayPal order as returned by the API."""

    id: str
    status: OrderStatus
    amount: str | None = None
    currency: str = CURRENCY
    payment_source: PaymentSource | None = None
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_response(
        cls,
        data: dict[str, Any],
        *,
        amount: str | None = None,
        payment_source: PaymentSource | None = None,
    ) -> "Order":
        """Build an :class:`Order` from an Orders v2 response body."""
        units = data.get("purchase_units") or []
        unit_amount = units[0].get("amount", {}) if units else {}
        return cls(
            id=data.get("id", ""),
            status=OrderStatus.parse(data.get("status")),
            amount=unit_amount.get("value", amount),
            currency=unit_amount.get("currency_code", CURRENCY),
            payment_source=payment_source,
            raw=data,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON body sent back to the browser.

        The upstream representation is passed through as-is so the hosted SDK
        sees every field PayPal returned.
        """
        if self.raw:
            return dict(self.raw)
        return {"id": self.id, "status": self.status.value}


@dataclass(frozen=True)
class Transaction:
    """The capture or authorization inside a lifecycle response."""

    id: str
    amount: str
    currency_code: str
    status: str

    @classmethod
    def from_capture(cls, data: dict[str, Any]) -> "Transaction":
        return cls._from_payments(data, "captures")

    @classmethod
    def from_authorization(cls, data: dict[str, Any]) -> "Transaction":
        return cls._from_payments(data, "authorizations")

    @classmethod
    def _from_payments(cls, data: dict[str, Any], kind: str) -> "Transaction":
        try:
            entry = data["purchase_units"][0]["payments"][kind][0]
        except (KeyError, IndexError, TypeError) as exc:
            raise ValueError(f"Response has no {kind[:-1]} entry") from exc
        amount = entry.get("amount", {})
        return cls(
            id=entry.get("id", ""),
            amount=amount.get("value", ""),
            currency_code=amount.get("currency_code", ""),
            status=entry.get("status", ""),
        )


@dataclass(frozen=True)
class NativeWalletConfig:
    """Eligibility and capabilities reported by the wallet ``config()`` call."""

    is_eligible: bool
    country_code: str = "US"
    currency_code: str = CURRENCY
    supported_networks: tuple[str, ...] = ()
    merchant_capabilities: tuple[str, ...] = ()

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "NativeWalletConfig":
        return cls(
            is_eligible=bool(data.get("isEligible")),
            country_code=data.get("countryCode", "US"),
            currency_code=data.get("currencyCode", CURRENCY),
            supported_networks=tuple(data.get("supportedNetworks") or ()),
            merchant_capabilities=tuple(data.get("merchantCapabilities") or ()),
        )


@dataclass(frozen=True)
class WalletPaymentRequest:
    """Payment request handed to the native wallet session."""

    country_code: str
    currency_code: str
    supported_networks: tuple[str, ...]
    merchant_capabilities: tuple[str, ...]
    label: str
    amount: str

    @classmethod
    def build(
        cls, config: NativeWalletConfig, *, amount: str, label: str
    ) -> "WalletPaymentRequest":
        return cls(
            country_code=config.country_code,
            currency_code=config.currency_code,
            supported_networks=config.supported_networks,
            merchant_capabilities=config.merchant_capabilities,
            label=label,
            amount=amount,
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the request in the shape the wallet runtime expects."""
        return {
            "countryCode": self.country_code,
            "currencyCode": self.currency_code,
            "supportedNetworks": list(self.supported_networks),
            "merchantCapabilities": list(self.merchant_capabilities),
            "total": {"label": self.label, "amount": self.amount, "type": "final"},
        }
