"""Async checkout orchestration for the browser-side widgets.

Every external capability (server API, wallet SDK, wallet session, display)
is injected, so the flows run under plain asyncio.
"""

from flask_paypal_checkout.client.api import CheckoutApi
from flask_paypal_checkout.client.display import CheckoutDisplay, LogDisplay
from flask_paypal_checkout.client.hosted import HostedButtonFlow, HostedFlowState
from flask_paypal_checkout.client.orchestrator import ClientCheckoutOrchestrator
from flask_paypal_checkout.client.wallet import (
    NativeWalletFlow,
    WalletPhase,
    WalletSessionRun,
)

__all__ = [
    "CheckoutApi",
    "CheckoutDisplay",
    "ClientCheckoutOrchestrator",
    "HostedButtonFlow",
    "HostedFlowState",
    "LogDisplay",
    "NativeWalletFlow",
    "WalletPhase",
    "WalletSessionRun",
]
