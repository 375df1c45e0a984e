"""Tests for the native wallet (Apple Pay) flow."""

import asyncio

import pytest

from conftest import request_error
from flask_paypal_checkout.client.wallet import (
    SESSION_VERSION,
    STATUS_FAILURE,
    STATUS_SUCCESS,
    NativeWalletFlow,
    WalletPhase,
)
from flask_paypal_checkout.errors import SessionAbandoned, ValidationFailed

PAYMENT = {
    "payment": {
        "token": {"paymentData": "opaque"},
        "billingContact": {"givenName": "Ada"},
        "shippingContact": {"locality": "London"},
    }
}


@pytest.fixture
def flow(fake_api, wallet, display, session_factory):
    return NativeWalletFlow(
        fake_api,
        wallet,
        display,
        session_factory=session_factory,
        amount_source=lambda: "25.00",
    )


async def started_run(flow):
    assert await flow.check_eligibility()
    return await flow.start_session()


async def validated_run(flow):
    run = await started_run(flow)
    await run.session.on_validate_merchant({"validationURL": "https://apple.example/validate"})
    return run


# ---------------------------------------------------------------------------
# Eligibility / session start
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_ineligible_wallet_never_creates_a_session(flow, wallet, session_factory, display):
    wallet.config_response["isEligible"] = False

    assert await flow.check_eligibility() is False
    assert flow.eligible is False
    with pytest.raises(RuntimeError, match="not eligible"):
        await flow.start_session()

    assert session_factory.sessions == []
    assert display.notices == []


@pytest.mark.asyncio
async def test_config_error_counts_as_ineligible(flow, wallet, display):
    wallet.config_error = RuntimeError("wallet unavailable")
    assert await flow.check_eligibility() is False
    assert display.notices == []


@pytest.mark.asyncio
async def test_payment_request_built_from_config(flow, wallet, session_factory):
    wallet.config_response.update(
        countryCode="CA",
        supportedNetworks=["visa", "interac"],
        merchantCapabilities=["supports3DS", "supportsDebit"],
    )
    run = await started_run(flow)

    (session,) = session_factory.sessions
    assert session.version == SESSION_VERSION
    assert session.began is True
    assert session.request == {
        "countryCode": "CA",
        "currencyCode": "USD",
        "supportedNetworks": ["visa", "interac"],
        "merchantCapabilities": ["supports3DS", "supportsDebit"],
        "total": {"label": "PayPal Checkout Demo", "amount": "25.00", "type": "final"},
    }
    assert run.phase is WalletPhase.STARTED
    assert flow.current_run is run


@pytest.mark.asyncio
async def test_session_factory_failure_is_shown(flow, display):
    def broken_factory(version, request):
        raise RuntimeError("ApplePaySession unavailable")

    flow.session_factory = broken_factory
    await flow.check_eligibility()

    with pytest.raises(RuntimeError):
        await flow.start_session()
    assert display.notices == [("Apple Pay Error", "Session failed: ApplePaySession unavailable")]


# ---------------------------------------------------------------------------
# Merchant validation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_merchant_validation_completes(flow, wallet):
    run = await validated_run(flow)

    assert wallet.validations == [("https://apple.example/validate", "PayPal Checkout Demo")]
    assert run.session.merchant_session == {"id": "MERCHANT_SESSION"}
    assert run.phase is WalletPhase.VALIDATED


@pytest.mark.asyncio
async def test_validation_failure_aborts_and_never_captures(flow, wallet, fake_api, display, events):
    wallet.validate_error = RuntimeError("domain not registered")
    run = await validated_run(flow)

    assert run.session.aborted is True
    assert run.phase is WalletPhase.FAILED
    assert isinstance(run.error, ValidationFailed)
    assert display.notices == [
        ("Apple Pay Error", "Merchant validation failed: domain not registered")
    ]

    await run.session.on_payment_authorized(PAYMENT)
    assert fake_api.created == []
    assert fake_api.captured == []
    assert events == ["validate", "abort"]


@pytest.mark.asyncio
async def test_authorization_before_validation_has_no_side_effects(flow, fake_api, events):
    run = await started_run(flow)
    await run.session.on_payment_authorized(PAYMENT)

    assert fake_api.created == []
    assert events == [f"complete_payment:{STATUS_FAILURE}"]
    assert run.phase is WalletPhase.FAILED


# ---------------------------------------------------------------------------
# Payment authorization
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_happy_path_step_order(flow, fake_api, wallet, display, events):
    run = await validated_run(flow)
    await run.session.on_payment_authorized(PAYMENT)

    assert events == [
        "validate",
        "validated",
        "create",
        "confirm",
        f"complete_payment:{STATUS_SUCCESS}",
        "capture",
    ]
    assert fake_api.created == [("25.00", "applepay")]
    assert wallet.confirmations == [
        {
            "order_id": "ORDER1",
            "token": {"paymentData": "opaque"},
            "billing_contact": {"givenName": "Ada"},
            "shipping_contact": {"locality": "London"},
        }
    ]
    assert fake_api.captured == ["ORDER1"]
    assert run.phase is WalletPhase.COMPLETED
    assert await run.wait() is WalletPhase.COMPLETED
    assert run.transaction.id == "TXN1"
    assert display.notices[-1] == (
        "Apple Pay Payment Successful",
        "Transaction ID: TXN1\nAmount: 25.00 USD\nStatus: COMPLETED",
    )
    assert display.successes == ["Apple Pay payment completed successfully!"]


@pytest.mark.asyncio
async def test_create_failure_signals_failure(flow, fake_api, wallet, display):
    fake_api.create_error = request_error(500)
    run = await validated_run(flow)
    await run.session.on_payment_authorized(PAYMENT)

    assert run.session.payment_statuses == [STATUS_FAILURE]
    assert wallet.confirmations == []
    assert fake_api.captured == []
    assert run.phase is WalletPhase.FAILED
    assert display.notices[-1] == ("Apple Pay Error", "Payment failed: HTTP error! status: 500")


@pytest.mark.asyncio
async def test_confirm_failure_signals_failure_and_skips_capture(flow, fake_api, wallet):
    wallet.confirm_error = RuntimeError("token declined")
    run = await validated_run(flow)
    await run.session.on_payment_authorized(PAYMENT)

    assert run.session.payment_statuses == [STATUS_FAILURE]
    assert fake_api.captured == []
    assert run.phase is WalletPhase.FAILED


@pytest.mark.asyncio
async def test_confirmed_order_must_match_created_order(flow, fake_api, wallet):
    wallet.confirmed_order_id = "OTHER_ORDER"
    run = await validated_run(flow)
    await run.session.on_payment_authorized(PAYMENT)

    assert fake_api.captured == []
    assert run.session.payment_statuses == [STATUS_FAILURE]


@pytest.mark.asyncio
async def test_capture_failure_after_success_signal(flow, fake_api, display):
    fake_api.capture_error = request_error(422)
    run = await validated_run(flow)
    await run.session.on_payment_authorized(PAYMENT)

    assert run.session.payment_statuses == [STATUS_SUCCESS]
    assert run.phase is WalletPhase.FAILED
    assert display.notices[-1] == ("Apple Pay Error", "Payment failed: HTTP error! status: 422")
    assert display.successes == []


@pytest.mark.asyncio
async def test_second_authorization_is_ignored(flow, fake_api):
    run = await validated_run(flow)
    await run.session.on_payment_authorized(PAYMENT)
    await run.session.on_payment_authorized(PAYMENT)
    assert fake_api.created == [("25.00", "applepay")]


# ---------------------------------------------------------------------------
# Cancellation
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_cancel_is_terminal(flow, fake_api, display, events):
    run = await started_run(flow)
    run.session.on_cancel({})

    assert run.phase is WalletPhase.CANCELLED
    assert isinstance(run.error, SessionAbandoned)
    assert await run.wait() is WalletPhase.CANCELLED
    assert display.notices == [("Apple Pay Cancelled", "User cancelled Apple Pay")]

    await run.session.on_validate_merchant({"validationURL": "https://apple.example/validate"})
    await run.session.on_payment_authorized(PAYMENT)
    assert events == []


@pytest.mark.asyncio
async def test_late_result_after_cancel_is_ignored(flow, fake_api, wallet, display):
    run = await validated_run(flow)
    fake_api.create_gate = asyncio.Event()

    authorizing = asyncio.create_task(run.session.on_payment_authorized(PAYMENT))
    await asyncio.sleep(0)
    assert run.phase is WalletPhase.AUTHORIZING

    run.session.on_cancel({})
    fake_api.create_gate.set()
    await authorizing

    assert run.phase is WalletPhase.CANCELLED
    assert wallet.confirmations == []
    assert fake_api.captured == []
    assert run.session.payment_statuses == []
    assert display.notices == [("Apple Pay Cancelled", "User cancelled Apple Pay")]


@pytest.mark.asyncio
async def test_each_button_press_is_a_new_run(flow, session_factory):
    first = await started_run(flow)
    first.session.on_cancel({})
    second = await flow.start_session()

    assert second is not first
    assert second.phase is WalletPhase.STARTED
    assert flow.current_run is second
    assert len(session_factory.sessions) == 2
