"""Pytest fixtures for payment tests."""

from decimal import Decimal

import pytest

from paylink.payments import Payment
from paylink.payments.signature import generate_result_signature

MERCHANT_LOGIN = "shop1"
PASSWORD_1 = "pw1"
PASSWORD_2 = "pw2"


@pytest.fixture
def payment() -> Payment:
    """Unconfigured payment with test credentials."""
    return Payment(MERCHANT_LOGIN, PASSWORD_1, PASSWORD_2)


@pytest.fixture
def configured_payment(payment: Payment) -> Payment:
    """Payment ready for link generation."""
    return (
        payment.set_out_sum(Decimal("100.00"))
        .set_invoice_id(42)
        .set_description("Order #42")
    )


@pytest.fixture
def sign_callback():
    """Build a signed callback mapping the way the gateway does."""

    def _sign(
        password: str,
        out_sum: str = "100.00",
        inv_id: int = 42,
        **shp_params: str,
    ) -> dict[str, str]:
        signature = generate_result_signature(out_sum, inv_id, password, shp_params)
        return {
            "OutSum": out_sum,
            "InvId": str(inv_id),
            "SignatureValue": signature,
            **shp_params,
        }

    return _sign
