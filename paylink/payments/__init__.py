"""Payment link signing and callback verification."""

from paylink.payments.hashing import DigestProvider, HashAlgorithm, compute_digest
from paylink.payments.payment import Payment
from paylink.payments.schemas import CallbackData, PaymentInitParams
from paylink.payments.types import Culture, Currency

__all__ = [
    "CallbackData",
    "Culture",
    "Currency",
    "DigestProvider",
    "HashAlgorithm",
    "Payment",
    "PaymentInitParams",
    "compute_digest",
]
