"""Robokassa payment links and callback verification."""

from paylink.core.exceptions import (
    AppException,
    EmptyDescriptionError,
    InvalidAmountError,
    InvalidCultureError,
    InvalidCurrencyError,
    InvalidDescriptionError,
    InvalidInvoiceIdError,
    InvalidParameterSetError,
    UnsupportedHashAlgorithmError,
    ValidationError,
)
from paylink.payments import (
    CallbackData,
    Culture,
    Currency,
    HashAlgorithm,
    Payment,
    PaymentInitParams,
)

__all__ = [
    "AppException",
    "CallbackData",
    "Culture",
    "Currency",
    "EmptyDescriptionError",
    "HashAlgorithm",
    "InvalidAmountError",
    "InvalidCultureError",
    "InvalidCurrencyError",
    "InvalidDescriptionError",
    "InvalidInvoiceIdError",
    "InvalidParameterSetError",
    "Payment",
    "PaymentInitParams",
    "UnsupportedHashAlgorithmError",
    "ValidationError",
]
