from typing import Any


class AppException(Exception):
    """Base application exception."""

    error_code: str = "APP_ERROR"
    message: str = "An application error occurred"

    def __init__(
        self,
        message: str | None = None,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.__class__.message
        self.error_code = error_code or self.__class__.error_code
        self.details = details or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(error_code={self.error_code!r}, message={self.message!r})"


class ValidationError(AppException):
    """Caller supplied a value the gateway would reject."""

    error_code = "VALIDATION_ERROR"
    message = "Validation failed"


class InvalidAmountError(ValidationError):
    """Payment sum is not a positive number."""

    error_code = "INVALID_AMOUNT"
    message = "Payment sum must be greater than zero"


class InvalidCurrencyError(ValidationError):
    """Currency is not one the gateway accepts for OutSumCurrency."""

    error_code = "INVALID_CURRENCY"
    message = "Unsupported payment currency"


class InvalidDescriptionError(ValidationError):
    error_code = "INVALID_DESCRIPTION"
    message = "Invalid payment description"


class EmptyDescriptionError(InvalidDescriptionError):
    """Description missing when a payment link is requested."""

    error_code = "EMPTY_DESCRIPTION"
    message = "Payment description must not be empty"


class InvalidInvoiceIdError(ValidationError):
    """Invoice ID is missing, not an integer or not positive."""

    error_code = "INVALID_INVOICE_ID"
    message = "Invoice ID must be greater than zero"


class InvalidParameterSetError(ValidationError):
    """Custom parameters were not passed as a mapping."""

    error_code = "INVALID_PARAMETER_SET"
    message = "Custom parameters must be a key-value mapping"


class InvalidCultureError(ValidationError):
    error_code = "INVALID_CULTURE"
    message = "Unsupported interface culture"


class UnsupportedHashAlgorithmError(ValidationError):
    """Hash algorithm is not in the gateway's allow-list."""

    error_code = "UNSUPPORTED_HASH_ALGORITHM"
    message = "Hash algorithm is not supported"
