"""Robokassa payment: signed payment links and callback verification."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from paylink.core.exceptions import (
    EmptyDescriptionError,
    InvalidAmountError,
    InvalidCultureError,
    InvalidCurrencyError,
    InvalidInvoiceIdError,
    InvalidParameterSetError,
)
from paylink.core.logging import get_logger
from paylink.payments.hashing import DigestProvider, HashAlgorithm, compute_digest
from paylink.payments.schemas import CallbackData, PaymentInitParams
from paylink.payments.signature import (
    SHP_PREFIX,
    TWO_PLACES,
    format_sum,
    generate_init_signature,
    verify_result_signature,
)
from paylink.payments.types import Culture, Currency

if TYPE_CHECKING:
    from paylink.core.config import Settings

logger = get_logger(__name__)

BASE_URL = "https://auth.robokassa.ru/Merchant/Index.aspx"


def _to_decimal(value: Any) -> Decimal | None:
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
        if not amount.is_finite():
            return None
        return amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        return None


def _to_int(value: Any) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class Payment:
    """Payment state for a single Robokassa transaction.

    Configure the payment with the fluent ``set_*`` methods, then either build
    a signed link with :meth:`get_payment_url` or check a callback with
    :meth:`validate_result` / :meth:`validate_success`. Verification replaces
    the field state with the received data, so use separate instances for
    outbound and inbound work. Instances are not thread-safe.

    Args:
        login: Merchant login
        payment_password: Password #1, signs links and SuccessURL redirects
        validation_password: Password #2, signs ResultURL notifications
        test_mode: Send IsTest=1 with the payment link
        base_url: Payment page endpoint
        digest: Digest provider used for all signatures
    """

    def __init__(
        self,
        login: str,
        payment_password: str,
        validation_password: str,
        test_mode: bool = False,
        *,
        base_url: str = BASE_URL,
        digest: DigestProvider = compute_digest,
    ) -> None:
        self._login = login
        self._payment_password = payment_password
        self._validation_password = validation_password
        self._is_test_mode = test_mode
        self._base_url = base_url.rstrip("?")
        self._digest = digest

        self._hash_algorithm = HashAlgorithm.MD5
        self._valid = False
        self._custom_params: dict[str, str] = {}
        self._data: dict[str, Any] = {
            "MerchantLogin": login,
            "InvId": None,
            "OutSum": Decimal(0),
            "OutSumCurrency": None,
            "Desc": None,
            "SignatureValue": "",
            "Encoding": "utf-8",
            "Culture": Culture.RU,
            "IncCurrLabel": "",
        }

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> Payment:
        """Create payment with credentials from application settings."""
        if config is None:
            from paylink.core.config import settings as config

        payment = cls(
            login=config.robokassa_merchant_login,
            payment_password=config.robokassa_password_1,
            validation_password=config.robokassa_password_2,
            test_mode=config.robokassa_is_test,
            base_url=config.robokassa_base_url,
        )
        return payment.set_hash_algorithm(config.robokassa_hash_algorithm).set_culture(
            config.robokassa_culture
        )

    # Link generation

    def get_payment_document(self) -> PaymentInitParams:
        """Sign the payment and return the request fields.

        Returns:
            Request fields ready for query string encoding

        Raises:
            InvalidAmountError: If sum is not greater than zero
            EmptyDescriptionError: If description is empty
            InvalidInvoiceIdError: If invoice ID is not greater than zero
        """
        out_sum = _to_decimal(self._data.get("OutSum"))
        if out_sum is None or out_sum <= 0:
            raise InvalidAmountError()

        description = self._data.get("Desc")
        if not description:
            raise EmptyDescriptionError()

        inv_id = _to_int(self._data.get("InvId"))
        if inv_id is None or inv_id <= 0:
            raise InvalidInvoiceIdError()

        currency = self._data.get("OutSumCurrency")
        shp_params = dict(sorted(self._custom_params.items()))

        signature = generate_init_signature(
            merchant_login=self._login,
            out_sum=out_sum,
            inv_id=inv_id,
            password=self._payment_password,
            currency=currency,
            shp_params=shp_params,
            algorithm=self._hash_algorithm,
            digest=self._digest,
        )
        self._data["SignatureValue"] = signature

        logger.debug(
            "Payment signed: inv_id=%d, sum=%s, algorithm=%s",
            inv_id,
            out_sum,
            self._hash_algorithm.value,
        )

        return PaymentInitParams(
            merchant_login=self._login,
            inv_id=inv_id,
            out_sum=format_sum(out_sum),
            out_sum_currency=currency or "",
            description=str(description),
            signature=signature,
            culture=self._data.get("Culture") or Culture.RU,
            inc_curr_label=self._data.get("IncCurrLabel") or "",
            is_test=1 if self._is_test_mode else None,
            email=self._data.get("Email"),
            shp_params=shp_params,
        )

    def get_payment_url(self) -> str:
        """Create payment URL.

        Raises:
            InvalidAmountError: If sum is not greater than zero
            EmptyDescriptionError: If description is empty
            InvalidInvoiceIdError: If invoice ID is not greater than zero
        """
        document = self.get_payment_document()
        return f"{self._base_url}?{document.to_query_string()}"

    # Callback verification

    def validate_result(self, data: Mapping[str, Any]) -> bool:
        """Validate ResultURL notification with password #2."""
        return self._validate(data, self._validation_password)

    def validate_success(self, data: Mapping[str, Any]) -> bool:
        """Validate SuccessURL redirect with password #1."""
        return self._validate(data, self._payment_password)

    def _validate(self, data: Mapping[str, Any], password: str) -> bool:
        self._data = dict(data) if isinstance(data, Mapping) else {}

        try:
            callback = CallbackData.model_validate(self._data)
        except PydanticValidationError:
            logger.warning(
                "Callback rejected, OutSum, InvId or SignatureValue missing or malformed: inv_id=%s",
                self._data.get("InvId"),
            )
            self._valid = False
            return self._valid

        self._valid = verify_result_signature(
            out_sum=callback.out_sum,
            inv_id=callback.inv_id,
            signature=callback.signature,
            password=password,
            shp_params=callback.shp_params,
            algorithm=self._hash_algorithm,
            digest=self._digest,
        )

        if not self._valid:
            logger.warning("Invalid signature for inv_id=%d", callback.inv_id)

        return self._valid

    @property
    def is_valid(self) -> bool:
        """Result of the last verification."""
        return self._valid

    def get_success_answer(self) -> str:
        """Response body confirming a ResultURL notification."""
        inv_id = self.invoice_id
        return f"OK{'' if inv_id is None else inv_id}\n"

    # Custom parameters

    def add_custom_parameters(self, params: Mapping[str, Any]) -> Payment:
        """Add custom parameters to the payment.

        The ``shp_`` prefix is added to every key.

        Raises:
            InvalidParameterSetError: If params is not a mapping
        """
        if not isinstance(params, Mapping):
            raise InvalidParameterSetError(details={"type": type(params).__name__})

        for key, value in params.items():
            self._custom_params[f"{SHP_PREFIX}{key}"] = str(value)

        return self

    def get_custom_param(self, name: str) -> Any:
        """Get custom parameter by name without the ``shp_`` prefix."""
        key = f"{SHP_PREFIX}{name}"
        if self._data.get(key) is not None:
            return self._data[key]
        return self._custom_params.get(key)

    @property
    def custom_params(self) -> dict[str, str]:
        return dict(self._custom_params)

    # Fields

    @property
    def merchant_login(self) -> str:
        return self._login

    @property
    def is_test_mode(self) -> bool:
        return self._is_test_mode

    @property
    def signature(self) -> str:
        return self._data.get("SignatureValue", "")

    @property
    def invoice_id(self) -> Any:
        return self._data.get("InvId")

    def set_invoice_id(self, inv_id: int | str) -> Payment:
        value = _to_int(inv_id)
        if value is None:
            raise InvalidInvoiceIdError(details={"inv_id": inv_id})

        self._data["InvId"] = value
        return self

    @property
    def out_sum(self) -> Any:
        return self._data.get("OutSum")

    def set_out_sum(self, out_sum: Decimal | float | int | str) -> Payment:
        """Set payment amount, rounded to two decimals.

        Raises:
            InvalidAmountError: If amount is not a number greater than zero
        """
        value = _to_decimal(out_sum)
        if value is None or value <= 0:
            raise InvalidAmountError(details={"out_sum": str(out_sum)})

        self._data["OutSum"] = value
        return self

    @property
    def out_sum_currency(self) -> str | None:
        return self._data.get("OutSumCurrency")

    def set_out_sum_currency(self, currency: Currency | str) -> Payment:
        """Set payment currency (USD, EUR or KZT), case-insensitive.

        Raises:
            InvalidCurrencyError: If currency is not supported
        """
        try:
            value = Currency(str(getattr(currency, "value", currency)).upper())
        except ValueError:
            raise InvalidCurrencyError(details={"currency": currency}) from None

        self._data["OutSumCurrency"] = value.value
        return self

    @property
    def description(self) -> str | None:
        return self._data.get("Desc")

    def set_description(self, description: str | None) -> Payment:
        self._data["Desc"] = "" if description is None else str(description)
        return self

    @property
    def culture(self) -> Culture | str | None:
        return self._data.get("Culture")

    def set_culture(self, culture: Culture | str = Culture.RU) -> Payment:
        """Set payment page language.

        Raises:
            InvalidCultureError: If culture is not ``en`` or ``ru``
        """
        try:
            value = Culture(str(getattr(culture, "value", culture)).lower())
        except ValueError:
            raise InvalidCultureError(details={"culture": culture}) from None

        self._data["Culture"] = value
        return self

    @property
    def currency_label(self) -> str:
        return self._data.get("IncCurrLabel", "")

    def set_currency_label(self, label: str | None) -> Payment:
        self._data["IncCurrLabel"] = "" if label is None else str(label)
        return self

    @property
    def email(self) -> str | None:
        return self._data.get("Email")

    def set_email(self, email: str | None) -> Payment:
        if email is None:
            self._data.pop("Email", None)
        else:
            self._data["Email"] = str(email)
        return self

    @property
    def hash_algorithm(self) -> HashAlgorithm:
        return self._hash_algorithm

    def set_hash_algorithm(self, algorithm: HashAlgorithm | str) -> Payment:
        """Set hash function used for signatures.

        Raises:
            UnsupportedHashAlgorithmError: If algorithm is not supported by Robokassa
        """
        self._hash_algorithm = HashAlgorithm.parse(algorithm)
        return self
