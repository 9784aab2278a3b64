"""Payment schemas for gateway communication."""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any
from urllib.parse import urlencode

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from paylink.payments.signature import extract_shp_params
from paylink.payments.types import Culture


class PaymentInitParams(BaseModel):
    """Signed payment page request (matches Robokassa format).

    Field order is the order of the query string.
    """

    model_config = ConfigDict(populate_by_name=True)

    merchant_login: str = Field(..., alias="MerchantLogin", description="Merchant login")
    inv_id: int = Field(..., ge=1, alias="InvId", description="Invoice ID")
    out_sum: str = Field(..., alias="OutSum", description="Payment amount, two decimals")
    out_sum_currency: str = Field(default="", alias="OutSumCurrency", description="Payment currency")
    description: str = Field(..., min_length=1, alias="Desc", description="Payment description")
    signature: str = Field(..., alias="SignatureValue", description="Lowercase hex signature")
    encoding: str = Field(default="utf-8", alias="Encoding")
    culture: Culture = Field(default=Culture.RU, alias="Culture", description="Interface language")
    inc_curr_label: str = Field(default="", alias="IncCurrLabel", description="Suggested payment method")

    # Optional parameters
    is_test: int | None = Field(default=None, alias="IsTest", description="Test mode flag")
    email: str | None = Field(default=None, alias="Email", description="Customer email")

    # Custom shp_* parameters, appended after the fixed fields
    shp_params: dict[str, str] = Field(default_factory=dict, exclude=True)

    def fixed_fields(self) -> dict[str, str]:
        """Fixed request fields keyed by wire name, unset optionals omitted."""
        fields = self.model_dump(mode="json", by_alias=True, exclude_none=True)
        return {key: str(value) for key, value in fields.items()}

    def to_query_params(self) -> list[tuple[str, str]]:
        """Fixed fields followed by custom parameters."""
        params = list(self.fixed_fields().items())
        params.extend(self.shp_params.items())
        return params

    def to_query_string(self) -> str:
        return urlencode(self.to_query_params())


class CallbackData(BaseModel):
    """ResultURL / SuccessURL callback data (matches Robokassa format)."""

    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    out_sum: str = Field(..., alias="OutSum", description="Payment amount as sent")
    inv_id: int = Field(..., alias="InvId", description="Invoice ID")
    signature: str = Field(..., alias="SignatureValue", description="Signature for verification")

    # Optional from Robokassa
    fee: Decimal | None = Field(default=None, alias="Fee", description="Payment fee")
    email: str | None = Field(default=None, alias="Email", description="Customer email")
    payment_method: str | None = Field(default=None, alias="PaymentMethod", description="Payment method used")

    # Custom shp_* parameters echoed back by the gateway
    shp_params: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def collect_shp_params(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            data = dict(data)
            data["shp_params"] = extract_shp_params(data)
        return data

    @field_validator("inv_id", mode="before")
    @classmethod
    def integer_literal_only(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip().lstrip("+-").isdigit():
            raise ValueError("InvId must be an integer literal")
        return value

    @field_validator("fee", mode="before")
    @classmethod
    def drop_unparseable_fee(cls, value: Any) -> Decimal | None:
        """Fee is not signed, so a blank or garbled value is treated as absent."""
        if value is None:
            return None
        try:
            fee = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            return None
        return fee if fee.is_finite() else None

    @field_validator("email", "payment_method", mode="before")
    @classmethod
    def drop_non_text(cls, value: Any) -> str | None:
        if isinstance(value, (str, int, float, Decimal)):
            return str(value)
        return None
