from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from paylink.payments.hashing import HashAlgorithm
from paylink.payments.types import Culture


class Settings(BaseSettings):
    """Gateway settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Robokassa credentials
    robokassa_merchant_login: str = Field(
        default="",
        description="Robokassa merchant login",
    )
    robokassa_password_1: str = Field(
        default="",
        description="Robokassa password for payment URL generation",
    )
    robokassa_password_2: str = Field(
        default="",
        description="Robokassa password for webhook validation",
    )
    robokassa_is_test: bool = Field(
        default=True,
        description="Use Robokassa test mode",
    )

    # Signing
    robokassa_hash_algorithm: HashAlgorithm = Field(
        default=HashAlgorithm.MD5,
        description="Hash algorithm selected in the merchant's technical settings",
    )
    robokassa_culture: Culture = Field(
        default=Culture.RU,
        description="Interface language of the payment page",
    )
    robokassa_base_url: str = Field(
        default="https://auth.robokassa.ru/Merchant/Index.aspx",
        min_length=1,
        description="Payment page endpoint",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    @field_validator("robokassa_hash_algorithm", "robokassa_culture", mode="before")
    @classmethod
    def lowercase_choice(cls, value: object) -> object:
        """Accept enum values in any case, e.g. SHA256 or RU."""
        if isinstance(value, str):
            return value.lower()
        return value


settings = Settings()
