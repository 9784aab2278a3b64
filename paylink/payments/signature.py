"""Robokassa signature utilities.

Outbound links and inbound callbacks are signed with different formulas:

    init:   MerchantLogin:OutSum:InvId[:OutSumCurrency]:Password_1[:Shp_*]
    result: OutSum:InvId:Password[:Shp_*]

Callbacks are verified with Password_2 on ResultURL and with Password_1 on
SuccessURL. Both formulas must be reproduced exactly for the gateway to agree.
"""

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from paylink.payments.hashing import DigestProvider, HashAlgorithm, compute_digest

SHP_PREFIX = "shp_"

TWO_PLACES = Decimal("0.01")


def format_sum(amount: Decimal) -> str:
    """Format amount for signature calculation.

    Always two fractional digits, no thousands separator.
    Examples: 100 -> "100.00", 99.5 -> "99.50", 0.005 -> "0.01"
    """
    return format(amount.quantize(TWO_PLACES, rounding=ROUND_HALF_UP), "f")


def extract_shp_params(source: Mapping[str, Any]) -> dict[str, str]:
    """Pick custom parameters out of a field mapping.

    The prefix match ignores case, so both ``shp_`` and ``Shp_`` keys qualify.
    """
    return {
        key: str(value)
        for key, value in source.items()
        if isinstance(key, str) and key.lower().startswith(SHP_PREFIX)
    }


def build_shp_string(shp_params: Mapping[str, str] | None) -> str:
    """Build Shp_* parameters string for signature.

    Parameters must be sorted alphabetically by key.
    Format: shp_key1=value1:shp_key2=value2
    """
    if not shp_params:
        return ""

    sorted_params = sorted(shp_params.items())
    return ":".join(f"{k}={v}" for k, v in sorted_params)


def build_init_signature_string(
    merchant_login: str,
    out_sum: Decimal,
    inv_id: int,
    password: str,
    currency: str | None = None,
    shp_params: Mapping[str, str] | None = None,
) -> str:
    """Build the string signed for a payment URL."""
    parts = [merchant_login, format_sum(out_sum), str(inv_id)]

    if currency:
        parts.append(currency)

    parts.append(password)

    shp_string = build_shp_string(shp_params)
    if shp_string:
        parts.append(shp_string)

    return ":".join(parts)


def build_result_signature_string(
    out_sum: str,
    inv_id: int,
    password: str,
    shp_params: Mapping[str, str] | None = None,
) -> str:
    """Build the string signed by the gateway in a callback.

    out_sum is used exactly as received; currency never takes part.
    """
    parts = [out_sum, str(inv_id), password]

    shp_string = build_shp_string(shp_params)
    if shp_string:
        parts.append(shp_string)

    return ":".join(parts)


def generate_init_signature(
    merchant_login: str,
    out_sum: Decimal,
    inv_id: int,
    password: str,
    currency: str | None = None,
    shp_params: Mapping[str, str] | None = None,
    algorithm: HashAlgorithm = HashAlgorithm.MD5,
    digest: DigestProvider = compute_digest,
) -> str:
    """Generate signature for payment URL (init).

    Args:
        merchant_login: Merchant login
        out_sum: Payment amount
        inv_id: Invoice ID
        password: First password
        currency: Optional OutSumCurrency
        shp_params: Optional Shp_* parameters (sorted alphabetically)
        algorithm: Hash algorithm
        digest: Digest provider

    Returns:
        Hex digest in lowercase
    """
    data = build_init_signature_string(
        merchant_login, out_sum, inv_id, password, currency, shp_params
    )
    return digest(algorithm, data).lower()


def generate_result_signature(
    out_sum: str,
    inv_id: int,
    password: str,
    shp_params: Mapping[str, str] | None = None,
    algorithm: HashAlgorithm = HashAlgorithm.MD5,
    digest: DigestProvider = compute_digest,
) -> str:
    """Generate signature for callback verification.

    Args:
        out_sum: Payment amount as sent by the gateway
        inv_id: Invoice ID
        password: Second password for ResultURL, first for SuccessURL
        shp_params: Optional Shp_* parameters (sorted alphabetically)
        algorithm: Hash algorithm
        digest: Digest provider

    Returns:
        Hex digest in lowercase
    """
    data = build_result_signature_string(out_sum, inv_id, password, shp_params)
    return digest(algorithm, data).lower()


def verify_result_signature(
    out_sum: str,
    inv_id: int,
    signature: str,
    password: str,
    shp_params: Mapping[str, str] | None = None,
    algorithm: HashAlgorithm = HashAlgorithm.MD5,
    digest: DigestProvider = compute_digest,
) -> bool:
    """Verify callback signature, ignoring case."""
    expected = generate_result_signature(
        out_sum, inv_id, password, shp_params, algorithm, digest
    )
    return signature.lower() == expected
