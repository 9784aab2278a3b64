"""Hash algorithms accepted by Robokassa and the default digest provider."""

import hashlib
from enum import Enum
from typing import Protocol

from paylink.core.exceptions import UnsupportedHashAlgorithmError


class HashAlgorithm(str, Enum):
    """Algorithms selectable in the merchant's technical settings."""

    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA384 = "sha384"
    SHA512 = "sha512"

    @classmethod
    def parse(cls, value: "HashAlgorithm | str") -> "HashAlgorithm":
        """Resolve an algorithm from a member or its name in any case.

        Raises:
            UnsupportedHashAlgorithmError: If value is not in the allow-list
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            try:
                return cls(value.lower())
            except ValueError:
                pass

        raise UnsupportedHashAlgorithmError(
            details={"algorithm": value, "allowed": [a.value for a in cls]},
        )


class DigestProvider(Protocol):
    """Computes a lowercase hex digest of a signing string."""

    def __call__(self, algorithm: HashAlgorithm, data: str) -> str: ...


def compute_digest(algorithm: HashAlgorithm, data: str) -> str:
    """Hash UTF-8 encoded data with hashlib and return lowercase hex."""
    return hashlib.new(algorithm.value, data.encode("utf-8")).hexdigest()
