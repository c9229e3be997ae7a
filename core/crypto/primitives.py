"""
Cryptographic primitives for size-targeted password derivation.

Security Properties:
- Argon2id (memory-hard) for password-based key derivation
- Salt is supplied by the caller, never generated here
- Output is the unpadded standard base64 encoding of the raw derivation

Length Model:
- Unpadded base64 maps every 3 raw bytes to 4 characters
- A trailing group of 1 or 2 bytes becomes 2 or 3 characters
- So n raw bytes encode to ceil(4 * n / 3) characters, and no encoded length is 1 mod 4
"""

import base64
from dataclasses import dataclass

from argon2.exceptions import HashingError
from argon2.low_level import Type, hash_secret_raw


# Argon2 refuses outputs and salts shorter than these
MIN_RAW_LENGTH = 4
MIN_SALT_BYTES = 8


class KdfConfigurationError(Exception):
    """Raised when the Argon2id parameters cannot be used by the primitive."""

    pass


# =============================================================================
# Data Structures
# =============================================================================


@dataclass(frozen=True)
class KdfParameters:
    """
    Argon2id cost parameters.

    Attributes:
        memory_cost: Memory in KiB
        time_cost: Number of iterations
        parallelism: Number of lanes
    """

    memory_cost: int
    time_cost: int
    parallelism: int

    def __post_init__(self):
        if self.time_cost < 1:
            raise ValueError("Time cost must be at least 1")
        if self.parallelism < 1:
            raise ValueError("Parallelism must be at least 1")
        if self.memory_cost < 8 * self.parallelism:
            raise ValueError("Memory cost must be at least 8 KiB per lane")

    def as_dict(self) -> dict[str, int]:
        return {
            "memory_cost_kb": self.memory_cost,
            "time_cost": self.time_cost,
            "parallelism": self.parallelism,
        }


# =============================================================================
# Key Derivation
# =============================================================================


def derive_raw(password: bytes, salt: bytes, params: KdfParameters, length: int) -> bytes:
    """
    Derive exactly `length` bytes from a password and salt using Argon2id.

    Args:
        password: Secret input material
        salt: Caller-supplied salt (Argon2 requires at least 8 bytes)
        params: Fixed cost parameters
        length: Output length in bytes (at least MIN_RAW_LENGTH)

    Returns:
        Raw derived bytes of the requested length

    Raises:
        KdfConfigurationError: If Argon2 rejects the inputs or parameters

    Example:
        >>> params = KdfParameters(memory_cost=64, time_cost=1, parallelism=1)
        >>> len(derive_raw(b"password", b"saltsalt", params, 6))
        6
    """
    try:
        return hash_secret_raw(
            secret=password,
            salt=salt,
            time_cost=params.time_cost,
            memory_cost=params.memory_cost,
            parallelism=params.parallelism,
            hash_len=length,
            type=Type.ID,
        )
    except HashingError as e:
        raise KdfConfigurationError(f"Argon2id rejected the derivation: {e}") from e


def verify_kdf_parameters(params: KdfParameters) -> None:
    """
    Run one probe derivation so bad parameters fail at startup, not per request.

    Raises:
        KdfConfigurationError: If the primitive cannot run with `params`
    """
    derive_raw(b"probe-password", b"probe-salt", params, MIN_RAW_LENGTH)


# =============================================================================
# Encoding
# =============================================================================


def encode_unpadded(raw: bytes) -> str:
    """Encode bytes as standard-alphabet base64 with the '=' padding removed."""
    return base64.b64encode(raw).rstrip(b"=").decode("ascii")


def raw_length_guess(encoded_size: int) -> int:
    """
    Starting raw length for a desired encoded size: floor(3 * size / 4).

    This never exceeds the smallest raw length whose encoding reaches
    `encoded_size`, so a search that counts upward from here stops at the
    minimum.
    """
    return (3 * encoded_size) // 4
