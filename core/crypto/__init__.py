"""Cryptographic primitives package for size-targeted Argon2id derivation."""

from .primitives import (
    MIN_RAW_LENGTH,
    MIN_SALT_BYTES,
    KdfConfigurationError,
    KdfParameters,
    derive_raw,
    verify_kdf_parameters,
    encode_unpadded,
    raw_length_guess,
)

__all__ = [
    "MIN_RAW_LENGTH",
    "MIN_SALT_BYTES",
    "KdfConfigurationError",
    "KdfParameters",
    "derive_raw",
    "verify_kdf_parameters",
    "encode_unpadded",
    "raw_length_guess",
]
