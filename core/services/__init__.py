"""
Core services for the Argon2 sizer.

Services encapsulate request policy and the size-targeted derivation loop.
"""

from .derivation_service import (
    DerivationService,
    DerivationServiceError,
    PolicyViolationError,
    SizeSearchExhaustedError,
    PolicyViolation,
    DerivationRequest,
    DerivationResult,
    validate,
    derive_to_size,
)

__all__ = [
    "DerivationService",
    "DerivationServiceError",
    "PolicyViolationError",
    "SizeSearchExhaustedError",
    "PolicyViolation",
    "DerivationRequest",
    "DerivationResult",
    "validate",
    "derive_to_size",
]
