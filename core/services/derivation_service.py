"""
Derivation Service - validates requests and derives size-targeted secrets.

The caller asks for a length in base64 characters, but Argon2id produces an
exact number of raw bytes. The service converts the request into a starting
raw length and re-derives with one more byte at a time until the encoding is
long enough. The returned string is always the complete encoding of a full
derivation, never a truncated one.

Security Note:
- Passwords, salts and derived secrets are never logged
- Every loop iteration is a full memory-hard derivation
"""
import enum
import logging
import threading
import time
from dataclasses import dataclass

from core.crypto import (
    MIN_RAW_LENGTH,
    MIN_SALT_BYTES,
    KdfConfigurationError,
    KdfParameters,
    derive_raw,
    encode_unpadded,
    raw_length_guess,
)

logger = logging.getLogger(__name__)

DEFAULT_MIN_PASSWORD_LENGTH = 8
DEFAULT_MIN_SALT_LENGTH = 8
DEFAULT_MIN_ENCODED_SIZE = 8


class PolicyViolation(enum.Enum):
    """Request policy rules, in the order they are reported."""

    PASSWORD_TOO_SHORT = "The password is too short"
    SALT_TOO_SHORT = "The salt is too short"
    SIZE_TOO_LARGE = "The requested size is too large"

    @property
    def message(self) -> str:
        return self.value


class DerivationServiceError(Exception):
    """Base exception for derivation service errors."""
    pass


class PolicyViolationError(DerivationServiceError):
    """Request failed one or more policy rules."""

    def __init__(self, violations: list[PolicyViolation]):
        self.violations = list(violations)
        super().__init__(", ".join(v.message for v in self.violations))


class SizeSearchExhaustedError(DerivationServiceError):
    """The raw-length search passed its ceiling without reaching the size."""
    pass


@dataclass
class DerivationRequest:
    password: str
    salt: str
    desired_encoded_size: int


@dataclass(frozen=True)
class DerivationResult:
    encoded: str
    actual_encoded_size: int
    raw_length: int


def validate(
    request: DerivationRequest,
    min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
    min_salt_length: int = DEFAULT_MIN_SALT_LENGTH,
    min_encoded_size: int = DEFAULT_MIN_ENCODED_SIZE,
    max_encoded_size: int | None = None,
) -> list[PolicyViolation]:
    """
    Check a request against the length policy.

    All violations are collected. A size below the floor is raised to the
    floor in place; that is a normalization, not a violation. Lengths are
    measured in UTF-8 bytes, which is what Argon2 consumes.

    Returns:
        List of violations, empty when the request may be derived
    """
    violations: list[PolicyViolation] = []

    if len(request.password.encode("utf-8")) < min_password_length:
        violations.append(PolicyViolation.PASSWORD_TOO_SHORT)
    if len(request.salt.encode("utf-8")) < min_salt_length:
        violations.append(PolicyViolation.SALT_TOO_SHORT)

    if request.desired_encoded_size < min_encoded_size:
        request.desired_encoded_size = min_encoded_size
    elif max_encoded_size is not None and request.desired_encoded_size > max_encoded_size:
        violations.append(PolicyViolation.SIZE_TOO_LARGE)

    return violations


def derive_to_size(request: DerivationRequest, params: KdfParameters) -> DerivationResult:
    """
    Derive the shortest encoded secret at least `desired_encoded_size` long.

    Starts from floor(3 * size / 4) raw bytes and adds one byte per attempt.
    The encoded length grows by one or two characters per byte, so the loop
    ends within a couple of attempts; the ceiling only guards against a bug.

    Args:
        request: A validated request (size already at or above the floor)
        params: Fixed Argon2id parameters

    Returns:
        DerivationResult with the encoding, its length and the raw length used

    Raises:
        SizeSearchExhaustedError: If the ceiling is reached
    """
    desired = request.desired_encoded_size
    password = request.password.encode("utf-8")
    salt = request.salt.encode("utf-8")

    start = raw_length_guess(desired)
    ceiling = start + desired + 4

    for raw_length in range(start, ceiling):
        raw = derive_raw(password, salt, params, raw_length)
        encoded = encode_unpadded(raw)
        if len(encoded) >= desired:
            logger.debug(
                "Derived %d chars from %d raw bytes after %d attempt(s) (wanted %d)",
                len(encoded),
                raw_length,
                raw_length - start + 1,
                desired,
            )
            return DerivationResult(
                encoded=encoded,
                actual_encoded_size=len(encoded),
                raw_length=raw_length,
            )

    raise SizeSearchExhaustedError(
        f"No raw length in [{start}, {ceiling}) reached {desired} encoded characters"
    )


class DerivationService:
    """
    Validates and derives requests against one fixed parameter set.

    Each derivation allocates `params.memory_cost` KiB, so the number of
    derivations running at once is capped by a semaphore.

    Policy floors below what Argon2 accepts raise KdfConfigurationError here,
    so a bad configuration stops startup instead of failing each request.
    """

    def __init__(
        self,
        params: KdfParameters,
        max_concurrent: int = 4,
        min_password_length: int = DEFAULT_MIN_PASSWORD_LENGTH,
        min_salt_length: int = DEFAULT_MIN_SALT_LENGTH,
        min_encoded_size: int = DEFAULT_MIN_ENCODED_SIZE,
        max_encoded_size: int | None = None,
    ):
        if min_salt_length < MIN_SALT_BYTES:
            raise KdfConfigurationError(f"Minimum salt length {min_salt_length} is below the Argon2 minimum of {MIN_SALT_BYTES}")
        if raw_length_guess(min_encoded_size) < MIN_RAW_LENGTH:
            raise KdfConfigurationError(
                f"Minimum encoded size {min_encoded_size} is below the Argon2 minimum output of {MIN_RAW_LENGTH} bytes"
            )

        self.params = params
        self.min_password_length = min_password_length
        self.min_salt_length = min_salt_length
        self.min_encoded_size = min_encoded_size
        self.max_encoded_size = max_encoded_size
        self._slots = threading.BoundedSemaphore(max_concurrent)

    def validate(self, request: DerivationRequest) -> list[PolicyViolation]:
        return validate(
            request,
            min_password_length=self.min_password_length,
            min_salt_length=self.min_salt_length,
            min_encoded_size=self.min_encoded_size,
            max_encoded_size=self.max_encoded_size,
        )

    def derive(self, request: DerivationRequest) -> DerivationResult:
        """
        Validate then derive. Blocks the calling thread for the whole search.

        Raises:
            PolicyViolationError: If any policy rule fails (no derivation runs)
            SizeSearchExhaustedError: If the search ceiling is reached
        """
        violations = self.validate(request)
        if violations:
            logger.info("Rejected derivation request: %s", [v.name for v in violations])
            raise PolicyViolationError(violations)

        with self._slots:
            started = time.perf_counter()
            result = derive_to_size(request, self.params)
            elapsed = time.perf_counter() - started

        logger.debug(
            "Derived secret: requested=%d actual=%d raw=%d in %.3fs",
            request.desired_encoded_size,
            result.actual_encoded_size,
            result.raw_length,
            elapsed,
        )
        return result
