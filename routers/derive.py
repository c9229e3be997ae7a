"""Derivation router.

Single endpoint: derive an Argon2id secret whose unpadded base64 encoding is
at least as long as the caller asked for.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends

from core.config import settings
from core.services import DerivationService
from schemas.derivation import DeriveRequest, DeriveResponse, ErrorResponse

logger = logging.getLogger(__name__)
router = APIRouter()

# Singleton instance
_derivation_service: Optional[DerivationService] = None


def get_derivation_service() -> DerivationService:
    """Get the process-wide DerivationService, building it from settings on first use."""
    global _derivation_service
    if _derivation_service is None:
        _derivation_service = DerivationService(
            params=settings.kdf_parameters(),
            max_concurrent=settings.MAX_CONCURRENT_DERIVATIONS,
            min_password_length=settings.MIN_PASSWORD_LENGTH,
            min_salt_length=settings.MIN_SALT_LENGTH,
            min_encoded_size=settings.MIN_ENCODED_SIZE,
            max_encoded_size=settings.MAX_ENCODED_SIZE,
        )
    return _derivation_service


@router.post(
    "",
    response_model=DeriveResponse,
    summary="Derive a sized secret",
    description=(
        "Derives a secret from `password` and `salt` with Argon2id and returns its unpadded "
        "base64 encoding. The encoding is the shortest complete encoding whose length is at "
        "least `size` (sizes below 8 are raised to 8). Argon2id cost parameters are fixed "
        "server-side."
    ),
    operation_id="derive",
    responses={
        400: {"model": ErrorResponse, "description": "Malformed request or policy violation"},
        500: {"model": ErrorResponse, "description": "Unexpected internal error"},
    },
)
def derive(
    request: DeriveRequest,
    service: DerivationService = Depends(get_derivation_service),
) -> DeriveResponse:
    # Sync handler: FastAPI runs it in the thread pool, one derivation per worker thread
    result = service.derive(request.to_derivation_request())
    return DeriveResponse.from_result(result)
