"""Pydantic schemas for API request/response validation."""

from .derivation import (
    MALFORMED_REQUEST_MESSAGE,
    INTERNAL_ERROR_MESSAGE,
    DeriveRequest,
    DeriveResponse,
    ErrorResponse,
    KdfParametersResponse,
    HealthResponse,
)

__all__ = [
    "MALFORMED_REQUEST_MESSAGE",
    "INTERNAL_ERROR_MESSAGE",
    "DeriveRequest",
    "DeriveResponse",
    "ErrorResponse",
    "KdfParametersResponse",
    "HealthResponse",
]
