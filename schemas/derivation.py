"""
Pydantic schemas for the derivation endpoint.

The wire envelope has one request shape, a success shape and an error shape.
Field types are strict so that, for example,
`"size": "8"` is rejected as malformed instead of being coerced.
"""
from pydantic import BaseModel, ConfigDict, Field

from core.services import DerivationRequest, DerivationResult

MALFORMED_REQUEST_MESSAGE = "The request is malformed"
INTERNAL_ERROR_MESSAGE = "Internal server error"

# Largest size the envelope accepts (unsigned 32-bit)
MAX_WIRE_SIZE = 2**32 - 1


class DeriveRequest(BaseModel):
    """Body of POST /api."""
    model_config = ConfigDict(strict=True)

    password: str = Field(..., description="Secret input material (8+ bytes)")
    salt: str = Field(..., description="Caller-supplied salt (8+ bytes)")
    size: int = Field(
        ...,
        ge=0,
        le=MAX_WIRE_SIZE,
        description="Desired length of the encoded output; values below 8 are raised to 8",
    )

    def to_derivation_request(self) -> DerivationRequest:
        return DerivationRequest(
            password=self.password,
            salt=self.salt,
            desired_encoded_size=self.size,
        )


class DeriveResponse(BaseModel):
    """Successful derivation."""
    hashed: str = Field(..., description="Unpadded base64 encoding of the Argon2id output")
    size: int = Field(..., description="Length of `hashed`, at least the requested size")

    @classmethod
    def from_result(cls, result: DerivationResult) -> "DeriveResponse":
        return cls(hashed=result.encoded, size=result.actual_encoded_size)


class ErrorResponse(BaseModel):
    """Any failed request. Always holds at least one message."""
    errors: list[str] = Field(..., min_length=1, description="Human-readable error messages")


class KdfParametersResponse(BaseModel):
    memory_cost_kb: int
    time_cost: int
    parallelism: int


class HealthResponse(BaseModel):
    """Response from GET /health."""
    status: str = Field(..., description="'healthy'")
    kdf: KdfParametersResponse
