# Load environment variables FIRST, before any other imports
from dotenv import load_dotenv

load_dotenv()

import logging

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
from contextlib import asynccontextmanager

from fastapi import FastAPI, Depends, Request
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse

from core.config import settings
from core.crypto import KdfConfigurationError, verify_kdf_parameters
from core.services import DerivationService, DerivationServiceError, PolicyViolationError
from routers import derive
from routers.derive import get_derivation_service
from schemas.derivation import (
    INTERNAL_ERROR_MESSAGE,
    MALFORMED_REQUEST_MESSAGE,
    ErrorResponse,
    HealthResponse,
    KdfParametersResponse,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    service = get_derivation_service()
    logger.info("Starting application with Argon2id parameters %s", service.params.as_dict())
    # Raises KdfConfigurationError and aborts startup if Argon2 rejects the parameters
    verify_kdf_parameters(service.params)

    yield

    # Shutdown
    logger.info("Shutting down application...")


openapi_tags = [
    {
        "name": "derive",
        "description": "Size-targeted Argon2id derivation with unpadded base64 output.",
    },
    {
        "name": "health",
        "description": "Health check endpoint for verifying API availability.",
    },
]

app = FastAPI(
    title="Argon2 Sizer API",
    description=(
        "Derives password-based secrets with Argon2id and returns them as unpadded base64 "
        "of a caller-chosen minimum length. Nothing is stored or cached."
    ),
    version="1.0.0",
    docs_url=None if settings.ENVIRONMENT == "prod" else "/docs",
    redoc_url=None if settings.ENVIRONMENT == "prod" else "/redoc",
    openapi_tags=openapi_tags,
    lifespan=lifespan,
)


def _error_response(status_code: int, messages: list[str]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(errors=messages).model_dump())


@app.exception_handler(RequestValidationError)
async def malformed_request_handler(request: Request, exc: RequestValidationError):
    logger.info("Malformed request to %s: %d validation error(s)", request.url.path, len(exc.errors()))
    return _error_response(400, [MALFORMED_REQUEST_MESSAGE])


@app.exception_handler(PolicyViolationError)
async def policy_violation_handler(request: Request, exc: PolicyViolationError):
    return _error_response(400, [violation.message for violation in exc.violations])


@app.exception_handler(DerivationServiceError)
async def derivation_error_handler(request: Request, exc: DerivationServiceError):
    logger.error(f"Derivation failed: {exc}")
    return _error_response(500, [INTERNAL_ERROR_MESSAGE])


@app.exception_handler(KdfConfigurationError)
async def kdf_configuration_error_handler(request: Request, exc: KdfConfigurationError):
    logger.error(f"Argon2id configuration error: {exc}")
    return _error_response(500, [INTERNAL_ERROR_MESSAGE])


@app.exception_handler(ResponseValidationError)
async def response_serialization_handler(request: Request, exc: ResponseValidationError):
    logger.error(f"Failed to serialize response for {request.url.path}: {exc}")
    return _error_response(500, [INTERNAL_ERROR_MESSAGE])


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return _error_response(500, [INTERNAL_ERROR_MESSAGE])


app.include_router(derive.router, prefix=settings.API_PATH, tags=["derive"])


@app.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns HTTP 200 and the fixed Argon2id parameters the service derives with.",
    operation_id="health_check",
    tags=["health"],
)
async def health_check(service: DerivationService = Depends(get_derivation_service)) -> HealthResponse:
    return HealthResponse(status="healthy", kdf=KdfParametersResponse(**service.params.as_dict()))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
