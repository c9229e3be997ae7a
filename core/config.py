import os

from pydantic import field_validator
from pydantic_settings import BaseSettings

from core.crypto import MIN_RAW_LENGTH, MIN_SALT_BYTES, KdfParameters, raw_length_guess


class Settings(BaseSettings):
    PROJECT_NAME: str = "Argon2 Sizer"
    API_PATH: str = "/api"

    # Environment mode
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ENVIRONMENT: str = os.getenv("ENVIRONMENT", "")

    # Listener (used when launched via uvicorn with these values)
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # Argon2id parameters - fixed for the process lifetime
    KDF_MEMORY_COST: int = int(os.getenv("KDF_MEMORY_COST", str(64 * 1024)))  # KiB (64 MB)
    KDF_TIME_COST: int = int(os.getenv("KDF_TIME_COST", "3"))
    KDF_PARALLELISM: int = int(os.getenv("KDF_PARALLELISM", "2"))

    # Request policy
    MIN_PASSWORD_LENGTH: int = 8
    MIN_SALT_LENGTH: int = 8
    MIN_ENCODED_SIZE: int = 8
    MAX_ENCODED_SIZE: int = int(os.getenv("MAX_ENCODED_SIZE", "4096"))

    # Each in-flight derivation holds KDF_MEMORY_COST KiB
    MAX_CONCURRENT_DERIVATIONS: int = int(os.getenv("MAX_CONCURRENT_DERIVATIONS", "4"))

    @field_validator("KDF_MEMORY_COST", "KDF_TIME_COST", "KDF_PARALLELISM", "MAX_CONCURRENT_DERIVATIONS")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Must be a positive integer")
        return v

    @field_validator("MIN_SALT_LENGTH")
    @classmethod
    def validate_min_salt_length(cls, v: int) -> int:
        if v < MIN_SALT_BYTES:
            raise ValueError(f"MIN_SALT_LENGTH must be at least {MIN_SALT_BYTES} (Argon2 salt minimum)")
        return v

    @field_validator("MIN_ENCODED_SIZE")
    @classmethod
    def validate_min_encoded_size(cls, v: int) -> int:
        if raw_length_guess(v) < MIN_RAW_LENGTH:
            raise ValueError(f"MIN_ENCODED_SIZE is below the Argon2 minimum output of {MIN_RAW_LENGTH} bytes")
        return v

    @field_validator("MAX_ENCODED_SIZE")
    @classmethod
    def validate_max_encoded_size(cls, v: int, info) -> int:
        floor = info.data.get("MIN_ENCODED_SIZE", 8)
        if v < floor:
            raise ValueError(f"MAX_ENCODED_SIZE must be at least {floor}")
        return v

    class Config:
        env_file = ".env"
        extra = "ignore"

    def kdf_parameters(self) -> KdfParameters:
        """Build the immutable Argon2id parameter set from these settings."""
        return KdfParameters(
            memory_cost=self.KDF_MEMORY_COST,
            time_cost=self.KDF_TIME_COST,
            parallelism=self.KDF_PARALLELISM,
        )


settings = Settings()
