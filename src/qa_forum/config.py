"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # App settings
    app_name: str = "Q&A Forum API"
    debug: bool = False

    # Database
    database_url: str = "sqlite+aiosqlite:///./qa_forum.db"

    # Sessions
    session_cookie_name: str = "session_id"
    session_cookie_secure: bool = True
    session_expire_days: int = 7

    # Password hashing and reset
    bcrypt_rounds: int = 12
    password_reset_expire_minutes: int = 60
    # Return the reset token in the API response instead of mailing it
    expose_reset_token: bool = True

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v: int) -> int:
        """Validate that the bcrypt work factor is one bcrypt accepts."""
        if not 4 <= v <= 31:
            msg = "BCRYPT_ROUNDS must be between 4 and 31"
            raise ValueError(msg)
        return v

    @field_validator("session_expire_days", "password_reset_expire_minutes")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Validate that lifetimes are positive."""
        if v < 1:
            msg = "Lifetimes must be at least 1"
            raise ValueError(msg)
        return v

    def validate_runtime_config(self) -> list[str]:
        """Validate runtime configuration and return warnings."""
        warnings = []

        if self.expose_reset_token:
            warnings.append(
                "EXPOSE_RESET_TOKEN is enabled - password reset tokens are returned "
                "in API responses instead of being delivered out of band"
            )

        if not self.session_cookie_secure:
            warnings.append("SESSION_COOKIE_SECURE is disabled - session cookie sent over HTTP")

        if self.bcrypt_rounds < 10:
            warnings.append("BCRYPT_ROUNDS is below 10 - password hashes are weak")

        # Warn about debug mode in production
        if self.debug:
            warnings.append("DEBUG mode is enabled - should be disabled in production")

        return warnings


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
