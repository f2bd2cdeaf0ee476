"""
Configuration management using Pydantic settings.
Handles database connection, session secrets, uploads and server options from the environment.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings
from typing import Optional, List
from functools import lru_cache
import os


DEFAULT_SESSION_SECRET = "dev_secret_change_me"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application configuration
    app_name: str = "Property Listing"
    app_version: str = "1.0.0"
    environment: str = "development"
    debug: bool = False

    # Database configuration
    database_url: Optional[str] = None
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = "postgres"
    db_password: str = ""
    db_name: str = "property_listings"

    # Connection pool: fixed size, acquisitions queue when exhausted
    db_pool_size: int = 10
    db_pool_timeout: Optional[float] = None

    # Session configuration
    session_secret: str = DEFAULT_SESSION_SECRET
    session_max_age: int = 60 * 60  # 1 hour
    session_cookie_name: str = "sid"

    # Password hashing work factor
    bcrypt_rounds: int = 12

    # File upload configuration
    upload_dir: str = "./uploads"
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    max_property_images: int = 5
    max_request_size: int = 60 * 1024 * 1024
    allowed_file_types: List[str] = ["image/jpeg", "image/png", "image/webp"]

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 3000

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v):
        """Ensure an async driver is used for PostgreSQL URLs."""
        if v and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v):
        """Validate environment setting."""
        allowed_envs = ["development", "testing", "staging", "production"]
        if v not in allowed_envs:
            raise ValueError(f"Environment must be one of: {allowed_envs}")
        return v

    @field_validator("bcrypt_rounds")
    @classmethod
    def validate_bcrypt_rounds(cls, v):
        """bcrypt accepts work factors between 4 and 31."""
        if not 4 <= v <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31")
        return v

    @field_validator("db_pool_size", "max_property_images", "session_max_age")
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("Value must be greater than 0")
        return v

    @field_validator("upload_dir")
    @classmethod
    def create_upload_directory(cls, v):
        """Ensure upload directory exists."""
        if v and not os.path.exists(v):
            os.makedirs(v, exist_ok=True)
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing mode."""
        return self.environment == "testing"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.environment == "production"

    @property
    def sqlalchemy_url(self) -> str:
        """Database URL, built from the individual DB_* options unless DATABASE_URL is set."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql+asyncpg://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    def check_secrets(self) -> None:
        """
        Refuse weak session secrets outside development and testing.

        Raises:
            ValueError: If the session secret is the default or too short
        """
        if self.is_development or self.is_testing:
            return
        if self.session_secret == DEFAULT_SESSION_SECRET or len(self.session_secret) < 32:
            raise ValueError("SESSION_SECRET must be set to at least 32 characters")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one instance of settings throughout the app lifecycle.
    """
    return Settings()


# Global settings instance
settings = get_settings()
