"""Centralized application settings using pydantic settings."""

from functools import lru_cache
from pathlib import Path
from typing import List

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
# Look for .env in the backend directory or project root
env_path = Path(__file__).parent.parent.parent / ".env"
if not env_path.exists():
    env_path = Path(__file__).parent.parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path, override=False)

IMAGE_FOLDER = "product-images"
ALLOWED_IMAGE_FORMATS = ("jpeg", "jpg", "png", "gif")
MAX_IMAGE_BYTES = 5 * 1024 * 1024

REQUIRED_ENV_VARS = (
    "CLOUDINARY_CLOUD_NAME",
    "CLOUDINARY_API_KEY",
    "CLOUDINARY_API_SECRET",
    "DATABASE_URL",
)


class Settings(BaseSettings):
    """Process-wide configuration, built once at startup and never mutated."""

    app_name: str = "Product Catalog"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)

    # Media host credentials
    cloudinary_cloud_name: str
    cloudinary_api_key: str
    cloudinary_api_secret: str
    cloudinary_api_base: str = "https://api.cloudinary.com/v1_1"

    # MONGODB_URI is still honoured so existing .env files keep working
    database_url: str = Field(
        validation_alias=AliasChoices("DATABASE_URL", "MONGODB_URI", "database_url"),
        description="Database connection URL",
    )

    cors_origins_raw: str | None = Field(
        default=None,
        validation_alias=AliasChoices("CORS_ORIGINS", "cors_origins_raw"),
        description="Comma-separated list of allowed CORS origins",
        exclude=True,
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
        frozen=True,
    )

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS_ORIGINS from comma-separated string to list."""
        if self.cors_origins_raw is None or not self.cors_origins_raw.strip():
            return ["*"]
        origins = [
            origin.strip().rstrip("/")
            for origin in self.cors_origins_raw.split(",")
            if origin.strip()
        ]
        return origins or ["*"]

    @property
    def default_image_url(self) -> str:
        """Placeholder shown for products without an uploaded image."""
        return (
            f"https://res.cloudinary.com/{self.cloudinary_cloud_name}"
            f"/image/upload/v1/{IMAGE_FOLDER}/default-product.jpg"
        )

    @field_validator(
        "cloudinary_cloud_name",
        "cloudinary_api_key",
        "cloudinary_api_secret",
        "database_url",
        mode="before",
    )
    @classmethod
    def reject_blank(cls, v: str | None) -> str | None:
        """Treat empty strings like unset variables."""
        if isinstance(v, str) and not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("database_url", mode="after")
    @classmethod
    def fix_database_url(cls, v: str) -> str:
        """Fix Heroku DATABASE_URL format (postgres:// -> postgresql+psycopg://)."""
        if v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql+psycopg://", 1)
        if v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+psycopg://", 1)
        return v


def missing_settings(exc: ValidationError) -> list[str]:
    """Map a settings validation failure back to environment variable names."""
    missing = []
    for error in exc.errors():
        field = str(error["loc"][0]) if error.get("loc") else ""
        name = field.upper()
        if name in REQUIRED_ENV_VARS and name not in missing:
            missing.append(name)
    return missing


@lru_cache
def get_settings() -> Settings:
    """Build the settings object once per process."""
    return Settings()
