from functools import lru_cache
from typing import Annotated, Any, List
import os

from dotenv import load_dotenv
from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Service information
    SERVICE_NAME: str = "catalog-service"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = "development"

    # API settings
    API_PREFIX: str = "/api/v1"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS settings
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = ["*"]

    # Database settings
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DATABASE: str = "ShopifyBackendChallengeDb"
    PRODUCTS_COLLECTION: str = "products"
    ORDERS_COLLECTION: str = "orders"
    DATABASE_POOL_SIZE: int = 10
    DATABASE_TIMEOUT_MS: int = 5000

    # Logging settings
    LOG_LEVEL: str = "INFO"
    ENABLE_STRUCTURED_LOGGING: bool = True

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Any) -> List[str]:
        """Parse CORS origins from string or list."""
        if isinstance(v, str) and not v.startswith("["):
            return [i.strip() for i in v.split(",") if i.strip()]
        elif isinstance(v, (list, str)):
            return v
        raise ValueError(v)

    @field_validator("MONGODB_URI")
    @classmethod
    def validate_mongodb_uri(cls, v: str) -> str:
        """Validate that the MongoDB URI is properly formatted."""
        if not v.startswith(("mongodb://", "mongodb+srv://")):
            raise ValueError("MONGODB_URI must be a valid MongoDB connection string")
        return v

    @field_validator("DATABASE_POOL_SIZE", "DATABASE_TIMEOUT_MS")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be a positive integer")
        return v


def load_env_file(env_file: str = ".env") -> None:
    """
    Load environment variables from specified .env file.

    Args:
        env_file: Path to the .env file. Defaults to ".env".
    """
    env_path = os.path.join(os.getcwd(), env_file)
    if os.path.exists(env_path):
        load_dotenv(env_path)


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings with caching for efficiency.

    Returns:
        Settings: Application settings instance
    """
    return Settings()
