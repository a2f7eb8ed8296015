# Settings management (reads env vars/secrets)
# app/core/config.py

import json
import logging
import os
from functools import lru_cache
from typing import Annotated, List, Union

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

# Set up basic logging configuration early
logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)


def _split_csv(v: Union[str, List[str]]) -> Union[str, List[str]]:
    """Accepts both "a,b" and '["a", "b"]' forms from the environment."""
    if isinstance(v, str):
        if v.startswith("["):
            return json.loads(v)
        return [i.strip() for i in v.split(",") if i.strip()]
    return v


class Settings(BaseSettings):
    """
    Application configuration settings loaded from environment variables or .env file.
    """
    # --- Project Info ---
    PROJECT_NAME: str = Field("Movie Catalog API", validation_alias="PROJECT_NAME")
    API_PREFIX: str = Field("/api", validation_alias="API_PREFIX")
    VERSION: str = Field("0.1.0", validation_alias="APP_VERSION")
    PORT: int = Field(8080, validation_alias="PORT")

    # --- Logging ---
    LOG_LEVEL: str = Field("INFO", validation_alias="LOG_LEVEL")

    # --- Database (MongoDB) ---
    # Use SecretStr to prevent accidental logging of the URI
    MONGODB_URI: SecretStr = Field(
        SecretStr("mongodb://localhost:27017"), validation_alias="MONGODB_URI"
    )
    # Used when the URI does not name a database
    MONGODB_DB_NAME: str = Field("movie_db", validation_alias="MONGODB_DB_NAME")

    # --- Media storage ---
    UPLOAD_DIR: str = Field("uploads", validation_alias="UPLOAD_DIR")
    ALLOWED_MOVIE_EXTENSIONS: Annotated[List[str], NoDecode] = Field(
        default=["mp4", "mov", "mkv", "avi"],
        validation_alias="ALLOWED_MOVIE_EXTENSIONS",
    )

    # --- CORS ---
    # Expects a comma-separated string in env var like "http://localhost:3000,https://*.example.com"
    BACKEND_CORS_ORIGINS: Annotated[List[str], NoDecode] = Field(
        default=["*"],
        validation_alias="BACKEND_CORS_ORIGINS",
    )

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: Union[str, List[str]]) -> Union[List[str], str]:
        if v == "*":
            return ["*"]
        v = _split_csv(v)
        if isinstance(v, list):
            return v
        raise ValueError(f"Invalid BACKEND_CORS_ORIGINS format: {v}")

    @field_validator("ALLOWED_MOVIE_EXTENSIONS", mode="before")
    @classmethod
    def assemble_allowed_extensions(cls, v: Union[str, List[str]]) -> List[str]:
        v = _split_csv(v)
        if not isinstance(v, list):
            raise ValueError(f"Invalid ALLOWED_MOVIE_EXTENSIONS format: {v}")
        # Stored lower-case and without the leading dot
        return [ext.lower().lstrip(".") for ext in v]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    """Returns the application settings instance."""
    logger.info("Attempting to load application settings...")
    try:
        settings_instance = Settings()
        logger.info(f"Settings loaded successfully for Project: {settings_instance.PROJECT_NAME}")
        logger.info(f"Log Level: {settings_instance.LOG_LEVEL}")
        logger.info(f"CORS Origins: {settings_instance.BACKEND_CORS_ORIGINS}")
        logger.info(f"Upload directory: {settings_instance.UPLOAD_DIR}")
        # DO NOT log SecretStr values directly in production logs!
        return settings_instance
    except Exception as e:
        logger.critical(f"CRITICAL ERROR: Failed to load application settings: {e}", exc_info=True)
        raise RuntimeError(f"Could not load settings: {e}")


# Create a single settings instance to be imported by other modules
settings: Settings = get_settings()
