"""
Configuration settings for the Wayfinder Engine.

This module defines all configuration parameters using Pydantic Settings,
enabling environment variable overrides for production deployment.
"""

from pydantic import Field
from pydantic_settings import BaseSettings
from typing import Optional
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings with environment variable support.

    Attributes:
        APP_NAME: Application identifier
        APP_VERSION: Semantic version
        DEBUG: Enable debug mode

        # Catalog
        DESTINATIONS_DATA_PATH: JSON file with the destination catalog

        # Trip/photo store
        STORE_BACKEND: "csv" (development) or "mongo" (production)
        DATA_DIR: Directory holding trips.csv and photos.csv
        MONGODB_URI: MongoDB connection string
        MONGODB_DB_NAME: MongoDB database name

        # Scoring / analytics
        MAX_SUGGESTIONS: Number of ranked destinations returned
        DEFAULT_TRIP_DURATION_DAYS: Average trip length when history is empty
        NEARBY_DEFAULT_RADIUS_KM: Radius used when the caller gives none
        NEARBY_SCAN_LIMIT: Upper bound on photos scanned by one nearby query

        # API Configuration
        API_V1_PREFIX: API version prefix
        HOST: Server host
        PORT: Server port
    """

    # Application
    APP_NAME: str = "Wayfinder Engine"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Catalog (None = file shipped with the package)
    DESTINATIONS_DATA_PATH: Optional[str] = None

    # Trip/photo store
    STORE_BACKEND: str = "csv"
    DATA_DIR: str = "./data"
    MONGODB_URI: str = "mongodb://localhost:27017"
    MONGODB_DB_NAME: str = "wayfinder"

    # Scoring / analytics
    MAX_SUGGESTIONS: int = Field(12, ge=1, le=12)
    DEFAULT_TRIP_DURATION_DAYS: int = 7
    NEARBY_DEFAULT_RADIUS_KM: float = 10.0
    NEARBY_SCAN_LIMIT: Optional[int] = None

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    HOST: str = "0.0.0.0"
    PORT: int = 8002

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Allow extra fields in .env


@lru_cache()
def get_settings() -> Settings:
    """
    Cached settings factory.

    Returns:
        Settings: Application configuration singleton
    """
    return Settings()


# Global settings instance
settings = get_settings()
