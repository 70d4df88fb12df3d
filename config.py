"""
Configuration Management for Route Weather Trip Planner
=======================================================

This module handles:
- Loading environment variables from .env file
- Validating required API keys and settings
- Providing centralized configuration access
- Setting up default values and logging

Usage:
    from config import config
    api_key = config.OPENWEATHER_API_KEY
    samples = config.ROUTE_SAMPLE_COUNT
"""

import os
import logging
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from pydantic import validator


class Config(BaseSettings):
    """
    Centralized configuration class using Pydantic for validation
    Loads settings from environment variables with type checking
    """

    # =============================================================================
    # API KEYS - Required for core functionality
    # =============================================================================

    OPENWEATHER_API_KEY: str
    OPENAI_API_KEY: str

    @validator('OPENWEATHER_API_KEY', 'OPENAI_API_KEY')
    def validate_api_key(cls, v):
        """Ensure API keys are provided"""
        if not v or not v.strip():
            raise ValueError("API key must not be empty")
        return v.strip()

    # =============================================================================
    # PROVIDER ENDPOINTS
    # =============================================================================

    OPENWEATHER_API_URL: str = "https://api.openweathermap.org/data/2.5/weather"
    OPENAI_API_URL: str = "https://api.openai.com/v1/chat/completions"
    OPENAI_MODEL: str = "gpt-4o-mini"
    NOMINATIM_URL: str = "https://nominatim.openstreetmap.org"
    GEOCODING_USER_AGENT: str = "Route-Weather-Trip-Planner/1.0"

    # =============================================================================
    # API TIMEOUTS (seconds)
    # =============================================================================

    ROUTE_WEATHER_TIMEOUT: int = 10
    HOME_WEATHER_TIMEOUT: int = 12
    GEOCODING_TIMEOUT: int = 10
    AI_API_TIMEOUT: int = 30

    # =============================================================================
    # TRIP PLANNING PARAMETERS
    # =============================================================================

    ROUTE_SAMPLE_COUNT: int = 5  # Route segments; N+1 points are sampled
    DEFAULT_CITY: str = "New Delhi"
    AVERAGE_DRIVE_SPEED_KMH: float = 60.0

    @validator('ROUTE_SAMPLE_COUNT')
    def validate_sample_count(cls, v):
        """Ensure at least one route segment"""
        if v < 1:
            raise ValueError(f"Route sample count must be at least 1, got {v}")
        return v

    # =============================================================================
    # DEVICE LOCATION
    # =============================================================================

    DEVICE_LOCATION_ENABLED: bool = False
    DEVICE_LATITUDE: Optional[float] = None
    DEVICE_LONGITUDE: Optional[float] = None
    DEVICE_LOCATION_PERMISSION: str = "granted"

    @validator('DEVICE_LOCATION_PERMISSION')
    def validate_permission(cls, v):
        """Ensure permission state is one the location service understands"""
        allowed = ("granted", "denied", "denied_forever")
        if v.lower() not in allowed:
            raise ValueError(f"Location permission must be one of {allowed}, got {v}")
        return v.lower()

    # =============================================================================
    # APPLICATION SETTINGS
    # =============================================================================

    APP_NAME: str = "Route Weather Trip Planner"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # =============================================================================
    # FILE PATHS
    # =============================================================================

    PREFERENCES_FILE_PATH: str = "./data/preferences.json"
    LOG_FILE_PATH: str = "./logs/app.log"
    ERROR_LOG_PATH: str = "./logs/errors.log"

    # =============================================================================
    # CONFIGURATION SETUP
    # =============================================================================

    class Config:
        """Pydantic configuration"""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def create_directories(self) -> None:
        """Create necessary directories if they don't exist"""
        directories = [
            os.path.dirname(self.PREFERENCES_FILE_PATH),
            os.path.dirname(self.LOG_FILE_PATH),
            os.path.dirname(self.ERROR_LOG_PATH)
        ]

        for directory in directories:
            if directory:
                Path(directory).mkdir(parents=True, exist_ok=True)

    def setup_logging(self) -> None:
        """Configure application logging"""
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

        logging.basicConfig(
            level=getattr(logging, self.LOG_LEVEL.upper()),
            format=log_format,
            handlers=[
                logging.FileHandler(self.LOG_FILE_PATH),
                logging.StreamHandler()  # Console output
            ]
        )

        # Create error-specific logger
        error_handler = logging.FileHandler(self.ERROR_LOG_PATH)
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(logging.Formatter(log_format))

        logger = logging.getLogger()
        logger.addHandler(error_handler)

    def validate_configuration(self) -> bool:
        """
        Validate that all critical configuration is properly set
        Returns True if configuration is valid, raises exception otherwise
        """
        try:
            if self.DEVICE_LOCATION_ENABLED and (
                self.DEVICE_LATITUDE is None or self.DEVICE_LONGITUDE is None
            ):
                raise ValueError(
                    "DEVICE_LATITUDE and DEVICE_LONGITUDE are required when device location is enabled"
                )

            timeouts = (self.ROUTE_WEATHER_TIMEOUT, self.HOME_WEATHER_TIMEOUT,
                        self.GEOCODING_TIMEOUT, self.AI_API_TIMEOUT)
            if any(t <= 0 for t in timeouts):
                raise ValueError(f"API timeouts must be positive, got {timeouts}")

            return True

        except Exception as e:
            logging.error(f"Configuration validation failed: {e}")
            raise


def load_configuration() -> Config:
    """
    Load and validate configuration from environment
    Creates directories and sets up logging
    """
    try:
        # Load environment variables from .env file
        load_dotenv()

        # Create and validate configuration
        config = Config()

        # Create necessary directories
        config.create_directories()

        # Setup logging
        config.setup_logging()

        # Validate configuration
        config.validate_configuration()

        logging.info(f"Configuration loaded successfully for {config.APP_NAME} v{config.APP_VERSION}")
        return config

    except Exception as e:
        print(f"Failed to load configuration: {e}")
        raise


# =============================================================================
# GLOBAL CONFIGURATION INSTANCE
# =============================================================================

# Create global configuration instance
config = load_configuration()

# Export commonly used settings for easy access
OPENWEATHER_API_KEY = config.OPENWEATHER_API_KEY
ROUTE_SAMPLE_COUNT = config.ROUTE_SAMPLE_COUNT
