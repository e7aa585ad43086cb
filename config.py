"""
Configuration module for the Gemini Assist Bridge.
Handles environment variables and default model/endpoint settings.
"""
import os
from dotenv import load_dotenv

from utils.logger import app_logger

load_dotenv()


class Config:
    """Application configuration class."""

    # API Keys
    GEMINI_API_KEY: str = os.getenv("GEMINI_API_KEY", "")

    # Completion endpoint
    GEMINI_BASE_URL: str = os.getenv("GEMINI_BASE_URL", "https://generativelanguage.googleapis.com")
    GEMINI_API_VERSION: str = "v1beta"
    GEMINI_MODEL: str = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # Generation defaults
    DEFAULT_TEMPERATURE: float = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
    DEFAULT_MAX_OUTPUT_TOKENS: int = int(os.getenv("GEMINI_MAX_OUTPUT_TOKENS", "2048"))

    # Fixed sampling parameters (not configurable per client)
    TOP_K: int = 40
    TOP_P: float = 0.95

    # Page extraction endpoint
    READER_BASE_URL: str = "https://r.jina.ai"

    # Application Settings
    APP_TITLE: str = "Gemini Assist Bridge"
    DEFAULT_MAX_RESULTS: int = 10

    # Timeouts (in seconds)
    COMPLETION_TIMEOUT: float = float(os.getenv("COMPLETION_TIMEOUT", "30.0"))
    READER_TIMEOUT: float = float(os.getenv("READER_TIMEOUT", "15.0"))

    # Transport limits
    MAX_CONNECTIONS: int = 10
    MAX_REDIRECTS: int = 5

    @classmethod
    def completion_url(cls, base_url: str, model_name: str) -> str:
        """Build the generateContent URL for a model."""
        return f"{base_url.rstrip('/')}/{cls.GEMINI_API_VERSION}/models/{model_name}:generateContent"

    @classmethod
    def reader_url(cls, url: str) -> str:
        """Build the page extraction URL for a target page."""
        return f"{cls.READER_BASE_URL}/{url}"

    @classmethod
    def validate(cls) -> None:
        """Validate configuration and log warnings for missing API keys."""
        if not cls.GEMINI_API_KEY:
            app_logger.warning("GEMINI_API_KEY not found in environment or .env file")
            app_logger.warning("Clients must be constructed with an explicit api_key. Get one from: https://aistudio.google.com/apikey")


Config.validate()
