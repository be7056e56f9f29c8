import os
from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """
    Runtime configuration, read from environment variables with defaults.
    Speed presets and confidence thresholds are fixed and live in the services.
    """
    MBTA_API_KEY = os.environ.get("MBTA_API_KEY")
    MBTA_BASE_URL = os.environ.get("MBTA_BASE_URL", "https://api-v3.mbta.com")
    MBTA_TIMEOUT_SECONDS = float(os.environ.get("MBTA_TIMEOUT_SECONDS", 15.0))

    # Stops rarely change; predictions are never cached
    STOP_CACHE_TTL_SECONDS = int(os.environ.get("STOP_CACHE_TTL_SECONDS", 45))

    # How often clients should re-poll predictions
    PREDICTIONS_REFRESH_SECONDS = int(os.environ.get("PREDICTIONS_REFRESH_SECONDS", 15))

    CORS_ORIGINS = [
        origin.strip()
        for origin in os.environ.get("CORS_ORIGINS", "http://localhost:5173").split(",")
        if origin.strip()
    ]

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", 8000))
