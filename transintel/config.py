"""
Application Configuration Module.

This module loads environment variables from a .env file and exposes them
as a Settings object plus a handful of constant groups used by the rest of
the application.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

# Load environment variables from a .env file if it exists.
load_dotenv()

# ============================================================================
# APPLICATION CONSTANTS
# ============================================================================

class ModelDefaults:
    """Default upstream model."""
    MODEL = "gemini-2.5-flash-lite"


class GenerationDefaults:
    """Sampling parameters applied to every generation call."""
    TEMPERATURE = 0.1
    TOP_P = 0.95
    TOP_K = 40
    MAX_OUTPUT_TOKENS = 8192


class CacheDefaults:
    """Translation cache sizing."""
    MAX_SIZE = 1000
    TTL_SECONDS = 3600


class RetryPolicy:
    """Retry ladder for upstream model calls."""
    MAX_ATTEMPTS = 3
    BASE_DELAY_SECONDS = 1.0
    RETRYABLE_STATUSES = frozenset({429, 500, 503, 504})


class ExtractionLimits:
    """Limits for the file text extraction flow."""
    MAX_FILE_BYTES = 10 * 1024 * 1024
    POLL_INTERVAL_SECONDS = 1.0
    MAX_POLLS = 300
    ALLOWED_MIME_TYPES = frozenset({
        'image/png', 'image/jpeg', 'image/jpg', 'image/webp',
        'image/heic', 'image/heif',
        'application/pdf',
        'audio/mpeg', 'audio/mp3', 'audio/wav', 'audio/aac',
        'audio/flac', 'audio/ogg', 'audio/aiff',
        'text/plain', 'text/csv',
    })


class ServerDefaults:
    """HTTP server defaults."""
    HOST = "0.0.0.0"
    PORT = 3001
    API_KEY_CONSOLE_URL = "https://aistudio.google.com/app/apikey"


# ============================================================================
# SETTINGS
# ============================================================================

@dataclass(frozen=True)
class Settings:
    """
    Runtime settings for the backend.

    Attributes:
        api_key: Gemini API key. The server starts without one, but every
                 endpoint that needs the model reports a configuration error.
        model: Gemini model identifier
        host: Interface the HTTP server binds to
        port: Port the HTTP server listens on
        cache_max_size: Maximum number of cached translations
        cache_ttl_seconds: Lifetime of a cached translation
    """
    api_key: Optional[str] = None
    model: str = ModelDefaults.MODEL
    host: str = ServerDefaults.HOST
    port: int = ServerDefaults.PORT
    cache_max_size: int = CacheDefaults.MAX_SIZE
    cache_ttl_seconds: float = CacheDefaults.TTL_SECONDS

    @property
    def api_key_configured(self) -> bool:
        return bool(self.api_key)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from the process environment."""
        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or None,
            model=os.getenv("MODEL", ModelDefaults.MODEL),
            host=os.getenv("HOST", ServerDefaults.HOST),
            port=int(os.getenv("PORT", ServerDefaults.PORT)),
            cache_max_size=int(os.getenv("CACHE_MAX_SIZE", CacheDefaults.MAX_SIZE)),
            cache_ttl_seconds=float(os.getenv("CACHE_TTL_SECONDS", CacheDefaults.TTL_SECONDS)),
        )
