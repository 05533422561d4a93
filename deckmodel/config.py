"""
config.py - Environment configuration for the parser and the API.

Values come from environment variables, optionally seeded from a .env file
at the project root.
"""

import os
from functools import lru_cache
from pathlib import Path


# Load .env file if it exists
def _load_dotenv():
    env_path = Path(__file__).parent.parent / ".env"
    if env_path.exists():
        with open(env_path) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, value = line.split("=", 1)
                    key = key.strip()
                    value = value.strip()
                    if key and value and key not in os.environ:
                        os.environ[key] = value

_load_dotenv()


# Deeper group nesting would run into the interpreter's recursion limit
MAX_GROUP_DEPTH_LIMIT = 100


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.app_name: str = os.environ.get("APP_NAME", "deckmodel")
        self.app_version: str = "0.3.0"

        # Parser settings
        self.max_group_depth: int = clamp_group_depth(
            int(os.environ.get("DECKMODEL_MAX_GROUP_DEPTH", "64"))
        )
        self.default_document_name: str = os.environ.get(
            "DECKMODEL_DEFAULT_NAME", "Imported Presentation"
        )
        self.default_author: str = os.environ.get("DECKMODEL_DEFAULT_AUTHOR", "Unknown")

        # Server settings
        self.host: str = os.environ.get("HOST", "0.0.0.0")
        self.port: int = int(os.environ.get("PORT", "8000"))
        self.debug: bool = os.environ.get("DEBUG", "false").lower() == "true"
        self.api_prefix: str = os.environ.get("API_PREFIX", "/api/pptx")
        self.log_level: str = os.environ.get("LOG_LEVEL", "INFO").upper()

        # CORS settings
        self.cors_origins: list = os.environ.get(
            "CORS_ORIGINS",
            "http://localhost:3000,http://127.0.0.1:3000"
        ).split(",")

        # Uploads and parsed document cache
        self.max_upload_mb: int = int(os.environ.get("MAX_UPLOAD_MB", "50"))
        self.document_store_size: int = int(os.environ.get("DOCUMENT_STORE_SIZE", "32"))

    @property
    def max_upload_bytes(self) -> int:
        """Upload limit in bytes."""
        return self.max_upload_mb * 1024 * 1024


def clamp_group_depth(depth: int) -> int:
    """Keep a group depth cap within 0..MAX_GROUP_DEPTH_LIMIT."""
    return min(max(depth, 0), MAX_GROUP_DEPTH_LIMIT)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
