"""
Application settings loaded from environment variables.

A ``.env`` file in the working directory is read first, so local
development only needs that file.  Values are read once when
``settings`` is instantiated; tests patch attributes on that object.
"""

import os
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _split_origins(raw: str) -> List[str]:
    return [o.strip() for o in raw.split(",") if o.strip()]


@dataclass
class Settings:
    """Runtime configuration for the Places API."""

    project_name: str = os.getenv("PROJECT_NAME", "Places API")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    port: int = int(os.getenv("PORT", "4000"))

    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./places.db")
    sql_echo: bool = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")

    # Token signing
    jwt_key: str = os.getenv("JWT_KEY", "change_me")
    jwt_algorithm: str = "HS256"
    token_expire_minutes: int = int(os.getenv("TOKEN_EXPIRE_MINUTES", "60"))

    # Geocoding (LocationIQ search API)
    map_api_key: str = os.getenv("MAP_API_KEY", "")
    geocoder_url: str = os.getenv("GEOCODER_URL", "https://us1.locationiq.com/v1/search.php")
    geocoder_timeout: float = float(os.getenv("GEOCODER_TIMEOUT", "10"))

    # Image uploads
    upload_dir: str = os.getenv("UPLOAD_DIR", os.path.join("uploads", "images"))
    max_upload_bytes: int = int(os.getenv("MAX_UPLOAD_BYTES", "500000"))

    cors_origins: List[str] = field(default_factory=lambda: _split_origins(os.getenv("CORS_ORIGINS", "*")))


settings = Settings()
