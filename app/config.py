import os
from dataclasses import dataclass, field


DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./civic_issues.db"
DEFAULT_UPLOAD_DIR = "./uploads"
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MiB


@dataclass
class Settings:
    """Runtime configuration for the civic issues service."""

    database_url: str = DEFAULT_DATABASE_URL
    upload_dir: str = DEFAULT_UPLOAD_DIR
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
    cors_origins: list[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def _split_origins(raw: str) -> list[str]:
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def get_settings() -> Settings:
    """
    Build settings from environment variables.

    Reads:
    - DATABASE_URL: async SQLAlchemy URL
    - UPLOAD_DIR: directory where uploaded files are kept
    - MAX_UPLOAD_BYTES: upload size limit in bytes
    - CORS_ORIGINS: comma separated list of allowed origins
    - LOG_LEVEL: logging level name
    """
    return Settings(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        upload_dir=os.getenv("UPLOAD_DIR", DEFAULT_UPLOAD_DIR),
        max_upload_bytes=int(os.getenv("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)),
        cors_origins=_split_origins(os.getenv("CORS_ORIGINS", "*")) or ["*"],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )
