"""Database configuration, models, and session management."""

from app.database.config import (
    Base,
    create_engine,
    create_sessionmaker,
    get_db,
    get_session_factory,
    init_models,
)
from app.database import models

__all__ = [
    "Base",
    "create_engine",
    "create_sessionmaker",
    "get_db",
    "get_session_factory",
    "init_models",
    "models",
]
