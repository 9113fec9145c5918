"""API route modules for FastAPI endpoints."""

from app.routes.issues import router as issues_router
from app.routes.stats import router as stats_router
from app.routes.uploads import router as uploads_router

__all__ = ["issues_router", "stats_router", "uploads_router"]
