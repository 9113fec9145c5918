"""Data access for issues, comments and statistics."""

from app.repositories.comments import CommentRepository
from app.repositories.issues import IssueRepository
from app.repositories.stats import StatsAggregator

__all__ = ["CommentRepository", "IssueRepository", "StatsAggregator"]
