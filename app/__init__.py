"""FastAPI Civic Issues Application.

A FastAPI service for reporting and tracking civic issues with:
- Issue submission with optional image or document upload
- Status updates and comments
- Aggregate statistics by status
- SQLAlchemy ORM with async support
"""
