"""
SQLAlchemy models for the readstack database.
"""
from readstack.models.user import User
from readstack.models.reading import Reading, SUMMARY_MAX_LENGTH

__all__ = [
    "User",
    "Reading",
    "SUMMARY_MAX_LENGTH",
]
