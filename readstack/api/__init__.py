"""
API routers for readstack.
"""
from readstack.api import auth, readings, search

__all__ = [
    "auth",
    "readings",
    "search",
]
