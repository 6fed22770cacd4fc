"""
Error taxonomy for readstack.

Every error carries the HTTP status it maps to and a short public message.
Diagnostic detail (upstream bodies, provider exceptions) is logged where the
error is raised and never placed in the message.
"""
from fastapi import status


class ReadstackError(Exception):
    """Base class for errors rendered at the request boundary."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(ReadstackError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class ValidationError(ReadstackError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class NotFound(ReadstackError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Reading not found"


class Conflict(ReadstackError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Article already exists in your reading list"


class ConfigurationError(ReadstackError):
    """A required credential or setting is missing."""

    default_message = "Service is not configured"


class UpstreamError(ReadstackError):
    """An extraction, generation or embedding provider failed."""

    default_message = "Upstream service failed"


class StorageError(ReadstackError):
    """The persistence layer rejected a read or write."""

    default_message = "Storage operation failed"
