"""
Domain errors raised by services and translated at the route boundary.

See backend.app.error_handlers for the HTTP mapping.
"""


class ServiceError(Exception):
    """Base class for errors raised by core services."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(ServiceError):
    """The requested profile (or its owner) does not exist."""


class StorageError(ServiceError):
    """A persistence operation failed. The cause is chained and logged."""


class UpstreamError(ServiceError):
    """The GitHub API could not be reached or answered with an error."""


__all__ = ["NotFoundError", "ServiceError", "StorageError", "UpstreamError"]
