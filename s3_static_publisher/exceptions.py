"""Custom exceptions for the s3_static_publisher package."""

from typing import Optional


class PublisherError(Exception):
    """Base class for all publisher errors."""

    pass


class UsageError(PublisherError, ValueError):
    """Raised when a caller passes an empty or unusable URL."""

    pass


class ConfigurationError(PublisherError):
    """Raised when a storage destination cannot be resolved from configuration."""

    pass


class RenderError(PublisherError):
    """Raised when the origin could not be reached to render a page."""

    pass


class UnsupportedOperationError(PublisherError):
    """Raised when a caller requires a capability this publisher does not provide."""

    pass


class StorageError(PublisherError):
    """Raised when the object storage backend rejects or fails a put/delete."""

    def __init__(self, message: str, key: Optional[str] = None, code: Optional[str] = None):
        super().__init__(message)
        self.key = key
        self.code = code
