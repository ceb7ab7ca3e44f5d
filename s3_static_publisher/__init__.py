"""
Publish rendered CMS pages to S3-compatible object storage for static hosting.
"""

from .config import PublisherConfig
from .exceptions import (
    ConfigurationError,
    PublisherError,
    RenderError,
    StorageError,
    UnsupportedOperationError,
    UsageError,
)
from .models import (
    Credentials,
    PublishOutcome,
    PurgeOutcome,
    RenderedResponse,
    StorageDestination,
    StorageObject,
    TenantRecord,
)
from .publisher import Publisher, StaticPublisher
from .renderer import HttpRenderer, StaticContentLookup
from .storage import InMemoryGateway, MinIOGateway
from .tenants import JsonTenantDirectory, MappingTenantDirectory, TenantResolver

__all__ = [
    "ConfigurationError",
    "Credentials",
    "HttpRenderer",
    "InMemoryGateway",
    "JsonTenantDirectory",
    "MappingTenantDirectory",
    "MinIOGateway",
    "Publisher",
    "PublisherConfig",
    "PublisherError",
    "PublishOutcome",
    "PurgeOutcome",
    "RenderError",
    "RenderedResponse",
    "StaticContentLookup",
    "StaticPublisher",
    "StorageDestination",
    "StorageError",
    "StorageObject",
    "TenantRecord",
    "TenantResolver",
    "UnsupportedOperationError",
    "UsageError",
]
