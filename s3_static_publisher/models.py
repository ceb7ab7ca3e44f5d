"""
Data models shared by the publisher, tenant resolver and storage gateways.
"""

from dataclasses import dataclass
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# Only these response headers influence what gets written to storage.
RELEVANT_HEADERS = ("Content-Type", "Expires", "Location")

_CANONICAL_HEADERS = {name.lower(): name for name in RELEVANT_HEADERS}


class RenderedResponse(BaseModel):
    """HTTP-like response produced by rendering a page on the origin."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(..., ge=100, le=599, description="HTTP status code")
    body: bytes = Field(default=b"", description="Raw response body")
    headers: Dict[str, str] = Field(default_factory=dict, description="Content-Type, Expires and Location only")

    @field_validator("body", mode="before")
    @classmethod
    def encode_body(cls, v):
        """Accept text bodies and store them as UTF-8 bytes."""
        if v is None:
            return b""
        if isinstance(v, str):
            return v.encode("utf-8")
        return v

    @field_validator("headers", mode="before")
    @classmethod
    def filter_headers(cls, v):
        """Keep the relevant headers under their canonical names, dropping empty values."""
        filtered = {}
        for name, value in dict(v or {}).items():
            canonical = _CANONICAL_HEADERS.get(str(name).lower())
            if canonical and value:
                filtered[canonical] = str(value)
        return filtered

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup."""
        canonical = _CANONICAL_HEADERS.get(name.lower(), name)
        return self.headers.get(canonical)


class TenantRecord(BaseModel):
    """Per-tenant storage settings; any field may be an `ENV_VAR` reference."""

    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    region: Optional[str] = None
    bucket_name: Optional[str] = None
    path_prefix: Optional[str] = None

    model_config = {"extra": "ignore"}


@dataclass(frozen=True)
class Credentials:
    """Credentials for one storage account."""

    access_key_id: str
    secret_access_key: str
    region: str

    def __repr__(self) -> str:
        return f"Credentials(access_key_id={self.access_key_id!r}, secret_access_key='***', region={self.region!r})"


@dataclass(frozen=True)
class StorageDestination:
    """Where a URL's objects are written: account, bucket and key prefix."""

    credentials: Credentials
    bucket_name: str
    key_prefix: str = ""
    endpoint: str = "s3.amazonaws.com"
    secure: bool = True


@dataclass
class StorageObject:
    """An object to be written: either a page body or a redirect marker."""

    body: bytes = b""
    content_type: Optional[str] = None
    expires: Optional[str] = None
    redirect_location: Optional[str] = None

    @property
    def content_length(self) -> int:
        """Length of the body in bytes."""
        return len(self.body)

    @property
    def is_redirect(self) -> bool:
        return self.redirect_location is not None


@dataclass
class PublishOutcome:
    """Result of publishing a single URL."""

    published: bool
    success: bool
    response_code: int
    url: str
    partial_failure: bool = False

    def to_dict(self) -> dict:
        """Legacy result shape consumed by job runners."""
        return {
            "published": self.published,
            "success": self.success,
            "responsecode": self.response_code,
            "url": self.url,
        }


@dataclass
class PurgeOutcome:
    """Result of purging a single URL.

    ``path`` is always False; it is kept so job runners that read it keep working.
    """

    success: bool
    url: str
    path: bool = False

    def to_dict(self) -> dict:
        return {"success": self.success, "url": self.url, "path": False}
