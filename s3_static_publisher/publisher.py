"""
Publisher deciding what a rendered page turns into in object storage.

A page is written as an object holding its body, a redirect is written as an
empty redirect marker, and error responses are not written at all.
"""

import logging
from typing import List, Optional, Protocol, Tuple

from s3_static_publisher.config import PublisherConfig
from s3_static_publisher.exceptions import ConfigurationError, StorageError, UnsupportedOperationError, UsageError
from s3_static_publisher.models import (
    PublishOutcome,
    PurgeOutcome,
    RenderedResponse,
    StorageDestination,
    StorageObject,
)
from s3_static_publisher.paths import (
    INDEX_DOCUMENT,
    canonical_location,
    map_to_key,
    needs_slash_redirect,
    normalize_url,
    slash_redirect_key,
    split_url,
)
from s3_static_publisher.renderer import ContentLookup, Renderer
from s3_static_publisher.storage.gateway import ObjectStorageGateway
from s3_static_publisher.storage.minio_gateway import MinIOGateway
from s3_static_publisher.tenants import GetEnv, TenantDirectory, TenantResolver

logger = logging.getLogger(__name__)

# Served for index documents rendered without a Content-Type.
HTML_CONTENT_TYPE = "text/html; charset=utf-8"


class Publisher(Protocol):
    """Capability interface job runners depend on."""

    supports_listing: bool

    def publish(self, url: str, force_publish: bool = False) -> PublishOutcome: ...

    def purge(self, url: str) -> PurgeOutcome: ...

    def list_published(self, directory: Optional[str] = None, strict: bool = False) -> List[str]: ...


class StaticPublisher:
    """Publish rendered pages to S3-compatible object storage."""

    # Listing would let a full rebuild delete every object it did not write,
    # which needs proof that this publisher owns the whole bucket.
    supports_listing = False

    def __init__(
        self,
        config: Optional[PublisherConfig] = None,
        gateway: Optional[ObjectStorageGateway] = None,
        renderer: Optional[Renderer] = None,
        content_lookup: Optional[ContentLookup] = None,
        tenant_directory: Optional[TenantDirectory] = None,
        getenv: Optional[GetEnv] = None,
    ):
        """
        Initialize the publisher.

        Args:
            config: Publisher configuration (read from the environment when omitted)
            gateway: Storage gateway, MinIOGateway by default
            renderer: Renders URLs that are published without a pre-rendered response
            content_lookup: Identifies published error pages for 404 responses
            tenant_directory: Enables per-domain destinations with domain_based_caching
            getenv: Environment accessor for `ENV_VAR` references in settings
        """
        self.config = config or PublisherConfig()
        self.gateway = gateway or MinIOGateway()
        self.renderer = renderer
        self.content_lookup = content_lookup
        self.tenant_resolver = TenantResolver(self.config, tenant_directory, getenv)

    def publish(
        self,
        url: str,
        force_publish: bool = False,
        response: Optional[RenderedResponse] = None,
    ) -> PublishOutcome:
        """
        Render ``url`` (unless a response is given) and write the result to storage.

        Args:
            url: Absolute or path-only URL; the query string is ignored
            force_publish: Accepted for job runner compatibility; currently has no effect
            response: Pre-rendered response to publish instead of rendering ``url``

        Returns:
            PublishOutcome; ``success`` reflects the primary write only

        Raises:
            UsageError: If ``url`` is empty
            ConfigurationError: If no destination can be resolved or nothing can render the URL
            RenderError: If the renderer could not reach the origin
        """
        url = self._normalize(url)
        if force_publish:
            logger.debug(f"force_publish requested for {url}; publishing normally")

        if response is None:
            response = self._render(url)

        status = response.status_code
        published = success = partial = False

        if status < 300:
            success, partial = self._publish_page(response, url)
            published = success
        elif status == 404:
            if self._is_published_error_page(url):
                success, partial = self._publish_page(response, url)
                published = success
            else:
                # Nothing to store is the expected state for a missing page.
                logger.info(f"{url} returned 404 and is not an error page, nothing to publish")
                success = True
        elif status < 400:
            success, partial = self._publish_redirect(response, url)
            published = success
        else:
            logger.warning(f"{url} returned {status}, not publishing")

        return PublishOutcome(
            published=published,
            success=success,
            response_code=status,
            url=url,
            partial_failure=partial,
        )

    def purge(self, url: str) -> PurgeOutcome:
        """
        Delete the objects published for ``url``.

        The slash-redirect object is removed first on a best-effort basis, since
        it may never have been written; the result of deleting the page object
        is what gets reported.

        Raises:
            UsageError: If ``url`` is empty
            ConfigurationError: If no destination can be resolved
        """
        url = self._normalize(url)

        host, path = split_url(url)
        destination = self.tenant_resolver.resolve(host)
        primary_key = map_to_key(destination.key_prefix, path, self.config.trailing_slashes)
        redirect_key = slash_redirect_key(destination.key_prefix, path)

        # Checked without the trailing-slash policy: a redirect written under an
        # earlier policy is still cleaned up.
        if needs_slash_redirect(path, False) and redirect_key != primary_key:
            try:
                self.gateway.delete(destination, redirect_key)
            except StorageError as e:
                logger.debug(f"Ignoring failed delete of slash-redirect {redirect_key}: {e}")

        try:
            success = self.gateway.delete(destination, primary_key)
        except StorageError as e:
            logger.error(f"Failed to purge {url} ({primary_key}): {e}")
            success = False

        return PurgeOutcome(success=success, url=url)

    def list_published(self, directory: Optional[str] = None, strict: bool = False) -> List[str]:
        """
        List published URLs. Not supported: always empty.

        Args:
            directory: Restrict the listing to a directory
            strict: Raise instead of returning an empty list

        Raises:
            UnsupportedOperationError: If ``strict`` is set
        """
        message = "Listing published URLs is not supported without authority over the whole bucket"
        if strict:
            raise UnsupportedOperationError(message)
        logger.warning(f"{message}; returning no URLs for {directory or '/'}")
        return []

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _normalize(url: str) -> str:
        """Normalize ``url``, rejecting URLs with nothing left to publish (e.g. "?preview=1")."""
        normalized = normalize_url(url) if url else ""
        if not normalized:
            raise UsageError(f"Bad url: {url!r}")
        return normalized

    def _render(self, url: str) -> RenderedResponse:
        if self.renderer is None:
            raise ConfigurationError(f"No renderer configured to render {url}")
        return self.renderer.render(url)

    def _is_published_error_page(self, url: str) -> bool:
        return self.content_lookup is not None and self.content_lookup.is_published_error_page(url)

    def _publish_page(self, response: RenderedResponse, url: str) -> Tuple[bool, bool]:
        """Write the page body, preceded by its slash-redirect when needed."""
        host, path = split_url(url)
        trailing_slashes = self.config.trailing_slashes
        destination = self.tenant_resolver.resolve(host)
        expires = response.header("Expires")

        partial = False
        if needs_slash_redirect(path, trailing_slashes):
            marker = StorageObject(redirect_location=canonical_location(path), expires=expires)
            partial = not self._write_slash_redirect(destination, path, marker, trailing_slashes)

        key = map_to_key(destination.key_prefix, path, trailing_slashes)
        content_type = response.header("Content-Type")
        if not content_type and key.endswith(INDEX_DOCUMENT):
            content_type = HTML_CONTENT_TYPE
        page = StorageObject(body=response.body, content_type=content_type, expires=expires)
        return self._write(destination, key, page), partial

    def _publish_redirect(self, response: RenderedResponse, url: str) -> Tuple[bool, bool]:
        """Write a redirect marker carrying the response's Location."""
        location = response.header("Location")
        if not location:
            logger.warning(f"{url} returned {response.status_code} without a Location header, not publishing")
            return False, False

        host, path = split_url(url)
        trailing_slashes = self.config.trailing_slashes
        destination = self.tenant_resolver.resolve(host)
        marker = StorageObject(redirect_location=location, expires=response.header("Expires"))

        partial = False
        if needs_slash_redirect(path, trailing_slashes):
            partial = not self._write_slash_redirect(destination, path, marker, trailing_slashes)

        key = map_to_key(destination.key_prefix, path, trailing_slashes)
        return self._write(destination, key, marker), partial

    def _write_slash_redirect(
        self, destination: StorageDestination, path: str, marker: StorageObject, trailing_slashes: bool
    ) -> bool:
        """Write the secondary marker at the bare key; failures are logged, not raised."""
        key = slash_redirect_key(destination.key_prefix, path)
        if not key or key == map_to_key(destination.key_prefix, path, trailing_slashes):
            return True
        try:
            written = self.gateway.put(destination, key, marker)
        except StorageError as e:
            logger.warning(f"Partial publish: slash-redirect {key} was not written: {e}")
            return False
        if not written:
            logger.warning(f"Partial publish: slash-redirect {key} was not acknowledged")
        return written

    def _write(self, destination: StorageDestination, key: str, obj: StorageObject) -> bool:
        try:
            written = self.gateway.put(destination, key, obj)
        except StorageError as e:
            logger.error(f"Failed to write {destination.bucket_name}/{key}: {e}")
            return False
        if not written:
            logger.error(f"Write of {destination.bucket_name}/{key} was not acknowledged")
        return written
