"""
Rendering pages on the origin and recognising published error pages.
"""

import logging
from typing import Dict, Iterable, Optional, Protocol

import httpx

from s3_static_publisher.exceptions import RenderError
from s3_static_publisher.models import RELEVANT_HEADERS, RenderedResponse
from s3_static_publisher.paths import split_url

logger = logging.getLogger(__name__)


class Renderer(Protocol):
    def render(self, url: str) -> RenderedResponse:
        """Produce the response the origin serves for ``url``."""
        ...


class ContentLookup(Protocol):
    def is_published_error_page(self, url: str) -> bool:
        """Return True when ``url`` is a published custom error page."""
        ...


class StaticContentLookup:
    """ContentLookup over a fixed set of error-page paths (e.g. "/404")."""

    def __init__(self, error_pages: Iterable[str] = ()):
        self.error_pages = {self._normalize(page) for page in error_pages}

    def is_published_error_page(self, url: str) -> bool:
        _, path = split_url(url)
        return self._normalize(path) in self.error_pages

    @staticmethod
    def _normalize(path: str) -> str:
        return "/" + path.strip("/")


class HttpRenderer:
    """
    Render pages by requesting them from the origin over HTTP.

    Redirects are not followed: a 3xx from the origin is itself what gets
    published, as a redirect marker.
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.Client] = None,
    ):
        """
        Initialize the renderer.

        Args:
            base_url: Origin used for path-only URLs, e.g. "https://origin.internal"
            timeout: Request timeout in seconds
            headers: Default headers to send with every request
            client: Preconfigured httpx client (its base_url takes precedence)
        """
        self.client = client or httpx.Client(
            base_url=base_url,
            timeout=timeout,
            follow_redirects=False,
            headers=headers or {},
        )

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit with cleanup."""
        self.close()

    def close(self) -> None:
        """Close the HTTP client."""
        self.client.close()

    def render(self, url: str) -> RenderedResponse:
        """
        Fetch ``url`` from the origin.

        Args:
            url: Absolute URL or path relative to the origin

        Returns:
            RenderedResponse with status, body and the headers relevant to publishing

        Raises:
            RenderError: If the origin could not be reached
        """
        logger.debug(f"Rendering {url}")
        try:
            response = self.client.get(url)
        except httpx.HTTPError as e:
            logger.error(f"Rendering {url} failed: {e}")
            raise RenderError(f"Rendering {url} failed: {e}") from e

        headers = {name: response.headers[name] for name in RELEVANT_HEADERS if name in response.headers}
        logger.info(f"Rendered {url}: HTTP {response.status_code}, {len(response.content)} bytes")
        return RenderedResponse(status_code=response.status_code, body=response.content, headers=headers)
