"""
Mapping of page URLs to object storage keys.

Object storage has no notion of directories or index documents, so every
extensionless URL ("/about") is stored as the index document of a directory
("about/index.html"). When the site does not use trailing slashes, a second
object is written at the bare key ("about") carrying a redirect to the index
document, so requests for the bare path still land on the page.
"""

import posixpath
import re
from typing import Tuple
from urllib.parse import urlsplit, urlunsplit

INDEX_DOCUMENT = "index.html"

_SLASHES = re.compile(r"/{2,}")


def normalize_url(url: str) -> str:
    """Strip the query string and fragment from a URL, leaving everything else intact."""
    if not url:
        return ""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def split_url(url: str) -> Tuple[str, str]:
    """
    Split a URL into its host and path.

    Args:
        url: Absolute URL or path-only string

    Returns:
        Tuple of (lowercased host without port, path); host is "" for path-only URLs
    """
    parts = urlsplit(url or "")
    return parts.hostname or "", parts.path


def join_key(*parts: str) -> str:
    """Join key segments with single slashes and trim the result."""
    joined = "/".join(str(p) for p in parts if p)
    return _SLASHES.sub("/", joined).strip("/")


def has_extension(path: str) -> bool:
    """Return True when the last path segment looks like a file name."""
    return bool(posixpath.splitext(path.strip("/"))[1])


def map_to_key(prefix: str, path: str, trailing_slashes: bool = False) -> str:
    """
    Compute the object key holding the page for ``path``.

    Extensionless paths, including the site root, resolve to their index
    document under both slash conventions; ``trailing_slashes`` only decides
    whether a slash-redirect is written next to it (see needs_slash_redirect).

    Args:
        prefix: Tenant or global key prefix (may be empty)
        path: URL path
        trailing_slashes: Whether canonical URLs end in a slash; accepted so callers pass
            the policy with the path, it never changes the key

    Returns:
        Key with no leading or trailing slash, e.g. "site/about/index.html"
    """
    key = join_key(prefix, path)
    if not has_extension(path):
        key = join_key(key, INDEX_DOCUMENT)
    return key


def needs_slash_redirect(url_path: str, trailing_slashes: bool) -> bool:
    """
    Return True when a redirect object must also be written at the bare key.

    Never needed when the site uses trailing slashes, for the site root, or
    when the URL already addresses an index document.
    """
    _, path = split_url(url_path)
    if trailing_slashes or not path.strip("/"):
        return False
    return not path.endswith(f"/{INDEX_DOCUMENT}")


def slash_redirect_key(prefix: str, path: str) -> str:
    """Key of the bare object that redirects to the index document."""
    return join_key(prefix, path)


def canonical_location(path: str) -> str:
    """Public path the slash-redirect points at, e.g. "/about" -> "/about/index.html"."""
    if has_extension(path):
        return "/" + join_key(path)
    return "/" + join_key(path, INDEX_DOCUMENT)
