"""
Resolution of the storage destination that applies to a URL.

A deployment either publishes every page to one globally configured bucket, or
(with ``domain_based_caching``) looks the URL's host up in a tenant directory
and publishes to that tenant's own bucket, prefix and credentials.
"""

import json
import logging
import os
import re
from pathlib import Path
from typing import Callable, Dict, Mapping, Optional, Protocol

from pydantic import ValidationError

from s3_static_publisher.config import PublisherConfig
from s3_static_publisher.exceptions import ConfigurationError
from s3_static_publisher.models import Credentials, StorageDestination, TenantRecord

logger = logging.getLogger(__name__)

GetEnv = Callable[[str], Optional[str]]

_ENV_REFERENCE = re.compile(r"^`(.*)`$")


class TenantDirectory(Protocol):
    """Lookup of tenant storage settings by domain."""

    def find_tenant_by_domain(self, domain: str) -> Optional[TenantRecord]:
        """Return the tenant serving ``domain``, or None when no tenant does."""
        ...


def normalize_domain(domain: str) -> str:
    """Lowercase a domain and drop any port."""
    return (domain or "").strip().lower().split(":", 1)[0]


def resolve_env_value(value: Optional[str], getenv: GetEnv = os.environ.get) -> Optional[str]:
    """
    Substitute a backtick-quoted environment variable reference.

    "`S3_KEY`" becomes the value of $S3_KEY. Values that are not references, and
    references to variables that are not set, are returned unchanged.
    """
    if not isinstance(value, str):
        return value
    match = _ENV_REFERENCE.match(value.strip())
    if not match:
        return value
    resolved = getenv(match.group(1))
    if resolved is None:
        logger.debug(f"Environment variable {match.group(1)} is not set, keeping literal value")
        return value
    return resolved


class MappingTenantDirectory:
    """Tenant directory backed by an in-memory domain -> record mapping."""

    def __init__(self, tenants: Optional[Mapping[str, TenantRecord]] = None):
        self._tenants: Dict[str, TenantRecord] = {
            normalize_domain(domain): record for domain, record in (tenants or {}).items()
        }

    def add_tenant(self, domain: str, record: TenantRecord) -> None:
        self._tenants[normalize_domain(domain)] = record

    def find_tenant_by_domain(self, domain: str) -> Optional[TenantRecord]:
        return self._tenants.get(normalize_domain(domain))


class JsonTenantDirectory:
    """
    Tenant directory stored as a JSON file keyed by domain.

    The file is read on every lookup so edits to tenant settings apply to the
    next publish without a restart. Example::

        {
            "example.com": {
                "access_key_id": "`EXAMPLE_KEY_ID`",
                "secret_access_key": "`EXAMPLE_SECRET`",
                "region": "eu-west-1",
                "bucket_name": "example-site",
                "path_prefix": "live"
            }
        }
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def find_tenant_by_domain(self, domain: str) -> Optional[TenantRecord]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Could not read tenant directory {self.path}: {e}") from e

        wanted = normalize_domain(domain)
        for key, record in data.items():
            if normalize_domain(key) != wanted:
                continue
            try:
                return TenantRecord(**record)
            except (TypeError, ValidationError) as e:
                raise ConfigurationError(f"Invalid tenant record for {key} in {self.path}: {e}") from e
        return None


class TenantResolver:
    """Resolve the storage destination for a URL host."""

    def __init__(
        self,
        config: PublisherConfig,
        directory: Optional[TenantDirectory] = None,
        getenv: Optional[GetEnv] = None,
    ):
        """
        Args:
            config: Global publisher configuration
            directory: Tenant lookup; multi-tenancy is only active when one is given
            getenv: Environment accessor used for `ENV_VAR` references
        """
        self.config = config
        self.directory = directory
        self.getenv = getenv or os.environ.get

    @property
    def multi_tenancy_enabled(self) -> bool:
        return self.config.domain_based_caching and self.directory is not None

    def resolve(self, host: Optional[str] = None) -> StorageDestination:
        """
        Build a fresh destination for ``host``.

        Args:
            host: URL host, or None/"" for path-only URLs

        Returns:
            StorageDestination for the tenant serving ``host``, or the global one

        Raises:
            ConfigurationError: If the tenant cannot be found or lacks a bucket or credentials
        """
        if not host or not self.multi_tenancy_enabled:
            return self.global_destination()

        record = self.directory.find_tenant_by_domain(normalize_domain(host))
        if record is None:
            raise ConfigurationError(f"No tenant is configured for domain '{host}'")
        return self.tenant_destination(record, host)

    def global_destination(self) -> StorageDestination:
        """
        Destination built from the global configuration.

        Raises:
            ConfigurationError: If the bucket is unset, or either key is unset and
                ``anonymous`` access was not enabled
        """
        config = self.config
        bucket = self._value(config.bucket)
        if not bucket:
            raise ConfigurationError("No bucket configured for publishing")

        access_key_id = self._value(config.access_key_id)
        secret_access_key = self._value(config.secret_access_key)
        if not config.anonymous:
            missing = [
                name
                for name, value in (("access_key_id", access_key_id), ("secret_access_key", secret_access_key))
                if not value
            ]
            if missing:
                raise ConfigurationError(
                    f"Global configuration is missing {', '.join(missing)}; set anonymous=True for public endpoints"
                )

        return StorageDestination(
            credentials=Credentials(
                access_key_id=access_key_id,
                secret_access_key=secret_access_key,
                region=self._value(config.region),
            ),
            bucket_name=bucket,
            key_prefix=self._value(config.prefix),
            endpoint=config.endpoint,
            secure=config.secure,
        )

    def tenant_destination(self, record: TenantRecord, domain: str) -> StorageDestination:
        """Destination built from a tenant record."""
        access_key_id = self._value(record.access_key_id)
        secret_access_key = self._value(record.secret_access_key)
        bucket = self._value(record.bucket_name)

        missing = [
            name
            for name, value in (
                ("access_key_id", access_key_id),
                ("secret_access_key", secret_access_key),
                ("bucket_name", bucket),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Tenant for domain '{domain}' is missing {', '.join(missing)}")

        logger.debug(f"Resolved tenant destination for {domain}: bucket {bucket}")
        return StorageDestination(
            credentials=Credentials(
                access_key_id=access_key_id,
                secret_access_key=secret_access_key,
                region=self._value(record.region) or self._value(self.config.region),
            ),
            bucket_name=bucket,
            key_prefix=self._value(record.path_prefix),
            endpoint=self.config.endpoint,
            secure=self.config.secure,
        )

    def _value(self, value: Optional[str]) -> str:
        return (resolve_env_value(value, self.getenv) or "").strip()
