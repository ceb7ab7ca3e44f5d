"""
Shared pytest fixtures and configuration for all tests.
"""

import os

import pytest

from s3_static_publisher.config import PublisherConfig
from s3_static_publisher.models import Credentials, RenderedResponse, StorageDestination, TenantRecord
from s3_static_publisher.publisher import StaticPublisher
from s3_static_publisher.renderer import StaticContentLookup
from s3_static_publisher.storage.memory import InMemoryGateway
from s3_static_publisher.tenants import MappingTenantDirectory
from tests.utils.mocks import MockRenderer


# ============= Configuration Fixtures =============


@pytest.fixture(autouse=True)
def clean_publisher_env(monkeypatch):
    """Keep S3_PUBLISHER_* variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.upper().startswith("S3_PUBLISHER_"):
            monkeypatch.delenv(name)


@pytest.fixture
def publisher_config():
    """Test publisher configuration with a single global bucket."""
    return PublisherConfig(
        access_key_id="global-key",
        secret_access_key="global-secret",
        region="us-east-1",
        bucket="static-site",
        prefix="site",
        endpoint="localhost:9000",
        secure=False,
    )


@pytest.fixture
def destination():
    """Destination matching publisher_config."""
    return StorageDestination(
        credentials=Credentials(access_key_id="global-key", secret_access_key="global-secret", region="us-east-1"),
        bucket_name="static-site",
        key_prefix="site",
        endpoint="localhost:9000",
        secure=False,
    )


@pytest.fixture
def tenant_record():
    """Tenant record whose credentials come from the environment."""
    return TenantRecord(
        access_key_id="`TENANT_A_KEY_ID`",
        secret_access_key="`TENANT_A_SECRET`",
        region="eu-west-1",
        bucket_name="tenant-a-site",
        path_prefix="live",
    )


@pytest.fixture
def tenant_env():
    """Environment accessor backed by a plain dict."""
    return {"TENANT_A_KEY_ID": "tenant-a-key", "TENANT_A_SECRET": "tenant-a-secret"}.get


@pytest.fixture
def tenant_directory(tenant_record):
    return MappingTenantDirectory({"tenant-a.example.com": tenant_record})


# ============= Publisher Fixtures =============


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
def renderer():
    return MockRenderer(
        {
            "/about": RenderedResponse(
                status_code=200,
                body=b"<html>about</html>",
                headers={"Content-Type": "text/html; charset=utf-8"},
            ),
            "/old": RenderedResponse(status_code=301, headers={"Location": "/new"}),
            "/404": RenderedResponse(
                status_code=404,
                body=b"<html>not found</html>",
                headers={"Content-Type": "text/html"},
            ),
        }
    )


@pytest.fixture
def publisher(publisher_config, gateway, renderer):
    """Publisher writing to the in-memory gateway."""
    return StaticPublisher(
        config=publisher_config,
        gateway=gateway,
        renderer=renderer,
        content_lookup=StaticContentLookup(["/404"]),
    )
