"""
Unit tests for the in-memory storage gateway.
"""

import pytest

from s3_static_publisher.exceptions import StorageError
from s3_static_publisher.models import StorageObject
from s3_static_publisher.storage.memory import InMemoryGateway


@pytest.mark.unit
class TestInMemoryGateway:
    """Test InMemoryGateway class."""

    def test_put_and_get(self, destination):
        gateway = InMemoryGateway()
        page = StorageObject(body=b"<html>", content_type="text/html")

        assert gateway.put(destination, "site/index.html", page) is True
        assert gateway.get("static-site", "site/index.html") is page
        assert gateway.keys() == ["site/index.html"]
        assert gateway.calls == [("put", "static-site", "site/index.html")]

    def test_put_overwrites(self, destination):
        gateway = InMemoryGateway()
        gateway.put(destination, "site/index.html", StorageObject(body=b"old"))
        gateway.put(destination, "site/index.html", StorageObject(body=b"new"))

        assert gateway.get("static-site", "site/index.html").body == b"new"
        assert gateway.keys("static-site") == ["site/index.html"]
        assert gateway.keys("other-bucket") == []

    def test_delete(self, destination):
        gateway = InMemoryGateway()
        gateway.put(destination, "site/index.html", StorageObject(body=b"<html>"))

        assert gateway.delete(destination, "site/index.html") is True
        assert gateway.keys() == []

    def test_delete_missing_key(self, destination):
        gateway = InMemoryGateway()

        with pytest.raises(StorageError) as exc_info:
            gateway.delete(destination, "site/missing")

        assert exc_info.value.code == "NoSuchKey"

    def test_failing_keys(self, destination):
        gateway = InMemoryGateway(failing_keys=["site/about"])

        with pytest.raises(StorageError):
            gateway.put(destination, "site/about", StorageObject(redirect_location="/about/index.html"))
        with pytest.raises(StorageError):
            gateway.delete(destination, "site/about")
        assert gateway.keys() == []
