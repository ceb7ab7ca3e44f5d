"""
Mock implementations for external services and dependencies.
"""

import io
from typing import Dict, List, Optional
from unittest.mock import MagicMock

from minio.error import MinioException

from s3_static_publisher.exceptions import RenderError
from s3_static_publisher.models import RenderedResponse


class MockMinIOClient:
    """Mock MinIO client with configurable responses."""

    def __init__(
        self,
        objects: Optional[Dict[str, bytes]] = None,
        raise_errors: bool = False,
        versioned: bool = True,
        acknowledge: bool = True,
    ):
        """
        Initialize mock MinIO client.

        Args:
            objects: Dict of object_name -> content mapping
            raise_errors: Whether to raise MinioException on operations
            versioned: Whether uploads return a version id
            acknowledge: Whether uploads return an etag
        """
        self.objects = objects or {}
        self.raise_errors = raise_errors
        self.versioned = versioned
        self.acknowledge = acknowledge
        self.uploaded_objects = {}
        self.deleted_objects = set()

    def put_object(
        self,
        bucket_name: str,
        object_name: str,
        data: io.BytesIO,
        length: int,
        content_type: str = "application/octet-stream",
        metadata: Optional[Dict] = None,
    ):
        """Mock put_object method."""
        if self.raise_errors:
            raise MinioException("Test error")

        data.seek(0)
        self.uploaded_objects[object_name] = {
            "bucket": bucket_name,
            "data": data.read(),
            "metadata": metadata,
            "content_type": content_type,
            "length": length,
        }
        self.objects[object_name] = self.uploaded_objects[object_name]["data"]

        result = MagicMock()
        result.etag = f"etag-{len(self.uploaded_objects)}" if self.acknowledge else None
        result.version_id = f"version-{len(self.uploaded_objects)}" if self.versioned else None
        return result

    def remove_object(self, bucket_name: str, object_name: str, version_id: Optional[str] = None):
        """Mock remove_object method."""
        if self.raise_errors:
            raise MinioException("Test error")

        self.deleted_objects.add(object_name)
        self.objects.pop(object_name, None)
        self.uploaded_objects.pop(object_name, None)


class MockRenderer:
    """Renderer returning canned responses and recording requested URLs."""

    def __init__(self, responses: Optional[Dict[str, RenderedResponse]] = None, raise_errors: bool = False):
        self.responses = responses or {}
        self.raise_errors = raise_errors
        self.rendered: List[str] = []

    def render(self, url: str) -> RenderedResponse:
        self.rendered.append(url)
        if self.raise_errors:
            raise RenderError(f"Rendering {url} failed")
        return self.responses.get(url, RenderedResponse(status_code=404))
