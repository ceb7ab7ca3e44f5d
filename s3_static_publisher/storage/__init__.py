"""
Storage module for object storage operations.

This module provides the gateway contract and its S3-compatible (MinIO) and
in-memory implementations.
"""

from .gateway import ObjectStorageGateway
from .memory import InMemoryGateway
from .minio_gateway import MinIOGateway

__all__ = ["ObjectStorageGateway", "InMemoryGateway", "MinIOGateway"]
