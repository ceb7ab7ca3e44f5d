"""
MinIO client gateway for S3-compatible object storage.
"""

import io
import logging
from typing import Dict

from minio import Minio
from minio.error import MinioException
from urllib3.exceptions import HTTPError

from s3_static_publisher.exceptions import StorageError
from s3_static_publisher.models import StorageDestination, StorageObject

logger = logging.getLogger(__name__)

# Header S3 website hosting reads to answer a GET with a 301 to another location.
WEBSITE_REDIRECT_HEADER = "x-amz-website-redirect-location"

# minio sends any other metadata as user metadata, so S3 serves the expiry back
# as x-amz-meta-expires rather than a native Expires header.
EXPIRES_METADATA_KEY = "x-amz-meta-expires"

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class MinIOGateway:
    """Gateway writing objects through the MinIO client.

    One client is kept per destination, so tenants never share a connection
    configured for another account.
    """

    def __init__(self):
        self._clients: Dict[StorageDestination, Minio] = {}

    def put(self, destination: StorageDestination, key: str, obj: StorageObject) -> bool:
        """
        Upload an object.

        Args:
            destination: Resolved bucket and credentials
            key: Object key
            obj: Page body or redirect marker

        Returns:
            True if the backend returned a version id or etag for the upload

        Raises:
            StorageError: If the upload failed
        """
        client = self._create_client(destination)
        metadata = self._build_metadata(obj)

        try:
            logger.debug(f"Uploading {obj.content_length} bytes to {destination.bucket_name}/{key}")
            result = client.put_object(
                bucket_name=destination.bucket_name,
                object_name=key,
                data=io.BytesIO(obj.body),
                length=obj.content_length,
                content_type=obj.content_type or DEFAULT_CONTENT_TYPE,
                metadata=metadata or None,
            )
        except (MinioException, HTTPError) as e:
            logger.error(f"Failed to upload {destination.bucket_name}/{key}: {e}")
            raise StorageError(f"Upload of {key} failed: {e}", key=key, code=getattr(e, "code", None)) from e

        acknowledged = bool(getattr(result, "version_id", None) or getattr(result, "etag", None))
        logger.info(
            f"Uploaded {obj.content_length} bytes to {destination.bucket_name}/{key} "
            f"(etag: {getattr(result, 'etag', None)}, version: {getattr(result, 'version_id', None)})"
        )
        return acknowledged

    def delete(self, destination: StorageDestination, key: str) -> bool:
        """
        Delete an object.

        Args:
            destination: Resolved bucket and credentials
            key: Object key

        Returns:
            True once the backend accepted the delete

        Raises:
            StorageError: If the delete failed
        """
        client = self._create_client(destination)
        try:
            client.remove_object(bucket_name=destination.bucket_name, object_name=key)
        except (MinioException, HTTPError) as e:
            logger.error(f"Failed to delete {destination.bucket_name}/{key}: {e}")
            raise StorageError(f"Delete of {key} failed: {e}", key=key, code=getattr(e, "code", None)) from e

        logger.info(f"Deleted {destination.bucket_name}/{key}")
        return True

    @staticmethod
    def _build_metadata(obj: StorageObject) -> Dict[str, str]:
        metadata = {}
        if obj.expires:
            metadata[EXPIRES_METADATA_KEY] = obj.expires
        if obj.redirect_location:
            metadata[WEBSITE_REDIRECT_HEADER] = obj.redirect_location
        return metadata

    def _create_client(self, destination: StorageDestination) -> Minio:
        client = self._clients.get(destination)
        if client is not None:
            return client

        credentials = destination.credentials
        client = Minio(
            endpoint=destination.endpoint,
            access_key=credentials.access_key_id or None,
            secret_key=credentials.secret_access_key or None,
            secure=destination.secure,
            region=credentials.region or None,
        )
        self._clients[destination] = client
        return client
