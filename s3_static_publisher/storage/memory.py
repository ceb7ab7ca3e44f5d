"""
In-memory object storage for local runs and tests.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set, Tuple

from s3_static_publisher.exceptions import StorageError
from s3_static_publisher.models import StorageDestination, StorageObject

logger = logging.getLogger(__name__)


class InMemoryGateway:
    """Gateway keeping objects in a dict keyed by (bucket, key).

    Deleting a missing key raises StorageError with code "NoSuchKey", and any
    key listed in ``failing_keys`` raises StorageError on put and delete.
    """

    def __init__(self, failing_keys: Optional[Iterable[str]] = None):
        self.objects: Dict[Tuple[str, str], StorageObject] = {}
        self.failing_keys: Set[str] = set(failing_keys or ())
        self.calls: List[Tuple[str, str, str]] = []

    def put(self, destination: StorageDestination, key: str, obj: StorageObject) -> bool:
        self.calls.append(("put", destination.bucket_name, key))
        if key in self.failing_keys:
            raise StorageError(f"Upload of {key} failed", key=key, code="InternalError")
        self.objects[(destination.bucket_name, key)] = obj
        logger.debug(f"Stored {obj.content_length} bytes at {destination.bucket_name}/{key}")
        return True

    def delete(self, destination: StorageDestination, key: str) -> bool:
        self.calls.append(("delete", destination.bucket_name, key))
        if key in self.failing_keys:
            raise StorageError(f"Delete of {key} failed", key=key, code="InternalError")
        if self.objects.pop((destination.bucket_name, key), None) is None:
            raise StorageError(f"{key} does not exist", key=key, code="NoSuchKey")
        return True

    def get(self, bucket: str, key: str) -> Optional[StorageObject]:
        return self.objects.get((bucket, key))

    def keys(self, bucket: Optional[str] = None) -> List[str]:
        """Sorted keys, optionally restricted to one bucket."""
        return sorted(k for b, k in self.objects if bucket is None or b == bucket)
