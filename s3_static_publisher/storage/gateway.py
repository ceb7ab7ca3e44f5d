from typing import Protocol

from s3_static_publisher.models import StorageDestination, StorageObject


class ObjectStorageGateway(Protocol):
    """Put and delete objects at a storage destination.

    Both methods return True when the backend acknowledged the operation and
    raise StorageError when it failed.
    """

    def put(self, destination: StorageDestination, key: str, obj: StorageObject) -> bool:
        """Write ``obj`` at ``key`` in the destination bucket."""
        ...

    def delete(self, destination: StorageDestination, key: str) -> bool:
        """Remove ``key`` from the destination bucket."""
        ...
