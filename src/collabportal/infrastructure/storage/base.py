"""Base abstractions for storage providers."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class StorageError(Exception):
    """Raised when a storage provider fails an operation."""

    pass


@dataclass(slots=True)
class StoredObject:
    """Location of an uploaded object."""

    bucket: str
    key: str
    url: str
    size: int
    content_type: str


class StorageProvider(ABC):
    """Abstract base class for storage providers.

    Objects are addressed by a logical bucket and a key inside it.
    """

    @abstractmethod
    async def upload(self, bucket: str, key: str, content: bytes, content_type: str) -> StoredObject:
        """Store an object and return where it is publicly reachable.

        Raises:
            StorageError: If the object cannot be stored.
        """
        ...

    @abstractmethod
    async def delete(self, bucket: str, key: str) -> None:
        """Delete an object. Deleting a missing object is not an error."""
        ...

    @abstractmethod
    async def test_connection(self) -> tuple[bool, str | None]:
        """Test provider connectivity and credentials."""
        ...
