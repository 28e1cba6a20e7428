"""Blob Publisher Port - Domain interface for publishing generated documents.

A publisher accepts a named byte buffer and hands back a time-limited signed
URL that end users can download the document from.

Architecture: Hexagonal - Port interface in domain layer
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class PublishedBlob:
    """Result of a publish call.

    Attributes:
        storage_key: Key of the object in the blob store ({namespace}/{file_name})
        signed_url: Time-limited retrieval URL
        size_bytes: Number of bytes published
    """
    storage_key: str
    signed_url: str
    size_bytes: int


class BlobPublisherPort(ABC):
    """Port interface for publishing generated documents.

    Example Usage:
        publisher = S3BlobPublisher(...)
        blob = await publisher.upload(
            namespace="declaration",
            file_name="0b6f..._1735689600000.pdf",
            data=pdf_bytes,
            content_type="application/pdf",
        )
        request.url = blob.signed_url
    """

    @abstractmethod
    async def upload(
        self,
        namespace: str,
        file_name: str,
        data: bytes,
        content_type: str,
    ) -> PublishedBlob:
        """Store a document and return a signed URL for it.

        Args:
            namespace: Collection the document belongs to (key prefix)
            file_name: Object name inside the namespace
            data: Document bytes (must not be empty)
            content_type: MIME type, e.g. 'application/pdf'

        Returns:
            PublishedBlob: storage key and signed URL

        Raises:
            StorageError: If the upload or URL signing fails
            ValueError: If data is empty
        """
        pass

    @abstractmethod
    async def check_health(self) -> bool:
        """Return True when the underlying store is reachable."""
        pass
