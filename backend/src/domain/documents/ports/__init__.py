"""Document ports - blob publishing and document rendering"""

from .blob_publisher_port import BlobPublisherPort, PublishedBlob
from .document_renderer_port import DocumentRendererPort

__all__ = ["BlobPublisherPort", "PublishedBlob", "DocumentRendererPort"]
