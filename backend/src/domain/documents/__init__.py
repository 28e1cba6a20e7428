"""Documents domain module - ports for rendering and publishing declarations"""

from .ports import BlobPublisherPort, PublishedBlob, DocumentRendererPort

__all__ = [
    "BlobPublisherPort",
    "PublishedBlob",
    "DocumentRendererPort",
]
