"""FastAPI dependencies providing the generation collaborators.

Tests override these through app.dependency_overrides.
"""

from functools import lru_cache

from config import get_settings
from domain.documents.ports import BlobPublisherPort, DocumentRendererPort
from infrastructure.rendering.pdf_renderer import ReportLabDocumentRenderer
from infrastructure.storage.s3_blob_publisher import S3BlobPublisher
from infrastructure.storage.storage_config import load_storage_config


@lru_cache()
def get_blob_publisher() -> BlobPublisherPort:
    """Process-wide S3 publisher built from settings."""
    config = load_storage_config()
    return S3BlobPublisher(
        endpoint_url=config.endpoint_url,
        access_key=config.access_key,
        secret_key=config.secret_key,
        bucket_name=config.bucket_name,
        region=config.region,
        url_expiry_seconds=config.url_expiry_seconds,
    )


@lru_cache()
def get_document_renderer() -> DocumentRendererPort:
    """PDF renderer carrying the configured letterhead."""
    return ReportLabDocumentRenderer(letterhead_lines=get_settings().LETTERHEAD_LINES)
