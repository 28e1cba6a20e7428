"""S3 Blob Publisher - Implementation of BlobPublisherPort using boto3.

Publishes generated declarations to S3-compatible storage (AWS S3, MinIO)
and returns presigned download URLs. boto3 calls block, so every one of them
runs in the threadpool to keep the event loop free during a batch.

Architecture: Hexagonal - Adapter implementation in infrastructure layer
"""

import logging
from io import BytesIO
from typing import Optional

import boto3
from botocore.exceptions import ClientError, NoCredentialsError
from starlette.concurrency import run_in_threadpool

from domain.documents.ports.blob_publisher_port import BlobPublisherPort, PublishedBlob
from domain.requests.errors import TransientIOError

logger = logging.getLogger(__name__)


class StorageError(TransientIOError):
    """Base exception for storage operations."""

    code = "storage_error"


class S3BlobPublisher(BlobPublisherPort):
    """S3-compatible blob publisher using boto3.

    Storage key format: {namespace}/{file_name}

    Example:
        config = load_storage_config()
        publisher = S3BlobPublisher(
            endpoint_url=config.endpoint_url,
            access_key=config.access_key,
            secret_key=config.secret_key,
            bucket_name=config.bucket_name,
            region=config.region,
            url_expiry_seconds=config.url_expiry_seconds,
        )
    """

    def __init__(
        self,
        endpoint_url: Optional[str],
        access_key: str,
        secret_key: str,
        bucket_name: str,
        region: str = "us-east-1",
        url_expiry_seconds: int = 3600,
    ):
        """Initialize S3 blob publisher.

        Args:
            endpoint_url: S3 endpoint URL (None for AWS S3, URL for MinIO)
            access_key: S3 access key ID
            secret_key: S3 secret access key
            bucket_name: S3 bucket name
            region: AWS region (default: 'us-east-1')
            url_expiry_seconds: Lifetime of generated signed URLs

        Raises:
            StorageError: If S3 client initialization fails
        """
        try:
            self.s3_client = boto3.client(
                "s3",
                endpoint_url=endpoint_url,
                aws_access_key_id=access_key,
                aws_secret_access_key=secret_key,
                region_name=region,
            )
            self.bucket_name = bucket_name
            self.region = region
            self.url_expiry_seconds = url_expiry_seconds

            logger.info(
                f"Initialized S3 blob publisher: bucket={bucket_name}, "
                f"endpoint={endpoint_url or 'AWS S3'}, region={region}"
            )
        except NoCredentialsError as e:
            raise StorageError(f"Invalid S3 credentials: {e}")
        except Exception as e:
            raise StorageError(f"Failed to initialize S3 client: {e}")

    async def upload(
        self,
        namespace: str,
        file_name: str,
        data: bytes,
        content_type: str,
    ) -> PublishedBlob:
        """Upload a document and sign a download URL for it.

        Raises:
            ValueError: If data is empty
            StorageError: If upload or signing fails
        """
        if not data:
            raise ValueError("Cannot publish empty document")

        storage_key = self.build_storage_key(namespace, file_name)
        await run_in_threadpool(self._put, storage_key, data, content_type)
        signed_url = await run_in_threadpool(self._sign, storage_key)
        return PublishedBlob(
            storage_key=storage_key,
            signed_url=signed_url,
            size_bytes=len(data),
        )

    def _put(self, storage_key: str, data: bytes, content_type: str) -> None:
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=storage_key,
                Body=BytesIO(data),
                ContentType=content_type,
            )
            logger.info(
                f"Uploaded document: storage_key={storage_key}, "
                f"size={len(data)}, content_type={content_type}"
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                f"S3 upload failed: storage_key={storage_key}, "
                f"error={error_code}, message={e}"
            )
            raise StorageError(f"Failed to upload document: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error during upload: {e}")
            raise StorageError(f"Failed to upload document: {e}")

    def _sign(self, storage_key: str) -> str:
        try:
            url = self.s3_client.generate_presigned_url(
                "get_object",
                Params={
                    "Bucket": self.bucket_name,
                    "Key": storage_key,
                },
                ExpiresIn=self.url_expiry_seconds,
            )
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.error(
                f"Presigned URL generation failed: storage_key={storage_key}, "
                f"error={error_code}"
            )
            raise StorageError(f"Failed to generate presigned URL: {error_code}")
        except Exception as e:
            logger.error(f"Unexpected error generating presigned URL: {e}")
            raise StorageError(f"Failed to generate presigned URL: {e}")

        logger.info(
            f"Generated presigned URL: storage_key={storage_key}, "
            f"expires_in={self.url_expiry_seconds}s"
        )
        return url

    @staticmethod
    def build_storage_key(namespace: str, file_name: str) -> str:
        """Build storage key in format: {namespace}/{file_name}

        Example:
            >>> S3BlobPublisher.build_storage_key("declaration", "abc_1.pdf")
            'declaration/abc_1.pdf'
        """
        return f"{namespace.strip('/')}/{file_name}"

    async def check_health(self) -> bool:
        """Verify that the configured bucket is reachable."""
        try:
            await run_in_threadpool(self.s3_client.head_bucket, Bucket=self.bucket_name)
            return True
        except ClientError as e:
            error_code = e.response.get("Error", {}).get("Code", "Unknown")
            logger.warning(f"Bucket check failed: bucket={self.bucket_name}, error={error_code}")
            return False
        except Exception as e:
            logger.warning(f"Bucket check failed: bucket={self.bucket_name}, error={e}")
            return False
