"""Unit tests for S3 Blob Publisher using moto

This module tests the S3BlobPublisher implementation using moto to mock AWS
S3. Tests cover upload, storage key layout, presigned URLs, health checks and
error mapping.
"""

import threading
from urllib.parse import urlparse, parse_qs

import boto3
import pytest
from moto import mock_aws

from domain.requests.errors import TransientIOError
from infrastructure.storage.s3_blob_publisher import S3BlobPublisher, StorageError


# Test constants
TEST_BUCKET = "test-declara-bucket"
TEST_REGION = "us-east-1"
TEST_ACCESS_KEY = "test-access-key"
TEST_SECRET_KEY = "test-secret-key"
PDF_BYTES = b"%PDF-1.4 test document"


@pytest.fixture
def s3_client():
    """Set up mock S3 environment with bucket"""
    with mock_aws():
        client = boto3.client(
            "s3",
            region_name=TEST_REGION,
            aws_access_key_id=TEST_ACCESS_KEY,
            aws_secret_access_key=TEST_SECRET_KEY,
        )
        client.create_bucket(Bucket=TEST_BUCKET)

        yield client


@pytest.fixture
def publisher(s3_client):
    """Create S3BlobPublisher instance against the mocked bucket"""
    return S3BlobPublisher(
        endpoint_url=None,  # AWS S3 (moto mocks this)
        access_key=TEST_ACCESS_KEY,
        secret_key=TEST_SECRET_KEY,
        bucket_name=TEST_BUCKET,
        region=TEST_REGION,
        url_expiry_seconds=600,
    )


class TestBuildStorageKey:
    """Test storage key layout"""

    def test_namespace_and_file_name(self):
        assert S3BlobPublisher.build_storage_key("declaration", "abc_1.pdf") == "declaration/abc_1.pdf"

    def test_surrounding_slashes_stripped(self):
        assert S3BlobPublisher.build_storage_key("/declaration/", "abc_1.pdf") == "declaration/abc_1.pdf"


class TestUpload:
    """Test upload and signing"""

    @pytest.mark.asyncio
    async def test_upload_stores_object(self, publisher, s3_client):
        blob = await publisher.upload("declaration", "req_1700000000000.pdf", PDF_BYTES, "application/pdf")

        assert blob.storage_key == "declaration/req_1700000000000.pdf"
        assert blob.size_bytes == len(PDF_BYTES)

        stored = s3_client.get_object(Bucket=TEST_BUCKET, Key=blob.storage_key)
        assert stored["Body"].read() == PDF_BYTES
        assert stored["ContentType"] == "application/pdf"

    @pytest.mark.asyncio
    async def test_upload_returns_presigned_url(self, publisher):
        blob = await publisher.upload("declaration", "req_1.pdf", PDF_BYTES, "application/pdf")

        url = urlparse(blob.signed_url)
        query = parse_qs(url.query)

        assert url.path.endswith("/declaration/req_1.pdf")
        # SigV4 or legacy query signing, depending on the botocore default
        assert "X-Amz-Signature" in query or "Signature" in query

    @pytest.mark.asyncio
    async def test_boto3_calls_leave_event_loop_thread(self, publisher, monkeypatch):
        loop_thread = threading.get_ident()
        call_threads = {}

        def record(name, original):
            def wrapper(*args, **kwargs):
                call_threads[name] = threading.get_ident()
                return original(*args, **kwargs)
            return wrapper

        client = publisher.s3_client
        monkeypatch.setattr(client, "put_object", record("put_object", client.put_object))
        monkeypatch.setattr(
            client, "generate_presigned_url", record("generate_presigned_url", client.generate_presigned_url)
        )
        monkeypatch.setattr(client, "head_bucket", record("head_bucket", client.head_bucket))

        await publisher.upload("declaration", "req_2.pdf", PDF_BYTES, "application/pdf")
        assert await publisher.check_health() is True

        assert set(call_threads) == {"put_object", "generate_presigned_url", "head_bucket"}
        assert loop_thread not in call_threads.values()

    @pytest.mark.asyncio
    async def test_empty_data_rejected(self, publisher):
        with pytest.raises(ValueError):
            await publisher.upload("declaration", "empty.pdf", b"", "application/pdf")

    @pytest.mark.asyncio
    async def test_missing_bucket_raises_storage_error(self, s3_client):
        publisher = S3BlobPublisher(
            endpoint_url=None,
            access_key=TEST_ACCESS_KEY,
            secret_key=TEST_SECRET_KEY,
            bucket_name="does-not-exist",
            region=TEST_REGION,
        )

        with pytest.raises(StorageError) as exc_info:
            await publisher.upload("declaration", "req_1.pdf", PDF_BYTES, "application/pdf")

        # Publishing failures are transient from the batch's point of view
        assert isinstance(exc_info.value, TransientIOError)
        assert exc_info.value.code == "storage_error"


class TestHealth:
    """Test bucket health check"""

    @pytest.mark.asyncio
    async def test_existing_bucket_is_healthy(self, publisher):
        assert await publisher.check_health() is True

    @pytest.mark.asyncio
    async def test_missing_bucket_is_unhealthy(self, s3_client):
        publisher = S3BlobPublisher(
            endpoint_url=None,
            access_key=TEST_ACCESS_KEY,
            secret_key=TEST_SECRET_KEY,
            bucket_name="does-not-exist",
            region=TEST_REGION,
        )

        assert await publisher.check_health() is False
