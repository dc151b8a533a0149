"""Tests for MinioPhotoStore."""
import pytest
from unittest.mock import MagicMock
from minio.error import MinioException
from urllib3.exceptions import MaxRetryError

from locations.errors import UploadError
from storage.photos import MinioPhotoStore


@pytest.fixture
def mock_minio():
    """Mock MinIO client."""
    return MagicMock()


@pytest.fixture
def photos(mock_minio):
    return MinioPhotoStore(client=mock_minio, bucket_name="photos", public_base_url="http://cdn.local/")


@pytest.mark.asyncio
async def test_upload_puts_object(photos, mock_minio):
    await photos.upload("/submissions/abc.jpg", b"\xff\xd8jpeg", "image/jpeg")

    kwargs = mock_minio.put_object.call_args.kwargs
    assert kwargs["bucket_name"] == "photos"
    assert kwargs["object_name"] == "submissions/abc.jpg"
    assert kwargs["length"] == 6
    assert kwargs["content_type"] == "image/jpeg"
    assert kwargs["data"].read() == b"\xff\xd8jpeg"


@pytest.mark.asyncio
async def test_upload_connection_error_raises_upload_error(photos, mock_minio):
    mock_minio.put_object.side_effect = ConnectionRefusedError("minio down")

    with pytest.raises(UploadError):
        await photos.upload("submissions/x.png", b"png")


@pytest.mark.asyncio
async def test_unreachable_minio_raises_upload_error(photos, mock_minio):
    mock_minio.put_object.side_effect = MaxRetryError(None, "/photos/submissions/x.png", reason="Connection refused")

    with pytest.raises(UploadError) as exc_info:
        await photos.upload("submissions/x.png", b"png")

    assert exc_info.value.operation == "upload"
    assert "Max retries exceeded" in exc_info.value.message


@pytest.mark.asyncio
async def test_minio_sdk_error_raises_upload_error(photos, mock_minio):
    mock_minio.put_object.side_effect = MinioException("bucket policy rejected upload")

    with pytest.raises(UploadError):
        await photos.upload("submissions/x.png", b"png")


def test_public_url(photos):
    assert photos.public_url("submissions/abc.jpg") == "http://cdn.local/photos/submissions/abc.jpg"
    assert photos.public_url(None) is None
    assert photos.public_url("") is None
