"""
MinIO Photo Store

Uploads submission photos and builds their public URLs. All photo access
goes through this module.
"""

import asyncio
import io
import logging
from typing import Optional

from minio import Minio
from minio.error import MinioException
from urllib3.exceptions import HTTPError as TransportError

from config import settings
from locations.errors import UploadError

logger = logging.getLogger(__name__)


class MinioPhotoStore:
    """
    PhotoStore implementation on MinIO.

    The MinIO SDK is synchronous, so uploads run in the default executor to
    keep the event loop free.

    Usage:
        photos = MinioPhotoStore()
        await photos.upload("submissions/3f2a.jpg", data, "image/jpeg")
        url = photos.public_url("submissions/3f2a.jpg")
    """

    def __init__(
        self,
        client: Optional[Minio] = None,
        bucket_name: str = settings.PHOTOS_BUCKET,
        public_base_url: str = settings.MINIO_PUBLIC_URL,
    ):
        self._client = client
        self._bucket_name = bucket_name
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def client(self) -> Minio:
        if self._client is None:
            self._client = Minio(
                endpoint=settings.MINIO_ENDPOINT.replace("http://", "").replace("https://", ""),
                access_key=settings.MINIO_ACCESS_KEY,
                secret_key=settings.MINIO_SECRET_KEY,
                secure=settings.MINIO_SECURE,
            )
            logger.info(f"MinIO client initialized: {settings.MINIO_ENDPOINT}, bucket: {self._bucket_name}")
        return self._client

    async def upload(self, path: str, data: bytes, content_type: Optional[str] = None) -> None:
        """
        Store `data` under `path`.

        Raises:
            UploadError: If MinIO rejects the upload or is unreachable
        """
        key = path.lstrip("/")
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(
                None,
                lambda: self.client.put_object(
                    bucket_name=self._bucket_name,
                    object_name=key,
                    data=io.BytesIO(data),
                    length=len(data),
                    content_type=content_type or "application/octet-stream",
                ),
            )
        # S3Error for rejected requests; urllib3 errors (MaxRetryError) when unreachable
        except (MinioException, TransportError, OSError) as e:
            logger.error(f"Failed to upload photo to MinIO: {e}", extra={"key": key})
            raise UploadError("upload", str(e)) from e

        logger.debug(f"Uploaded photo: {key} ({len(data)} bytes)")

    def public_url(self, path: Optional[str]) -> Optional[str]:
        """Public URL for a stored photo, or None when there is no photo."""
        if not path:
            return None
        return f"{self._public_base_url}/{self._bucket_name}/{path.lstrip('/')}"
