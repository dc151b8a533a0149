"""
Object storage for submission photos.

Provides:
- MinioPhotoStore: photo upload and public URL resolution
"""

from .photos import MinioPhotoStore

__all__ = ["MinioPhotoStore"]
