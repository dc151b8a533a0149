"""
Third-party embed support.

Provides:
- ResourceLoader: single-flight, status-caching loader keyed by URL
- SocialEmbed: Instagram / Threads post embeds with fallback links
"""

from .loader import (
    HttpResourceFetcher,
    ResourceHandle,
    ResourceLoader,
    ResourceStatus,
    get_resource_loader,
)
from .social import EmbedState, Platform, SocialEmbed, detect_platform, normalize_permalink

__all__ = [
    "HttpResourceFetcher",
    "ResourceHandle",
    "ResourceLoader",
    "ResourceStatus",
    "get_resource_loader",
    "EmbedState",
    "Platform",
    "SocialEmbed",
    "detect_platform",
    "normalize_permalink",
]
