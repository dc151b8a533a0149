"""
Social media post embeds (Instagram, Threads).

Both platforms refuse to be framed directly; instead the page carries a
placeholder blockquote and the platform's embed SDK rewrites it. Each
SocialEmbed instance asks the shared ResourceLoader for its platform's SDK
and, once that is ready, runs the platform post-processing entry point
(instgrm.Embeds.process / Threads.EmbedSDK.reload) for itself. If the SDK
fails to load, or the URL is from an unsupported site, a plain link is
rendered instead.
"""

import logging
from enum import Enum
from html import escape
from typing import Any, Callable, Optional

from config.settings import settings
from .loader import ResourceLoader, get_resource_loader

logger = logging.getLogger(__name__)

FALLBACK_LABEL = "View on Social Media"

# Platform post-processing hook: (platform, loaded SDK) -> None
PostProcess = Callable[["Platform", Any], None]


class Platform(Enum):
    INSTAGRAM = "instagram"
    THREADS = "threads"
    OTHER = "other"


class EmbedState(Enum):
    LOADING = "loading"
    READY = "ready"
    ERROR = "error"


def detect_platform(url: str) -> Platform:
    """Classify a post URL by host substring."""
    if "instagram.com" in url:
        return Platform.INSTAGRAM
    if "threads.com" in url or "threads.net" in url:
        return Platform.THREADS
    return Platform.OTHER


def normalize_permalink(url: str) -> str:
    """Drop the query string and a single trailing slash."""
    permalink = url.split("?")[0]
    if permalink.endswith("/"):
        permalink = permalink[:-1]
    return permalink


def fallback_link(url: str) -> str:
    return (
        f'<div class="social-embed-fallback">'
        f'<a href="{escape(url)}" target="_blank" rel="noopener noreferrer">{FALLBACK_LABEL}</a>'
        f"</div>"
    )


class SocialEmbed:
    """
    One embedded post.

    Lifecycle: mount() -> (SDK ready | SDK failed) -> unmount().
    Notifications arriving after unmount() are ignored; the shared loader
    handle is never touched, so other embeds waiting on it are unaffected.

    Usage:
        embed = SocialEmbed(url, post_process=run_sdk_entry_point)
        embed.mount()
        ...
        html = embed.render()
    """

    def __init__(
        self,
        url: str,
        loader: Optional[ResourceLoader] = None,
        post_process: Optional[PostProcess] = None,
        scripts: Optional[dict[str, str]] = None,
    ):
        self.url = url or ""
        self.platform = detect_platform(self.url)
        self.permalink = normalize_permalink(self.url)
        self.state = EmbedState.LOADING
        self._loader = loader
        self._post_process = post_process
        self._scripts = scripts if scripts is not None else settings.get_embed_scripts()
        self._sdk: Any = None
        self._mounted = False
        # Bumped on every mount so callbacks from an earlier mount are ignored
        self._mount_id = 0

    @property
    def script_url(self) -> Optional[str]:
        if self.platform is Platform.OTHER:
            return None
        return self._scripts[self.platform.value]

    def mount(self) -> None:
        """Request the platform SDK. Must be called from the event loop."""
        if self._mounted or not self.url or self.script_url is None:
            return
        self._mounted = True
        self._mount_id += 1
        mount_id = self._mount_id
        loader = self._loader or get_resource_loader()
        loader.request(
            self.script_url,
            lambda sdk: self._on_ready(sdk, mount_id),
            lambda exc: self._on_error(exc, mount_id),
        )

    def unmount(self) -> None:
        self._mounted = False

    def rerender(self) -> None:
        """Run the SDK entry point again, e.g. after the markup was replaced."""
        if self._mounted and self.state is EmbedState.READY:
            self._run_post_process()

    def _is_current(self, mount_id: int) -> bool:
        return self._mounted and mount_id == self._mount_id

    def _on_ready(self, sdk: Any, mount_id: int) -> None:
        if not self._is_current(mount_id):
            return
        self._sdk = sdk
        self._run_post_process()
        self.state = EmbedState.READY

    def _on_error(self, exc: BaseException, mount_id: int) -> None:
        if not self._is_current(mount_id):
            return
        logger.warning(
            "Embed SDK unavailable, rendering fallback link",
            extra={"platform": self.platform.value, "post_url": self.url, "error": str(exc)},
        )
        self.state = EmbedState.ERROR

    def _run_post_process(self) -> None:
        if self._post_process is not None:
            self._post_process(self.platform, self._sdk)

    def render(self) -> str:
        """HTML for the current state. Empty for an empty URL."""
        if not self.url:
            return ""
        if self.platform is Platform.OTHER or self.state is EmbedState.ERROR:
            return fallback_link(self.url)

        spinner = '<div class="social-embed-loading"></div>' if self.state is EmbedState.LOADING else ""
        if self.platform is Platform.INSTAGRAM:
            quote = (
                f'<blockquote class="instagram-media" data-instgrm-captioned '
                f'data-instgrm-permalink="{escape(self.permalink)}/" data-instgrm-version="14">'
                f"</blockquote>"
            )
        else:
            quote = (
                f'<blockquote class="text-post-media" '
                f'data-text-post-permalink="{escape(self.permalink)}" data-text-post-version="0">'
                f"</blockquote>"
            )
        return f'<div class="social-embed">{spinner}{quote}</div>'
