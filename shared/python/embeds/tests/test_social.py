"""Tests for social media embeds."""
import asyncio

import pytest

from embeds.loader import ResourceLoader
from embeds.social import (
    EmbedState,
    Platform,
    SocialEmbed,
    detect_platform,
    normalize_permalink,
)

SCRIPTS = {
    "instagram": "https://www.instagram.com/embed.js",
    "threads": "https://www.threads.net/embed.js",
}


async def drain(iterations: int = 10) -> None:
    for _ in range(iterations):
        await asyncio.sleep(0)


class CountingFetcher:
    def __init__(self, fail: bool = False):
        self.calls = []
        self.fail = fail

    async def __call__(self, url):
        self.calls.append(url)
        if self.fail:
            raise ConnectionError("script blocked")
        return {"url": url}


@pytest.mark.parametrize(
    "url, platform",
    [
        ("https://www.instagram.com/p/C1abc/", Platform.INSTAGRAM),
        ("https://www.threads.net/@cafe/post/xyz", Platform.THREADS),
        ("https://www.threads.com/@cafe/post/xyz", Platform.THREADS),
        ("https://www.facebook.com/some/post", Platform.OTHER),
    ],
)
def test_detect_platform(url, platform):
    assert detect_platform(url) is platform


def test_normalize_permalink_strips_query_and_trailing_slash():
    assert normalize_permalink("https://www.instagram.com/p/C1abc/?igsh=xyz") == "https://www.instagram.com/p/C1abc"
    assert normalize_permalink("https://www.threads.net/@a/post/1") == "https://www.threads.net/@a/post/1"


@pytest.mark.asyncio
async def test_embeds_share_one_sdk_download_and_each_post_processes():
    fetcher = CountingFetcher()
    loader = ResourceLoader(fetcher)
    processed = []

    embeds = [
        SocialEmbed(
            f"https://www.instagram.com/p/post{i}/",
            loader=loader,
            post_process=lambda platform, sdk, i=i: processed.append((i, platform)),
            scripts=SCRIPTS,
        )
        for i in range(3)
    ]
    for embed in embeds:
        embed.mount()
        assert embed.state is EmbedState.LOADING

    await drain()

    assert fetcher.calls == [SCRIPTS["instagram"]]
    assert processed == [(0, Platform.INSTAGRAM), (1, Platform.INSTAGRAM), (2, Platform.INSTAGRAM)]
    assert all(embed.state is EmbedState.READY for embed in embeds)


@pytest.mark.asyncio
async def test_failed_sdk_renders_fallback_link():
    loader = ResourceLoader(CountingFetcher(fail=True))
    embed = SocialEmbed("https://www.threads.net/@cafe/post/xyz", loader=loader, scripts=SCRIPTS)

    embed.mount()
    await drain()

    assert embed.state is EmbedState.ERROR
    html = embed.render()
    assert "View on Social Media" in html
    assert 'href="https://www.threads.net/@cafe/post/xyz"' in html
    assert "blockquote" not in html


@pytest.mark.asyncio
async def test_unmounted_embed_ignores_late_notification():
    loader = ResourceLoader(CountingFetcher())
    processed = []
    gone = SocialEmbed(
        "https://www.instagram.com/p/a/", loader=loader,
        post_process=lambda p, s: processed.append("gone"), scripts=SCRIPTS,
    )
    stays = SocialEmbed(
        "https://www.instagram.com/p/b/", loader=loader,
        post_process=lambda p, s: processed.append("stays"), scripts=SCRIPTS,
    )

    gone.mount()
    stays.mount()
    gone.unmount()
    await drain()

    assert processed == ["stays"]
    assert gone.state is EmbedState.LOADING
    assert stays.state is EmbedState.READY


@pytest.mark.asyncio
async def test_remount_while_loading_post_processes_once():
    fetcher = CountingFetcher()
    loader = ResourceLoader(fetcher)
    processed = []
    embed = SocialEmbed(
        "https://www.instagram.com/p/a/", loader=loader,
        post_process=lambda p, s: processed.append(p), scripts=SCRIPTS,
    )

    embed.mount()
    embed.unmount()
    embed.mount()
    await drain()

    assert processed == [Platform.INSTAGRAM]
    assert fetcher.calls == [SCRIPTS["instagram"]]
    assert embed.state is EmbedState.READY

@pytest.mark.asyncio
async def test_rerender_runs_post_process_again():
    loader = ResourceLoader(CountingFetcher())
    processed = []
    embed = SocialEmbed(
        "https://www.instagram.com/p/a/", loader=loader,
        post_process=lambda p, s: processed.append(s), scripts=SCRIPTS,
    )
    embed.mount()
    await drain()
    embed.rerender()

    assert processed == [{"url": SCRIPTS["instagram"]}] * 2


def test_render_instagram_placeholder_while_loading():
    embed = SocialEmbed("https://www.instagram.com/p/C1abc/?igsh=1", scripts=SCRIPTS)
    html = embed.render()

    assert 'class="instagram-media"' in html
    assert 'data-instgrm-permalink="https://www.instagram.com/p/C1abc/"' in html
    assert "social-embed-loading" in html


def test_render_unsupported_and_empty_urls():
    assert SocialEmbed("", scripts=SCRIPTS).render() == ""
    assert "View on Social Media" in SocialEmbed("https://example.com/post", scripts=SCRIPTS).render()


def test_mount_is_noop_for_unsupported_platform():
    loader = ResourceLoader(CountingFetcher())
    embed = SocialEmbed("https://example.com/post", loader=loader, scripts=SCRIPTS)
    embed.mount()
    assert loader.get_handle("https://example.com/post") is None
