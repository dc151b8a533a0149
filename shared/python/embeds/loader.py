"""
Single-flight loader for third-party embed resources.

Each distinct URL gets exactly one ResourceHandle for the life of the
loader. The first request issues the fetch; every request made while it is
in flight is queued as a waiter; once the fetch settles, all waiters are
notified in registration order and the terminal status is cached, so later
requests are answered without touching the network again (failures
included).

Notifications are always delivered on a later event-loop iteration
(loop.call_soon), including for already-settled handles. No callback ever
runs inside request().

Usage:
    loader = ResourceLoader(HttpResourceFetcher())
    loader.request(url, on_ready=lambda sdk: ..., on_error=lambda exc: ...)

    # or, from a coroutine:
    sdk = await loader.load(url)
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

import httpx

from config.constants import Timeouts
from observability.metrics import record_resource_request, record_resource_settled

logger = logging.getLogger(__name__)

OnReady = Callable[[Any], None]
OnError = Callable[[BaseException], None]
Fetcher = Callable[[str], Awaitable[Any]]
Locator = Callable[[str], Optional[Awaitable[Any]]]


class ResourceStatus(Enum):
    """Lifecycle of a resource handle. READY and FAILED are terminal."""
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


@dataclass
class ResourceHandle:
    """
    Cache entry for one resource URL.

    Attributes:
        url: Resource URL (the cache key)
        status: Current lifecycle status
        waiters: Callback pairs awaiting settlement, in registration order
        value: Loaded resource once READY
        error: Failure cause once FAILED
    """

    url: str
    status: ResourceStatus = ResourceStatus.LOADING
    waiters: list[tuple[OnReady, OnError]] = field(default_factory=list)
    value: Any = None
    error: Optional[BaseException] = None

    @property
    def settled(self) -> bool:
        return self.status is not ResourceStatus.LOADING


class HttpResourceFetcher:
    """Downloads a script resource over HTTP and returns its body."""

    def __init__(
        self,
        timeout: float = Timeouts.HTTP_DEFAULT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._timeout = timeout
        self._transport = transport

    async def __call__(self, url: str) -> str:
        async with httpx.AsyncClient(
            timeout=self._timeout,
            transport=self._transport,
            follow_redirects=True,
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.text


class ResourceLoader:
    """
    Process-wide, per-URL single-flight cache of embed resources.

    Args:
        fetch: Coroutine function downloading a URL. Called at most once per URL.
        locate: Optional hook reporting a load of the URL that was started
            outside this loader. It returns an awaitable that completes when
            that load finishes, or None if the URL is unknown. The handle is
            only marked READY after the awaitable completes.

    Not thread-safe: all calls must come from the thread running the event loop.
    """

    def __init__(self, fetch: Fetcher, locate: Optional[Locator] = None):
        self._fetch = fetch
        self._locate = locate
        self._handles: dict[str, ResourceHandle] = {}
        self._tasks: set[asyncio.Task] = set()

    def request(self, url: str, on_ready: OnReady, on_error: OnError) -> ResourceHandle:
        """
        Ask for a resource. Never blocks and never invokes a callback inline.

        Exactly one of on_ready(value) / on_error(exc) is called, once.
        """
        loop = asyncio.get_running_loop()
        handle = self._handles.get(url)

        if handle is None:
            existing = self._locate(url) if self._locate is not None else None

            handle = ResourceHandle(url=url)
            self._handles[url] = handle
            handle.waiters.append((on_ready, on_error))

            if existing is not None:
                logger.info("Adopting resource load already in progress", extra={"url": url})
                record_resource_request("adopted")
                self._start(handle, lambda: existing)
            else:
                logger.info("Fetching resource", extra={"url": url})
                record_resource_request("fetch")
                self._start(handle, lambda: self._fetch(url))

        elif handle.status is ResourceStatus.LOADING:
            handle.waiters.append((on_ready, on_error))
            record_resource_request("waiting")
            logger.debug(
                "Resource in flight, queued waiter",
                extra={"url": url, "waiters": len(handle.waiters)},
            )

        elif handle.status is ResourceStatus.READY:
            record_resource_request("cached_ready")
            loop.call_soon(on_ready, handle.value)

        else:
            record_resource_request("cached_failed")
            loop.call_soon(on_error, handle.error)

        return handle

    async def load(self, url: str) -> Any:
        """
        Await a resource through the same single-flight path.

        Raises the fetch error if the resource failed to load. Cancelling the
        caller only drops this caller's interest; the shared load continues.
        """
        future = asyncio.get_running_loop().create_future()

        def _ready(value: Any) -> None:
            if not future.done():
                future.set_result(value)

        def _failed(exc: BaseException) -> None:
            if not future.done():
                future.set_exception(exc)

        self.request(url, _ready, _failed)
        return await future

    def adopt(self, url: str, pending: Awaitable[Any]) -> ResourceHandle:
        """
        Register a load started elsewhere so it is never fetched again.

        If the URL already has a handle, that handle wins and `pending` is
        left untouched.
        """
        handle = self._handles.get(url)
        if handle is not None:
            return handle

        handle = ResourceHandle(url=url)
        self._handles[url] = handle
        record_resource_request("adopted")
        self._start(handle, lambda: pending)
        return handle

    def status(self, url: str) -> Optional[ResourceStatus]:
        """Status for a URL, or None if it was never requested."""
        handle = self._handles.get(url)
        return handle.status if handle is not None else None

    def get_handle(self, url: str) -> Optional[ResourceHandle]:
        return self._handles.get(url)

    def _start(self, handle: ResourceHandle, source: Callable[[], Awaitable[Any]]) -> None:
        task = asyncio.get_running_loop().create_task(self._run(handle, source))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _run(self, handle: ResourceHandle, source: Callable[[], Awaitable[Any]]) -> None:
        try:
            value = await source()
        except asyncio.CancelledError as exc:
            self._settle(handle, ResourceStatus.FAILED, error=exc)
            raise
        except Exception as exc:
            logger.warning(
                f"Resource failed to load: {exc}",
                extra={"url": handle.url, "error_type": type(exc).__name__},
            )
            self._settle(handle, ResourceStatus.FAILED, error=exc)
        else:
            logger.info("Resource ready", extra={"url": handle.url})
            self._settle(handle, ResourceStatus.READY, value=value)

    def _settle(
        self,
        handle: ResourceHandle,
        status: ResourceStatus,
        value: Any = None,
        error: Optional[BaseException] = None,
    ) -> None:
        if handle.settled:
            return

        handle.status = status
        handle.value = value
        handle.error = error
        record_resource_settled(status.value)

        waiters, handle.waiters = handle.waiters, []
        loop = asyncio.get_running_loop()
        for on_ready, on_error in waiters:
            if status is ResourceStatus.READY:
                loop.call_soon(on_ready, value)
            else:
                loop.call_soon(on_error, error)


_default_loader: Optional[ResourceLoader] = None


def get_resource_loader() -> ResourceLoader:
    """
    Get or create the process-wide loader.

    Note:
        Handles are cached for the lifetime of the process and never reset.
    """
    global _default_loader

    if _default_loader is None:
        _default_loader = ResourceLoader(HttpResourceFetcher())
        logger.debug("Embed resource loader initialized")

    return _default_loader
