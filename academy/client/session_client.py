"""
Cached, retrying, polling reader of an academy's session list.

Keeps a working set of sessions for one academy fresh without hammering
the server:

- page 1 is served from :class:`SessionCache` while fresh (non-forced loads);
- fetches are retried with linear back-off (``backoff × attempt``);
- when every attempt fails the last cached page 1 is shown as *stale*
  instead of an empty list, and the error is recorded, never raised;
- while mounted, a background task refreshes page 1 every poll interval
  and a focus event triggers an immediate refresh.

Overlapping triggers (poll, focus, manual refresh) are collapsed by a
single loading flag: a call made while a fetch is in flight returns at
once.  Everything runs on one event loop.
"""

import asyncio
import time
from enum import Enum
from typing import Awaitable, Callable, Optional

import httpx
from loguru import logger
from pydantic import BaseModel, Field

from academy.client.cache import SessionCache
from academy.client.transport import SessionFetchError, SessionsTransport
from academy.core.config import settings
from academy.schemas.session import SessionDocument


class LoadState(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    STALE = "stale"
    ERROR = "error"


class ClientConfig(BaseModel):
    """Paging, retry and polling knobs of the client."""

    page_size: int = Field(settings.SESSION_PAGE_SIZE, ge=1)
    max_attempts: int = Field(settings.FETCH_MAX_ATTEMPTS, ge=1)
    backoff_seconds: float = Field(settings.FETCH_BACKOFF_SECONDS, ge=0.0)
    poll_interval_seconds: float = Field(settings.POLL_INTERVAL_SECONDS, gt=0.0)


class SessionCacheClient:
    """Session list state for one academy.

    Args:
        academy_id: Academy whose sessions are listed.
        transport: Page fetcher.
        cache: Shared cache instance (one per process, passed in).
        config: Paging/retry/poll settings.
        sleep: Awaitable sleep between retry attempts, injectable for tests.
        clock: Wall clock used for ``last_refreshed``.
    """

    def __init__(self, academy_id: str, transport: SessionsTransport, cache: SessionCache,
                 config: Optional[ClientConfig] = None, sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
                 clock: Callable[[], float] = time.time, ):
        self.academy_id = academy_id
        self.transport = transport
        self.cache = cache
        self.config = config or ClientConfig()
        self._sleep = sleep
        self._clock = clock

        self.sessions: list[SessionDocument] = []
        self.state = LoadState.IDLE
        self.error: Optional[SessionFetchError] = None
        self.page = 1
        self.has_more = False
        self.last_refreshed: Optional[float] = None

        self._loading = False
        self._mounted = False
        # Bumped on unmount; fetches started under an older generation are discarded.
        self._generation = 0
        self._poll_task: Optional[asyncio.Task] = None
        self._focus_tasks: set[asyncio.Task] = set()

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self, force_refresh: bool = False, page: int = 1) -> None:
        """Load *page* into the working set (page 1 replaces it, later pages append)."""
        if self._loading:
            logger.debug(f"Sessions of academy {self.academy_id} already loading, skipping")
            return

        if not force_refresh and page == 1:
            cached = self.cache.get(self.academy_id)
            if cached is not None:
                self.sessions = cached
                self.page = 1
                self.has_more = len(cached) == self.config.page_size
                self.state = LoadState.SUCCESS
                self.error = None
                return

        generation = self._generation
        self._loading = True
        self.state = LoadState.LOADING
        try:
            fetched = await self._fetch_with_retry(page)
        except SessionFetchError as exc:
            if generation == self._generation:
                self._fall_back(exc, page)
            return
        finally:
            if generation == self._generation:
                self._loading = False

        if generation != self._generation:
            logger.debug(f"Discarding sessions of academy {self.academy_id} fetched after unmount")
            return

        if page == 1:
            self.sessions = list(fetched)
            self.cache.set(self.academy_id, fetched)
        else:
            self.sessions = [*self.sessions, *fetched]
        self.page = page
        self.has_more = len(fetched) == self.config.page_size
        self.last_refreshed = self._clock()
        self.state = LoadState.SUCCESS
        self.error = None

    async def load_more(self) -> None:
        if not self.has_more or self._loading:
            return
        await self.load(force_refresh=True, page=self.page + 1)

    async def refresh(self) -> None:
        await self.load(force_refresh=True, page=1)

    async def _fetch_with_retry(self, page: int) -> list[SessionDocument]:
        attempts = self.config.max_attempts
        last_error: Optional[BaseException] = None
        for attempt in range(1, attempts + 1):
            try:
                return await self.transport.fetch_page(self.academy_id, page, self.config.page_size)
            except (httpx.HTTPError, ValueError) as exc:
                last_error = exc
                logger.warning(f"Fetching sessions of academy {self.academy_id} page {page} failed "
                               f"(attempt {attempt}/{attempts}): {exc}")
                if attempt < attempts:
                    await self._sleep(self.config.backoff_seconds * attempt)
        raise SessionFetchError(self.academy_id, attempts, last_error)

    def _fall_back(self, exc: SessionFetchError, page: int) -> None:
        """Record a failed load; keep showing whatever can still be shown."""
        self.error = exc
        if page > 1 and self.sessions:
            # Earlier pages stay valid; only the extension failed.
            self.state = LoadState.STALE
        else:
            cached = self.cache.get(self.academy_id, allow_stale=True)
            if cached is not None:
                self.sessions = cached
                self.page = 1
                self.state = LoadState.STALE
            else:
                self.state = LoadState.ERROR
        logger.error(f"{exc} (state: {self.state.value})")

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def mount(self) -> None:
        """Initial forced load, then keep refreshing while mounted."""
        if self._mounted:
            return
        self._mounted = True
        self._poll_task = asyncio.create_task(self._poll())
        await self.load(force_refresh=True, page=1)

    def handle_focus(self) -> Optional[asyncio.Task]:
        """Schedule a forced refresh; ``None`` when not mounted."""
        if not self._mounted:
            return None
        task = asyncio.create_task(self.refresh())
        self._focus_tasks.add(task)
        task.add_done_callback(self._focus_tasks.discard)
        return task

    async def unmount(self) -> None:
        if not self._mounted:
            return
        self._mounted = False
        self._generation += 1
        self._loading = False
        if self._poll_task is not None:
            self._poll_task.cancel()
            try:
                await self._poll_task
            except asyncio.CancelledError:
                pass
            self._poll_task = None
        pending = list(self._focus_tasks)
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    async def _poll(self) -> None:
        while self._mounted:
            await asyncio.sleep(self.config.poll_interval_seconds)
            if self._mounted and not self._loading:
                await self.refresh()

    async def __aenter__(self) -> "SessionCacheClient":
        await self.mount()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.unmount()
