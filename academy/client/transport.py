"""
HTTP transport for the session list.

Thin wrapper around :class:`httpx.AsyncClient`.  One call fetches one page;
retrying is the caller's business.
"""

from typing import Optional

import httpx
from loguru import logger
from pydantic import TypeAdapter

from academy.core.config import settings
from academy.schemas.session import SessionDocument

SESSIONS_PATH = "/api/v1/sessions"

# Every poll must reach the server.
NO_STORE_HEADERS = { "Cache-Control": "no-cache, no-store, must-revalidate", "Pragma": "no-cache", }

_session_list = TypeAdapter(list[SessionDocument])


class SessionFetchError(Exception):
    """Raised when the session list could not be fetched after all attempts."""

    def __init__(self, academy_id: str, attempts: int, cause: Optional[BaseException] = None):
        self.academy_id = academy_id
        self.attempts = attempts
        self.cause = cause
        super().__init__(f"Fetching sessions of academy {academy_id} failed after {attempts} attempts: {cause}")


class SessionsTransport:
    """Fetch pages of an academy's session list over HTTP."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 client: Optional[httpx.AsyncClient] = None):
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url or settings.SESSIONS_API_URL,
            timeout=settings.HTTP_TIMEOUT_SECONDS if timeout is None else timeout,
        )

    async def fetch_page(self, academy_id: str, page: int, limit: int) -> list[SessionDocument]:
        """Fetch one page.

        Raises:
            httpx.HTTPError: Network failure or non-2xx status.
            pydantic.ValidationError: Malformed payload (a ``ValueError``).
        """
        params = { "academy_id": academy_id, "page": page, "limit": limit }
        logger.debug(f"GET {SESSIONS_PATH} academy={academy_id} page={page} limit={limit}")
        response = await self._client.get(SESSIONS_PATH, params=params, headers=NO_STORE_HEADERS)
        response.raise_for_status()
        return _session_list.validate_python(response.json())

    async def aclose(self) -> None:
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()
