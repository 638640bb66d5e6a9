"""Async client keeping an academy's session list fresh."""

from academy.client.cache import SessionCache
from academy.client.session_client import ClientConfig, LoadState, SessionCacheClient
from academy.client.transport import SessionFetchError, SessionsTransport

__all__ = [
    "ClientConfig",
    "LoadState",
    "SessionCache",
    "SessionCacheClient",
    "SessionFetchError",
    "SessionsTransport",
]
