"""
HTTP client for the chat relay endpoint.
"""

import httpx
import logging
from typing import Optional

logger = logging.getLogger(__name__)


class RelayClientError(Exception):
    """The relay endpoint did not produce a usable reply."""

    def __init__(self, message: str, status_code: Optional[int] = None, reply: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        # Fallback text the relay sent along with an error status, if any
        self.reply = reply


def _error_reply(resp: httpx.Response) -> Optional[str]:
    """The localized fallback carried in an error response body, if present."""
    try:
        data = resp.json()
    except ValueError:
        return None
    reply = data.get("reply") if isinstance(data, dict) else None
    return reply if isinstance(reply, str) and reply.strip() else None


class HttpRelayClient:
    """
    Posts a message to ``{base_url}/api/chat`` and returns the reply text.

    Instances are awaitable callables matching the session store's reply
    fetcher signature: ``await client(message, romanize)``.
    """

    def __init__(self, base_url: str, timeout: Optional[float] = None):
        """
        Args:
            base_url: Server root, e.g. "http://127.0.0.1:8000"
            timeout: Request timeout in seconds; None waits indefinitely
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def __call__(self, message: str, romanize: bool = False) -> str:
        url = f"{self.base_url}/api/chat"
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(url, json={"message": message, "romanize": romanize})

        if resp.status_code >= 400:
            raise RelayClientError(
                f"Relay answered HTTP {resp.status_code}",
                resp.status_code,
                reply=_error_reply(resp),
            )

        try:
            data = resp.json()
        except ValueError as e:
            raise RelayClientError("Relay answered with invalid JSON", resp.status_code) from e

        reply = data.get("reply") if isinstance(data, dict) else None
        if not isinstance(reply, str):
            raise RelayClientError("Relay response has no reply", resp.status_code)

        logger.debug(f"Relay reply received ({len(reply)} chars)")
        return reply
