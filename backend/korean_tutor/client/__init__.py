"""Client module - talks to the chat relay over HTTP."""

from .relay_client import HttpRelayClient, RelayClientError

__all__ = ['HttpRelayClient', 'RelayClientError']
