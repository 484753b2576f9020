"""
Unit tests for the HTTP relay client.
"""

import httpx
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from korean_tutor.client.relay_client import HttpRelayClient, RelayClientError
from korean_tutor.sessions.store import ERROR_MARKER, ERROR_REPLY, SessionStore


def _response(payload=None, status_code=200, json_error=None):
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = payload
    return response


def _patch_client(mock_client, response):
    mock_instance = AsyncMock()
    mock_instance.post.return_value = response
    mock_instance.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_instance.__aexit__ = AsyncMock(return_value=False)
    mock_client.return_value = mock_instance
    return mock_instance


class TestHttpRelayClient:
    """Tests for HttpRelayClient."""

    @pytest.mark.asyncio
    async def test_returns_reply(self):
        client = HttpRelayClient("http://tutor.local/")

        with patch("httpx.AsyncClient") as mock_client:
            instance = _patch_client(mock_client, _response({"reply": "안녕하세요!"}))
            reply = await client("안녕", False)

        assert reply == "안녕하세요!"
        args, kwargs = instance.post.call_args
        assert args[0] == "http://tutor.local/api/chat"
        assert kwargs["json"] == {"message": "안녕", "romanize": False}

    @pytest.mark.asyncio
    async def test_server_error_raises(self):
        client = HttpRelayClient("http://tutor.local")

        with patch("httpx.AsyncClient") as mock_client:
            _patch_client(mock_client, _response({"reply": "서버 오류"}, status_code=500))
            with pytest.raises(RelayClientError) as exc_info:
                await client("안녕", False)

        assert exc_info.value.status_code == 500
        assert exc_info.value.reply == "서버 오류"

    @pytest.mark.asyncio
    async def test_missing_reply_raises(self):
        client = HttpRelayClient("http://tutor.local")

        with patch("httpx.AsyncClient") as mock_client:
            _patch_client(mock_client, _response({"detail": "?"}))
            with pytest.raises(RelayClientError):
                await client("안녕", False)

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        client = HttpRelayClient("http://tutor.local")

        with patch("httpx.AsyncClient") as mock_client:
            _patch_client(mock_client, _response(json_error=ValueError("bad json")))
            with pytest.raises(RelayClientError):
                await client("안녕", False)

    @pytest.mark.asyncio
    async def test_store_turns_client_error_into_error_bubble(self):
        client = HttpRelayClient("http://tutor.local")
        store = SessionStore()

        with patch("httpx.AsyncClient") as mock_client:
            _patch_client(mock_client, _response({"reply": "서버 오류"}, status_code=500))
            await store.send_message("안녕", client)

        assert store.messages[-1].is_error is True
        assert store.current_session.last_message == ERROR_MARKER

    @pytest.mark.asyncio
    async def test_server_error_without_reply(self):
        client = HttpRelayClient("http://tutor.local")

        with patch("httpx.AsyncClient") as mock_client:
            _patch_client(mock_client, _response(json_error=ValueError("bad json"), status_code=502))
            with pytest.raises(RelayClientError) as exc_info:
                await client("안녕", False)

        assert exc_info.value.status_code == 502
        assert exc_info.value.reply is None

    @pytest.mark.asyncio
    async def test_store_shows_localized_server_fallback(self):
        fallback = "A server error occurred. Please try again in a moment."
        client = HttpRelayClient("http://tutor.local")
        store = SessionStore()

        with patch("httpx.AsyncClient") as mock_client:
            _patch_client(mock_client, _response({"reply": fallback}, status_code=500))
            await store.send_message("How do I say hello?", client)

        last = store.messages[-1]
        assert last.content == fallback
        assert last.role == "assistant"
        assert last.is_error is True
        assert store.current_session.last_message == ERROR_MARKER

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"detail": "upstream down"}, {"reply": "   "}])
    async def test_store_falls_back_to_fixed_error_text(self, payload):
        client = HttpRelayClient("http://tutor.local")
        store = SessionStore()

        with patch("httpx.AsyncClient") as mock_client:
            _patch_client(mock_client, _response(payload, status_code=500))
            await store.send_message("How do I say hello?", client)

        assert store.messages[-1].content == ERROR_REPLY
        assert store.messages[-1].is_error is True

    @pytest.mark.asyncio
    async def test_store_transport_error_uses_fixed_error_text(self):
        client = HttpRelayClient("http://tutor.local")
        store = SessionStore()

        with patch("httpx.AsyncClient") as mock_client:
            instance = _patch_client(mock_client, _response({"reply": "unused"}))
            instance.post.side_effect = httpx.ConnectError("connection refused")
            await store.send_message("안녕", client)

        assert store.messages[-1].content == ERROR_REPLY
        assert store.current_session.last_message == ERROR_MARKER
