"""
Integration tests for the /api/chat endpoint.
The completion relay is replaced through FastAPI dependency overrides.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from fastapi.testclient import TestClient

from korean_tutor.main import app
from korean_tutor.api.chat import get_completion_relay
from korean_tutor.llm.groq_provider import GroqProvider
from korean_tutor.tutor.prompts import ENGLISH_PROMPTS, KOREAN_PROMPTS
from korean_tutor.tutor.relay import CompletionRelay, RelayReply


class StubRelay:
    def __init__(self, result):
        self.result = result
        self.calls = []

    async def reply(self, message, romanize=False):
        self.calls.append((message, romanize))
        return self.result


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


def _use_relay(result):
    relay = StubRelay(result)
    app.dependency_overrides[get_completion_relay] = lambda: relay
    return relay


class TestChatEndpoint:
    """Tests for POST /api/chat."""

    def test_reply_success(self, client):
        relay = _use_relay(RelayReply(reply="안녕하세요!"))

        response = client.post("/api/chat", json={"message": "안녕"})

        assert response.status_code == 200
        assert response.json() == {"reply": "안녕하세요!"}
        assert relay.calls == [("안녕", False)]

    def test_romanize_hint_forwarded(self, client):
        relay = _use_relay(RelayReply(reply="annyeong"))

        response = client.post("/api/chat", json={"message": "안녕", "romanize": True})

        assert response.status_code == 200
        assert relay.calls == [("안녕", True)]

    def test_upstream_failure_returns_500_with_reply(self, client):
        _use_relay(RelayReply(reply=KOREAN_PROMPTS.server_error, failed=True))

        response = client.post("/api/chat", json={"message": "안녕"})

        assert response.status_code == 500
        assert response.json() == {"reply": KOREAN_PROMPTS.server_error}

    def test_without_api_key_uses_fallback(self, client):
        # conftest clears GROQ_API_KEY, so the real relay has no provider
        response = client.post("/api/chat", json={"message": "안녕"})

        assert response.status_code == 500
        assert response.json() == {"reply": KOREAN_PROMPTS.server_error}

    def test_empty_choices_returns_no_reply_string(self, client):
        relay = CompletionRelay(GroqProvider(api_key="test-key"))
        app.dependency_overrides[get_completion_relay] = lambda: relay
        upstream = MagicMock()
        upstream.status_code = 200
        upstream.json.return_value = {"choices": []}

        with patch("httpx.AsyncClient") as mock_client:
            instance = AsyncMock()
            instance.post.return_value = upstream
            instance.__aenter__ = AsyncMock(return_value=instance)
            instance.__aexit__ = AsyncMock(return_value=False)
            mock_client.return_value = instance
            response = client.post("/api/chat", json={"message": "How do I say thanks?"})

        assert response.status_code == 200
        assert response.json() == {"reply": ENGLISH_PROMPTS.no_reply}

    @pytest.mark.parametrize("method", ["get", "put", "patch", "delete"])
    def test_non_post_rejected(self, client, method):
        response = client.request(method.upper(), "/api/chat")

        assert response.status_code == 405
        assert response.json() == {"reply": "Method not allowed"}
        assert response.headers["allow"] == "POST"

    @pytest.mark.parametrize("body", [
        {"message": ""},
        {"message": "   "},
        {"message": "가" * 1001},
        {},
    ])
    def test_invalid_body_rejected(self, client, body):
        relay = _use_relay(RelayReply(reply="unused"))

        response = client.post("/api/chat", json=body)

        assert response.status_code == 422
        assert relay.calls == []

    def test_max_length_message_accepted(self, client):
        _use_relay(RelayReply(reply="좋아요"))

        response = client.post("/api/chat", json={"message": "가" * 1000})

        assert response.status_code == 200


class TestServiceEndpoints:
    """Tests for root and health endpoints."""

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["upstream_configured"] is False
