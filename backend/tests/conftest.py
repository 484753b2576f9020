"""
Shared test fixtures and configuration.
"""

import pytest
import os

# Set test environment variables before importing app modules
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", "/tmp/korean_tutor_test_data")
os.environ.setdefault("LOG_FILE_ENABLED", "false")
os.environ["GROQ_API_KEY"] = ""

from korean_tutor.sessions import MemoryKeyValueStorage, SessionPersistence


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def memory_storage():
    return MemoryKeyValueStorage()


@pytest.fixture
def persistence(memory_storage):
    return SessionPersistence(memory_storage)


class RecordingRelay:
    """Reply fetcher stub that records calls and answers with a fixed reply."""

    def __init__(self, reply="안녕하세요!", error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def __call__(self, message, romanize=False):
        self.calls.append((message, romanize))
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture
def relay_stub():
    return RecordingRelay()


@pytest.fixture
def failing_relay():
    return RecordingRelay(error=ConnectionError("relay unreachable"))
