"""
Key-value storage backends for persisted chat state.

``KeyValueStorage`` mirrors the browser local-storage contract (string keys,
string values). Backends report failures through their return values or by
raising; callers decide whether a failure matters.
"""

import re
import aiofiles
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage(ABC):
    """Abstract string key-value store."""

    @abstractmethod
    async def get_item(self, key: str) -> Optional[str]:
        """
        Read the value stored under ``key``.

        Returns:
            The stored string, or None if the key has never been written
        """
        pass

    @abstractmethod
    async def set_item(self, key: str, value: str) -> bool:
        """
        Store ``value`` under ``key``, replacing any previous value.

        Returns:
            bool: True if the write succeeded
        """
        pass

    @abstractmethod
    async def remove_item(self, key: str) -> bool:
        """
        Delete ``key``.

        Returns:
            bool: True if a value was removed
        """
        pass


class MemoryKeyValueStorage(KeyValueStorage):
    """Dict-backed storage; contents last as long as the instance."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.items: Dict[str, str] = dict(initial or {})

    async def get_item(self, key: str) -> Optional[str]:
        return self.items.get(key)

    async def set_item(self, key: str, value: str) -> bool:
        self.items[key] = value
        return True

    async def remove_item(self, key: str) -> bool:
        return self.items.pop(key, None) is not None


class FileKeyValueStorage(KeyValueStorage):
    """
    Local filesystem storage.
    Each key is one UTF-8 ``<key>.json`` file inside a base directory.
    """

    def __init__(self, base_dir: str = "./data"):
        self.base_dir = Path(base_dir).resolve()
        self.base_dir.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        # Keys map directly to file names; reject anything that could escape base_dir
        if not _KEY_PATTERN.match(key) or key in (".", ".."):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.base_dir / f"{key}.json"

    async def get_item(self, key: str) -> Optional[str]:
        full_path = self._get_full_path(key)
        if not full_path.exists():
            return None
        async with aiofiles.open(full_path, 'r', encoding='utf-8') as f:
            return await f.read()

    async def set_item(self, key: str, value: str) -> bool:
        full_path = self._get_full_path(key)
        tmp_path = full_path.with_suffix(".json.tmp")
        async with aiofiles.open(tmp_path, 'w', encoding='utf-8') as f:
            await f.write(value)
        tmp_path.replace(full_path)
        return True

    async def remove_item(self, key: str) -> bool:
        full_path = self._get_full_path(key)
        if not full_path.exists():
            return False
        full_path.unlink()
        return True
