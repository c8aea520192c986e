# portfolio_api/services/kv_store.py
"""
Key-value store contract shared by sessions and content.

Every backend exposes exactly three coroutines:
- read(key) -> value or None when the key is absent
- write(key, value, ttl_seconds=None)
- delete(key)

Values are stored as canonical JSON strings. Backend failures raise
StoreError; a missing key is never an error.
"""
import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple

from portfolio_api.core.exceptions import store_error

logger = logging.getLogger(__name__)


def serialize_value(value: Any) -> str:
    """Serialize a value to canonical JSON (compact, insertion key order)."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False)


def deserialize_value(raw: Any) -> Any:
    """Inverse of serialize_value. Bytes are decoded as UTF-8."""
    if raw is None:
        return None
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    return json.loads(raw)


class KeyValueStore(ABC):
    """Abstract JSON key-value store with optional per-key expiry."""

    backend_name = "store"

    @abstractmethod
    async def read(self, key: str) -> Optional[Any]:
        """
        Read and deserialize the value stored at key.

        Returns:
            The stored value, or None if the key is absent or expired

        Raises:
            StoreError: If the backend cannot be reached
        """

    @abstractmethod
    async def write(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        """
        Serialize and store value at key, replacing any previous value.

        Args:
            key: Key to write
            value: JSON-serializable value
            ttl_seconds: If given, the backend expires the key after this many seconds

        Raises:
            StoreError: If the value cannot be serialized or the backend fails
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete key. Deleting an absent key is a no-op."""


class InMemoryStore(KeyValueStore):
    """
    Process-local store for tests and local development.

    Expiry is passive: an expired key is dropped the first time it is
    touched after its deadline, so no sweep task is needed.
    """

    backend_name = "memory"

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._data: Dict[str, Tuple[str, Optional[float]]] = {}

    async def read(self, key: str) -> Optional[Any]:
        entry = self._data.get(key)
        if entry is None:
            return None

        raw, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None

        return deserialize_value(raw)

    async def write(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> None:
        try:
            raw = serialize_value(value)
        except (TypeError, ValueError) as e:
            raise store_error(
                f"Value for '{key}' is not JSON serializable: {e}",
                key=key, operation="write", backend=self.backend_name
            )

        expires_at = None
        if ttl_seconds:
            expires_at = self._clock() + ttl_seconds
        self._data[key] = (raw, expires_at)

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def health_check(self) -> Dict[str, Any]:
        return {
            "healthy": True,
            "status": "in_memory",
            "details": {"keys": len(self._data)}
        }

    def raw(self, key: str) -> Optional[str]:
        """Serialized value at key, ignoring expiry (debugging and tests)."""
        entry = self._data.get(key)
        return entry[0] if entry else None

    def __len__(self) -> int:
        return len(self._data)
