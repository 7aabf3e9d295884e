"""
Key-value store interface for rating prompt state.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class Store(ABC):
    """Durable scalar key-value store.

    Values are plain scalars: ``int``, ``bool``, ``str`` or ``datetime``.
    Setting ``None`` removes the key.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Return the stored value, or None if the key is absent."""

    @abstractmethod
    def set(self, key: str, value: Optional[Any]) -> None:
        """Store a value under ``key``."""

    def get_bool(self, key: str) -> bool:
        """Return the flag stored under ``key``; False unless it is a stored True."""
        return self.get(key) is True


class InMemoryStore(Store):
    """Dict-backed store for tests and headless use."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Optional[Any]) -> None:
        if value is None:
            self._data.pop(key, None)
        else:
            self._data[key] = value

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"InMemoryStore({self._data!r})"
