"""
Generic registry for named components (algorithm configurations, pool policies).
"""

from __future__ import annotations

import threading
from difflib import get_close_matches
from typing import Any, Callable, Generic, Iterable, TypeVar

T = TypeVar("T")


class Registry(Generic[T]):
    """
    A small thread-safe name -> item map.

    Keys are case-insensitive. Supports usage as a decorator.
    """

    def __init__(self, name: str = "Registry") -> None:
        self._name = name
        self._items: dict[str, T] = {}
        self._lock = threading.Lock()

    @property
    def name(self) -> str:
        return self._name

    def register(self, key: str, item: T | None = None, *, override: bool = False) -> Callable[[T], T] | T:
        """
        Register an item with the given key.

        Args:
            key: The unique name for the item.
            item: The item to register. If None, returns a decorator.
            override: If True, overwrite existing key. If False, raise ValueError on duplicate.
        """
        norm = key.lower()

        def _do_register(obj: T) -> T:
            with self._lock:
                if norm in self._items and not override:
                    raise ValueError(f"Key '{norm}' already exists in registry '{self._name}'")
                self._items[norm] = obj
            return obj

        if item is None:
            return _do_register
        return _do_register(item)

    def get(self, key: str, default: Any = ...) -> T:
        norm = key.lower()
        if norm not in self._items:
            if default is not ...:
                return default
            raise KeyError(f"Key '{key}' not found in registry '{self._name}'")
        return self._items[norm]

    def suggest(self, key: str, n: int = 3) -> list[str]:
        """Registered keys close to ``key``, best match first."""
        if not key or not self._items:
            return []
        return get_close_matches(key.lower(), list(self._items), n=n, cutoff=0.6)

    def list(self) -> list[str]:
        """Return a sorted list of registered keys."""
        return sorted(self._items.keys())

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._items

    def __getitem__(self, key: str) -> T:
        return self.get(key)

    def __iter__(self) -> Iterable[str]:
        return iter(self.list())

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> Iterable[tuple[str, T]]:
        return [(k, self._items[k]) for k in self.list()]


__all__ = ["Registry"]
