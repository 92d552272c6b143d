#!/usr/bin/env python3
"""
In-memory response cache with per-entry time-to-live.
"""

import json
import time
from collections import OrderedDict
from typing import Any, Callable, Dict, Optional, Tuple

SEARCH_RESULTS_TTL = 10 * 60  # seconds


class MemoryCache:
    """A small TTL cache. When full, the oldest inserted entry is dropped."""

    def __init__(self, default_ttl: int = 3600, max_size: int = 1000, clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self.max_size = max_size
        self._clock = clock
        self._entries: "OrderedDict[str, Tuple[Any, float]]" = OrderedDict()

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        if self.max_size <= 0:
            return
        if ttl is None:
            ttl = self.default_ttl
        self._entries.pop(key, None)
        while len(self._entries) >= self.max_size:
            self._entries.popitem(last=False)
        self._entries[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def size(self) -> int:
        return len(self._entries)


def package_readme_key(package_name: str, version: str) -> str:
    return f"pkg_readme:{package_name}:{version}"


def package_info_key(package_name: str, version: str, include_dependencies: bool = True, include_dev_dependencies: bool = False) -> str:
    return f"pkg_info:{package_name}:{version}:{int(include_dependencies)}{int(include_dev_dependencies)}"


def search_key(query: str, limit: int, filters: Dict[str, Any]) -> str:
    return f"search:{query}:{limit}:{json.dumps(filters, sort_keys=True)}"
