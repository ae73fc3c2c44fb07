"""Bounded memoization for repeated calculations.

Eviction is by insertion order (oldest entry first), not LRU: reads do not
refresh an entry. No locking; callers sharing a cache across threads must
synchronise get/set pairs themselves.
"""

import functools
import json
import logging
from collections.abc import Callable, Hashable
from typing import Any, Generic, TypeVar

from config.settings import settings

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class MemoCache(Generic[K, V]):
    """Size-limited key/value store with FIFO eviction."""

    def __init__(self, max_size: int = 100) -> None:
        self.max_size = max_size
        self._entries: dict[K, V] = {}

    def get(self, key: K) -> V | None:
        return self._entries.get(key)

    def set(self, key: K, value: V) -> None:
        # Evict oldest entries if cache is full
        if len(self._entries) >= self.max_size and self._entries:
            oldest_key = next(iter(self._entries))
            del self._entries[oldest_key]
        self._entries[key] = value

    def has(self, key: K) -> bool:
        return key in self._entries

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


def _default_key(args: tuple[Any, ...], kwargs: dict[str, Any]) -> str:
    """JSON-encode call arguments; Decimals and models fall back to str()."""
    payload: list[Any] = list(args)
    if kwargs:
        payload.append(kwargs)
    return json.dumps(payload, default=str, sort_keys=True)


def memoize(
    fn: Callable[..., V],
    key_generator: Callable[..., str] | None = None,
    max_cache_size: int | None = None,
) -> Callable[..., V]:
    """Wrap ``fn`` with a bounded cache.

    Args:
        fn: Function to wrap. Should be pure.
        key_generator: Builds the cache key from the call arguments.
            Defaults to a JSON encoding of the arguments.
        max_cache_size: Cache bound. Defaults to SME_TAX_MEMO_CACHE_SIZE.

    Returns:
        The wrapped function. Its cache is exposed as ``wrapper.cache``.
    """
    if max_cache_size is None:
        max_cache_size = settings.memo_cache_size
    cache: MemoCache[str, V] = MemoCache(max_cache_size)

    @functools.wraps(fn)
    def wrapper(*args: Any, **kwargs: Any) -> V:
        key = key_generator(*args, **kwargs) if key_generator else _default_key(args, kwargs)
        if cache.has(key):
            logger.debug("Memo cache hit for %s", fn.__name__)
            return cache.get(key)  # type: ignore[return-value]

        result = fn(*args, **kwargs)
        cache.set(key, result)
        return result

    wrapper.cache = cache  # type: ignore[attr-defined]
    return wrapper
