"""Time-bounded memoization for upstream fetches."""

from __future__ import annotations

import functools
import threading
from time import monotonic
from typing import Any, Callable, Dict, Tuple, TypeVar

T = TypeVar("T")

_cache_lock = threading.Lock()
_memory_cache: Dict[Tuple, Tuple[float, Any]] = {}


def _evict_expired(prefix: str, ttl: float, now: float) -> None:
    # Caller holds _cache_lock.
    for key in [key for key, (stored, _) in _memory_cache.items() if key[0] == prefix and now - stored >= ttl]:
        del _memory_cache[key]


def ttl_memoize(prefix: str, ttl_seconds: Callable[[], float] | float) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """Thread-safe memoization whose entries expire after ``ttl_seconds``.

    ``ttl_seconds`` may be a callable so the window can follow runtime
    configuration. A TTL of zero or less disables caching. Exceptions are
    never cached, so a failed fetch is retried on the next call. Expired
    entries under ``prefix`` are evicted whenever a fresh result is stored.
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            ttl = ttl_seconds() if callable(ttl_seconds) else ttl_seconds
            if ttl <= 0:
                return func(*args, **kwargs)
            key = (prefix, args, tuple(sorted(kwargs.items())))
            with _cache_lock:
                hit = _memory_cache.get(key)
                if hit is not None:
                    if monotonic() - hit[0] < ttl:
                        return hit[1]
                    del _memory_cache[key]
            result = func(*args, **kwargs)
            with _cache_lock:
                now = monotonic()
                _evict_expired(prefix, ttl, now)
                _memory_cache[key] = (now, result)
            return result

        return wrapper

    return decorator


def clear_prefix(prefix: str) -> None:
    """Drop every cache entry stored under ``prefix``."""

    with _cache_lock:
        for key in [key for key in _memory_cache if key[0] == prefix]:
            del _memory_cache[key]


def cache_size(prefix: str) -> int:
    with _cache_lock:
        return sum(1 for key in _memory_cache if key[0] == prefix)


__all__ = ["ttl_memoize", "clear_prefix", "cache_size"]
