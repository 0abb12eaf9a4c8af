"""
인메모리 TTL 캐시

요청 핸들러와 분리된 캐시 추상화입니다. 각 키는 (value, expires_at) 엔트리로
저장되며, 용량 초과 시 어떤 키를 내보낼지는 EvictionPolicy가 결정합니다.

사용 예:
    cache = TTLCache(ttl_seconds=60, max_size=256, policy=LRUEviction())
    cache.set("dog:1", {"name": "Luna"})
    cache.get("dog:1")
"""
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional


@dataclass
class CacheEntry:
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
        }


class EvictionPolicy:
    """용량 초과 시 내보낼 키를 고르는 정책 (키 순서만 관리)"""

    def on_insert(self, key: Hashable) -> None:
        raise NotImplementedError

    def on_access(self, key: Hashable) -> None:
        raise NotImplementedError

    def on_remove(self, key: Hashable) -> None:
        raise NotImplementedError

    def victim(self) -> Optional[Hashable]:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError


class FIFOEviction(EvictionPolicy):
    """가장 먼저 들어온 키부터 내보냄 (조회는 순서에 영향 없음)"""

    def __init__(self):
        self._order: "OrderedDict[Hashable, None]" = OrderedDict()

    def on_insert(self, key):
        if key not in self._order:
            self._order[key] = None

    def on_access(self, key):
        pass

    def on_remove(self, key):
        self._order.pop(key, None)

    def victim(self):
        return next(iter(self._order), None)

    def clear(self):
        self._order.clear()


class LRUEviction(FIFOEviction):
    """가장 오래 사용되지 않은 키부터 내보냄"""

    def on_insert(self, key):
        self._order[key] = None
        self._order.move_to_end(key)

    def on_access(self, key):
        if key in self._order:
            self._order.move_to_end(key)


EVICTION_POLICIES: Dict[str, Callable[[], EvictionPolicy]] = {
    "lru": LRUEviction,
    "fifo": FIFOEviction,
}


def make_eviction_policy(name: str) -> EvictionPolicy:
    try:
        return EVICTION_POLICIES[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown cache eviction policy: {name}")


class TTLCache:
    """
    키 → CacheEntry(value, expires_at) 저장소.

    - 만료된 엔트리는 조회 시점에 제거되고 miss로 집계됩니다.
    - max_size 초과 시 policy.victim()이 고른 키를 제거합니다.
    - clock은 테스트에서 시간을 제어할 수 있도록 주입 가능합니다.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_size: int = 128,
        policy: Optional[EvictionPolicy] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_size <= 0:
            raise ValueError("max_size must be positive")

        self.ttl_seconds = ttl_seconds
        self.max_size = max_size
        self.policy = policy or LRUEviction()
        self.stats = CacheStats()
        self._clock = clock
        self._entries: Dict[Hashable, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        return self.get(key, _count=False) is not _MISSING

    def get(self, key: Hashable, default: Any = None, _count: bool = True) -> Any:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                if _count:
                    self.stats.misses += 1
                return default if _count else _MISSING

            if entry.is_expired(self._clock()):
                self._remove(key)
                self.stats.expirations += 1
                if _count:
                    self.stats.misses += 1
                return default if _count else _MISSING

            if _count:
                self.stats.hits += 1
                self.policy.on_access(key)
            return entry.value

    def set(self, key: Hashable, value: Any, ttl_seconds: Optional[float] = None) -> None:
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        with self._lock:
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl)
            self.policy.on_insert(key)
            self._evict_overflow()

    def get_or_load(self, key: Hashable, loader: Callable[[], Any]) -> Any:
        """
        캐시에 있으면 반환, 없으면 loader() 결과를 저장 후 반환.
        loader가 None을 반환하면 캐시하지 않습니다.
        """
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            return value

        value = loader()
        if value is not None:
            self.set(key, value)
        return value

    def invalidate(self, key: Hashable) -> bool:
        with self._lock:
            if key in self._entries:
                self._remove(key)
                return True
            return False

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.policy.clear()

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in expired:
                self._remove(key)
            self.stats.expirations += len(expired)
            return len(expired)

    def _remove(self, key: Hashable) -> None:
        self._entries.pop(key, None)
        self.policy.on_remove(key)

    def _evict_overflow(self) -> None:
        while len(self._entries) > self.max_size:
            victim = self.policy.victim()
            if victim is None:
                break
            self._remove(victim)
            self.stats.evictions += 1


_MISSING = object()
