# hybrid_cart/services/cache.py
import json
import time
from typing import Any, Callable, Dict, Tuple

import redis
from redis.exceptions import RedisError

from hybrid_cart.domain.errors import CacheMiss
from hybrid_cart.utils.settings import CACHE_TTL, CACHE_BACKEND, REDIS_URL
from hybrid_cart.utils.logging import get_logger

logger = get_logger(__name__)

ALL_PRODUCTS_KEY = "all_products"


def product_key(product_id: int) -> str:
    return f"product:{product_id}"


class MemoryCacheBackend:
    """
    Cache w pamieci procesu z TTL.
    -wpis wygasa po ttl sekundach od wstawienia
    -wygasle wpisy usuwane leniwie przy odczycie
    -purge_expired tylko odzyskuje pamiec, nie jest potrzebne do poprawnosci
    """

    def __init__(self, ttl: int = CACHE_TTL, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self.clock = clock
        self._store: Dict[str, Tuple[float, Any]] = {}

    def get(self, key: str) -> Any | None:
        entry = self._store.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if self.clock() > expires_at:
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: str, value: Any) -> None:
        self._store[key] = (self.clock() + self.ttl, value)

    def delete(self, key: str) -> None:
        self._store.pop(key, None)

    def purge_expired(self) -> int:
        now = self.clock()
        expired = [k for k, (expires_at, _) in self._store.items() if now > expires_at]
        for key in expired:
            self._store.pop(key, None)
        return len(expired)

    def keys_count(self) -> int:
        now = self.clock()
        return sum(1 for expires_at, _ in self._store.values() if now <= expires_at)


class RedisCacheBackend:
    """
    Ten sam kontrakt co MemoryCacheBackend ale w redisie, wspoldzielony
    miedzy workerami. Wygasanie robi redis (SET ... EX ttl).
    """

    def __init__(self, client: redis.Redis, ttl: int = CACHE_TTL, prefix: str = "cache:"):
        self.redis = client
        self.ttl = ttl
        self.prefix = prefix

    @classmethod
    def from_url(cls, url: str | None = None, ttl: int = CACHE_TTL) -> "RedisCacheBackend":
        client = redis.Redis.from_url(url or REDIS_URL, decode_responses=True)
        return cls(client, ttl=ttl)

    def get(self, key: str) -> Any | None:
        raw = self.redis.get(self.prefix + key)
        if raw is None:
            return None
        return json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        self.redis.set(name=self.prefix + key, value=json.dumps(value), ex=self.ttl)

    def delete(self, key: str) -> None:
        self.redis.delete(self.prefix + key)

    def purge_expired(self) -> int:
        #redis sam usuwa wygasle klucze
        return 0

    def keys_count(self) -> int:
        return sum(1 for _ in self.redis.scan_iter(match=f"{self.prefix}*"))


class ProductCache:
    """
    Cache odczytow produktow z licznikami hit/miss (do /health).
    Wstrzykiwany do serwisow, nie jest singletonem modulu.
    """

    def __init__(self, backend):
        self.backend = backend
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> Any | None:
        value = self.backend.get(key)
        if value is None:
            self.misses += 1
        else:
            self.hits += 1
        return value

    def lookup(self, key: str) -> Any:
        value = self.get(key)
        if value is None:
            raise CacheMiss(f"Cache miss for {key}")
        return value

    def set(self, key: str, value: Any) -> None:
        self.backend.set(key, value)

    def delete(self, key: str) -> None:
        self.backend.delete(key)
        logger.info(f"Cache invalidated: {key}")

    def purge_expired(self) -> int:
        return self.backend.purge_expired()

    def stats(self) -> Dict[str, Any]:
        try:
            keys = self.backend.keys_count()
        except RedisError as e:
            logger.warning(f"Cannot count cache keys: {e}")
            keys = 0

        total = self.hits + self.misses
        hit_rate = f"{self.hits / total * 100:.2f}%" if self.hits > 0 else "0%"
        return {
            "keys": keys,
            "hits": self.hits,
            "misses": self.misses,
            "hitRate": hit_rate,
        }


def build_cache(backend: str = CACHE_BACKEND, ttl: int = CACHE_TTL) -> ProductCache:
    if backend == "redis":
        logger.info(f"Using redis product cache, ttl={ttl}s")
        return ProductCache(RedisCacheBackend.from_url(ttl=ttl))

    if backend != "memory":
        raise ValueError(f"Unknown cache backend: {backend}")

    logger.info(f"Using in-memory product cache, ttl={ttl}s")
    return ProductCache(MemoryCacheBackend(ttl=ttl))
