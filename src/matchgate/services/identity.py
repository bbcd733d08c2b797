# src/matchgate/services/identity.py
"""Pseudonymous identity services.

Real identities (account emails) never leave the server. Other parties only
see an opaque id: a keyed, truncated BLAKE3 hash of the real identity. The
resolver maps opaque ids back through a memo cache and, on a miss, by hashing
the identities the requester is allowed to see.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from functools import lru_cache
from itertools import islice
from threading import Lock
from typing import Any, Protocol

import redis

from matchgate.core.errors import ConfigurationError
from matchgate.core.settings import settings
from matchgate.utils.hash import derive_key, keyed_hexdigest

logger = logging.getLogger(__name__)

OPAQUE_ID_BYTES = 16
_OPAQUE_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def is_opaque_id(value: str) -> bool:
    """Return True if ``value`` has the shape of an opaque id."""
    return bool(_OPAQUE_ID_PATTERN.fullmatch(value))


class IdentityHasher:
    """Deterministic one-way transform from a real identity to an opaque id."""

    def __init__(self, secret: str | None) -> None:
        if not secret:
            raise ConfigurationError("IDENTITY_SECRET is not configured")
        self._key = derive_key(secret)

    def hash(self, identity: str) -> str:
        """Return the 128-bit opaque id for ``identity`` as 32 hex characters."""
        return keyed_hexdigest(self._key, identity.encode("utf-8"), OPAQUE_ID_BYTES)


class IdentityCache(Protocol):
    """Bidirectional memo of real identity <-> opaque id pairs."""

    def get(self, opaque_id: str) -> str | None: ...

    def get_opaque(self, identity: str) -> str | None: ...

    def put(self, identity: str, opaque_id: str) -> None: ...

    def clear(self) -> None: ...


class InMemoryIdentityCache:
    """Process-local identity cache. Rebuilt lazily after a restart."""

    def __init__(self) -> None:
        self._by_opaque: dict[str, str] = {}
        self._by_identity: dict[str, str] = {}
        self._lock = Lock()

    def get(self, opaque_id: str) -> str | None:
        with self._lock:
            return self._by_opaque.get(opaque_id)

    def get_opaque(self, identity: str) -> str | None:
        with self._lock:
            return self._by_identity.get(identity)

    def put(self, identity: str, opaque_id: str) -> None:
        with self._lock:
            self._by_opaque[opaque_id] = identity
            self._by_identity[identity] = opaque_id

    def clear(self) -> None:
        with self._lock:
            self._by_opaque.clear()
            self._by_identity.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._by_opaque)


class RedisIdentityCache:
    """Identity cache shared between workers through Redis.

    Redis failures degrade to cache misses; the resolver can always recompute
    the mapping from the hasher.
    """

    def __init__(
        self,
        client: Any,
        *,
        ttl_seconds: int = 86_400,
        namespace: str = "identity",
    ) -> None:
        self._redis = client
        self._ttl_seconds = ttl_seconds
        self._namespace = namespace

    def _opaque_key(self, opaque_id: str) -> str:
        return f"{self._namespace}:o:{opaque_id}"

    def _identity_key(self, identity: str) -> str:
        return f"{self._namespace}:r:{identity}"

    def _read(self, key: str) -> str | None:
        try:
            value = self._redis.get(key)
        except redis.RedisError as err:
            logger.warning("Identity cache read failed: %s", err)
            return None
        if value is None:
            return None
        return value.decode("utf-8") if isinstance(value, bytes) else str(value)

    def get(self, opaque_id: str) -> str | None:
        return self._read(self._opaque_key(opaque_id))

    def get_opaque(self, identity: str) -> str | None:
        return self._read(self._identity_key(identity))

    def put(self, identity: str, opaque_id: str) -> None:
        try:
            pipe = self._redis.pipeline()
            pipe.set(self._opaque_key(opaque_id), identity, ex=self._ttl_seconds)
            pipe.set(self._identity_key(identity), opaque_id, ex=self._ttl_seconds)
            pipe.execute()
        except redis.RedisError as err:
            logger.warning("Identity cache write failed: %s", err)

    def clear(self) -> None:
        try:
            keys = list(self._redis.scan_iter(match=f"{self._namespace}:*"))
            if keys:
                self._redis.delete(*keys)
        except redis.RedisError as err:
            logger.warning("Identity cache clear failed: %s", err)


class IdentityResolver:
    """Maps real identities to opaque ids and back, within a caller's scope."""

    def __init__(
        self,
        hasher: IdentityHasher,
        cache: IdentityCache | None = None,
        *,
        scan_limit: int = 500,
    ) -> None:
        self._hasher = hasher
        self._cache: IdentityCache = cache if cache is not None else InMemoryIdentityCache()
        self._scan_limit = scan_limit

    @property
    def cache(self) -> IdentityCache:
        return self._cache

    def opaque_for(self, identity: str) -> str:
        """Return the opaque id for ``identity``, memoizing both directions."""
        cached = self._cache.get_opaque(identity)
        if cached is not None:
            return cached
        opaque_id = self._hasher.hash(identity)
        self._cache.put(identity, opaque_id)
        return opaque_id

    def resolve(self, opaque_id: str, scope: Iterable[str]) -> str | None:
        """Return the real identity behind ``opaque_id`` if it lies in ``scope``.

        ``scope`` yields the identities the requester is authorized to see and
        should support ``in``. At most ``scan_limit`` candidates are hashed on
        a cache miss. Returns None instead of raising, whether the identity
        is unknown or simply outside the scope.
        """
        if not is_opaque_id(opaque_id):
            return None

        cached = self._cache.get(opaque_id)
        if cached is not None:
            return cached if cached in scope else None

        for candidate in islice(scope, self._scan_limit):
            if self.opaque_for(candidate) == opaque_id:
                return candidate

        logger.debug("Opaque id did not resolve within scope (limit %d)", self._scan_limit)
        return None


def build_identity_cache() -> IdentityCache:
    """Return the identity cache selected by configuration."""
    if settings.identity_cache_backend == "redis":
        client = redis.from_url(settings.redis_url)  # type: ignore[no-untyped-call]
        return RedisIdentityCache(client, ttl_seconds=settings.identity_cache_ttl_seconds)
    return InMemoryIdentityCache()


@lru_cache(maxsize=1)
def get_identity_resolver() -> IdentityResolver:
    """Return the process-wide identity resolver.

    Raises:
        ConfigurationError: If IDENTITY_SECRET is not configured.
    """
    return IdentityResolver(
        IdentityHasher(settings.identity_secret),
        build_identity_cache(),
        scan_limit=settings.identity_scan_limit,
    )
