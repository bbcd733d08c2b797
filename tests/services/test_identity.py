import pytest
import redis

from matchgate.core.errors import ConfigurationError
from matchgate.services.identity import (
    IdentityHasher,
    IdentityResolver,
    InMemoryIdentityCache,
    RedisIdentityCache,
    is_opaque_id,
)


@pytest.fixture
def hasher():
    return IdentityHasher("unit-test-secret")


def test_hash_is_deterministic_and_opaque(hasher):
    first = hasher.hash("alice@example.com")
    assert first == IdentityHasher("unit-test-secret").hash("alice@example.com")
    assert is_opaque_id(first)
    assert "alice" not in first


def test_hash_depends_on_secret(hasher):
    assert hasher.hash("alice@example.com") != IdentityHasher("other").hash("alice@example.com")


def test_hash_is_collision_free_on_sample(hasher):
    identities = [f"user{i}@example.com" for i in range(5000)]
    assert len({hasher.hash(identity) for identity in identities}) == len(identities)


@pytest.mark.parametrize("secret", [None, ""])
def test_missing_secret_is_fatal(secret):
    with pytest.raises(ConfigurationError):
        IdentityHasher(secret)


def test_resolve_round_trips_within_scope(hasher):
    scope = [f"user{i}@example.com" for i in range(50)]
    resolver = IdentityResolver(hasher)
    for identity in scope:
        opaque_id = resolver.opaque_for(identity)
        assert resolver.resolve(opaque_id, scope) == identity


def test_resolve_scans_on_cache_miss_and_memoizes(hasher):
    cache = InMemoryIdentityCache()
    resolver = IdentityResolver(hasher, cache)
    opaque_id = hasher.hash("bob@example.com")

    assert resolver.resolve(opaque_id, ["alice@example.com", "bob@example.com"]) == "bob@example.com"
    assert cache.get(opaque_id) == "bob@example.com"
    assert cache.get_opaque("bob@example.com") == opaque_id


def test_resolve_outside_scope_is_not_found(hasher):
    resolver = IdentityResolver(hasher)
    opaque_id = hasher.hash("mallory@example.com")
    assert resolver.resolve(opaque_id, ["alice@example.com"]) is None


def test_cached_identity_outside_scope_is_not_found(hasher):
    resolver = IdentityResolver(hasher)
    opaque_id = resolver.opaque_for("mallory@example.com")
    assert resolver.resolve(opaque_id, ["alice@example.com"]) is None


def test_resolve_scan_is_bounded(hasher):
    scope = [f"user{i}@example.com" for i in range(10)]
    resolver = IdentityResolver(hasher, scan_limit=3)
    assert resolver.resolve(hasher.hash(scope[2]), scope) == scope[2]
    assert resolver.resolve(hasher.hash(scope[7]), scope) is None


@pytest.mark.parametrize("value", ["", "not-an-id", "A" * 32, "0" * 31])
def test_resolve_rejects_malformed_ids(hasher, value):
    assert IdentityResolver(hasher).resolve(value, ["alice@example.com"]) is None


def test_in_memory_cache_clear():
    cache = InMemoryIdentityCache()
    cache.put("alice@example.com", "a" * 32)
    assert len(cache) == 1
    cache.clear()
    assert len(cache) == 0
    assert cache.get("a" * 32) is None


def test_redis_cache_reads_and_writes_both_directions(mocker):
    client = mocker.MagicMock()
    client.get.return_value = b"alice@example.com"
    cache = RedisIdentityCache(client, ttl_seconds=60, namespace="ids")

    assert cache.get("a" * 32) == "alice@example.com"
    client.get.assert_called_once_with(f"ids:o:{'a' * 32}")

    cache.put("alice@example.com", "a" * 32)
    pipe = client.pipeline.return_value
    pipe.set.assert_any_call(f"ids:o:{'a' * 32}", "alice@example.com", ex=60)
    pipe.set.assert_any_call("ids:r:alice@example.com", "a" * 32, ex=60)
    pipe.execute.assert_called_once()


def test_redis_failures_degrade_to_misses(mocker, hasher):
    client = mocker.MagicMock()
    client.get.side_effect = redis.ConnectionError("down")
    client.pipeline.side_effect = redis.ConnectionError("down")
    resolver = IdentityResolver(hasher, RedisIdentityCache(client))

    opaque_id = resolver.opaque_for("alice@example.com")
    assert opaque_id == hasher.hash("alice@example.com")
    assert resolver.resolve(opaque_id, ["alice@example.com"]) == "alice@example.com"
