from unittest.mock import Mock

import pytest
import redis

from addressbook.infrastructure.cache.memory_cache import InMemoryCache
from addressbook.infrastructure.cache.redis_cache import RedisCache, _sanitize


class TestInMemoryCache:
    @pytest.fixture
    def clock(self):
        now = [100.0]

        def _clock() -> float:
            return now[0]

        _clock.now = now
        return _clock

    def test_set_get_delete(self, clock):
        cache = InMemoryCache(clock=clock)

        cache.set("k", "v", 60)
        assert cache.get("k") == "v"

        cache.delete("k")
        assert cache.get("k") is None
        cache.delete("missing")

    def test_entry_expires(self, clock):
        cache = InMemoryCache(clock=clock)
        cache.set("k", "v", 60)

        clock.now[0] += 59
        assert cache.get("k") == "v"
        clock.now[0] += 1
        assert cache.get("k") is None

    def test_set_purges_entries_nobody_reads(self, clock):
        cache = InMemoryCache(clock=clock)
        cache.set("short", "1", 1)
        cache.set("long", "2", 100)
        clock.now[0] += 10

        cache.set("fresh", "3", 60)

        assert set(cache._data) == {"long", "fresh"}
        assert cache.ping() is True


class TestRedisCache:
    def test_set_uses_expiry(self):
        client = Mock()
        cache = RedisCache(client=client)

        cache.set("AddressBook_AllContacts", "[]", 600)

        client.set.assert_called_once_with("AddressBook_AllContacts", "[]", ex=600)

    def test_get_and_delete_forward_to_client(self):
        client = Mock()
        client.get.return_value = '{"id": 1}'
        cache = RedisCache(client=client)

        assert cache.get("AddressBook_Contact_1") == '{"id": 1}'
        cache.delete("AddressBook_Contact_1")

        client.delete.assert_called_once_with("AddressBook_Contact_1")

    def test_client_errors_propagate(self):
        client = Mock()
        client.get.side_effect = redis.ConnectionError("refused")
        cache = RedisCache(client=client)

        with pytest.raises(redis.ConnectionError):
            cache.get("k")

    def test_ping_reports_failure(self):
        client = Mock()
        client.ping.side_effect = redis.ConnectionError("refused")

        assert RedisCache(client=client).ping() is False

    def test_requires_url_or_client(self):
        with pytest.raises(RuntimeError):
            RedisCache()

    def test_sanitize_hides_credentials(self):
        assert _sanitize("redis://user:pw@cache:6379/0") == "redis://***@cache:6379/0"
        assert _sanitize("redis://localhost:6379/0") == "redis://localhost:6379/0"
