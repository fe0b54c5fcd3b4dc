"""RedisStore connection lifecycle."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from config.cache import RedisStore
from util.errors import StoreNotConnectedError


@pytest.mark.asyncio
async def test_client_requires_connect(store):
    assert store.connected is False
    with pytest.raises(StoreNotConnectedError):
        store.client


@pytest.mark.asyncio
async def test_connect_passes_url_and_pings(fake_redis):
    seen = {}

    def factory(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return fake_redis

    store = RedisStore("redis://cache:6379/2", factory=factory)
    client = await store.connect()

    assert client is fake_redis
    assert seen["url"] == "redis://cache:6379/2"
    assert seen["decode_responses"] is False
    assert fake_redis.calls == ["ping"]


@pytest.mark.asyncio
async def test_failed_ping_releases_client(store, fake_redis):
    fake_redis.fail("ping")

    with pytest.raises(RedisConnectionError):
        await store.connect()

    assert fake_redis.closed is True
    assert store.connected is False


@pytest.mark.asyncio
async def test_close_then_reconnect(store, fake_redis):
    await store.connect()
    await store.close()
    await store.close()

    assert store.connected is False
    await store.connect()
    assert store.connected is True
    assert fake_redis.calls.count("ping") == 2
