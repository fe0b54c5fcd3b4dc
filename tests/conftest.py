"""Shared fixtures: test environment, in-memory Redis double, wired queue."""

import asyncio
import os

os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("REDIS_URL", "redis://localhost:6379/15")
os.environ.setdefault("AUTHORIZATION", "test-secret")
os.environ.setdefault("STORE_RETRY_MAX_ATTEMPTS", "3")
os.environ.setdefault("STORE_RETRY_BASE_DELAY_SECONDS", "0")
os.environ.setdefault("STORE_RETRY_MAX_DELAY_SECONDS", "0")

from typing import Dict, List, Optional, Tuple, Type, Union  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from redis.exceptions import ConnectionError as RedisConnectionError  # noqa: E402

from config.cache import RedisStore  # noqa: E402
from repository.queue_repository import QueueRepository  # noqa: E402
from util.retry import RetryPolicy  # noqa: E402


def _b(value: Union[str, bytes]) -> bytes:
    return value.encode("utf-8") if isinstance(value, str) else bytes(value)


class InMemoryRedis:
    """
    Async stand-in for the slice of redis.asyncio.Redis the queue uses.
    Lists are kept head-first, like Redis. `fail(cmd, times)` makes the next
    `times` calls of `cmd` raise before touching any data. `pause(cmd)` holds
    the next `cmd` after it has read its data until the returned release is set.
    """

    def __init__(self) -> None:
        self.lists: Dict[str, List[bytes]] = {}
        self.hashes: Dict[str, Dict[bytes, bytes]] = {}
        self.calls: List[str] = []
        self.closed = False
        self._failures: Dict[str, int] = {}
        self._errors: Dict[str, Type[Exception]] = {}
        self._pauses: Dict[str, Tuple[asyncio.Event, asyncio.Event]] = {}

    def fail(
        self, command: str, times: int = 1, exc: Type[Exception] = RedisConnectionError
    ) -> None:
        self._failures[command] = times
        self._errors[command] = exc

    def pause(self, command: str) -> Tuple[asyncio.Event, asyncio.Event]:
        reached, release = asyncio.Event(), asyncio.Event()
        self._pauses[command] = (reached, release)
        return reached, release

    async def _hold(self, command: str) -> None:
        pause = self._pauses.pop(command, None)
        if pause is not None:
            reached, release = pause
            reached.set()
            await release.wait()

    def _enter(self, command: str) -> None:
        self.calls.append(command)
        left = self._failures.get(command, 0)
        if left > 0:
            self._failures[command] = left - 1
            raise self._errors[command](f"{command} refused")

    async def ping(self) -> bool:
        self._enter("ping")
        return True

    async def lpush(self, key: str, *values: Union[str, bytes]) -> int:
        self._enter("lpush")
        items = self.lists.setdefault(key, [])
        for value in values:
            items.insert(0, _b(value))
        return len(items)

    async def rpop(self, key: str) -> Optional[bytes]:
        self._enter("rpop")
        items = self.lists.get(key)
        if not items:
            return None
        value = items.pop()
        if not items:
            del self.lists[key]
        return value

    async def lrange(self, key: str, start: int, end: int) -> List[bytes]:
        self._enter("lrange")
        items = self.lists.get(key, [])
        stop = None if end == -1 else end + 1
        result = list(items[start:stop])
        await self._hold("lrange")
        return result

    async def llen(self, key: str) -> int:
        self._enter("llen")
        return len(self.lists.get(key, []))

    async def hset(self, name: str, key: Union[str, bytes], value: Union[str, bytes]) -> int:
        self._enter("hset")
        bucket = self.hashes.setdefault(name, {})
        created = _b(key) not in bucket
        bucket[_b(key)] = _b(value)
        return int(created)

    async def hget(self, name: str, key: Union[str, bytes]) -> Optional[bytes]:
        self._enter("hget")
        return self.hashes.get(name, {}).get(_b(key))

    async def hgetall(self, name: str) -> Dict[bytes, bytes]:
        self._enter("hgetall")
        return dict(self.hashes.get(name, {}))

    async def aclose(self) -> None:
        self.closed = True


@pytest.fixture
def fake_redis() -> InMemoryRedis:
    return InMemoryRedis()


@pytest.fixture
def store(fake_redis: InMemoryRedis) -> RedisStore:
    return RedisStore("redis://test", factory=lambda *a, **kw: fake_redis)


@pytest.fixture
def fast_policy() -> RetryPolicy:
    return RetryPolicy(max_attempts=3, base_delay=0, max_delay=0)


@pytest_asyncio.fixture
async def queue(store: RedisStore, fast_policy: RetryPolicy):
    repo = QueueRepository(store, fast_policy)
    await repo.launch()
    yield repo
    await repo.shutdown()
