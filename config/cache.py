# config/cache.py
import asyncio
import logging
from typing import Any, Callable, Optional
from redis.asyncio import Redis, from_url
from util.errors import StoreNotConnectedError

logger = logging.getLogger(__name__)

ClientFactory = Callable[..., Redis]


class RedisStore:
    """
    Owns the single Redis connection shared by every queue operation.

    Flow:
    - connect() builds the client and pings it; later calls are no-ops.
    - client raises StoreNotConnectedError until connect() has succeeded.
    - close() releases the connection; connect() may be called again afterwards.
    """

    def __init__(self, url: str, *, factory: ClientFactory = from_url) -> None:
        self._url = url
        self._factory = factory
        self._client: Optional[Redis] = None
        self._lock = asyncio.Lock()

    @property
    def connected(self) -> bool:
        return self._client is not None

    @property
    def client(self) -> Redis:
        if self._client is None:
            raise StoreNotConnectedError()
        return self._client

    async def connect(self) -> Redis:
        async with self._lock:
            if self._client is not None:
                logger.debug("store.connect.skip already_connected=1")
                return self._client
            client: Any = self._factory(
                self._url,
                encoding="utf-8",
                decode_responses=False,  # repositories get raw bytes
                socket_keepalive=True,
                health_check_interval=30,
            )
            try:
                # Fail fast on startup if Redis is unreachable.
                await client.ping()
            except Exception:
                await client.aclose()
                raise
            self._client = client
            logger.info("store.connected")
            return client

    async def close(self) -> None:
        async with self._lock:
            if self._client is not None:
                await self._client.aclose()
                self._client = None
                logger.info("store.closed")
