# repository/queue_repository.py
import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional, Union
from pydantic import ValidationError
from redis.asyncio import Redis
from config.cache import RedisStore
from model.backup import Backup, WorkerSnapshot
from model.block import Block, decode_block, encode_block
from repository.namespaces import (
    BACKUPS,
    backup_field,
    queue_key,
)
from util.enums import DataTypes
from util.errors import MalformedPayloadError
from util.retry import RetryPolicy, store_retry
from util.timing import timed

logger = logging.getLogger(__name__)

CategoryLike = Union[DataTypes, str]


def _category(value: CategoryLike) -> DataTypes:
    # Reject unknown categories before touching the store.
    return DataTypes(value)


def _decode_backup(raw: Optional[bytes], field: str) -> Backup:
    key = f"{BACKUPS}:{field}"
    if raw is None:
        raise MalformedPayloadError(key, raw, "missing value")
    try:
        return Backup.model_validate_json(raw)
    except ValidationError as e:
        raise MalformedPayloadError(key, raw, e.errors()[0].get("msg", "")) from e


class QueueRepository:
    """
    Redis-backed FIFO queue per category, plus per-category backups.

    Flow:
    - insert_block LPUSHes onto `<category>-queue` (head = newest).
    - get_block RPOPs the tail (oldest); an empty queue yields None.
    - backup stores {workers, blocks} under field `<category>-backup` of the
      `backups` hash, overwriting the previous record.
    - Store calls retry transient failures within `retry_policy`, then raise
      StoreUnavailableError.

    insert/get/backup of one category are serialized by an in-process lock so a
    backup never interleaves with this process's own pushes/pops. Writers in
    other processes can still land between the LRANGE and the HSET of a backup.
    """

    def __init__(
        self, store: RedisStore, retry_policy: Optional[RetryPolicy] = None
    ) -> None:
        self._store = store
        self.retry_policy = retry_policy or RetryPolicy.from_settings()
        self._locks: Dict[DataTypes, asyncio.Lock] = {
            c: asyncio.Lock() for c in DataTypes
        }

    @property
    def _client(self) -> Redis:
        return self._store.client

    # ---------------- Lifecycle ----------------

    async def launch(self) -> None:
        """Connect once; repeated calls reuse the live connection."""
        await self._store.connect()

    async def shutdown(self) -> None:
        await self._store.close()

    # ---------------- FIFO ----------------

    async def insert_block(self, block: Block, category: CategoryLike) -> None:
        """Append as newest. None is refused: get_block uses it to mean "empty"."""
        if block is None:
            raise ValueError("None cannot be queued as a block")
        category = _category(category)
        payload = encode_block(block)
        async with self._locks[category]:
            await self._push(queue_key(category), payload)
        logger.debug("queue.insert category=%s bytes=%d", category, len(payload))

    async def get_block(self, category: CategoryLike) -> Optional[Block]:
        """
        Pop the oldest block, or None when the queue is empty.
        A popped payload that cannot be decoded raises MalformedPayloadError
        carrying the raw bytes; it is already removed from the queue.
        """
        category = _category(category)
        key = queue_key(category)
        async with self._locks[category]:
            raw = await self._pop(key)
        if raw is None:
            return None
        return decode_block(raw, key=key)

    async def get_all_blocks(self, category: CategoryLike) -> List[Block]:
        """Non-destructive snapshot, oldest first."""
        category = _category(category)
        return self._decode_blocks(
            queue_key(category), await self._range(queue_key(category))
        )

    async def count_blocks(self, category: CategoryLike) -> int:
        category = _category(category)
        return await self._length(queue_key(category))

    # ---------------- Backups ----------------

    async def backup(
        self, category: CategoryLike, workers: Iterable[Any]
    ) -> Backup:
        """
        Persist the category's remaining blocks together with the
        {block, continuation} projection of each worker. Returns what was stored.
        """
        category = _category(category)
        snapshots = [WorkerSnapshot.model_validate(w) for w in workers]
        async with self._locks[category]:
            with timed(logger, "queue.backup", category=category):
                record = await self._write_backup(category, snapshots)
        logger.info(
            "queue.backup.ok category=%s workers=%d blocks=%d",
            category,
            len(record.workers),
            len(record.blocks),
        )
        return record

    async def load_backup(self) -> List[Dict[str, Backup]]:
        """One single-entry mapping per stored record, ordered by field name."""
        stored = await self._read_backups()
        out: List[Dict[str, Backup]] = []
        for raw_field in sorted(stored):
            field = (
                raw_field.decode("utf-8")
                if isinstance(raw_field, (bytes, bytearray))
                else str(raw_field)
            )
            out.append({field: _decode_backup(stored[raw_field], field)})
        return out

    async def load_category_backup(self, category: CategoryLike) -> Optional[Backup]:
        category = _category(category)
        field = backup_field(category)
        raw = await self._read_backup(field)
        if raw is None:
            return None
        return _decode_backup(raw, field)

    # ---------------- Store calls (retried) ----------------

    @store_retry
    async def _push(self, key: str, payload: bytes) -> None:
        await self._client.lpush(key, payload)

    @store_retry
    async def _pop(self, key: str) -> Optional[bytes]:
        return await self._client.rpop(key)

    @store_retry
    async def _range(self, key: str) -> List[bytes]:
        return await self._client.lrange(key, 0, -1)

    @store_retry
    async def _length(self, key: str) -> int:
        return int(await self._client.llen(key) or 0)

    @store_retry
    async def _write_backup(
        self, category: DataTypes, snapshots: List[WorkerSnapshot]
    ) -> Backup:
        # Whole read+write is one attempt; HSET overwrites, so a retry is idempotent.
        key = queue_key(category)
        raw_blocks = await self._client.lrange(key, 0, -1)
        record = Backup(workers=snapshots, blocks=self._decode_blocks(key, raw_blocks))
        await self._client.hset(
            BACKUPS, backup_field(category), record.model_dump_json().encode("utf-8")
        )
        return record

    @store_retry
    async def _read_backups(self) -> Dict[bytes, bytes]:
        return await self._client.hgetall(BACKUPS) or {}

    @store_retry
    async def _read_backup(self, field: str) -> Optional[bytes]:
        return await self._client.hget(BACKUPS, field)

    @staticmethod
    def _decode_blocks(key: str, raw_blocks: Optional[List[bytes]]) -> List[Block]:
        # Redis lists are stored head-first (newest first); callers see oldest first.
        return [decode_block(raw, key=key) for raw in reversed(raw_blocks or [])]
