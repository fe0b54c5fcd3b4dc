# service/backup_service.py
import asyncio
import logging
from typing import Any, Callable, Dict, Iterable, Optional
from model.backup import Backup
from repository.namespaces import category_from_backup_field
from repository.queue_repository import CategoryLike, QueueRepository
from util.enums import DataTypes
from util.timing import timed

logger = logging.getLogger(__name__)

# Returns the live worker-like objects (anything with block/continuation) of a category.
WorkerSource = Callable[[], Iterable[Any]]


class BackupService:
    """
    Periodic and on-demand backups for registered categories, plus the
    one-shot restore read at process start.
    """

    def __init__(self, queue: QueueRepository, interval_seconds: float) -> None:
        self._queue = queue
        self._interval = float(interval_seconds)
        self._sources: Dict[DataTypes, WorkerSource] = {}
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def register(self, category: CategoryLike, source: WorkerSource) -> None:
        self._sources[DataTypes(category)] = source

    async def backup_all(self) -> Dict[DataTypes, Backup]:
        out: Dict[DataTypes, Backup] = {}
        # register() may run while a backup is awaiting the store.
        for category, source in list(self._sources.items()):
            out[category] = await self._queue.backup(category, source())
        return out

    async def restore(self) -> Dict[DataTypes, Backup]:
        """
        Last stored record per category. Reseeding queues and worker cursors
        is up to the caller.
        """
        out: Dict[DataTypes, Backup] = {}
        with timed(logger, "backup.restore"):
            for entry in await self._queue.load_backup():
                for field, record in entry.items():
                    try:
                        category = category_from_backup_field(field)
                    except ValueError:
                        logger.warning("backup.restore.skip field=%s", field)
                        continue
                    out[category] = record
        logger.info("backup.restore.ok categories=%d", len(out))
        return out

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="backup-loop")

    async def stop(self, *, final_backup: bool = True) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                # A dead loop must not cost the final backup.
                logger.exception("backup.loop.crashed")
        if final_backup and self._sources:
            await self.backup_all()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.backup_all()
            except Exception:
                logger.exception("backup.loop.error")
