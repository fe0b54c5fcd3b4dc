# controller/queue_controller.py
from fastapi import APIRouter, Depends
from model.api import BackupsResponse, QueueSnapshot, QueueSnapshotResponse
from repository.queue_repository import QueueRepository
from util.constants import InternalURIs
from util.enums import DataTypes
from controller.controller_dependencies import get_queue, parse_category

queue_router = APIRouter()


@queue_router.get(InternalURIs.QUEUE, response_model=QueueSnapshotResponse)
async def queue_snapshot(
    category: DataTypes = Depends(parse_category),
    queue: QueueRepository = Depends(get_queue),
) -> QueueSnapshotResponse:
    blocks = await queue.get_all_blocks(category)
    return QueueSnapshotResponse(
        data=QueueSnapshot(category=category, size=len(blocks), blocks=blocks)
    )


@queue_router.get(InternalURIs.BACKUPS, response_model=BackupsResponse)
async def list_backups(
    queue: QueueRepository = Depends(get_queue),
) -> BackupsResponse:
    return BackupsResponse(data=await queue.load_backup())
