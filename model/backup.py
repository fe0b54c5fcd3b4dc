# model/backup.py
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict
from model.block import Block


class WorkerSnapshot(BaseModel):
    """
    What a worker needs to resume: the block in hand (if any) and its
    upstream cursor. Built by projection from worker objects or mappings,
    so any extra worker state is dropped.
    """

    model_config = ConfigDict(from_attributes=True, extra="ignore")

    block: Optional[Block] = None
    continuation: Any = None


class Backup(BaseModel):
    workers: List[WorkerSnapshot] = []
    blocks: List[Block] = []
