# model/api.py
from typing import Any, Dict, List
from pydantic import BaseModel
from model.backup import Backup
from util.enums import DataTypes


class QueueSnapshot(BaseModel):
    category: DataTypes
    size: int
    blocks: List[Any]


class QueueSnapshotResponse(BaseModel):
    data: QueueSnapshot


class BackupsResponse(BaseModel):
    data: List[Dict[str, Backup]]
