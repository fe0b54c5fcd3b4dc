# repository/namespaces.py
from typing import Final
from util.enums import DataTypes

QUEUE_SUFFIX: Final[str] = "queue"
BACKUP_SUFFIX: Final[str] = "backup"

# Single hash holding one backup record per category.
BACKUPS: Final[str] = "backups"


def queue_key(category: DataTypes) -> str:
    return f"{category.value}-{QUEUE_SUFFIX}"


def backup_field(category: DataTypes) -> str:
    return f"{category.value}-{BACKUP_SUFFIX}"


def category_from_backup_field(field: str) -> DataTypes:
    """Inverse of backup_field. Raises ValueError for foreign fields."""
    prefix, sep, suffix = field.rpartition("-")
    if not sep or suffix != BACKUP_SUFFIX:
        raise ValueError(f"not a backup field: {field!r}")
    return DataTypes(prefix)
