# controller/controller_dependencies.py
from fastapi import Request
from repository.queue_repository import QueueRepository
from util.enums import DataTypes, ErrorMessage
from util.errors import AppError


def get_queue(request: Request) -> QueueRepository:
    # Built and launched by the app lifespan.
    return request.app.state.queue


def parse_category(category: str) -> DataTypes:
    try:
        return DataTypes(category)
    except ValueError:
        raise AppError(
            ErrorMessage.ROUTE_NOT_FOUND.value.message,
            ErrorMessage.ROUTE_NOT_FOUND.value.http_status,
        )
