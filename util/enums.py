# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    TEST = "test"
    PROD = "prod"


class DataTypes(str, Enum):
    """Queue categories. Each value is the key prefix of its namespace."""

    BLOCKS = "BLOCKS"
    TRANSACTIONS = "TRANSACTIONS"
    LOGS = "LOGS"

    def __str__(self):
        return self.value


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    UNAUTHORIZED = ErrorInfo("Unauthorized", status.HTTP_403_FORBIDDEN)
    ROUTE_NOT_FOUND = ErrorInfo("Route not found.", status.HTTP_404_NOT_FOUND)
    STORE_UNAVAILABLE = ErrorInfo(
        "Queue store unavailable", status.HTTP_503_SERVICE_UNAVAILABLE
    )
    MALFORMED_PAYLOAD = ErrorInfo(
        "Stored payload is corrupted", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
