# util/errors.py
from typing import Optional
from fastapi import HTTPException, status


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)


class QueueError(Exception):
    """Base class for queue/store failures surfaced to callers."""


class StoreNotConnectedError(QueueError):
    def __init__(self) -> None:
        super().__init__("store is not connected; call launch() first")


class StoreUnavailableError(QueueError):
    """Retry budget exhausted while talking to the store."""

    def __init__(self, operation: str, attempts: int) -> None:
        self.operation = operation
        self.attempts = attempts
        super().__init__(f"{operation} failed after {attempts} attempt(s)")


class MalformedPayloadError(QueueError):
    """
    A stored value could not be decoded.
    `raw` keeps the undecodable bytes so a popped block is not silently lost.
    """

    def __init__(self, key: str, raw: Optional[bytes], reason: str = "") -> None:
        self.key = key
        self.raw = raw
        suffix = f": {reason}" if reason else ""
        super().__init__(f"malformed payload at {key}{suffix}")
