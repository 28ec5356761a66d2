"""Custom exception classes."""

from fastapi import HTTPException, status


class RelayChatException(HTTPException):
    """Base exception for application errors."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        code: str = "RELAYCHAT_ERROR",
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code


class HistoryUnavailableError(RelayChatException):
    def __init__(self, detail: str = "Failed to read message history"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            code="STORAGE_READ_FAILURE",
        )


class StorageError(Exception):
    """Base class for persistence backend failures."""


class StorageWriteError(StorageError):
    """A message could not be appended to the store."""


class StorageReadError(StorageError):
    """Stored messages could not be read back."""
