"""Shared error codes and exceptions for the sorter and its CLI."""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class ErrorCode(str, Enum):
    CONFIG_ERROR = "CONFIG_ERROR"
    IO_ERROR = "IO_ERROR"
    STATE_ERROR = "STATE_ERROR"
    GIT_ERROR = "GIT_ERROR"


class BackendError(RuntimeError):
    """Exception carrying a structured error code for the CLI."""

    def __init__(self, code: ErrorCode, message: str, *, context: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.code = code
        self.context = context or {}

    def __str__(self) -> str:  # pragma: no cover - formatting sugar
        base = super().__str__()
        return f"[{self.code.value}] {base}" if base else self.code.value


class SortIOError(BackendError):
    """Raised when a target file cannot be opened, read, seeked or written."""

    def __init__(self, path: Path, operation: str, cause: OSError) -> None:
        detail = cause.strerror or str(cause)
        super().__init__(
            ErrorCode.IO_ERROR,
            f"{operation} failed for {path}: {detail}",
            context={"path": str(path), "operation": operation, "errno": cause.errno},
        )
        self.path = path
        self.operation = operation
