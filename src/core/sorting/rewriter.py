"""Scan a file for sort-lines blocks and overwrite each block in place."""
from __future__ import annotations

from pathlib import Path
from typing import BinaryIO, List

from common.errors import BackendError, ErrorCode, SortIOError
from common.models import BlockRecord, SortReport

from .scanner import BlockScanner


def process(
    file_path: Path | str,
    delimiter: str,
    *,
    encoding: str = "utf-8",
    errors: str = "surrogateescape",
) -> bool:
    """Sort every closed block in ``file_path``; True when at least one block was closed."""

    return sort_file(file_path, delimiter, encoding=encoding, errors=errors).changed


def sort_file(
    file_path: Path | str,
    delimiter: str,
    *,
    encoding: str = "utf-8",
    errors: str = "surrogateescape",
) -> SortReport:
    path = Path(file_path)
    try:
        handle = path.open("r+b")
    except OSError as exc:
        raise SortIOError(path, "open", exc) from exc

    with handle:
        blocks = _scan(handle, path, BlockScanner(delimiter, encoding=encoding, errors=errors))
        closed = [block for block in blocks if block.closed]
        _rewrite(handle, path, closed)

    return SortReport(
        file_path=path,
        delimiter=delimiter,
        closed_blocks=len(closed),
        reordered_blocks=sum(1 for block in closed if block.reordered),
        unterminated_blocks=len(blocks) - len(closed),
    )


def _scan(handle: BinaryIO, path: Path, scanner: BlockScanner) -> List[BlockRecord]:
    try:
        while True:
            raw_line = handle.readline()
            if not raw_line:
                break
            scanner.feed(raw_line, handle.tell())
    except OSError as exc:
        raise SortIOError(path, "read", exc) from exc
    except UnicodeDecodeError as exc:
        raise BackendError(
            ErrorCode.IO_ERROR,
            f"read failed for {path}: not valid {scanner.encoding} ({exc.reason})",
            context={"path": str(path), "operation": "read"},
        ) from exc
    return scanner.finish()


def _rewrite(handle: BinaryIO, path: Path, blocks: List[BlockRecord]) -> None:
    for block in blocks:
        payload = block.payload()
        expected = block.content_end - block.start_offset
        if len(payload) != expected:
            raise BackendError(
                ErrorCode.STATE_ERROR,
                f"Sorted block at offset {block.start_offset} in {path} is {len(payload)} bytes, expected {expected}",
                context={"path": str(path), "start_offset": block.start_offset},
            )
        try:
            handle.seek(block.start_offset)
        except OSError as exc:
            raise SortIOError(path, "seek", exc) from exc
        try:
            handle.write(payload)
            handle.flush()
        except OSError as exc:
            raise SortIOError(path, "write", exc) from exc
