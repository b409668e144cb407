"""Line-fed state machine that locates and sorts sort-lines blocks."""
from __future__ import annotations

from bisect import bisect_right
from enum import Enum
from typing import List

from common.models import BlockRecord

START_SUFFIX = "sort-lines: start"
END_SUFFIX = "sort-lines: end"


class ScannerState(str, Enum):
    SCANNING = "SCANNING"
    INSIDE_BLOCK = "INSIDE_BLOCK"


def start_marker(delimiter: str) -> str:
    return f"{delimiter} {START_SUFFIX}\n"


def end_marker(delimiter: str) -> str:
    return f"{delimiter} {END_SUFFIX}\n"


class BlockScanner:
    """Consumes raw lines with their end offsets and builds block records.

    The scanner never touches a file. Callers feed each line together with
    the stream position right after it, then call :meth:`finish`.
    """

    def __init__(self, delimiter: str, *, encoding: str = "utf-8", errors: str = "surrogateescape") -> None:
        self.delimiter = delimiter
        self.encoding = encoding
        self.errors = errors
        self._start = start_marker(delimiter)
        self._end = end_marker(delimiter)
        self._state = ScannerState.SCANNING
        self._current = BlockRecord()
        self._finished: List[BlockRecord] = []
        self._last_offset = 0

    @property
    def state(self) -> ScannerState:
        return self._state

    @property
    def closed_count(self) -> int:
        return sum(1 for block in self._finished if block.closed)

    def feed(self, raw_line: bytes, offset_after: int) -> None:
        text = raw_line.decode(self.encoding, errors=self.errors)
        offset_before = self._last_offset
        self._last_offset = offset_after

        if self._state is ScannerState.SCANNING:
            if text.lstrip() == self._start:
                self._current.start_offset = offset_after
                self._state = ScannerState.INSIDE_BLOCK
            return

        if text.lstrip() == self._end:
            self._current.content_end = offset_before
            self._current.end_offset = offset_after
            self._finished.append(self._current)
            self._current = BlockRecord()
            self._state = ScannerState.SCANNING
            return

        self._insert(raw_line, text.lower())

    def finish(self) -> List[BlockRecord]:
        """Return every block in discovery order, unterminated ones last with end_offset 0."""

        blocks = list(self._finished)
        if self._state is ScannerState.INSIDE_BLOCK:
            blocks.append(self._current)
        return blocks

    def _insert(self, raw_line: bytes, key: str) -> None:
        block = self._current
        # bisect_right places equal keys after existing ones, keeping the sort stable
        index = bisect_right(block.sort_keys, key)
        if index != len(block.lines):
            block.reordered = True
        block.sort_keys.insert(index, key)
        block.lines.insert(index, raw_line)
