"""Data models shared across the scanner, rewriter, and CLI layers."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass(slots=True)
class BlockRecord:
    """One detected sort-lines block.

    ``start_offset`` points just past the start marker's newline and
    ``end_offset`` just past the end marker's newline. An ``end_offset`` of 0
    marks a block that was never closed; such a block is never rewritten.
    ``content_end`` is the offset where the end marker line begins.
    """

    start_offset: int = 0
    end_offset: int = 0
    content_end: int = 0
    lines: List[bytes] = field(default_factory=list)
    sort_keys: List[str] = field(default_factory=list)
    reordered: bool = False

    @property
    def closed(self) -> bool:
        return self.end_offset != 0

    def payload(self) -> bytes:
        return b"".join(self.lines)


@dataclass(slots=True)
class SortReport:
    """Summary of one file's scan and rewrite."""

    file_path: Path
    delimiter: str
    closed_blocks: int = 0
    reordered_blocks: int = 0
    unterminated_blocks: int = 0

    @property
    def changed(self) -> bool:
        return self.closed_blocks > 0


@dataclass(slots=True)
class FileOutcome:
    """What the CLI learned about a single file."""

    file_path: Path
    delimiter: str
    report: Optional[SortReport] = None
    error: Optional[str] = None

    @property
    def changed(self) -> bool:
        return self.report is not None and self.report.changed


@dataclass(slots=True)
class GlobalSettings:
    encoding: str = "utf-8"
    error_policy: str = "surrogateescape"
    default_delimiter: str = "//"


@dataclass(slots=True)
class RuntimeConfig:
    global_settings: GlobalSettings = field(default_factory=GlobalSettings)
    delimiters: Dict[str, str] = field(default_factory=dict)
    source: Optional[Path] = None
