"""Block scanning and in-place rewriting of sort-lines regions."""

from .rewriter import process, sort_file
from .scanner import BlockScanner, ScannerState, end_marker, start_marker

__all__ = ["BlockScanner", "ScannerState", "end_marker", "process", "sort_file", "start_marker"]
