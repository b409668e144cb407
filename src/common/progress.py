"""Structured per-file progress logging."""
from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Optional

from .models import FileOutcome


class ProgressLogger:
    """Writes one JSONL event per processed file for later inspection."""

    def __init__(self, path: Optional[Path]) -> None:
        self.path = path
        if path:
            path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, outcome: FileOutcome) -> None:
        if not self.path:
            return
        report = outcome.report
        payload = {
            "file_path": str(outcome.file_path),
            "delimiter": outcome.delimiter,
            "changed": outcome.changed,
            "closed_blocks": report.closed_blocks if report else 0,
            "reordered_blocks": report.reordered_blocks if report else 0,
            "unterminated_blocks": report.unterminated_blocks if report else 0,
            "error": outcome.error,
            "timestamp": time.time(),
        }
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload))
            handle.write("\n")
