"""Default comment delimiters keyed by file extension."""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Mapping, Optional

FALLBACK_DELIMITER = "//"

DEFAULT_DELIMITERS: Dict[str, str] = {
    **dict.fromkeys(("sh", "bash", "fish", "nu"), "#"),
    **dict.fromkeys(("py", "rb", "pl", "ex", "nix", "toml", "yaml"), "#"),
    **dict.fromkeys(("lua", "hs", "lhs", "sql"), "--"),
    **dict.fromkeys(("ini", "asm", "s"), ";"),
    **dict.fromkeys(("bat", "cmd"), "@REM"),
    **dict.fromkeys(("c", "c++", "cpp"), "//"),
    **dict.fromkeys(("js", "ts"), "//"),
}


def _normalize_extension(extension: str) -> str:
    return extension.lstrip(".").lower()


def auto_detect_delimiter(
    extension: str,
    table: Optional[Mapping[str, str]] = None,
    default: str = FALLBACK_DELIMITER,
) -> str:
    lookup = {**DEFAULT_DELIMITERS, **{_normalize_extension(k): v for k, v in (table or {}).items()}}
    return lookup.get(_normalize_extension(extension), default)


def resolve_delimiter(
    path: Path | str,
    explicit: Optional[str] = None,
    *,
    table: Optional[Mapping[str, str]] = None,
    default: str = FALLBACK_DELIMITER,
) -> str:
    """Pick the delimiter for ``path``: explicit value first, then its extension."""

    if explicit is not None:
        return explicit
    suffix = Path(path).suffix
    if not suffix:
        return default
    return auto_detect_delimiter(suffix, table, default)
