"""Locating candidate files and picking their comment delimiter."""

from .delimiters import DEFAULT_DELIMITERS, FALLBACK_DELIMITER, auto_detect_delimiter, resolve_delimiter
from .git_files import GitSelection, list_git_files

__all__ = [
    "DEFAULT_DELIMITERS",
    "FALLBACK_DELIMITER",
    "GitSelection",
    "auto_detect_delimiter",
    "list_git_files",
    "resolve_delimiter",
]
