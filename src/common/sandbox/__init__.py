"""Path containment helpers."""

from .paths import PathEscapeError, RepoSandbox

__all__ = ["PathEscapeError", "RepoSandbox"]
