"""Keep repository-relative paths from escaping the repository root."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from common.errors import BackendError, ErrorCode


class PathEscapeError(BackendError):
    """Raised when a listed path would resolve outside the repository root."""

    def __init__(self, *, attempted: Path, root: Path) -> None:
        super().__init__(
            ErrorCode.GIT_ERROR,
            f"Path escapes repository: attempted={attempted}, root={root}",
            context={"attempted": str(attempted), "root": str(root)},
        )


@dataclass(slots=True)
class RepoSandbox:
    """Resolves paths reported by git relative to the repository top level."""

    root: Path

    def __post_init__(self) -> None:
        self.root = _normalize(self.root)

    def resolve(self, *segments: str | os.PathLike[str]) -> Path:
        """Join segments onto the root lexically; symlinks keep the name git listed."""

        candidate = Path(os.path.normpath(self.root.joinpath(*segments)))
        if not _is_relative_to(candidate, self.root):
            raise PathEscapeError(attempted=candidate, root=self.root)
        return candidate

    def relative(self, path: Path, cwd: Path) -> Path:
        """Express ``path`` relative to ``cwd`` when it sits below it, for display."""

        try:
            return path.relative_to(_normalize(cwd))
        except ValueError:
            return path


def _normalize(path: Path | os.PathLike[str]) -> Path:
    return Path(path).expanduser().resolve()


def _is_relative_to(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True
