"""Candidate file lists pulled from the git index."""
from __future__ import annotations

import subprocess
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from common.errors import BackendError, ErrorCode
from common.sandbox import RepoSandbox


class GitSelection(str, Enum):
    ALL = "all"
    STAGED = "staged"
    MODIFIED = "modified"

    @property
    def git_args(self) -> Tuple[str, ...]:
        return _GIT_ARGS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_GIT_ARGS = {
    GitSelection.ALL: ("ls-files",),
    GitSelection.STAGED: ("diff", "--cached", "--name-only"),
    GitSelection.MODIFIED: ("ls-files", "--modified"),
}

_LABELS = {
    GitSelection.ALL: "git files",
    GitSelection.STAGED: "staged files",
    GitSelection.MODIFIED: "modified files",
}


def run_git(args: Sequence[str], *, cwd: Optional[Path] = None) -> str:
    command = ["git", "-c", "core.quotePath=false", *args]
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise BackendError(
            ErrorCode.GIT_ERROR,
            f"Unable to run {' '.join(command)}: {exc}",
        ) from exc
    if completed.returncode != 0:
        raise BackendError(
            ErrorCode.GIT_ERROR,
            f"{' '.join(command)} exited with {completed.returncode}: {completed.stderr.strip()}",
            context={"returncode": completed.returncode},
        )
    return completed.stdout


def list_git_files(selection: GitSelection, *, cwd: Optional[Path] = None) -> List[Path]:
    """Return the selected files as paths under the repository top level."""

    workdir = Path(cwd) if cwd else Path.cwd()
    toplevel = run_git(["rev-parse", "--show-toplevel"], cwd=workdir).strip()
    sandbox = RepoSandbox(Path(toplevel))

    # ls-files reports paths relative to cwd, diff relative to the top level
    base = workdir.resolve() if selection.git_args[0] == "ls-files" else sandbox.root
    output = run_git(selection.git_args, cwd=workdir)

    files: List[Path] = []
    seen = set()
    for line in output.splitlines():
        if not line.strip():
            continue
        path = sandbox.resolve(base / line)
        if path in seen:
            continue
        seen.add(path)
        files.append(sandbox.relative(path, workdir))
    return files
