"""CLI entry point: sort the lines inside sort-lines blocks of the given files."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from common.config import load_runtime_config
from common.errors import BackendError
from common.models import FileOutcome, RuntimeConfig
from common.progress import ProgressLogger
from core.discovery import GitSelection, list_git_files, resolve_delimiter
from core.sorting import sort_file

GREY = "\x1b[30m"
RESET = "\x1b[0m"


def collect_targets(file_list: Sequence[str], git: Optional[GitSelection]) -> List[Path]:
    explicit = [Path(name) for name in file_list]
    if git is None:
        return explicit
    return [*list_git_files(git), *explicit]


def render_outcome(outcome: FileOutcome, *, color: bool = True) -> None:
    if outcome.error is not None:
        print(f"error sorting {outcome.file_path}: {outcome.error}")
    elif outcome.changed or not color:
        print(outcome.file_path)
    else:
        print(f"{GREY}{outcome.file_path}{RESET}")


def sort_one(path: Path, delimiter: Optional[str], runtime: RuntimeConfig) -> FileOutcome:
    settings = runtime.global_settings
    chosen = resolve_delimiter(
        path,
        delimiter,
        table=runtime.delimiters,
        default=settings.default_delimiter,
    )
    try:
        report = sort_file(path, chosen, encoding=settings.encoding, errors=settings.error_policy)
    except BackendError as exc:
        return FileOutcome(file_path=path, delimiter=chosen, error=str(exc))
    return FileOutcome(file_path=path, delimiter=chosen, report=report)


def sort_files(
    files: Sequence[Path],
    delimiter: Optional[str],
    runtime: RuntimeConfig,
    *,
    callback: Optional[Callable[[FileOutcome], None]] = None,
) -> List[FileOutcome]:
    outcomes: List[FileOutcome] = []
    for path in files:
        outcome = sort_one(path, delimiter, runtime)
        outcomes.append(outcome)
        if callback:
            callback(outcome)
    return outcomes


def command_sort(args: argparse.Namespace) -> None:
    try:
        runtime = load_runtime_config(Path(args.config) if args.config else None)
    except BackendError as exc:
        raise SystemExit(f"[config] {exc}") from exc

    git = GitSelection(args.git) if args.git else None
    try:
        files = collect_targets(args.file_list, git)
    except BackendError as exc:
        raise SystemExit(f"[git] {exc}") from exc

    if not files:
        label = git.label if git is not None else "files"
        print(f"there are no {label} to sort", file=sys.stderr)
        return

    progress = ProgressLogger(Path(args.progress_log) if args.progress_log else None)
    color = not args.no_color

    def report(outcome: FileOutcome) -> None:
        render_outcome(outcome, color=color)
        progress.emit(outcome)

    sort_files(files, args.delimiter, runtime, callback=report)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sort-lines",
        description="Sort the lines between '<comment> sort-lines: start' and '<comment> sort-lines: end' markers in place",
    )
    parser.add_argument("file_list", nargs="*", help="Files to sort")
    parser.add_argument(
        "-g",
        "--git",
        choices=[selection.value for selection in GitSelection],
        help="Also sort files selected from git (all tracked, staged, or modified)",
    )
    parser.add_argument(
        "-d",
        "--delimiter",
        help="Comment delimiter used in the markers (defaults to one picked by file extension)",
    )
    parser.add_argument(
        "--config",
        help="Optional JSON config with encoding and per-extension delimiter overrides",
    )
    parser.add_argument(
        "--progress-log",
        help="Path to JSONL file for structured per-file events",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Do not dim unchanged file names",
    )
    parser.set_defaults(func=command_sort)
    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args_list = sys.argv[1:] if argv is None else argv
    if not args_list:
        parser.print_help()
        return
    args = parser.parse_args(args_list)
    args.func(args)


if __name__ == "__main__":
    main()
