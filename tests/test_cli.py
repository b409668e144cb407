from __future__ import annotations

import json
from pathlib import Path

import pytest

from common.errors import BackendError, ErrorCode
from ui import cli

BLOCK = "// sort-lines: start\nb\na\n// sort-lines: end\n"


def test_no_arguments_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main([])

    assert "usage: sort-lines" in capsys.readouterr().out


def test_failed_file_does_not_stop_batch(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    first = tmp_path / "first.txt"
    first.write_text(BLOCK, encoding="utf-8")
    missing = tmp_path / "missing.txt"
    last = tmp_path / "last.txt"
    last.write_text("no blocks here\n", encoding="utf-8")

    cli.main([str(first), str(missing), str(last)])

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == str(first)
    assert lines[1].startswith(f"error sorting {missing}: ")
    assert "IO_ERROR" in lines[1]
    assert lines[2] == f"{cli.GREY}{last}{cli.RESET}"
    assert first.read_text(encoding="utf-8") == "// sort-lines: start\na\nb\n// sort-lines: end\n"


def test_no_color_prints_plain_names(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "plain.txt"
    target.write_text("nothing\n", encoding="utf-8")

    cli.main(["--no-color", str(target)])

    assert capsys.readouterr().out == f"{target}\n"


def test_delimiter_flag_and_auto_detection(tmp_path: Path) -> None:
    script = tmp_path / "script.py"
    script.write_text("# sort-lines: start\nb\na\n# sort-lines: end\n" + BLOCK, encoding="utf-8")
    forced = tmp_path / "forced.py"
    forced.write_text(BLOCK, encoding="utf-8")

    cli.main([str(script)])
    cli.main(["-d", "//", str(forced)])

    assert script.read_text(encoding="utf-8") == "# sort-lines: start\na\nb\n# sort-lines: end\n" + BLOCK
    assert forced.read_text(encoding="utf-8") == "// sort-lines: start\na\nb\n// sort-lines: end\n"


def test_config_table_applies(tmp_path: Path) -> None:
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"version": 1, "delimiters": {"tex": "%"}}), encoding="utf-8")
    target = tmp_path / "paper.tex"
    target.write_text("% sort-lines: start\nb\na\n% sort-lines: end\n", encoding="utf-8")

    cli.main(["--config", str(config), str(target)])

    assert target.read_text(encoding="utf-8") == "% sort-lines: start\na\nb\n% sort-lines: end\n"


def test_invalid_config_aborts(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main(["--config", str(tmp_path / "absent.json"), "file.txt"])

    assert "CONFIG_ERROR" in str(exc.value.code)


def test_empty_git_selection_is_informational(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setattr(cli, "list_git_files", lambda selection: [])

    cli.main(["--git", "staged"])

    captured = capsys.readouterr()
    assert captured.err.strip() == "there are no staged files to sort"
    assert captured.out == ""


def test_git_files_come_before_explicit_files(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    tracked = tmp_path / "tracked.txt"
    tracked.write_text(BLOCK, encoding="utf-8")
    extra = tmp_path / "extra.txt"
    extra.write_text("plain\n", encoding="utf-8")
    monkeypatch.setattr(cli, "list_git_files", lambda selection: [tracked])

    cli.main(["-g", "all", "--no-color", str(extra)])

    assert capsys.readouterr().out.splitlines() == [str(tracked), str(extra)]


def test_git_failure_aborts(monkeypatch: pytest.MonkeyPatch) -> None:
    def failing(selection):
        raise BackendError(ErrorCode.GIT_ERROR, "git ls-files exited with 128")

    monkeypatch.setattr(cli, "list_git_files", failing)

    with pytest.raises(SystemExit) as exc:
        cli.main(["-g", "all"])

    assert "GIT_ERROR" in str(exc.value.code)


def test_progress_log_records_each_file(tmp_path: Path) -> None:
    sorted_file = tmp_path / "a.txt"
    sorted_file.write_text(BLOCK, encoding="utf-8")
    log = tmp_path / "logs" / "progress.jsonl"

    cli.main(["--progress-log", str(log), str(sorted_file), str(tmp_path / "gone.txt")])

    events = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert [event["changed"] for event in events] == [True, False]
    assert events[0]["closed_blocks"] == 1
    assert events[0]["reordered_blocks"] == 1
    assert events[0]["delimiter"] == "//"
    assert events[1]["error"]


class WriteFailingHandle:
    def __init__(self, handle) -> None:
        self._handle = handle

    def __enter__(self) -> "WriteFailingHandle":
        return self

    def __exit__(self, *exc_info) -> None:
        self._handle.close()

    def write(self, payload: bytes) -> int:
        raise OSError(28, "No space left on device")

    def __getattr__(self, name: str):
        return getattr(self._handle, name)


def test_write_failure_does_not_stop_next_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    broken = tmp_path / "broken.txt"
    broken.write_text(BLOCK, encoding="utf-8")
    healthy = tmp_path / "healthy.txt"
    healthy.write_text(BLOCK, encoding="utf-8")
    original_open = Path.open

    def open_failing_broken(self, mode="r", *args, **kwargs):
        handle = original_open(self, mode, *args, **kwargs)
        if mode == "r+b" and self.name == "broken.txt":
            return WriteFailingHandle(handle)
        return handle

    monkeypatch.setattr(Path, "open", open_failing_broken)

    cli.main(["--no-color", str(broken), str(healthy)])

    monkeypatch.undo()
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith(f"error sorting {broken}: ")
    assert "No space left on device" in lines[0]
    assert lines[1] == str(healthy)
    assert broken.read_text(encoding="utf-8") == BLOCK
    assert healthy.read_text(encoding="utf-8") == "// sort-lines: start\na\nb\n// sort-lines: end\n"


def test_unknown_encoding_rejected_before_any_file(tmp_path: Path) -> None:
    config = tmp_path / "config.json"
    config.write_text(json.dumps({"version": 1, "global": {"encoding": "no-such-codec"}}), encoding="utf-8")
    target = tmp_path / "a.txt"
    target.write_text(BLOCK, encoding="utf-8")

    with pytest.raises(SystemExit) as exc:
        cli.main(["--config", str(config), str(target)])

    assert "Unknown encoding 'no-such-codec'" in str(exc.value.code)
    assert target.read_text(encoding="utf-8") == BLOCK


def test_flags_without_files_are_informational(capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["-d", "#"])

    captured = capsys.readouterr()
    assert captured.err.strip() == "there are no files to sort"
    assert captured.out == ""
