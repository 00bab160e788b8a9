import subprocess
from typing import List

import pytest

from gitrelease import process
from gitrelease.errors import CommandError, RootNotFoundError
from gitrelease.git import Git, parse_release_section


class _FakeRun:
    def __init__(self, returncode: int = 0, stdout: str = "", stderr: str = "") -> None:
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.calls: List[List[str]] = []

    def __call__(self, args, **kwargs):  # type: ignore[no-untyped-def]
        self.calls.append(list(args))
        return subprocess.CompletedProcess(args, self.returncode, self.stdout, self.stderr)


def test_show_toplevel(monkeypatch: pytest.MonkeyPatch) -> None:
    fake = _FakeRun(stdout="/work/repo\n")
    monkeypatch.setattr(process.subprocess, "run", fake)
    assert Git().show_toplevel() == "/work/repo"
    assert fake.calls == [["git", "rev-parse", "--show-toplevel"]]


def test_show_toplevel_outside_repo(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(process.subprocess, "run", _FakeRun(128, stderr="fatal: not a git repository"))
    with pytest.raises(RootNotFoundError):
        Git().show_toplevel()


def test_config_get_missing_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(process.subprocess, "run", _FakeRun(1))
    assert Git().config_get("release.push") is None
    assert Git().config_get_all("release.target") == []


def test_config_get_all_lines(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(process.subprocess, "run", _FakeRun(stdout="package.json:3\r\nsrc/version.py:1\n"))
    assert Git().config_get_all("release.target") == ["package.json:3", "src/version.py:1"]


def test_mutating_command_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(process.subprocess, "run", _FakeRun(128, stderr="fatal: tag 'v1.0.0' already exists\n"))
    with pytest.raises(CommandError) as excinfo:
        Git().tag("v1.0.0")
    assert excinfo.value.returncode == 128
    assert "already exists" in str(excinfo.value)


def test_spawn_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    def boom(args, **kwargs):  # type: ignore[no-untyped-def]
        raise FileNotFoundError(2, "No such file or directory", args[0])

    monkeypatch.setattr(process.subprocess, "run", boom)
    with pytest.raises(CommandError) as excinfo:
        Git(command="no-such-git").add("a.txt")
    assert excinfo.value.returncode is None


def test_parse_release_section() -> None:
    text = (
        "[core]\n"
        "\tbare = false\n"
        "[release]\n"
        "\ttarget = package.json:3\n"
        "\ttarget = lib/version.js:2\n"
        "\tpush = true\n"
        '[remote "origin"]\n'
        "\turl = git@example.com:demo.git\n"
    )
    targets, push = parse_release_section(text)
    assert targets == ["package.json:3", "lib/version.js:2"]
    assert push is True


def test_parse_release_section_push_false() -> None:
    targets, push = parse_release_section("[release]\n  push = false\n")
    assert targets == []
    assert push is False
    assert parse_release_section("[core]\n")[1] is None
