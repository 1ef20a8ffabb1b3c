from __future__ import annotations

import io
import os
from pathlib import Path

import pytest

from gitcredazure import commands
from gitcredazure.exceptions import SetupError


class _RecordingGit:
    def __init__(self, fail_on: str | None = None) -> None:
        self.calls: list[tuple[str, ...]] = []
        self._fail_on = fail_on

    def set_global(self, *args: str) -> None:
        if self._fail_on and self._fail_on in args:
            raise SetupError(f"git config --global {' '.join(args)} exited with status 5")
        self.calls.append(args)


@pytest.fixture()
def helper_exe(tmp_path: Path) -> Path:
    exe = tmp_path / "bin" / "git-credential-azure-cli"
    exe.parent.mkdir()
    exe.write_text("#!/bin/sh\n")
    exe.chmod(0o755)
    return exe


def test_executable_path__resolves_symlinks(tmp_path: Path, helper_exe: Path) -> None:
    link = tmp_path / "link"
    link.symlink_to(helper_exe)

    assert commands.executable_path(str(link)) == helper_exe.resolve()


def test_executable_path__missing(tmp_path: Path) -> None:
    with pytest.raises(SetupError):
        commands.executable_path(str(tmp_path / "nope" / "helper"))


def test_executable_path__rejects_non_executable_module(tmp_path: Path) -> None:
    """Under `python -m` argv[0] is the package __main__.py, not a program."""
    main_py = tmp_path / "gitcredazure" / "__main__.py"
    main_py.parent.mkdir()
    main_py.write_text("import sys\n")
    main_py.chmod(0o644)

    with pytest.raises(SetupError, match="not an executable file"):
        commands.executable_path(str(main_py))


def test_executable_path__rejects_directory(tmp_path: Path) -> None:
    with pytest.raises(SetupError, match="not an executable file"):
        commands.executable_path(str(tmp_path))


def test_executable_path__bare_name_searched_on_path(
    monkeypatch: pytest.MonkeyPatch, helper_exe: Path
) -> None:
    monkeypatch.setenv("PATH", str(helper_exe.parent) + os.pathsep + os.environ.get("PATH", ""))

    assert commands.executable_path(helper_exe.name) == helper_exe.resolve()


def test_render_exports__uses_executable_directory(helper_exe: Path) -> None:
    assert commands.render_exports(str(helper_exe)) == (
        f'export GOAUTH="git {helper_exe.resolve().parent}"\n'
    )


def test_find_netrc_conflicts(tmp_path: Path) -> None:
    netrc_file = tmp_path / "netrc"
    netrc_file.write_text(
        "machine dev.azure.com login me password secret\n"
        "machine MSAZURE.visualstudio.com login me password secret\n"
        "machine github.com login me password secret\n"
    )

    conflicts = commands.find_netrc_conflicts(
        ["visualstudio.com", "dev.azure.com"], netrc_file
    )

    assert sorted(conflicts) == ["dev.azure.com", "msazure.visualstudio.com"]


def test_find_netrc_conflicts__missing_or_malformed(tmp_path: Path) -> None:
    assert commands.find_netrc_conflicts(["dev.azure.com"], tmp_path / "absent") == []

    bad = tmp_path / "bad"
    bad.write_text("machine\n")
    assert commands.find_netrc_conflicts(["dev.azure.com"], bad) == []


def test_run_init__configures_helpers(tmp_path: Path, helper_exe: Path) -> None:
    git = _RecordingGit()
    out, err = io.StringIO(), io.StringIO()

    commands.run_init(
        git,
        ["dev.azure.com"],
        stdout=out,
        stderr=err,
        netrc_path=tmp_path / "absent",
        argv0=str(helper_exe),
    )

    assert git.calls == [
        ("--replace-all", "credential.helper", "cache"),
        ("--add", "credential.helper", str(helper_exe.resolve())),
    ]
    assert "Added cache credential helper" in out.getvalue()
    assert "configuration complete" in out.getvalue()
    assert err.getvalue() == ""


def test_run_init__warns_about_netrc(tmp_path: Path, helper_exe: Path) -> None:
    netrc_file = tmp_path / "netrc"
    netrc_file.write_text("machine org.visualstudio.com login me password secret\n")
    err = io.StringIO()

    commands.run_init(
        _RecordingGit(),
        ["visualstudio.com"],
        stdout=io.StringIO(),
        stderr=err,
        netrc_path=netrc_file,
        argv0=str(helper_exe),
    )

    assert "WARNING" in err.getvalue()
    assert "   - org.visualstudio.com" in err.getvalue()


def test_run_init__git_failure_raises(tmp_path: Path, helper_exe: Path) -> None:
    git = _RecordingGit(fail_on="--add")

    with pytest.raises(SetupError, match="status 5"):
        commands.run_init(
            git,
            [],
            stdout=io.StringIO(),
            stderr=io.StringIO(),
            netrc_path=tmp_path / "absent",
            argv0=str(helper_exe),
        )
    assert git.calls == [("--replace-all", "credential.helper", "cache")]


def test_package_version__falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    def _missing(name: str) -> str:
        raise commands.PackageNotFoundError(name)

    monkeypatch.setattr(commands, "version", _missing)
    assert commands.package_version() == "0.0.0"
