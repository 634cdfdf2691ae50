from __future__ import annotations

import json
import os
import subprocess
import sys
from collections.abc import Sequence
from pathlib import Path

import pytest

import gom
import toolchain_compat.policy as policy
from gom.cli import build_parser, main
from gom.collaborators import UnavailableCollaborators
from gom.config import WrapperConfig


def _fake_toolchain(monkeypatch: pytest.MonkeyPatch, version: str) -> list[str]:
    calls: list[str] = []

    def _version_string(command: str) -> str:
        calls.append(command)
        return version

    monkeypatch.setattr(policy, "toolchain_version_string", _version_string)
    return calls


class _RecordingCollaborators:
    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple[str, ...], WrapperConfig]] = []

    def install(self, args: Sequence[str], config: WrapperConfig) -> None:
        self.calls.append(("install", tuple(args), config))

    def update(self, config: WrapperConfig) -> None:
        self.calls.append(("update", (), config))

    def generate_gomfile(self, config: WrapperConfig) -> None:
        self.calls.append(("gomfile", (), config))

    def generate_lock(self, config: WrapperConfig) -> None:
        self.calls.append(("lock", (), config))


def test_parser_keeps_task_arguments_verbatim() -> None:
    args = build_parser().parse_args(["-production", "-groups", "a,b", "test", "-run", "Foo", "-v"])
    assert args.production is True
    assert args.groups == "a,b"
    assert args.command == "test"
    assert args.args == ["-run", "Foo", "-v"]


def test_parser_accepts_double_dash_flags() -> None:
    args = build_parser().parse_args(["--test", "--project-mode", "build"])
    assert args.test is True
    assert args.project_mode is True
    assert args.command == "build"
    assert args.args == []


def test_no_command_prints_usage(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 1
    assert "Usage of gom" in capsys.readouterr().out


def test_unknown_command_prints_usage(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["frobnicate"]) == 1
    assert "gom build" in capsys.readouterr().out


def test_unknown_flag_is_usage_error(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-nope", "build"]) == 1
    captured = capsys.readouterr()
    assert "Usage of gom" in captured.out
    assert captured.err.startswith("gom: ")


def test_exec_without_arguments_prints_usage(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _fake_toolchain(monkeypatch, "go1.9.0")
    assert main(["exec"]) == 1
    assert "Usage of gom" in capsys.readouterr().out


def test_child_exit_status_is_propagated(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_toolchain(monkeypatch, "go1.9.0")
    assert main(["exec", sys.executable, "-c", "import sys; sys.exit(2)"]) == 2


def test_exec_sees_rewired_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls = _fake_toolchain(monkeypatch, "go1.4.2")
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("GOM_VENDOR_NAME", raising=False)
    monkeypatch.setenv("GOPATH", "/home/me/go")
    out = tmp_path / "env.json"
    script = (
        "import json, os, sys; "
        "keys = ('GOPATH', 'GOM_ENVIRONMENT', 'GOM_GROUPS'); "
        "open(sys.argv[1], 'w').write(json.dumps({k: os.environ.get(k) for k in keys}))"
    )

    status = main(["-test", "-groups", "db,,cache", "e", sys.executable, "-c", script, str(out)])

    assert status == 0
    assert calls == ["go"]
    payload = json.loads(out.read_text())
    root = str((tmp_path / "_vendor").resolve())
    assert payload["GOPATH"] == f"{root}{os.pathsep}/home/me/go"
    assert payload["GOM_ENVIRONMENT"] == "test"
    assert payload["GOM_GROUPS"] == "db,cache"


def test_malformed_toolchain_version_is_fatal(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _fake_toolchain(monkeypatch, "devel")
    assert main(["build"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("gom: ")
    assert "devel" in err


def test_missing_executable_is_reported(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _fake_toolchain(monkeypatch, "")
    assert main(["exec", "gom-definitely-missing-tool"]) == 1
    err = capsys.readouterr().err
    assert err.startswith("gom: executable file not found")
    assert len(err.strip().splitlines()) == 1


def test_install_without_plugin_fails(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _fake_toolchain(monkeypatch, "go1.9.0")
    assert main(["install"], collaborators=UnavailableCollaborators()) == 1
    assert "`install`" in capsys.readouterr().err


def test_collaborator_commands_receive_config(monkeypatch: pytest.MonkeyPatch) -> None:
    _fake_toolchain(monkeypatch, "go1.4.2")
    monkeypatch.setenv("GOM_VENDOR_NAME", "libs")
    fake = _RecordingCollaborators()

    assert main(["-production", "-project-mode", "i", "-x"], collaborators=fake) == 0
    assert main(["update"], collaborators=fake) == 0
    assert main(["gen", "gomfile"], collaborators=fake) == 0
    assert main(["l"], collaborators=fake) == 0

    assert [name for name, _, _ in fake.calls] == ["install", "update", "gomfile", "lock"]
    _, install_args, install_config = fake.calls[0]
    assert install_args == ("-x",)
    assert install_config.environments == ("production",)
    assert install_config.directory.base_name == "libs"
    assert install_config.directory.project_mode is True


def test_gen_travis_yml(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _fake_toolchain(monkeypatch, "go1.9.0")
    monkeypatch.chdir(tmp_path)
    assert main(["gen", "travis-yml"]) == 0
    assert (tmp_path / ".travis.yml").exists()
    assert main(["g", "travis-yml"]) == 1
    assert "already exists" in capsys.readouterr().err


def test_gen_unknown_target_prints_usage(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _fake_toolchain(monkeypatch, "go1.9.0")
    assert main(["gen", "makefile"]) == 1
    assert "Usage of gom" in capsys.readouterr().out


def test_version_flag(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--version"])
    assert excinfo.value.code == 0
    assert gom.__version__ in capsys.readouterr().out


def test_help_smoke() -> None:
    env = dict(os.environ)
    env["PYTHONPATH"] = os.pathsep.join(p for p in sys.path if p)
    proc = subprocess.run(
        [sys.executable, "-m", "gom.cli", "--help"],
        capture_output=True,
        text=True,
        check=False,
        env=env,
    )
    assert proc.returncode == 0
    assert "gom" in proc.stdout
