from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from exec_env import Invocation, dependency_overlay

from gom.config import WrapperConfig
from gom.errors import UsageError

GO = "go"
GODOC = "godoc"

COMMAND_ALIASES: dict[str, str] = {
    "i": "install",
    "b": "build",
    "t": "test",
    "r": "run",
    "d": "doc",
    "e": "exec",
    "u": "update",
    "g": "gen",
    "l": "lock",
}

GO_SUBCOMMANDS: frozenset[str] = frozenset(
    {"build", "test", "run", "env", "tool", "fmt", "list", "vet"}
)
WRAPPED_COMMANDS: frozenset[str] = GO_SUBCOMMANDS | {"doc", "exec"}
COLLABORATOR_COMMANDS: frozenset[str] = frozenset({"install", "update", "gen", "lock"})
GEN_TARGETS: tuple[str, ...] = ("travis-yml", "gomfile")


def canonical_command(name: str | None) -> str | None:
    if not name:
        return None
    command = COMMAND_ALIASES.get(name, name)
    if command in WRAPPED_COMMANDS or command in COLLABORATOR_COMMANDS:
        return command
    return None


def toolchain_argv(command: str, args: Sequence[str]) -> list[str]:
    if command in GO_SUBCOMMANDS:
        return [GO, command, *args]
    if command == "doc":
        return [GODOC, *args]
    if command == "exec":
        if not args:
            raise UsageError("exec needs a command to run")
        return list(args)
    raise UsageError(f"`{command}` does not wrap a toolchain command")


def build_invocation(
    command: str,
    args: Sequence[str],
    config: WrapperConfig,
    *,
    cwd: Path | None = None,
    base_env: Mapping[str, str] | None = None,
) -> Invocation:
    argv = toolchain_argv(command, args)
    extra_env = {
        **config.group_overlay(),
        **dependency_overlay(config.directory, cwd=cwd, base_env=base_env),
    }
    return Invocation(argv=tuple(argv), extra_env=extra_env)
