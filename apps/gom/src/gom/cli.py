#!/usr/bin/env python
from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

from exec_env import ExecEnvError, run
from toolchain_compat import VersionUnparsableError

from gom import __version__
from gom.collaborators import DependencyCollaborators, load_collaborators
from gom.config import WrapperConfig, build_config, parse_groups, select_environments
from gom.dispatch import GEN_TARGETS, WRAPPED_COMMANDS, build_invocation, canonical_command
from gom.errors import GomError, UsageError
from gom.travis import write_travis_yml

USAGE = """\
Usage of gom:
 Tasks:
   gom build   [options]   : Build with _vendor packages
   gom install [options]   : Install bundled packages into _vendor directory, by default.
                              GOM_VENDOR_NAME=. gom install [options], for regular src folder.
   gom test    [options]   : Run tests with bundles
   gom run     [options]   : Run go file with bundles
   gom doc     [options]   : Run godoc for bundles
   gom exec    [arguments] : Execute command with bundle environment
   gom tool    [options]   : Run go tool with bundles
   gom env     [arguments] : Run go env
   gom fmt     [arguments] : Run go fmt
   gom list    [arguments] : Run go list
   gom vet     [arguments] : Run go vet
   gom update              : Update all dependencies (Experiment)
   gom gen travis-yml      : Generate .travis.yml which uses "gom test"
   gom gen gomfile         : Scan packages from current directory as root
                              recursively, and generate Gomfile
   gom lock                : Generate Gomfile.lock
"""


class _GomArgumentParser(argparse.ArgumentParser):
    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _GomArgumentParser(
        prog="gom",
        usage="gom [options] <command> [arguments...]",
        description="Run the Go toolchain against project-local dependencies.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-production", "--production", action="store_true", help="production environment"
    )
    parser.add_argument(
        "-development", "--development", action="store_true", help="development environment"
    )
    parser.add_argument("-test", "--test", action="store_true", help="test environment")
    parser.add_argument(
        "-project-mode",
        "--project-mode",
        dest="project_mode",
        action="store_true",
        help="do not move from vendor/src to vendor/",
    )
    parser.add_argument(
        "-groups", "--groups", default="", help="comma-separated list of Gomfile groups"
    )
    parser.add_argument("-version", "--version", action="version", version=f"gom {__version__}")
    parser.add_argument("command", nargs="?", help="task to run (see `gom` without arguments)")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="arguments passed to the task")
    return parser


def _usage() -> int:
    print(USAGE, end="")
    return 1


def _run_wrapped(command: str, args: Sequence[str], config: WrapperConfig) -> int:
    invocation = build_invocation(command, args, config)
    result = run(invocation.argv, invocation.extra_env)
    return result.wrapper_exit_status


def _dispatch(
    command: str,
    args: list[str],
    config: WrapperConfig,
    collaborators: DependencyCollaborators | None,
) -> int:
    if command in WRAPPED_COMMANDS:
        return _run_wrapped(command, args, config)

    if command == "gen":
        target = args[0] if args else None
        if target not in GEN_TARGETS:
            raise UsageError(f"unknown gen target: {target!r}")
        if target == "travis-yml":
            path = write_travis_yml(Path.cwd())
            print(f"wrote {path.name}")
            return 0

    if collaborators is None:
        collaborators = load_collaborators()
    if command == "install":
        collaborators.install(args, config)
    elif command == "update":
        collaborators.update(config)
    elif command == "gen":
        collaborators.generate_gomfile(config)
    elif command == "lock":
        collaborators.generate_lock(config)
    return 0


def main(
    argv: Sequence[str] | None = None,
    *,
    collaborators: DependencyCollaborators | None = None,
) -> int:
    parser = build_parser()
    try:
        args = parser.parse_args(list(argv) if argv is not None else None)
    except UsageError as exc:
        print(f"gom: {exc}", file=sys.stderr)
        return _usage()

    command = canonical_command(args.command)
    if command is None:
        return _usage()

    try:
        config = build_config(
            environments=select_environments(
                production=args.production,
                development=args.development,
                test=args.test,
            ),
            groups=parse_groups(args.groups),
            project_mode=args.project_mode,
        )
        return _dispatch(command, list(args.args), config, collaborators)
    except UsageError:
        return _usage()
    except (GomError, ExecEnvError, VersionUnparsableError, OSError) as exc:
        print(f"gom: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
