from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Literal

from toolchain_compat import (
    DependencyDirectoryConfig,
    dependency_directory,
    resolve_vendoring_support,
)

Environment = Literal["production", "development", "test"]

ENVIRONMENT_ENV = "GOM_ENVIRONMENT"
GROUPS_ENV = "GOM_GROUPS"


def parse_groups(raw: str | None) -> tuple[str, ...]:
    if not raw:
        return ()
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def select_environments(
    *, production: bool, development: bool, test: bool
) -> tuple[Environment, ...]:
    selected: list[Environment] = []
    if production:
        selected.append("production")
    if development:
        selected.append("development")
    if test:
        selected.append("test")
    return tuple(selected) if selected else ("development",)


@dataclass(frozen=True)
class WrapperConfig:
    directory: DependencyDirectoryConfig
    environments: tuple[Environment, ...] = ("development",)
    groups: tuple[str, ...] = ()

    def group_overlay(self) -> dict[str, str]:
        return {
            ENVIRONMENT_ENV: ",".join(self.environments),
            GROUPS_ENV: ",".join(self.groups),
        }


def build_config(
    *,
    environments: Iterable[Environment] = ("development",),
    groups: Iterable[str] = (),
    project_mode: bool = False,
    env: Mapping[str, str] | None = None,
    toolchain: str = "go",
    toolchain_version: str | None = None,
) -> WrapperConfig:
    """
    Build the process-wide configuration.

    Probes the toolchain once; `VersionUnparsableError` propagates and no configuration is
    produced.
    """

    if env is None:
        env = os.environ
    supported = resolve_vendoring_support(env=env, toolchain=toolchain, version=toolchain_version)
    return WrapperConfig(
        directory=dependency_directory(supported, env, project_mode=project_mode),
        environments=tuple(environments),
        groups=tuple(groups),
    )
