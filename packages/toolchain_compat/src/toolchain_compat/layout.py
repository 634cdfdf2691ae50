from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

NATIVE_VENDOR_NAME = "vendor"
DEFAULT_EMULATED_VENDOR_NAME = "_vendor"
VENDOR_NAME_ENV = "GOM_VENDOR_NAME"


@dataclass(frozen=True)
class DependencyDirectoryConfig:
    base_name: str
    supports_native_vendoring: bool
    # Keeps the installer from migrating `vendor/src` into `vendor/`.
    project_mode: bool = False

    @property
    def source_subpath(self) -> str:
        if self.supports_native_vendoring:
            return self.base_name
        return os.path.join(self.base_name, "src")

    def search_root(self, cwd: Path | None = None) -> Path:
        return ((cwd or Path.cwd()) / self.base_name).resolve()

    def bin_dir(self, cwd: Path | None = None) -> Path:
        return self.search_root(cwd) / "bin"


def dependency_directory(
    supports_native_vendoring: bool,
    env: Mapping[str, str] | None = None,
    *,
    project_mode: bool = False,
) -> DependencyDirectoryConfig:
    if supports_native_vendoring:
        return DependencyDirectoryConfig(
            base_name=NATIVE_VENDOR_NAME,
            supports_native_vendoring=True,
            project_mode=project_mode,
        )

    if env is None:
        env = os.environ
    override = env.get(VENDOR_NAME_ENV) or ""
    return DependencyDirectoryConfig(
        base_name=override if override else DEFAULT_EMULATED_VENDOR_NAME,
        supports_native_vendoring=False,
        project_mode=project_mode,
    )
