from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from toolchain_compat import DependencyDirectoryConfig

GOPATH_ENV = "GOPATH"
PATH_ENV = "PATH"


def merge_environment(
    base: Mapping[str, str] | None,
    overlay: Mapping[str, str] | None,
) -> dict[str, str]:
    merged = dict(os.environ if base is None else base)
    if not overlay:
        return merged
    for key, value in overlay.items():
        if not isinstance(key, str) or not key.strip():
            continue
        if not isinstance(value, str):
            continue
        merged[key] = value
    return merged


def _prepend_search_path(entry: str, existing: str | None) -> str:
    if not existing:
        return entry
    return f"{entry}{os.pathsep}{existing}"


def dependency_overlay(
    directory: DependencyDirectoryConfig,
    *,
    cwd: Path | None = None,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Environment variables that point the toolchain at the dependency directory.

    A toolchain with native vendoring finds `vendor/` by itself, so nothing is rewired. Otherwise
    the dependency directory becomes the first `GOPATH` root (its `src/` holds the packages)
    and its `bin/` is put in front of `PATH` so installed tools win over global ones.
    """

    if directory.supports_native_vendoring:
        return {}

    env = os.environ if base_env is None else base_env
    root = directory.search_root(cwd)
    return {
        GOPATH_ENV: _prepend_search_path(str(root), env.get(GOPATH_ENV)),
        PATH_ENV: _prepend_search_path(str(directory.bin_dir(cwd)), env.get(PATH_ENV)),
    }
