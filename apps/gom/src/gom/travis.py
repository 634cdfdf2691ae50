from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from gom.errors import GomError

TRAVIS_YML_NAME = ".travis.yml"
GOM_IMPORT_PATH = "github.com/mattn/gom"
_GOM_BIN = "$HOME/gopath/bin/gom"


def travis_config() -> dict[str, Any]:
    return {
        "language": "go",
        "go": ["tip"],
        "before_install": [f"go get {GOM_IMPORT_PATH}"],
        "script": [f"{_GOM_BIN} install", f"{_GOM_BIN} test"],
    }


def render_travis_yml() -> str:
    return yaml.safe_dump(travis_config(), sort_keys=False, default_flow_style=False)


def write_travis_yml(directory: Path) -> Path:
    path = directory / TRAVIS_YML_NAME
    if path.exists():
        raise GomError(f"{TRAVIS_YML_NAME} already exists")
    path.write_text(render_travis_yml(), encoding="utf-8")
    return path
