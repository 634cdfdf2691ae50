from __future__ import annotations

import os
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

DEFAULT_TOOLCHAIN_COMMAND = "go"


@dataclass(frozen=True)
class ToolchainProbe:
    command: str
    resolved_path: str | None
    version: str = ""
    reason_code: str | None = None
    reason: str | None = None


def looks_like_path(command: str) -> bool:
    return (
        ("/" in command)
        or ("\\" in command)
        or (os.name == "nt" and ":" in command)
        or Path(command).is_absolute()
    )


def _extract_version_field(stdout_text: str) -> str:
    # `go version go1.4.2 linux/amd64`
    for line in stdout_text.splitlines():
        fields = line.split()
        if len(fields) >= 3 and fields[0] == "go" and fields[1] == "version":
            return fields[2]
    return ""


def probe_toolchain(
    command: str = DEFAULT_TOOLCHAIN_COMMAND,
    *,
    timeout_seconds: float = 10.0,
    path: str | None = None,
) -> ToolchainProbe:
    """
    Ask the toolchain for its self-reported version.

    Never raises: a missing binary, a launch failure, a timeout or output that does not look
    like `go version <ver> ...` all produce a probe with an empty version and a reason code.
    """

    resolved: str | None
    if looks_like_path(command):
        resolved = command if Path(command).exists() else None
    else:
        resolved = shutil.which(command, path=path) if path is not None else shutil.which(command)
    if resolved is None:
        return ToolchainProbe(
            command=command,
            resolved_path=None,
            reason_code="not_found",
            reason=f"`{command}` was not found on PATH.",
        )

    try:
        proc = subprocess.run(
            [resolved, "version"],
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=max(0.1, float(timeout_seconds)),
            check=False,
        )
    except subprocess.TimeoutExpired:
        return ToolchainProbe(
            command=command,
            resolved_path=resolved,
            reason_code="timeout",
            reason=f"`{command} version` timed out after {timeout_seconds:.1f}s.",
        )
    except OSError as exc:
        return ToolchainProbe(
            command=command,
            resolved_path=resolved,
            reason_code="launch_failed",
            reason=str(exc),
        )

    if proc.returncode != 0:
        merged = (proc.stderr or "").strip() or (proc.stdout or "").strip()
        return ToolchainProbe(
            command=command,
            resolved_path=resolved,
            reason_code="exit_nonzero",
            reason=merged or f"`{command} version` exited with code {proc.returncode}.",
        )

    version = _extract_version_field(proc.stdout or "")
    if not version:
        return ToolchainProbe(
            command=command,
            resolved_path=resolved,
            reason_code="unrecognized_output",
            reason=f"`{command} version` did not report a version.",
        )

    return ToolchainProbe(command=command, resolved_path=resolved, version=version)


def toolchain_version_string(
    command: str = DEFAULT_TOOLCHAIN_COMMAND,
    *,
    timeout_seconds: float = 10.0,
    path: str | None = None,
) -> str:
    return probe_toolchain(command, timeout_seconds=timeout_seconds, path=path).version
