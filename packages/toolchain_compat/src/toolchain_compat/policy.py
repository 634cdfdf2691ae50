from __future__ import annotations

import os
import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass

from packaging.version import InvalidVersion, Version

from toolchain_compat.probe import DEFAULT_TOOLCHAIN_COMMAND, toolchain_version_string

VENDOR_EXPERIMENT_ENV = "GO15VENDOREXPERIMENT"
VENDOR_EXPERIMENT_ENABLED = "1"
VENDOR_EXPERIMENT_DISABLED = "0"

GO_1_5_0 = Version("1.5.0")
GO_1_6_0 = Version("1.6.0")
GO_1_7_3 = Version("1.7.3")

_NON_NUMERIC_PREFIX_RE = re.compile(r"^[^0-9]+")
# major[.minor[.patch]][-prerelease][+build]
_SEMVER_RE = re.compile(
    r"^(\d+)(?:\.(\d+))?(?:\.(\d+))?(?:-([0-9A-Za-z.-]+))?(?:\+[0-9A-Za-z.-]+)?$"
)

VendoringPolicy = Callable[[Mapping[str, str]], bool]


class VersionUnparsableError(ValueError):
    def __init__(self, raw: str) -> None:
        super().__init__(f"toolchain reported an invalid semantic version: {raw!r}")
        self.raw = raw


@dataclass(frozen=True)
class VendoringBand:
    upper_bound: Version | None
    policy: VendoringPolicy

    def covers(self, version: Version) -> bool:
        return self.upper_bound is None or version < self.upper_bound


def _never(env: Mapping[str, str]) -> bool:  # noqa: ARG001
    return False


def _opt_in(env: Mapping[str, str]) -> bool:
    return env.get(VENDOR_EXPERIMENT_ENV) == VENDOR_EXPERIMENT_ENABLED


def _opt_out(env: Mapping[str, str]) -> bool:
    return env.get(VENDOR_EXPERIMENT_ENV) != VENDOR_EXPERIMENT_DISABLED


def _always(env: Mapping[str, str]) -> bool:  # noqa: ARG001
    return True


# Ordered; the first band whose upper bound lies above the version decides.
# See https://golang.org/doc/go1.6#go_command
VENDORING_BANDS: tuple[VendoringBand, ...] = (
    VendoringBand(upper_bound=GO_1_5_0, policy=_never),
    VendoringBand(upper_bound=GO_1_6_0, policy=_opt_in),
    VendoringBand(upper_bound=GO_1_7_3, policy=_opt_out),
    VendoringBand(upper_bound=None, policy=_always),
)


def _parse_semver(stripped: str) -> Version | None:
    match = _SEMVER_RE.match(stripped)
    if match is None:
        return None
    major, minor, patch, prerelease = match.groups()
    core = f"{major}.{minor or 0}.{patch or 0}"
    # Any pre-release sorts below its release; build metadata does not affect order.
    return Version(f"{core}rc0") if prerelease else Version(core)


def parse_toolchain_version(raw: str) -> Version:
    """
    Parse `go1.4.2`-style strings.

    Strings that PEP 440 rejects but semver accepts (`go1.21.0-custom`) are read as their
    numeric core, placed just below the release when a pre-release tag is present. Anything
    else left after the prefix is fatal.
    """

    stripped = _NON_NUMERIC_PREFIX_RE.sub("", raw.strip())
    try:
        return Version(stripped)
    except InvalidVersion as exc:
        version = _parse_semver(stripped)
        if version is None:
            raise VersionUnparsableError(raw) from exc
        return version


def band_for(version: Version, bands: tuple[VendoringBand, ...] = VENDORING_BANDS) -> VendoringBand:
    for band in bands:
        if band.covers(version):
            return band
    raise LookupError(f"no vendoring band covers version {version}")


def detect_vendoring_support(version_string: str, env: Mapping[str, str]) -> bool:
    # An unknown toolchain (e.g. gccgo) is assumed to vendor natively.
    if not version_string:
        return True
    version = parse_toolchain_version(version_string)
    return band_for(version).policy(env)


def resolve_vendoring_support(
    *,
    env: Mapping[str, str] | None = None,
    toolchain: str = DEFAULT_TOOLCHAIN_COMMAND,
    version: str | None = None,
) -> bool:
    """
    Decide whether the installed toolchain resolves `vendor/` on its own.

    When `version` is omitted the toolchain is probed with `<toolchain> version`. A probe
    failure yields an empty version and therefore the optimistic `True`; a version string
    that is present but malformed raises `VersionUnparsableError`.
    """

    if env is None:
        env = os.environ
    if version is None:
        version = toolchain_version_string(toolchain)
    return detect_vendoring_support(version, env)
