from toolchain_compat.layout import (
    DEFAULT_EMULATED_VENDOR_NAME,
    NATIVE_VENDOR_NAME,
    VENDOR_NAME_ENV,
    DependencyDirectoryConfig,
    dependency_directory,
)
from toolchain_compat.policy import (
    VENDOR_EXPERIMENT_ENV,
    VENDORING_BANDS,
    VendoringBand,
    VersionUnparsableError,
    detect_vendoring_support,
    parse_toolchain_version,
    resolve_vendoring_support,
)
from toolchain_compat.probe import (
    ToolchainProbe,
    looks_like_path,
    probe_toolchain,
    toolchain_version_string,
)

__all__ = [
    "DEFAULT_EMULATED_VENDOR_NAME",
    "DependencyDirectoryConfig",
    "NATIVE_VENDOR_NAME",
    "ToolchainProbe",
    "VENDORING_BANDS",
    "VENDOR_EXPERIMENT_ENV",
    "VENDOR_NAME_ENV",
    "VendoringBand",
    "VersionUnparsableError",
    "dependency_directory",
    "detect_vendoring_support",
    "looks_like_path",
    "parse_toolchain_version",
    "probe_toolchain",
    "resolve_vendoring_support",
    "toolchain_version_string",
]
