from exec_env.environment import dependency_overlay, merge_environment
from exec_env.process import (
    ExecEnvError,
    ExecutableNotFoundError,
    SignalForwarder,
    SpawnError,
    resolve_executable,
    run,
    supervised_process,
)
from exec_env.model import ExecutionResult, Invocation

__all__ = [
    "ExecEnvError",
    "ExecutableNotFoundError",
    "ExecutionResult",
    "Invocation",
    "SignalForwarder",
    "SpawnError",
    "dependency_overlay",
    "merge_environment",
    "resolve_executable",
    "run",
    "supervised_process",
]
