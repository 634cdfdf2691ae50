from __future__ import annotations

import os
import shutil
import signal
import subprocess
import threading
from collections.abc import Iterator, Mapping, Sequence
from contextlib import contextmanager
from pathlib import Path
from types import FrameType
from typing import Any, Self

from exec_env.environment import PATH_ENV, merge_environment
from exec_env.model import ExecutionResult
from toolchain_compat import looks_like_path

_FORWARDED_SIGNAL_NAMES: tuple[str, ...] = ("SIGINT", "SIGTERM", "SIGHUP")


class ExecEnvError(RuntimeError):
    pass


class ExecutableNotFoundError(ExecEnvError):
    def __init__(self, program: str) -> None:
        super().__init__(f"executable file not found: `{program}`")
        self.program = program


class SpawnError(ExecEnvError):
    def __init__(self, program: str, cause: OSError) -> None:
        super().__init__(f"failed to start `{program}`: {cause}")
        self.program = program


def resolve_executable(
    program: str, *, path: str | None = None, cwd: Path | None = None
) -> str:
    """
    Locate `program` the way the child will see it.

    Path-like names must exist; relative ones are taken from `cwd` when it is given. Bare
    names are looked up on `path` (or the process `PATH`).
    """

    if not program:
        raise ExecutableNotFoundError(program)
    if looks_like_path(program):
        candidate = Path(program)
        if cwd is not None and not candidate.is_absolute():
            candidate = Path(os.path.abspath(Path(cwd) / candidate))
        if candidate.exists():
            return str(candidate) if cwd is not None else program
        raise ExecutableNotFoundError(program)
    resolved = shutil.which(program, path=path) if path is not None else shutil.which(program)
    if resolved is None:
        raise ExecutableNotFoundError(program)
    return resolved


def _forwardable_signals() -> list[signal.Signals]:
    return [getattr(signal, name) for name in _FORWARDED_SIGNAL_NAMES if hasattr(signal, name)]


class SignalForwarder:
    """
    Relays signals received by this process to a child process.

    Handlers are installed on `__enter__` and the previous ones restored on `__exit__`.
    Signals that arrive before a child is attached are queued and delivered on `attach`.
    """

    def __init__(self, signals: Sequence[int] | None = None) -> None:
        self._signals = list(signals) if signals is not None else _forwardable_signals()
        self._previous: dict[int, Any] = {}
        self._process: subprocess.Popen[Any] | None = None
        self._pending: list[int] = []

    @property
    def installed(self) -> bool:
        return bool(self._previous)

    def _handle(self, signum: int, frame: FrameType | None) -> None:  # noqa: ARG002
        proc = self._process
        if proc is None:
            self._pending.append(signum)
            return
        self._deliver(proc, signum)

    def _deliver(self, proc: subprocess.Popen[Any], signum: int) -> None:
        try:
            proc.send_signal(signum)
        except (OSError, ValueError):
            # Child already reaped, or the platform cannot deliver this signal.
            pass

    def attach(self, proc: subprocess.Popen[Any]) -> None:
        self._process = proc
        pending, self._pending = self._pending, []
        for signum in pending:
            self._deliver(proc, signum)

    def install(self) -> None:
        # signal.signal() is only legal on the main thread.
        if threading.current_thread() is not threading.main_thread():
            return
        for signum in self._signals:
            self._previous[signum] = signal.signal(signum, self._handle)

    def restore(self) -> None:
        previous, self._previous = self._previous, {}
        for signum, handler in previous.items():
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)
        self._process = None

    def __enter__(self) -> Self:
        self.install()
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.restore()


@contextmanager
def supervised_process(
    argv: Sequence[str],
    *,
    env: Mapping[str, str],
    cwd: Path | None = None,
    forwarder: SignalForwarder | None = None,
) -> Iterator[subprocess.Popen[Any]]:
    """
    Spawn `argv` attached to this process's stdio with signal forwarding in place.

    The child is always waited on before the block exits; if the block is left by an
    exception the child is killed first.
    """

    forwarder = forwarder if forwarder is not None else SignalForwarder()
    with forwarder:
        try:
            proc = subprocess.Popen(
                list(argv),
                cwd=str(cwd) if cwd is not None else None,
                env=dict(env),
            )
        except OSError as exc:
            raise SpawnError(argv[0], exc) from exc
        forwarder.attach(proc)
        try:
            yield proc
        except BaseException:
            if proc.poll() is None:
                proc.kill()
            raise
        finally:
            proc.wait()


def run(
    argv: Sequence[str],
    env_overlay: Mapping[str, str] | None = None,
    *,
    cwd: Path | None = None,
    base_env: Mapping[str, str] | None = None,
    forwarder: SignalForwarder | None = None,
) -> ExecutionResult:
    args = [str(arg) for arg in argv]
    if not args:
        raise ValueError("argv must name a program to execute")

    env = merge_environment(base_env, env_overlay)
    program = resolve_executable(args[0], path=env.get(PATH_ENV), cwd=cwd)

    with supervised_process([program, *args[1:]], env=env, cwd=cwd, forwarder=forwarder) as proc:
        returncode = proc.wait()
    return ExecutionResult.from_returncode(returncode)
