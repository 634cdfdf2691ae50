from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Invocation:
    argv: tuple[str, ...]
    extra_env: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ExecutionResult:
    exit_code: int
    terminating_signal: int | None = None

    @property
    def wrapper_exit_status(self) -> int:
        if self.terminating_signal is not None:
            return 128 + self.terminating_signal
        return self.exit_code

    @classmethod
    def from_returncode(cls, returncode: int) -> ExecutionResult:
        # Popen reports death-by-signal as a negative return code on POSIX.
        if returncode < 0:
            return cls(exit_code=returncode, terminating_signal=-returncode)
        return cls(exit_code=returncode)
