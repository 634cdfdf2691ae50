from __future__ import annotations


class GomError(RuntimeError):
    pass


class UsageError(GomError):
    pass


class CollaboratorUnavailableError(GomError):
    def __init__(self, command: str) -> None:
        super().__init__(
            f"`{command}` needs a dependency installer plugin; none is installed "
            "(expected an entry point in group `gom.collaborators`)."
        )
        self.command = command
