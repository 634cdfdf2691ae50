from __future__ import annotations

from collections.abc import Sequence
from importlib.metadata import entry_points
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from gom.errors import CollaboratorUnavailableError, GomError

if TYPE_CHECKING:
    from gom.config import WrapperConfig

COLLABORATORS_ENTRY_POINT_GROUP = "gom.collaborators"


@runtime_checkable
class DependencyCollaborators(Protocol):
    """
    Everything that reads the Gomfile or writes into the dependency directory.

    Implementations receive the resolved `WrapperConfig`; `config.directory.source_subpath`
    is where package sources must be materialized and `config.directory.project_mode` says
    whether a `vendor/src` layout may be migrated.
    """

    def install(self, args: Sequence[str], config: WrapperConfig) -> None: ...

    def update(self, config: WrapperConfig) -> None: ...

    def generate_gomfile(self, config: WrapperConfig) -> None: ...

    def generate_lock(self, config: WrapperConfig) -> None: ...


class UnavailableCollaborators:
    def install(self, args: Sequence[str], config: WrapperConfig) -> None:  # noqa: ARG002
        raise CollaboratorUnavailableError("install")

    def update(self, config: WrapperConfig) -> None:  # noqa: ARG002
        raise CollaboratorUnavailableError("update")

    def generate_gomfile(self, config: WrapperConfig) -> None:  # noqa: ARG002
        raise CollaboratorUnavailableError("gen gomfile")

    def generate_lock(self, config: WrapperConfig) -> None:  # noqa: ARG002
        raise CollaboratorUnavailableError("lock")


def load_collaborators() -> DependencyCollaborators:
    candidates = sorted(entry_points(group=COLLABORATORS_ENTRY_POINT_GROUP), key=lambda ep: ep.name)
    if not candidates:
        return UnavailableCollaborators()

    ep = candidates[0]
    factory = ep.load()
    collaborators = factory() if callable(factory) else factory
    if not isinstance(collaborators, DependencyCollaborators):
        raise GomError(
            f"Entry point `{ep.name}` in group `{COLLABORATORS_ENTRY_POINT_GROUP}` did not "
            "provide install/update/generate_gomfile/generate_lock."
        )
    return collaborators
