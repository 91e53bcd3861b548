"""Error taxonomy for descriptor loading and materialization."""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple


class ScaffoldError(RuntimeError):
    """Base class for every scaffolding failure.

    ``action_index`` and ``location`` identify the manifest action that failed
    when the error stems from a specific source action.
    """

    def __init__(self, message: str, *, action_index: int | None = None, location: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.action_index = action_index
        self.location = location

    def at(self, action_index: int, location: str) -> "ScaffoldError":
        """Attach the failing action to an error raised below the executor."""
        self.action_index = action_index
        self.location = location
        return self

    def __str__(self) -> str:
        if self.action_index is None:
            return self.message
        return f"action #{self.action_index} ({self.location}): {self.message}"


class MalformedDescriptor(ScaffoldError):
    """Manifest shape is invalid; raised at load time, before any action runs."""

    def __init__(self, message: str, issues: Iterable[Tuple[str, str]] = ()) -> None:
        super().__init__(message)
        self.issues: Sequence[Tuple[str, str]] = tuple(issues)


class UnresolvedParameter(ScaffoldError):
    def __init__(self, identifier: str, *, action_index: int | None = None, location: str | None = None) -> None:
        super().__init__(f"unresolved parameter '{identifier}'", action_index=action_index, location=location)
        self.identifier = identifier


class SourceNotFound(ScaffoldError):
    pass


class DestinationPathInvalid(ScaffoldError):
    pass


class DestinationExists(ScaffoldError):
    pass


class ActionFailed(ScaffoldError):
    pass


class DescriptorNotFound(ScaffoldError):
    def __init__(self, descriptor_id: str) -> None:
        super().__init__(f"descriptor '{descriptor_id}' is not registered")
        self.descriptor_id = descriptor_id


class IncompatibleDescriptor(ScaffoldError):
    pass


class DuplicateDescriptor(ScaffoldError, ValueError):
    """Two sources registered the same descriptor id."""

    def __init__(self, descriptor_id: str, origin: str = "") -> None:
        suffix = f" (from {origin})" if origin else ""
        super().__init__(f"descriptor '{descriptor_id}' is already registered{suffix}")
        self.descriptor_id = descriptor_id
        self.origin = origin


__all__ = [
    "ActionFailed",
    "DescriptorNotFound",
    "DuplicateDescriptor",
    "DestinationExists",
    "DestinationPathInvalid",
    "IncompatibleDescriptor",
    "MalformedDescriptor",
    "ScaffoldError",
    "SourceNotFound",
    "UnresolvedParameter",
]
