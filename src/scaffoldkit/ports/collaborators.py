"""Ports for external services the smoke checks talk to."""

from __future__ import annotations

from typing import Callable, Protocol, Sequence


class CollaboratorError(RuntimeError):
    """Raised when an external collaborator cannot answer."""


class ContentObject(Protocol):  # pragma: no cover
    object_id: str
    name: str
    base_type: str


class Folder(Protocol):  # pragma: no cover
    def get_children(self) -> Sequence[ContentObject]:
        ...


class ContentSession(Protocol):  # pragma: no cover
    def get_root_folder(self) -> Folder:
        ...


class DigestProvider(Protocol):  # pragma: no cover
    def md5_hex(self, value: str) -> str:
        ...


SessionProvider = Callable[[], ContentSession]

__all__ = [
    "CollaboratorError",
    "ContentObject",
    "ContentSession",
    "DigestProvider",
    "Folder",
    "SessionProvider",
]
