"""Executes template source actions against the filesystem."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Mapping, Tuple

from scaffoldkit.domain.errors import (
    ActionFailed,
    DestinationExists,
    DestinationPathInvalid,
    SourceNotFound,
    UnresolvedParameter,
)
from scaffoldkit.domain.substitution import substitute
from scaffoldkit.domain.template import ActionKind, SourceAction, TemplateDescriptor

_ENCODING = "utf-8"
_ERRORS = "surrogateescape"


class ConflictPolicy(str, Enum):
    OVERWRITE = "overwrite"
    FAIL = "fail"


@dataclass(frozen=True)
class PlannedAction:
    index: int
    action: SourceAction
    source: Path
    destination: Path
    content: bytes | None = None


@dataclass(frozen=True)
class MaterializedFile:
    index: int
    action: ActionKind
    location: str
    destination: Path
    size_bytes: int

    def as_dict(self) -> Dict[str, Any]:
        return {
            "index": self.index,
            "action": self.action.value,
            "location": self.location,
            "destination": self.destination.as_posix(),
            "size_bytes": self.size_bytes,
        }


@dataclass(frozen=True)
class MaterializationReport:
    template: str
    destination_root: Path
    files: Tuple[MaterializedFile, ...]

    def relative_paths(self) -> List[str]:
        return [item.destination.relative_to(self.destination_root).as_posix() for item in self.files]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "template": self.template,
            "destination": self.destination_root.as_posix(),
            "files": [item.as_dict() for item in self.files],
        }


class ActionExecutor:
    """Materializes one manifest from ``template_root`` into ``destination_root``.

    Every action is planned before the first write: destinations are
    substituted and confined to the destination root, sources are checked and
    generated bodies are rendered in memory. Execution then follows manifest
    order and stops at the first failure without rolling back.
    """

    def __init__(
        self,
        template_root: Path,
        destination_root: Path,
        *,
        conflict: ConflictPolicy = ConflictPolicy.OVERWRITE,
    ) -> None:
        self._template_root = Path(template_root).expanduser().resolve()
        self._destination_root = Path(destination_root).expanduser().resolve()
        self._conflict = ConflictPolicy(conflict)

    @property
    def destination_root(self) -> Path:
        return self._destination_root

    def plan(self, descriptor: TemplateDescriptor, values: Mapping[str, str]) -> List[PlannedAction]:
        planned: List[PlannedAction] = []
        produced: set[Path] = set()
        for index, action in enumerate(descriptor.sources):
            try:
                rename = substitute(action.rename, values)
            except UnresolvedParameter as exc:
                raise exc.at(index, action.location)
            if "\\" in rename:
                raise DestinationPathInvalid(
                    f"destination '{rename}' contains a backslash",
                    action_index=index,
                    location=action.location,
                )
            destination = _confine(self._destination_root, rename)
            if destination is None:
                raise DestinationPathInvalid(
                    f"destination '{rename}' escapes {self._destination_root}",
                    action_index=index,
                    location=action.location,
                )
            if destination.is_dir():
                raise DestinationPathInvalid(
                    f"destination {destination} is a directory",
                    action_index=index,
                    location=action.location,
                )
            if self._conflict is ConflictPolicy.FAIL and destination.exists() and destination not in produced:
                raise DestinationExists(
                    f"destination {destination} already exists",
                    action_index=index,
                    location=action.location,
                )

            source = _confine(self._template_root, action.location)
            if source is None or not source.is_file():
                raise SourceNotFound(
                    f"source '{action.location}' not found under {self._template_root}",
                    action_index=index,
                    location=action.location,
                )

            content = None
            if action.action is ActionKind.GENERATE:
                content = self._render(index, action, source, values)
            planned.append(PlannedAction(index=index, action=action, source=source, destination=destination, content=content))
            produced.add(destination)
        return planned

    def run(self, descriptor: TemplateDescriptor, values: Mapping[str, str]) -> MaterializationReport:
        planned = self.plan(descriptor, values)
        written: List[MaterializedFile] = []
        for item in planned:
            try:
                item.destination.parent.mkdir(parents=True, exist_ok=True)
                if item.content is not None:
                    item.destination.write_bytes(item.content)
                else:
                    shutil.copyfile(item.source, item.destination)
                size = item.destination.stat().st_size
            except OSError as exc:
                raise ActionFailed(
                    f"failed to write {item.destination}: {exc}",
                    action_index=item.index,
                    location=item.action.location,
                ) from exc
            written.append(
                MaterializedFile(
                    index=item.index,
                    action=item.action.action,
                    location=item.action.location,
                    destination=item.destination,
                    size_bytes=size,
                )
            )
        return MaterializationReport(
            template=descriptor.name,
            destination_root=self._destination_root,
            files=tuple(written),
        )

    def _render(self, index: int, action: SourceAction, source: Path, values: Mapping[str, str]) -> bytes:
        try:
            raw = source.read_bytes()
        except OSError as exc:
            raise ActionFailed(f"failed to read {source}: {exc}", action_index=index, location=action.location) from exc
        try:
            rendered = substitute(raw.decode(_ENCODING, _ERRORS), values)
        except UnresolvedParameter as exc:
            raise exc.at(index, action.location)
        return rendered.encode(_ENCODING, _ERRORS)


def _confine(root: Path, raw: str) -> Path | None:
    """Resolve ``raw`` below ``root``; ``None`` when it points outside."""
    if "\\" in raw or "\x00" in raw:
        return None
    relative = raw.lstrip("/")
    if not relative:
        return None
    candidate = (root / relative).resolve()
    if candidate == root or not candidate.is_relative_to(root):
        return None
    return candidate


__all__ = [
    "ActionExecutor",
    "ConflictPolicy",
    "MaterializationReport",
    "MaterializedFile",
    "PlannedAction",
]
