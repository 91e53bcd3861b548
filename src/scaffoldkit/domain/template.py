"""Value objects describing scaffolding templates."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Mapping, Tuple

from .errors import MalformedDescriptor


class ActionKind(str, Enum):
    GENERATE = "generate"
    COPY = "copy"


@dataclass(frozen=True)
class SourceAction:
    """One step of a manifest: read ``location``, write ``rename``."""

    location: str
    action: ActionKind
    rename: str

    def __post_init__(self) -> None:
        if not isinstance(self.location, str) or not self.location.strip():
            raise MalformedDescriptor("source action requires a non-empty 'location'")
        if not isinstance(self.rename, str) or not self.rename.strip():
            raise MalformedDescriptor(f"source action {self.location} requires a non-empty 'rename'")
        try:
            kind = ActionKind(self.action)
        except ValueError as exc:
            raise MalformedDescriptor(
                f"source action {self.location} has unsupported action '{self.action}'"
            ) from exc
        object.__setattr__(self, "action", kind)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "location": self.location,
            "action": self.action.value,
            "rename": self.rename,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SourceAction":
        if not isinstance(data, Mapping):
            raise MalformedDescriptor("source action must be an object")
        return cls(
            location=data.get("location", ""),
            action=data.get("action", ""),
            rename=data.get("rename", ""),
        )


@dataclass(frozen=True)
class ParameterSpec:
    key: str
    default_value: str | None = None
    label: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.key, str) or not self.key.strip():
            raise MalformedDescriptor("parameter requires a non-empty 'key'")
        object.__setattr__(self, "key", self.key.strip())
        if self.default_value is not None:
            object.__setattr__(self, "default_value", str(self.default_value))

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"key": self.key}
        if self.default_value is not None:
            payload["defaultValue"] = self.default_value
        if self.label:
            payload["label"] = self.label
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ParameterSpec":
        if not isinstance(data, Mapping):
            raise MalformedDescriptor("parameter must be an object")
        return cls(
            key=data.get("key", ""),
            default_value=data.get("defaultValue"),
            label=str(data.get("label", "") or ""),
        )


@dataclass(frozen=True)
class TemplateDescriptor:
    """Immutable manifest of a scaffolding template."""

    name: str
    description: str
    sources: Tuple[SourceAction, ...]
    parameters: Tuple[ParameterSpec, ...] = ()
    version: str = ""
    compatibility: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise MalformedDescriptor("template requires a non-empty 'name'")
        object.__setattr__(self, "name", self.name.strip())
        object.__setattr__(self, "description", (self.description or "").strip())
        object.__setattr__(self, "sources", tuple(self.sources))
        object.__setattr__(self, "parameters", tuple(self.parameters))
        seen: set[str] = set()
        for parameter in self.parameters:
            if parameter.key in seen:
                raise MalformedDescriptor(f"template {self.name} declares parameter '{parameter.key}' twice")
            seen.add(parameter.key)

    def parameter(self, key: str) -> ParameterSpec | None:
        for parameter in self.parameters:
            if parameter.key == key:
                return parameter
        return None

    def as_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "description": self.description,
            "sources": [source.as_dict() for source in self.sources],
            "parameters": [parameter.as_dict() for parameter in self.parameters],
        }
        if self.version:
            payload["version"] = self.version
        if self.compatibility:
            payload["compatibility"] = self.compatibility
        return payload

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "TemplateDescriptor":
        if not isinstance(data, Mapping):
            raise MalformedDescriptor("template manifest must be an object")
        sources = data.get("sources")
        if not isinstance(sources, list):
            raise MalformedDescriptor("template manifest requires a 'sources' list")
        parameters = data.get("parameters") or []
        if not isinstance(parameters, list):
            raise MalformedDescriptor("template 'parameters' must be a list")
        return cls(
            name=data.get("name", ""),
            description=str(data.get("description", "") or ""),
            sources=_build(SourceAction.from_dict, sources),
            parameters=_build(ParameterSpec.from_dict, parameters),
            version=str(data.get("version", "") or ""),
            compatibility=str(data.get("compatibility", "") or ""),
        )


def _build(factory, items: Iterable[Any]) -> Tuple[Any, ...]:
    return tuple(factory(item) for item in items)


__all__ = ["ActionKind", "ParameterSpec", "SourceAction", "TemplateDescriptor"]
