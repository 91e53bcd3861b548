"""Descriptor for views contributed to an external rendering host."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping

from .errors import MalformedDescriptor


@dataclass(frozen=True)
class ViewDescriptor:
    id: str
    name: str
    factory: str
    region: str
    label: str
    link: str

    def __post_init__(self) -> None:
        for field_name in ("id", "name", "factory", "region", "label", "link"):
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise MalformedDescriptor(f"view descriptor requires a non-empty '{field_name}'")
            object.__setattr__(self, field_name, value.strip())

    def as_dict(self) -> Dict[str, Any]:
        return {item.name: getattr(self, item.name) for item in fields(self)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ViewDescriptor":
        if not isinstance(data, Mapping):
            raise MalformedDescriptor("view descriptor must be an object")
        return cls(**{item.name: data.get(item.name, "") for item in fields(cls)})


__all__ = ["ViewDescriptor"]
