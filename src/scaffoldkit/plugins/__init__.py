"""Descriptor plugins discovered through entry points."""

from __future__ import annotations

from dataclasses import dataclass
from importlib import metadata
from typing import Callable, Iterable, Protocol

from scaffoldkit.domain.template import TemplateDescriptor
from scaffoldkit.domain.view import ViewDescriptor
from scaffoldkit.settings import RuntimeSettings

ENTRY_POINT_GROUP = "scaffoldkit.descriptors"


@dataclass(frozen=True)
class PluginContext:
    settings: RuntimeSettings


class DescriptorRegistrar(Protocol):  # pragma: no cover
    def add_template(self, template_id: str, factory: Callable[[], TemplateDescriptor]) -> None:
        ...

    def add_view(self, view_id: str, factory: Callable[[], ViewDescriptor]) -> None:
        ...


class DescriptorPlugin(Protocol):  # pragma: no cover
    name: str

    def register(self, registrar: DescriptorRegistrar, context: PluginContext) -> None:
        ...


def iter_entry_points() -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=ENTRY_POINT_GROUP)
