"""Runtime loading of descriptor plugins."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, ItemsView, Iterable

from scaffoldkit.domain.errors import DuplicateDescriptor
from scaffoldkit.domain.template import TemplateDescriptor
from scaffoldkit.domain.view import ViewDescriptor
from scaffoldkit.plugins import DescriptorRegistrar, PluginContext, iter_entry_points
from scaffoldkit.settings import RuntimeSettings


class Registry(DescriptorRegistrar):
    def __init__(self, settings: RuntimeSettings) -> None:
        self._settings = settings
        self._templates: Dict[str, Callable[[], TemplateDescriptor]] = {}
        self._views: Dict[str, Callable[[], ViewDescriptor]] = {}

    def add_template(self, template_id: str, factory: Callable[[], TemplateDescriptor]) -> None:
        if template_id in self._templates:
            raise DuplicateDescriptor(template_id, origin="plugin template")
        self._templates[template_id] = factory

    def add_view(self, view_id: str, factory: Callable[[], ViewDescriptor]) -> None:
        if view_id in self._views:
            raise DuplicateDescriptor(view_id, origin="plugin view")
        self._views[view_id] = factory

    @property
    def settings(self) -> RuntimeSettings:
        return self._settings

    def templates(self) -> ItemsView[str, Callable[[], TemplateDescriptor]]:
        return self._templates.items()

    def views(self) -> ItemsView[str, Callable[[], ViewDescriptor]]:
        return self._views.items()


def load_plugins(
    settings: RuntimeSettings,
    entry_points: Iterable[metadata.EntryPoint] | None = None,
) -> Registry:
    registry = Registry(settings)
    context = PluginContext(settings=settings)
    for entry_point in entry_points if entry_points is not None else iter_entry_points():
        plugin = entry_point.load()
        register = getattr(plugin, "register", None)
        if callable(register):
            register(registry, context)
    return registry
