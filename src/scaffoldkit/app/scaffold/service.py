"""Application service composing repository, registries and executor."""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Mapping, Tuple, TypeVar

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import Version

from scaffoldkit.app.materialize import ActionExecutor, ConflictPolicy, MaterializationReport
from scaffoldkit.app.registry import DescriptorRegistry
from scaffoldkit.domain.errors import (
    DuplicateDescriptor,
    IncompatibleDescriptor,
    MalformedDescriptor,
    ScaffoldError,
)
from scaffoldkit.domain.substitution import resolve_values
from scaffoldkit.domain.template import TemplateDescriptor
from scaffoldkit.domain.view import ViewDescriptor
from scaffoldkit.ports.template_repo import TemplateRepository
from scaffoldkit.settings import RuntimeSettings
from scaffoldkit.utils.telemetry import record_structured_event

T = TypeVar("T")


@dataclass(frozen=True)
class TemplateSummary:
    template_id: str
    name: str
    description: str
    action_count: int
    parameters: List[str]

    def as_dict(self) -> dict:
        return {
            "id": self.template_id,
            "name": self.name,
            "description": self.description,
            "actions": self.action_count,
            "parameters": list(self.parameters),
        }


@dataclass(frozen=True)
class SkippedDescriptor:
    """Descriptor left out of a listing because its manifest is malformed."""

    kind: str
    descriptor_id: str
    message: str

    def as_dict(self) -> dict:
        return {"kind": self.kind, "id": self.descriptor_id, "message": self.message}


class ScaffoldService:
    """High-level template and view operations used by the CLI."""

    def __init__(
        self,
        repository: TemplateRepository,
        settings: RuntimeSettings,
        *,
        extra_templates: Mapping[str, Callable[[], TemplateDescriptor]] | None = None,
        extra_views: Mapping[str, Callable[[], ViewDescriptor]] | None = None,
    ) -> None:
        self._repository = repository
        self._settings = settings
        self._templates: DescriptorRegistry[TemplateDescriptor] = DescriptorRegistry()
        self._views: DescriptorRegistry[ViewDescriptor] = DescriptorRegistry()
        self._skipped: Dict[Tuple[str, str], SkippedDescriptor] = {}
        root = repository.root
        for template_id in repository.template_ids():
            loader = _bind(repository.load_template, template_id)
            _register(self._templates, template_id, loader, f"bundle {root / template_id}")
        for view_id in repository.view_ids():
            loader = _bind(repository.load_view, view_id)
            _register(self._views, view_id, loader, f"bundle {root / view_id}")
        for template_id, factory in (extra_templates or {}).items():
            _register(self._templates, template_id, factory, "plugin template")
        for view_id, factory in (extra_views or {}).items():
            _register(self._views, view_id, factory, "plugin view")

    @property
    def templates(self) -> DescriptorRegistry[TemplateDescriptor]:
        return self._templates

    @property
    def views(self) -> DescriptorRegistry[ViewDescriptor]:
        return self._views

    @property
    def skipped(self) -> List[SkippedDescriptor]:
        """Malformed descriptors met by the listings so far."""
        return [self._skipped[key] for key in sorted(self._skipped)]

    def list_templates(self) -> List[TemplateSummary]:
        summaries = []
        for template_id in self._templates.ids():
            descriptor = self._lookup(self._templates, "template", template_id)
            if descriptor is None:
                continue
            summaries.append(
                TemplateSummary(
                    template_id=template_id,
                    name=descriptor.name,
                    description=descriptor.description,
                    action_count=len(descriptor.sources),
                    parameters=[parameter.key for parameter in descriptor.parameters],
                )
            )
        return summaries

    def describe(self, template_id: str) -> TemplateDescriptor:
        return self._templates.get(template_id)

    def list_views(self) -> List[ViewDescriptor]:
        views = []
        for view_id in self._views.ids():
            view = self._lookup(self._views, "view", view_id)
            if view is not None:
                views.append(view)
        return views

    def view(self, view_id: str) -> ViewDescriptor:
        return self._views.get(view_id)

    def generate(
        self,
        template_id: str,
        destination: Path,
        params: Mapping[str, object] | None = None,
        *,
        conflict: ConflictPolicy = ConflictPolicy.OVERWRITE,
    ) -> MaterializationReport:
        started = time.perf_counter()
        try:
            descriptor = self._templates.get(template_id)
            self._check_compatibility(template_id, descriptor)
            values = resolve_values(descriptor.parameters, params)
            executor = ActionExecutor(self._repository.root, destination, conflict=conflict)
            report = executor.run(descriptor, values)
        except ScaffoldError as exc:
            record_structured_event(
                self._settings,
                "scaffold.generate",
                payload={
                    "template": template_id,
                    "error": type(exc).__name__,
                    "message": exc.message,
                    "action_index": exc.action_index,
                },
                level="error",
                status="error",
                component="scaffold",
                duration_ms=_elapsed_ms(started),
            )
            raise
        record_structured_event(
            self._settings,
            "scaffold.generate",
            payload={"template": template_id, "files": len(report.files), "conflict": ConflictPolicy(conflict).value},
            status="ok",
            component="scaffold",
            duration_ms=_elapsed_ms(started),
        )
        return report

    def _lookup(self, registry: DescriptorRegistry[T], kind: str, descriptor_id: str) -> T | None:
        try:
            descriptor = registry.get(descriptor_id)
        except MalformedDescriptor as exc:
            self._skipped[(kind, descriptor_id)] = SkippedDescriptor(kind, descriptor_id, str(exc))
            return None
        self._skipped.pop((kind, descriptor_id), None)
        return descriptor

    def _check_compatibility(self, template_id: str, descriptor: TemplateDescriptor) -> None:
        if not descriptor.compatibility:
            return
        try:
            specifier = SpecifierSet(descriptor.compatibility)
        except InvalidSpecifier as exc:
            raise MalformedDescriptor(
                f"template {template_id} has invalid compatibility '{descriptor.compatibility}'"
            ) from exc
        current = Version(self._settings.cli_version)
        if not specifier.contains(current, prereleases=True):
            raise IncompatibleDescriptor(
                f"template {template_id} requires scaffoldkit {descriptor.compatibility}, running {current}"
            )


def _register(registry: DescriptorRegistry, descriptor_id: str, factory: Callable[[], object], origin: str) -> None:
    try:
        registry.register(descriptor_id, factory)
    except DuplicateDescriptor as exc:
        raise DuplicateDescriptor(descriptor_id, origin=origin) from exc


def _bind(loader: Callable[[str], object], descriptor_id: str) -> Callable[[], object]:
    def factory() -> object:
        return loader(descriptor_id)

    return factory


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 3)


__all__ = ["ScaffoldService", "SkippedDescriptor", "TemplateSummary"]
