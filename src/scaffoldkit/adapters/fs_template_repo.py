"""Filesystem-backed template repository."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List

import yaml

from scaffoldkit.app.manifest import validate_template_manifest, validate_view_manifest
from scaffoldkit.domain.errors import DescriptorNotFound, MalformedDescriptor
from scaffoldkit.domain.template import TemplateDescriptor
from scaffoldkit.domain.view import ViewDescriptor
from scaffoldkit.ports.template_repo import TemplateRepository

TEMPLATE_MANIFESTS = ("template.yaml", "template.yml", "template.json")
VIEW_MANIFESTS = ("view.yaml", "view.yml", "view.json")


class FSTemplateRepository(TemplateRepository):
    """Bundles are the subdirectories of ``base_dir``.

    A bundle holding ``template.yaml`` (or ``.yml``/``.json``) is a template
    and one holding ``view.*`` is a view; the directory name is the id.
    """

    def __init__(self, base_dir: Path) -> None:
        self._base_dir = Path(base_dir).expanduser()
        self._base_dir.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        return self._base_dir

    def template_ids(self) -> Iterable[str]:
        return self._bundle_ids(TEMPLATE_MANIFESTS)

    def view_ids(self) -> Iterable[str]:
        return self._bundle_ids(VIEW_MANIFESTS)

    def load_template(self, template_id: str) -> TemplateDescriptor:
        manifest_path = self._manifest_path(template_id, TEMPLATE_MANIFESTS)
        data = load_manifest_file(manifest_path)
        validate_template_manifest(data, origin=str(manifest_path))
        return TemplateDescriptor.from_dict(data)

    def load_view(self, view_id: str) -> ViewDescriptor:
        manifest_path = self._manifest_path(view_id, VIEW_MANIFESTS)
        data = load_manifest_file(manifest_path)
        validate_view_manifest(data, origin=str(manifest_path))
        return ViewDescriptor.from_dict(data)

    def _bundle_ids(self, names: Iterable[str]) -> List[str]:
        if not self._base_dir.exists():
            return []
        ids = []
        for entry in sorted(p for p in self._base_dir.iterdir() if p.is_dir()):
            if _find_manifest(entry, names) is not None:
                ids.append(entry.name)
        return ids

    def _manifest_path(self, bundle_id: str, names: Iterable[str]) -> Path:
        if "/" in bundle_id or "\\" in bundle_id or bundle_id in {"", ".", ".."}:
            raise DescriptorNotFound(bundle_id)
        bundle = self._base_dir / bundle_id
        manifest = _find_manifest(bundle, names) if bundle.is_dir() else None
        if manifest is None:
            raise DescriptorNotFound(bundle_id)
        return manifest


def load_manifest_file(path: Path) -> Any:
    """Parse a JSON or YAML manifest; the top level must be a mapping."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedDescriptor(f"cannot read manifest {path}: {exc}") from exc
    try:
        if path.suffix == ".json":
            data = json.loads(raw)
        else:
            data = yaml.safe_load(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise MalformedDescriptor(f"manifest {path} is not valid {path.suffix.lstrip('.')}: {exc}") from exc
    if not isinstance(data, dict):
        raise MalformedDescriptor(f"manifest {path} must contain an object")
    return data


def _find_manifest(bundle: Path, names: Iterable[str]) -> Path | None:
    for name in names:
        candidate = bundle / name
        if candidate.is_file():
            return candidate
    return None


__all__ = ["FSTemplateRepository", "load_manifest_file"]
