"""Schema helpers for template manifests and view descriptors."""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from typing import Any, Iterator, Tuple

from jsonschema import Draft202012Validator

from scaffoldkit.domain.errors import MalformedDescriptor

_SCHEMA_PACKAGE = "scaffoldkit.resources"
TEMPLATE_SCHEMA = "template_manifest.schema.json"
VIEW_SCHEMA = "view_descriptor.schema.json"


@lru_cache(maxsize=None)
def _load_schema(name: str) -> dict[str, Any]:
    resource = resources.files(_SCHEMA_PACKAGE) / name
    with resource.open("r", encoding="utf-8") as handle:
        return json.load(handle)


@lru_cache(maxsize=None)
def _validator(name: str) -> Draft202012Validator:
    return Draft202012Validator(_load_schema(name))


def _iter_errors(schema: str, manifest: Any) -> Iterator[Tuple[str, str]]:
    validator = _validator(schema)
    for error in sorted(validator.iter_errors(manifest), key=lambda item: [str(part) for part in item.absolute_path]):
        path = ".".join(str(item) for item in error.absolute_path)
        yield path, error.message


def iter_template_errors(manifest: Any) -> Iterator[Tuple[str, str]]:
    """Yield (path, message) pairs for schema issues in a template manifest."""
    return _iter_errors(TEMPLATE_SCHEMA, manifest)


def iter_view_errors(manifest: Any) -> Iterator[Tuple[str, str]]:
    return _iter_errors(VIEW_SCHEMA, manifest)


def validate_template_manifest(manifest: Any, *, origin: str = "template manifest") -> None:
    issues = list(iter_template_errors(manifest))
    if issues:
        raise MalformedDescriptor(_summarise(origin, issues), issues)


def validate_view_manifest(manifest: Any, *, origin: str = "view descriptor") -> None:
    issues = list(iter_view_errors(manifest))
    if issues:
        raise MalformedDescriptor(_summarise(origin, issues), issues)


def _summarise(origin: str, issues: list[Tuple[str, str]]) -> str:
    path, message = issues[0]
    where = path or "<root>"
    more = f" (+{len(issues) - 1} more)" if len(issues) > 1 else ""
    return f"{origin} is invalid at {where}: {message}{more}"


__all__ = [
    "iter_template_errors",
    "iter_view_errors",
    "validate_template_manifest",
    "validate_view_manifest",
]
