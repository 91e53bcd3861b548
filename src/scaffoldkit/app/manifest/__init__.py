"""Manifest validation helpers."""

from .schema import (
    iter_template_errors,
    iter_view_errors,
    validate_template_manifest,
    validate_view_manifest,
)

__all__ = [
    "iter_template_errors",
    "iter_view_errors",
    "validate_template_manifest",
    "validate_view_manifest",
]
