"""Scaffolding application service."""

from .service import ScaffoldService, SkippedDescriptor, TemplateSummary

__all__ = ["ScaffoldService", "SkippedDescriptor", "TemplateSummary"]
