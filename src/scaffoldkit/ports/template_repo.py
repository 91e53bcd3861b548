"""Port definitions for template storage."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable

from scaffoldkit.domain.template import TemplateDescriptor
from scaffoldkit.domain.view import ViewDescriptor


class TemplateRepository(ABC):
    @property
    @abstractmethod
    def root(self) -> Path:
        """Directory that template ``location`` paths are resolved against."""

    @abstractmethod
    def template_ids(self) -> Iterable[str]:
        """List identifiers of available templates."""

    @abstractmethod
    def view_ids(self) -> Iterable[str]:
        """List identifiers of available view descriptors."""

    @abstractmethod
    def load_template(self, template_id: str) -> TemplateDescriptor:
        """Read and validate the manifest of ``template_id``."""

    @abstractmethod
    def load_view(self, view_id: str) -> ViewDescriptor:
        """Read and validate the view descriptor ``view_id``."""


__all__ = ["TemplateRepository"]
