"""Packaged resources for scaffoldkit."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List

__all__ = ["packaged_templates_root", "sync_packaged_templates"]


def packaged_templates_root() -> Path:
    """Directory holding the bundles shipped with the package."""

    return Path(__file__).resolve().parent / "templates"


def sync_packaged_templates(target: Path) -> List[str]:
    """Copy packaged bundles into ``target``, replacing older copies.

    Bundles the user added to ``target`` are left alone.
    """

    source_base = packaged_templates_root()
    if not source_base.is_dir():
        return []
    target.mkdir(parents=True, exist_ok=True)
    synced: List[str] = []
    for bundle in sorted(p for p in source_base.iterdir() if p.is_dir()):
        destination = target / bundle.name
        if destination.exists():
            shutil.rmtree(destination)
        shutil.copytree(bundle, destination)
        synced.append(bundle.name)
    return synced
