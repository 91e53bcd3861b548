"""Content session backed by a local directory."""

from __future__ import annotations

from pathlib import Path
from typing import List

from scaffoldkit.adapters.cmis_browser import CmisObject
from scaffoldkit.ports.collaborators import CollaboratorError


class LocalFolder:
    def __init__(self, path: Path, root: Path) -> None:
        self._path = path
        self._root = root
        self.object_id = "/" + path.relative_to(root).as_posix() if path != root else "/"

    def get_children(self) -> List[CmisObject]:
        if not self._path.is_dir():
            raise CollaboratorError(f"folder {self._path} does not exist")
        children = []
        for entry in sorted(self._path.iterdir()):
            children.append(
                CmisObject(
                    object_id="/" + entry.relative_to(self._root).as_posix(),
                    name=entry.name,
                    base_type="cmis:folder" if entry.is_dir() else "cmis:document",
                )
            )
        return children


class LocalContentSession:
    def __init__(self, root: Path) -> None:
        self._root = Path(root).expanduser().resolve()

    def get_root_folder(self) -> LocalFolder:
        if not self._root.is_dir():
            raise CollaboratorError(f"content root {self._root} does not exist")
        return LocalFolder(self._root, self._root)


__all__ = ["LocalContentSession", "LocalFolder"]
