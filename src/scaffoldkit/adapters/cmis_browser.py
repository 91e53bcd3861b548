"""Content session speaking the CMIS browser binding over HTTP."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

import requests

from scaffoldkit.ports.collaborators import CollaboratorError

DEFAULT_TIMEOUT = 30
PAGE_SIZE = 100


@dataclass(frozen=True)
class CmisObject:
    object_id: str
    name: str
    base_type: str


class CmisFolder:
    def __init__(self, session: "CmisBrowserSession", url: str, object_id: str) -> None:
        self._session = session
        self._url = url
        self.object_id = object_id

    def get_children(self) -> List[CmisObject]:
        children: List[CmisObject] = []
        skip = 0
        while True:
            params = {
                "cmisselector": "children",
                "succinct": "true",
                "maxItems": PAGE_SIZE,
                "skipCount": skip,
            }
            if self.object_id:
                params["objectId"] = self.object_id
            payload = self._session.request_json(self._url, params)
            if not isinstance(payload, dict):
                raise CollaboratorError("cmis children response must be an object")
            objects = payload.get("objects") or []
            for entry in objects:
                children.append(_to_object(entry))
            if not payload.get("hasMoreItems") or not objects:
                break
            skip += len(objects)
        return children


class CmisBrowserSession:
    """Minimal CMIS browser-binding client: repository info and folder listing."""

    def __init__(
        self,
        service_url: str,
        *,
        repository_id: str | None = None,
        auth: Tuple[str, str] | None = None,
        session: requests.Session | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self._service_url = service_url.rstrip("/")
        self._repository_id = repository_id
        self._session = session or requests.Session()
        if auth is not None:
            self._session.auth = auth
        self._timeout = timeout

    def get_root_folder(self) -> CmisFolder:
        info = self._repository_info()
        root_url = info.get("rootFolderUrl")
        if not root_url:
            raise CollaboratorError("cmis repository info lacks 'rootFolderUrl'")
        return CmisFolder(self, str(root_url), str(info.get("rootFolderId", "")))

    def request_json(self, url: str, params: Dict[str, Any] | None = None) -> Any:
        try:
            response = self._session.get(url, params=params, timeout=self._timeout)
        except requests.RequestException as exc:
            raise CollaboratorError(f"cmis request failed: {exc}") from exc
        if response.status_code >= 400:
            raise CollaboratorError(f"cmis request failed: {response.status_code} {response.text}")
        try:
            return response.json()
        except ValueError as exc:
            raise CollaboratorError(f"cmis response is not JSON: {exc}") from exc

    def _repository_info(self) -> Dict[str, Any]:
        payload = self.request_json(self._service_url)
        if not isinstance(payload, dict) or not payload:
            raise CollaboratorError("cmis service returned no repositories")
        if self._repository_id:
            info = payload.get(self._repository_id)
            if not isinstance(info, dict):
                raise CollaboratorError(f"cmis repository '{self._repository_id}' not found")
            return info
        first = next(iter(payload.values()))
        if not isinstance(first, dict):
            raise CollaboratorError("cmis repository info must be an object")
        return first


def _to_object(entry: Any) -> CmisObject:
    wrapped = entry.get("object", entry) if isinstance(entry, dict) else {}
    properties = wrapped.get("succinctProperties") or {}
    return CmisObject(
        object_id=str(properties.get("cmis:objectId", "")),
        name=str(properties.get("cmis:name", "")),
        base_type=str(properties.get("cmis:baseTypeId", "")),
    )


__all__ = ["CmisBrowserSession", "CmisFolder", "CmisObject"]
