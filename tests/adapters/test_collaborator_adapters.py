from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import requests

from scaffoldkit.adapters.cmis_browser import CmisBrowserSession, CmisObject
from scaffoldkit.adapters.digest import HashlibDigestProvider
from scaffoldkit.adapters.local_content import LocalContentSession
from scaffoldkit.ports.collaborators import CollaboratorError


class DummyResponse:
    def __init__(self, status_code: int, payload: Any) -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = json.dumps(payload)

    def json(self) -> Any:
        return self._payload


class DummySession:
    def __init__(self, responses: list[DummyResponse]) -> None:
        self._responses = responses
        self.calls: list[tuple[str, dict[str, Any] | None]] = []
        self.auth: tuple[str, str] | None = None

    def get(self, url: str, params: dict[str, Any] | None = None, timeout: float | None = None) -> DummyResponse:
        self.calls.append((url, params))
        if not self._responses:
            raise AssertionError("no more responses queued")
        return self._responses.pop(0)


def _child(object_id: str, name: str, base_type: str = "cmis:document") -> dict[str, Any]:
    return {
        "object": {
            "succinctProperties": {
                "cmis:objectId": object_id,
                "cmis:name": name,
                "cmis:baseTypeId": base_type,
            }
        }
    }


REPOSITORY_INFO = {
    "repo": {
        "repositoryId": "repo",
        "rootFolderId": "root-id",
        "rootFolderUrl": "http://cms.local/browser/repo/root",
    }
}


def test_cmis_children_are_paginated() -> None:
    session = DummySession(
        [
            DummyResponse(200, REPOSITORY_INFO),
            DummyResponse(200, {"objects": [_child("1", "a.txt"), _child("2", "docs", "cmis:folder")], "hasMoreItems": True}),
            DummyResponse(200, {"objects": [_child("3", "b.txt")], "hasMoreItems": False}),
        ]
    )
    cmis = CmisBrowserSession("http://cms.local/browser/", auth=("admin", "secret"), session=session)  # type: ignore[arg-type]

    children = cmis.get_root_folder().get_children()

    assert children == [
        CmisObject("1", "a.txt", "cmis:document"),
        CmisObject("2", "docs", "cmis:folder"),
        CmisObject("3", "b.txt", "cmis:document"),
    ]
    assert session.auth == ("admin", "secret")
    assert session.calls[0] == ("http://cms.local/browser", None)
    assert session.calls[1][1]["cmisselector"] == "children"
    assert session.calls[1][1]["objectId"] == "root-id"
    assert session.calls[2][1]["skipCount"] == 2


def test_cmis_selects_named_repository() -> None:
    info = dict(REPOSITORY_INFO)
    info["other"] = {"repositoryId": "other", "rootFolderUrl": "http://cms.local/browser/other/root"}
    session = DummySession([DummyResponse(200, info), DummyResponse(200, {"objects": [], "hasMoreItems": False})])
    cmis = CmisBrowserSession("http://cms.local/browser", repository_id="other", session=session)  # type: ignore[arg-type]
    assert cmis.get_root_folder().get_children() == []
    assert session.calls[1][0] == "http://cms.local/browser/other/root"


def test_cmis_errors_are_collaborator_errors() -> None:
    session = DummySession([DummyResponse(401, {"exception": "permissionDenied"})])
    cmis = CmisBrowserSession("http://cms.local/browser", session=session)  # type: ignore[arg-type]
    with pytest.raises(CollaboratorError, match="401"):
        cmis.get_root_folder()


def test_cmis_children_page_must_be_an_object() -> None:
    session = DummySession([DummyResponse(200, REPOSITORY_INFO), DummyResponse(200, [])])
    cmis = CmisBrowserSession("http://cms.local/browser", session=session)  # type: ignore[arg-type]
    with pytest.raises(CollaboratorError, match="must be an object"):
        cmis.get_root_folder().get_children()


def test_cmis_transport_failure() -> None:
    class BrokenSession(DummySession):
        def get(self, url: str, params: dict[str, Any] | None = None, timeout: float | None = None) -> DummyResponse:
            raise requests.ConnectionError("refused")

    cmis = CmisBrowserSession("http://cms.local/browser", session=BrokenSession([]))  # type: ignore[arg-type]
    with pytest.raises(CollaboratorError, match="refused"):
        cmis.get_root_folder()


def test_local_content_session(tmp_path: Path) -> None:
    (tmp_path / "docs").mkdir()
    (tmp_path / "readme.txt").write_text("hi", encoding="utf-8")
    children = LocalContentSession(tmp_path).get_root_folder().get_children()
    assert [(child.name, child.base_type) for child in children] == [
        ("docs", "cmis:folder"),
        ("readme.txt", "cmis:document"),
    ]
    assert children[0].object_id == "/docs"

    with pytest.raises(CollaboratorError):
        LocalContentSession(tmp_path / "absent").get_root_folder()


def test_hashlib_digest_provider() -> None:
    assert HashlibDigestProvider().md5_hex("ABC") == "902fbdd2b1df0c4f70b4a5d23525e932"
