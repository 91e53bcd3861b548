"""Smoke checks against the content and digest collaborators."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from scaffoldkit.ports.collaborators import DigestProvider, SessionProvider

MD5_INPUT = "ABC"
MD5_EXPECTED = "902fbdd2b1df0c4f70b4a5d23525e932"

STATUS_PASSED = "passed"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"


@dataclass(frozen=True)
class SmokeCheckResult:
    name: str
    status: str
    detail: str = ""

    @property
    def passed(self) -> bool:
        return self.status == STATUS_PASSED

    def as_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "status": self.status, "detail": self.detail}


class SmokeCheckService:
    """Runs each check once; collaborators are injected, never looked up."""

    def __init__(
        self,
        session_provider: SessionProvider | None = None,
        digest: DigestProvider | None = None,
    ) -> None:
        self._session_provider = session_provider
        self._digest = digest

    def run(self) -> List[SmokeCheckResult]:
        return [
            self._guard("cms.children", self._session_provider is not None, self._check_children),
            self._guard("digest.md5hex", self._digest is not None, self._check_md5),
        ]

    def _check_children(self) -> SmokeCheckResult:
        session = self._session_provider()
        children = session.get_root_folder().get_children()
        if children is None:
            return SmokeCheckResult("cms.children", STATUS_FAILED, "root folder returned no children collection")
        return SmokeCheckResult("cms.children", STATUS_PASSED, f"{len(children)} children")

    def _check_md5(self) -> SmokeCheckResult:
        result = self._digest.md5_hex(MD5_INPUT)
        if result != MD5_EXPECTED:
            return SmokeCheckResult("digest.md5hex", STATUS_FAILED, f"md5Hex({MD5_INPUT!r}) returned {result}")
        return SmokeCheckResult("digest.md5hex", STATUS_PASSED, result)

    @staticmethod
    def _guard(name: str, available: bool, check: Callable[[], SmokeCheckResult]) -> SmokeCheckResult:
        if not available:
            return SmokeCheckResult(name, STATUS_SKIPPED, "collaborator not configured")
        try:
            return check()
        except Exception as exc:  # report collaborator failures as failed checks
            return SmokeCheckResult(name, STATUS_FAILED, f"{type(exc).__name__}: {exc}")


__all__ = ["MD5_EXPECTED", "SmokeCheckResult", "SmokeCheckService"]
