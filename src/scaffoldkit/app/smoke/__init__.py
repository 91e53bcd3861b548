"""Collaborator smoke checks."""

from .service import MD5_EXPECTED, SmokeCheckResult, SmokeCheckService

__all__ = ["MD5_EXPECTED", "SmokeCheckResult", "SmokeCheckService"]
