"""Digest provider backed by :mod:`hashlib`."""

from __future__ import annotations

import hashlib


class HashlibDigestProvider:
    encoding = "utf-8"

    def md5_hex(self, value: str) -> str:
        return hashlib.md5(value.encode(self.encoding)).hexdigest()


__all__ = ["HashlibDigestProvider"]
