"""``{{token}}`` substitution used for destination paths and generated files."""

from __future__ import annotations

import re
from typing import Dict, Iterable, List, Mapping

from .errors import UnresolvedParameter
from .template import ParameterSpec

TOKEN_PATTERN = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_.\-]*)\s*\}\}")


def find_tokens(text: str) -> List[str]:
    """Return token identifiers in order of appearance (duplicates kept)."""
    return [match.group(1) for match in TOKEN_PATTERN.finditer(text)]


def substitute(text: str, values: Mapping[str, str]) -> str:
    """Replace every token in a single pass.

    Raises :class:`UnresolvedParameter` for the first identifier without a
    value. Substituted values are not scanned again.
    """

    for identifier in find_tokens(text):
        if identifier not in values:
            raise UnresolvedParameter(identifier)
    return TOKEN_PATTERN.sub(lambda match: str(values[match.group(1)]), text)


def resolve_values(parameters: Iterable[ParameterSpec], supplied: Mapping[str, object] | None = None) -> Dict[str, str]:
    values: Dict[str, str] = {}
    for parameter in parameters:
        if parameter.default_value is not None:
            values[parameter.key] = parameter.default_value
    for key, value in (supplied or {}).items():
        values[str(key)] = "" if value is None else str(value)
    return values


__all__ = ["TOKEN_PATTERN", "find_tokens", "resolve_values", "substitute"]
