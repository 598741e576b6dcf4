"""Lookup of ``#/components/<category>/<name>`` references."""

from __future__ import annotations

import re
from typing import Any

COMPONENT_CATEGORIES = ("schemas", "parameters", "headers", "requestBodies", "responses", "pathItems")

_REFERENCE_PATTERN = re.compile(r"^#/components/([^/]+)/([^/]+)$")


def is_reference(value: Any) -> bool:
    return isinstance(value, dict) and isinstance(value.get("$ref"), str)


def parse_reference(ref: str) -> tuple[str, str] | None:
    """Split a reference into ``(category, name)``, or None if it is not a component pointer."""
    match = _REFERENCE_PATTERN.match(ref)
    if not match or match.group(1) not in COMPONENT_CATEGORIES:
        return None
    return match.group(1), match.group(2)


def resolve(ref: str, category: str, components: dict[str, Any] | None) -> dict[str, Any] | None:
    """Find the entity ``ref`` names in ``components[category]``.

    Only the last path segment of ``ref`` is used as the key. Returns None
    when there is no such entry; callers decide whether that drops the
    referencing entity.
    """
    table = (components or {}).get(category)
    if not isinstance(table, dict):
        return None
    found = table.get(ref.split("/")[-1])
    return found if isinstance(found, dict) else None
