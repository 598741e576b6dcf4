"""Exceptions raised while loading and normalizing OpenAPI documents."""

from __future__ import annotations


class NormalizerError(Exception):
    """Base class for every error raised by openapi_normalizer."""


class RecursionLimitExceeded(NormalizerError):
    """A schema nests deeper than the configured limit (or is cyclic)."""

    def __init__(self, depth: int, limit: int, accessor: str | None = None):
        self.depth = depth
        self.limit = limit
        self.accessor = accessor
        where = f" at {accessor}" if accessor else ""
        super().__init__(f"Schema nesting depth {depth} exceeds the limit of {limit}{where}")


class DanglingReferenceError(NormalizerError):
    """A $ref points at a name missing from its components category.

    Only raised in strict mode; by default the referencing entity is dropped.
    """

    def __init__(self, ref: str, category: str):
        self.ref = ref
        self.category = category
        super().__init__(f"Unresolved reference {ref!r} (components.{category})")


class DocumentLoadError(NormalizerError):
    """The input file could not be read as an OpenAPI document."""


class MalformedDocumentError(NormalizerError):
    """A document entity stays invalid even after its malformed fields are dropped."""

    def __init__(self, entity: str, detail: str):
        self.entity = entity
        self.detail = detail
        super().__init__(f"Malformed {entity}: {detail}")
