"""Canonical OpenAPI document models.

The converter builds these from a source document. Every reference they
could hold has already been inlined, and every embedded schema is a
canonical schema model. Fields not modelled here (``info``, ``servers``,
``operationId``, ``examples``, ...) are carried over as extra fields.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from openapi_normalizer.schema.base import Schema

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")


class DocumentModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Parameter(DocumentModel):
    """A single operation parameter (path, query, header or cookie)."""

    name: str
    location: str = Field(alias="in")  # path / query / header / cookie
    schema_: Schema | None = Field(default=None, alias="schema")
    required: bool | None = None
    description: str | None = None


class Header(DocumentModel):
    schema_: Schema | None = Field(default=None, alias="schema")
    required: bool | None = None
    description: str | None = None


class MediaType(DocumentModel):
    schema_: Schema | None = Field(default=None, alias="schema")


class RequestBody(DocumentModel):
    description: str | None = None
    content: dict[str, MediaType] | None = None
    required: bool | None = None


class Response(DocumentModel):
    description: str | None = None
    content: dict[str, MediaType] | None = None
    headers: dict[str, Header] | None = None


class Operation(DocumentModel):
    parameters: list[Parameter] | None = None
    request_body: RequestBody | None = Field(default=None, alias="requestBody")
    responses: dict[str, Response] | None = None


class PathItem(DocumentModel):
    """Operations of one path; path-level parameters are already folded into each."""

    summary: str | None = None
    description: str | None = None
    get: Operation | None = None
    put: Operation | None = None
    post: Operation | None = None
    delete: Operation | None = None
    options: Operation | None = None
    head: Operation | None = None
    patch: Operation | None = None
    trace: Operation | None = None

    def operations(self) -> dict[str, Operation]:
        """The populated method slots, in declaration order."""
        return {m: getattr(self, m) for m in HTTP_METHODS if getattr(self, m) is not None}


class Components(DocumentModel):
    schemas: dict[str, Schema] | None = None
    security_schemes: dict[str, Any] | None = Field(default=None, alias="securitySchemes")


class Document(DocumentModel):
    openapi: str | None = None
    components: Components | None = None
    paths: dict[str, PathItem] | None = None
    webhooks: dict[str, PathItem] | None = None
