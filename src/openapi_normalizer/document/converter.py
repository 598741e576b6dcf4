"""OpenAPI document converter.

Walks a source document (a mapping as loaded from YAML/JSON) and builds the
canonical ``Document``: references inside paths, webhooks, operations,
parameters, request bodies, responses and headers are inlined, and every
embedded schema goes through the ``SchemaNormalizer``.

A reference whose target is missing drops the referencing entity. The drop
is logged, or raised as ``DanglingReferenceError`` in strict mode.
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from openapi_normalizer.config import get_settings
from openapi_normalizer.document.base import (
    HTTP_METHODS,
    Components,
    Document,
    DocumentModel,
    Header,
    MediaType,
    Operation,
    Parameter,
    PathItem,
    RequestBody,
    Response,
)
from openapi_normalizer.document.resolver import is_reference, resolve
from openapi_normalizer.errors import DanglingReferenceError, MalformedDocumentError
from openapi_normalizer.schema.normalizer import SchemaNormalizer

logger = logging.getLogger(__name__)

HEADER_REF_PREFIX = "#/components/headers/"


def _validate(model: type[DocumentModel], data: dict[str, Any]) -> DocumentModel:
    """Validate ``data`` into ``model``, dropping fields whose values are malformed."""
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        bad = {err["loc"][0] for err in exc.errors() if err["loc"]}
        logger.warning("Dropping malformed fields %s from %s", sorted(map(str, bad)), model.__name__)
        data = {k: v for k, v in data.items() if k not in bad}
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MalformedDocumentError(model.__name__, str(exc)) from exc


class DocumentConverter:
    """Converts one source OpenAPI document into a canonical ``Document``."""

    def __init__(self, document: dict[str, Any], strict: bool | None = None, max_depth: int | None = None):
        self.document = document
        components = document.get("components")
        self.components: dict[str, Any] = components if isinstance(components, dict) else {}
        self.strict = get_settings().strict_references if strict is None else strict
        self.normalizer = SchemaNormalizer(max_depth=max_depth)

    def convert(self) -> Document:
        data = {k: v for k, v in self.document.items() if k not in ("components", "paths", "webhooks")}
        if data.get("openapi") is not None:
            data["openapi"] = str(data["openapi"])
        if isinstance(self.document.get("components"), dict):
            data["components"] = self._convert_components(self.components)
        if isinstance(self.document.get("paths"), dict):
            data["paths"] = self._convert_path_map(self.document["paths"])
        if isinstance(self.document.get("webhooks"), dict):
            data["webhooks"] = self._convert_path_map(self.document["webhooks"])
        return _validate(Document, data)

    # -- references ---------------------------------------------------

    def _dangling(self, ref: str, category: str) -> None:
        if self.strict:
            raise DanglingReferenceError(ref, category)
        logger.warning("Dropping unresolved reference %s (components.%s)", ref, category)

    def _lookup(self, ref: str, category: str) -> dict[str, Any] | None:
        """Resolve ``ref`` in ``category``, following chained references once each."""
        seen = {ref}
        found = resolve(ref, category, self.components)
        while found is not None and is_reference(found) and found["$ref"] not in seen:
            seen.add(found["$ref"])
            found = resolve(found["$ref"], category, self.components)
        if found is None or is_reference(found):
            self._dangling(ref, category)
            return None
        return found

    # -- paths --------------------------------------------------------

    def _convert_path_map(self, items: dict[str, Any]) -> dict[str, PathItem]:
        result = {}
        for key, value in items.items():
            if not isinstance(value, dict):
                continue
            if is_reference(value):
                value = self._lookup(value["$ref"], "pathItems")
                if value is None:
                    continue
            result[str(key)] = self._convert_path_item(value)
        return result

    def _convert_path_item(self, item: dict[str, Any]) -> PathItem:
        inherited = item.get("parameters")
        inherited = inherited if isinstance(inherited, list) else []

        data = {k: v for k, v in item.items() if k not in HTTP_METHODS and k not in ("parameters", "$ref")}
        for method in HTTP_METHODS:
            operation = item.get(method)
            if isinstance(operation, dict):
                data[method] = self._convert_operation(operation, inherited)
        return _validate(PathItem, data)

    def _convert_operation(self, operation: dict[str, Any], inherited: list[Any]) -> Operation:
        own = operation.get("parameters")
        own = own if isinstance(own, list) else []

        data = dict(operation)
        data["parameters"] = [
            param for param in (self._convert_parameter_entry(p) for p in [*inherited, *own]) if param is not None
        ]

        data.pop("requestBody", None)
        if isinstance(operation.get("requestBody"), dict):
            body = self._convert_request_body(operation["requestBody"])
            if body is not None:
                data["requestBody"] = body

        if isinstance(operation.get("responses"), dict):
            responses = {}
            for status, value in operation["responses"].items():
                response = self._convert_response(value) if isinstance(value, dict) else None
                if response is not None:
                    responses[str(status)] = response
            data["responses"] = responses
        return _validate(Operation, data)

    # -- parameters and headers ----------------------------------------

    def _convert_parameter_entry(self, value: Any) -> Parameter | None:
        if not isinstance(value, dict):
            return None
        if is_reference(value):
            ref = value["$ref"]
            if ref.startswith(HEADER_REF_PREFIX):
                found = self._lookup(ref, "headers")
                if found is not None:
                    found = {"name": ref.split("/")[-1], "in": "header", **found}
            else:
                found = self._lookup(ref, "parameters")
            if found is None:
                return None
            value = found

        if not isinstance(value.get("name"), str) or not isinstance(value.get("in"), str):
            logger.warning("Skipping parameter without name/in: %r", value)
            return None
        return _validate(Parameter, {**value, "schema": self._schema(value.get("schema"))})

    def _convert_header(self, value: dict[str, Any]) -> Header | None:
        if is_reference(value):
            ref = value["$ref"]
            if not ref.startswith(HEADER_REF_PREFIX):
                self._dangling(ref, "headers")
                return None
            value = self._lookup(ref, "headers")
            if value is None:
                return None
        return _validate(Header, {**value, "schema": self._schema(value.get("schema"))})

    # -- bodies -------------------------------------------------------

    def _convert_request_body(self, value: dict[str, Any]) -> RequestBody | None:
        if is_reference(value):
            value = self._lookup(value["$ref"], "requestBodies")
            if value is None:
                return None
        return _validate(RequestBody, {**value, "content": self._convert_content(value.get("content"))})

    def _convert_response(self, value: dict[str, Any]) -> Response | None:
        if is_reference(value):
            value = self._lookup(value["$ref"], "responses")
            if value is None:
                return None

        data = {**value, "content": self._convert_content(value.get("content"))}
        headers = value.get("headers")
        if isinstance(headers, dict):
            converted = {}
            for name, header in headers.items():
                header = self._convert_header(header) if isinstance(header, dict) else None
                if header is not None:
                    converted[str(name)] = header
            data["headers"] = converted
        return _validate(Response, data)

    def _convert_content(self, content: Any) -> dict[str, MediaType] | None:
        if not isinstance(content, dict):
            return None
        return {
            str(media_type): _validate(MediaType, {**value, "schema": self._schema(value.get("schema"))})
            for media_type, value in content.items()
            if isinstance(value, dict)
        }

    # -- components ---------------------------------------------------

    def _convert_components(self, components: dict[str, Any]) -> Components:
        schemas = components.get("schemas")
        if isinstance(schemas, dict):
            schemas = {str(name): self.normalizer.normalize(s) for name, s in schemas.items() if s is not None}
        else:
            schemas = None
        return _validate(Components, {"schemas": schemas, "securitySchemes": components.get("securitySchemes")})

    def _schema(self, schema: Any):
        return self.normalizer.normalize(schema) if schema is not None else None


def convert_document(document: dict[str, Any], strict: bool | None = None, max_depth: int | None = None) -> Document:
    """Convert a source OpenAPI document into its canonical form."""
    return DocumentConverter(document, strict=strict, max_depth=max_depth).convert()
