"""Normalize OpenAPI 3.1 documents into a canonical, single-type-per-node form."""

from openapi_normalizer.document.converter import DocumentConverter, convert_document
from openapi_normalizer.schema.normalizer import SchemaNormalizer, normalize_schema
from openapi_normalizer.schema.visitor import visit

__version__ = "0.1.0"
