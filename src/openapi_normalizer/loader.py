"""Reading and writing OpenAPI documents."""

import json
import logging
from pathlib import Path

import yaml

from openapi_normalizer.errors import DocumentLoadError

logger = logging.getLogger(__name__)


def load_document(file_path: Path) -> dict:
    """Load an OpenAPI document from a YAML or JSON file."""
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(f"Cannot read {file_path}: {e}") from e

    # YAML is a superset of JSON, so one parser covers both
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentLoadError(f"Cannot parse {file_path}: {e}") from e

    if not isinstance(data, dict):
        raise DocumentLoadError(f"{file_path} does not contain a mapping at the top level")
    if "openapi" not in data and "swagger" not in data:
        raise DocumentLoadError(f"{file_path} is not an OpenAPI document (no 'openapi' field)")
    return data


def detect_version(document: dict) -> str:
    """Detect the OpenAPI dialect of a loaded document.

    Returns: '3.1', '3.0', '2.0', or 'unknown'.
    """
    if "swagger" in document:
        return "2.0" if str(document["swagger"]).startswith("2") else "unknown"
    version = str(document.get("openapi", ""))
    if version.startswith("3.1"):
        return "3.1"
    if version.startswith("3.0"):
        return "3.0"
    logger.debug("Unrecognized openapi version %r", version)
    return "unknown"


def resolve_format(fmt: str, output: Path | None) -> str:
    """Pick 'json' or 'yaml'; 'auto' follows the output file suffix."""
    if fmt != "auto":
        return fmt
    if output is not None and output.suffix.lower() in (".yaml", ".yml"):
        return "yaml"
    return "json"


def dump_document(document: dict, fmt: str = "json") -> str:
    """Serialize a document mapping as JSON or YAML."""
    if fmt == "yaml":
        return yaml.safe_dump(document, sort_keys=False, allow_unicode=True)
    return json.dumps(document, indent=2, ensure_ascii=False) + "\n"
