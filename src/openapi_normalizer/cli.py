"""CLI entry point for openapi-normalizer."""

import logging
from pathlib import Path

import click

from openapi_normalizer.config import get_settings
from openapi_normalizer.document.converter import convert_document
from openapi_normalizer.errors import NormalizerError
from openapi_normalizer.loader import detect_version, dump_document, load_document, resolve_format
from openapi_normalizer.schema.visitor import is_nullable, visit


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else get_settings().log_level
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _load(doc_path: Path) -> dict:
    document = load_document(doc_path)
    version = detect_version(document)
    if version not in ("3.0", "3.1"):
        click.echo(f"Warning: {doc_path} looks like OpenAPI {version}; only 3.x is supported.", err=True)
    return document


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log every dropped reference and malformed keyword.")
def main(verbose: bool):
    """OpenAPI Normalizer: rewrite OpenAPI 3.1 documents into a canonical schema dialect."""
    _configure_logging(verbose)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", default=None, type=click.Path(path_type=Path), help="Output file path (stdout if omitted).")
@click.option("--format", "fmt", default=None, type=click.Choice(["auto", "json", "yaml"]), help="Output format.")
@click.option("--max-depth", default=None, type=click.IntRange(min=1), help="Maximum schema nesting depth.")
@click.option("--strict", is_flag=True, help="Fail on unresolved references instead of dropping them.")
def convert(doc_path: Path, output: Path | None, fmt: str | None, max_depth: int | None, strict: bool):
    """Convert an OpenAPI document into its canonical form."""
    settings = get_settings()
    fmt = resolve_format(fmt or settings.output_format, output)

    try:
        document = _load(doc_path)
        result = convert_document(document, strict=strict or None, max_depth=max_depth)
    except NormalizerError as e:
        raise click.ClickException(str(e)) from e

    text = dump_document(result.to_dict(), fmt)
    if output is None:
        click.echo(text, nl=False)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    click.echo(f"Canonical document saved to {output}", err=True)


@main.command()
@click.argument("doc_path", type=click.Path(exists=True, path_type=Path))
@click.option("--nullable-only", is_flag=True, help="Only list schema nodes that accept null.")
def inspect(doc_path: Path, nullable_only: bool):
    """List every node of the normalized component schemas."""
    try:
        document = convert_document(_load(doc_path))
    except NormalizerError as e:
        raise click.ClickException(str(e)) from e

    schemas = document.components.schemas if document.components else None
    if not schemas:
        click.echo("No component schemas found.")
        return

    for name, schema in schemas.items():
        rows = []

        def collect(node, accessor):
            if not nullable_only or is_nullable(node):
                rows.append((accessor, node.kind))

        visit(schema, collect)
        for accessor, kind in rows:
            click.echo(f"{name}\t{accessor}\t{kind}")
