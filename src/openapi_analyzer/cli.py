"""CLI entry point for openapi-analyzer."""

import logging
import os
from pathlib import Path

import click

from openapi_analyzer.analysis.analyzer import SpecAnalyzer
from openapi_analyzer.analysis.context import AnalysisContext, Root
from openapi_analyzer.analysis.models import AnalysisModel
from openapi_analyzer.config import dump_settings, load_settings
from openapi_analyzer.errors import AnalyzerError
from openapi_analyzer.parser.document import SpecDocument
from openapi_analyzer.parser.loader import load_document

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _configure_logging(verbose: bool) -> None:
    level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S")


def _parse_roots(values: tuple[str, ...]) -> tuple[Root, ...]:
    """Parse ``NAME=URI`` (or bare ``URI``) root options."""
    roots = []
    for value in values:
        name, sep, uri = value.partition("=")
        if not sep:
            name, uri = None, value
        roots.append(Root(uri=uri, name=name))
    return tuple(roots)


def _render_analysis(doc: SpecDocument, model: AnalysisModel, detailed: bool) -> None:
    summary = model.summary()

    click.echo("API Information:")
    click.echo(f"  - Title: {doc.title}")
    click.echo(f"  - Version: {doc.version or 'N/A'}")
    click.echo(f"  - Description: {doc.info.get('description') or 'N/A'}")

    click.echo("\nEndpoints:")
    click.echo(f"  - Total: {summary['endpoints']}")
    click.echo(f"  - Actions: {summary['actions']}")
    click.echo(f"  - Resources: {summary['resources']}")
    click.echo(f"  - Schemas: {summary['schemas']}")

    enabled = model.capabilities.enabled()
    if enabled:
        click.echo("\nCapabilities:")
        for name in enabled:
            click.echo(f"  + {name}")

    if model.workflows:
        click.echo("\nDetected Workflows:")
        for workflow in model.workflows:
            click.echo(f"  - {workflow.name} ({workflow.type.value})")

    if detailed:
        click.echo("\nRelationships:")
        for rel in model.relationships:
            click.echo(f"  - {rel.from_} {rel.type.value} {rel.to}")

        click.echo("\nError Patterns:")
        for error in model.error_patterns:
            marker = " (recoverable)" if error.recoverable else ""
            click.echo(f"  - {error.status_code}: {error.endpoint}{marker}")

    click.echo("\nFeatures:")
    for label, flag in (
        ("Tools", model.has_tools),
        ("Resources", model.has_resources),
        ("Prompts", model.has_prompts),
        ("Sampling Recommended", model.requires_sampling),
        ("Context Management", model.requires_context_management),
        ("Error Intelligence", model.requires_error_intelligence),
    ):
        click.echo(f"  - {label}: {'Yes' if flag else 'No'}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
def main(verbose: bool):
    """OpenAPI Analyzer: derive a structural model from API description documents."""
    _configure_logging(verbose)


@main.command()
@click.argument("spec")
@click.option("-d", "--detailed", is_flag=True, help="Show relationships and error patterns.")
@click.option("--json", "as_json", is_flag=True, help="Print the analysis model as JSON.")
@click.option("--env", "environment", default=None, help="Target environment, e.g. production.")
@click.option("--root", "roots", multiple=True, help="Context root as NAME=URI. Repeatable.")
@click.option("-c", "--config", "config_path", default=None, type=click.Path(path_type=Path), help="Analyzer settings YAML.")
def analyze(spec: str, detailed: bool, as_json: bool, environment: str | None, roots: tuple[str, ...], config_path: Path | None):
    """Analyze an API description document (file path or URL)."""
    try:
        settings = load_settings(config_path)
        doc = SpecDocument(load_document(spec))
        analyzer = SpecAnalyzer(doc, settings)
        if environment is not None or roots:
            context = AnalysisContext(environment=environment, roots=_parse_roots(roots))
            model = analyzer.analyze_with_context(context)
        else:
            model = analyzer.analyze()
    except AnalyzerError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(model.model_dump_json(indent=2, by_alias=True))
    else:
        _render_analysis(doc, model, detailed)


@main.command("init-config")
@click.option("-o", "--output", default="analyzer.yaml", type=click.Path(path_type=Path), help="Output path for the settings file.")
def init_config(output: Path):
    """Write a settings file with the default heuristic constants."""
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(dump_settings(), encoding="utf-8")
    click.echo(f"Settings file created: {output}")
