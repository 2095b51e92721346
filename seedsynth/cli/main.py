"""CLI commands for seedsynth."""

import logging
import sys
from pathlib import Path

import click

from seedsynth.config import CONFIG_FILENAME, Settings
from seedsynth.core.dependency import build_dependency_graph
from seedsynth.core.schema import SchemaExtractor
from seedsynth.exceptions import SeedSynthError
from seedsynth.identity import surrogate_id
from seedsynth.pipeline import SeedPipeline, load_records, load_schema, write_artifacts
from seedsynth.state import EXIT_FATAL

logger = logging.getLogger("seedsynth")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


def _load_settings(config_path: str | None) -> Settings:
    if config_path:
        return Settings.from_toml(config_path)
    return Settings.find_and_load()


@click.group()
@click.version_option(package_name="seedsynth")
def cli() -> None:
    """seedsynth - seed SQL from a schema dump and meeting summary records."""
    pass


@cli.command()
@click.argument("input_file", type=click.Path(dir_okay=False))
@click.argument("schema_file", required=False, type=click.Path(dir_okay=False))
@click.option("--output-dir", "-o", type=click.Path(file_okay=False), help="Output directory")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def generate(
    input_file: str,
    schema_file: str | None,
    output_dir: str | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """Generate seed.sql, mapping.json and TESTDATA.md from INPUT_FILE."""
    _configure_logging(verbose)

    try:
        settings = _load_settings(config_path)
        schema_file = schema_file or settings.input.schema_file

        logger.info(f"Processing {input_file}...")
        records = load_records(input_file)
        schema_text = load_schema(schema_file)

        result = SeedPipeline(settings).run(schema_text, records, schema_source=schema_file)

        target = Path(output_dir) if output_dir else settings.get_output_dir(input_file)
        write_artifacts(result, target, input_file, schema_file)
    except (SeedSynthError, FileNotFoundError, ValueError, OSError) as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(EXIT_FATAL)

    logger.info(f"Done! Generated files in {target}/")
    state = result.state
    if state.diagnostics:
        logger.info(
            f"Warnings: {len(state.warnings)}, Errors: {len(state.errors)} "
            f"(see {settings.output.docs_file} for details)"
        )
    sys.exit(result.exit_code)


@cli.command()
@click.argument("schema_file", type=click.Path(exists=True, dir_okay=False))
def order(schema_file: str) -> None:
    """Print the table insertion order for SCHEMA_FILE."""
    try:
        extractor = SchemaExtractor(load_schema(schema_file), source=schema_file)
    except SeedSynthError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(EXIT_FATAL)

    graph = build_dependency_graph(extractor)
    for position, table in enumerate(graph.topological_sort(), start=1):
        deps = graph.get_dependencies(table)
        suffix = f"  (after: {', '.join(deps)})" if deps else ""
        click.echo(f"{position:3d}. {table}{suffix}")

    cycles = graph.detect_cycles()
    for cycle in cycles:
        click.echo(f"cycle: {' -> '.join(cycle)}", err=True)


@cli.command()
@click.argument("context")
def uuid(context: str) -> None:
    """Print the deterministic identifier for CONTEXT (e.g. "workgroup:Alpha")."""
    click.echo(surrogate_id(context))


@cli.command()
@click.argument("path", required=False, default=CONFIG_FILENAME, type=click.Path(dir_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing file")
def init(path: str, force: bool) -> None:
    """Write a default seedsynth.toml."""
    config_path = Path(path)
    if config_path.exists() and not force:
        click.echo(f"Error: {config_path} already exists (use --force)", err=True)
        sys.exit(EXIT_FATAL)

    Settings().to_toml(config_path)
    click.echo(f"✓ Wrote {config_path}")


if __name__ == "__main__":
    cli()
