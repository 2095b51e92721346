"""Seed generation pipeline.

Wires the pieces together in the order they must run:

1. Parse the schema and compute the table insertion order (once)
2. Normalize every record into one PipelineState (once per record, in order)
3. Render seed SQL and reports from the finished state (once)
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

import yaml

from seedsynth.config import Settings
from seedsynth.core.dependency import DependencyGraph, build_dependency_graph
from seedsynth.core.schema import SchemaExtractor
from seedsynth.exceptions import (
    InputFileNotFoundError,
    InvalidInputError,
    SchemaFileNotFoundError,
)
from seedsynth.normalizer import RecordNormalizer, validate_records
from seedsynth.report import ReportGenerator, Statistics
from seedsynth.state import PipelineState
from seedsynth.statements import StatementGenerator

logger = logging.getLogger(__name__)


@dataclass
class PipelineResult:
    """Outcome of a pipeline run."""

    table_order: list[str]
    graph: DependencyGraph
    state: PipelineState
    settings: Settings = field(default_factory=Settings)

    @property
    def statistics(self) -> Statistics:
        return Statistics.from_state(self.state)

    @property
    def exit_code(self) -> int:
        return self.state.exit_code()

    def seed_sql(self) -> str:
        return StatementGenerator(self.state, self.settings).generate(self.table_order)

    def reports(self) -> ReportGenerator:
        return ReportGenerator(self.state, self.settings)


class SeedPipeline:
    """Turns a schema dump and meeting summary records into seed artifacts."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings()

    def plan(self, schema_text: str, state: PipelineState, source: str | None = None):
        """
        Parse the schema and compute the insertion order.

        Cycles are recorded as warnings on ``state``; the order still covers
        every table.

        Raises:
            NoTablesFoundError: If the schema has no CREATE TABLE statements
        """
        extractor = SchemaExtractor(schema_text, source=source)
        graph = build_dependency_graph(extractor)
        order = graph.topological_sort(
            on_cycle=lambda table: state.add_warning(
                f"Circular dependency detected involving table: {table}"
            )
        )
        logger.info(f"Table insertion order: {' -> '.join(order)}")
        return graph, order

    def run(
        self,
        schema_text: str,
        records: Any,
        schema_source: str | None = None,
    ) -> PipelineResult:
        """
        Run the whole transform in memory.

        Args:
            schema_text: SQL schema dump
            records: Decoded input document (must be a list of objects)
            schema_source: Schema file name for error messages

        Returns:
            PipelineResult with the insertion order and accumulated state

        Raises:
            InvalidInputError: If records isn't a list of objects
            NoTablesFoundError: If the schema has no CREATE TABLE statements
        """
        state = PipelineState()
        records = validate_records(records, state)
        logger.info(f"Found {len(records)} meeting summaries")

        graph, order = self.plan(schema_text, state, source=schema_source)

        RecordNormalizer(state, self.settings).process_all(records)

        return PipelineResult(
            table_order=order, graph=graph, state=state, settings=self.settings
        )


def load_records(path: Path | str) -> Any:
    """
    Read the records file. ``.yaml``/``.yml`` files are read as YAML, anything
    else as JSON.

    Raises:
        InputFileNotFoundError: If the file doesn't exist
        InvalidInputError: If the file can't be decoded
    """
    path = Path(path)
    if not path.exists():
        raise InputFileNotFoundError(str(path))

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise InvalidInputError(f"Failed to parse {path}: {e}") from e


def load_schema(path: Path | str) -> str:
    """
    Read the schema dump.

    Raises:
        SchemaFileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise SchemaFileNotFoundError(str(path))
    return path.read_text(encoding="utf-8")


def write_artifacts(
    result: PipelineResult,
    output_dir: Path | str,
    input_file: str,
    schema_file: str,
    generated_at: Optional[datetime] = None,
) -> dict[str, Path]:
    """
    Write seed.sql, mapping.json and TESTDATA.md.

    Args:
        result: Finished pipeline run
        output_dir: Target directory (created if missing)
        input_file: Records file name recorded in the reports
        schema_file: Schema file name recorded in the reports
        generated_at: Timestamp recorded in the reports (defaults to now)

    Returns:
        Artifact kind ("seed", "mapping", "docs") -> written path
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    generated_at = generated_at or datetime.now(timezone.utc)
    names = result.settings.output
    reports = result.reports()

    artifacts = {
        "seed": (output_dir / names.seed_file, result.seed_sql()),
        "mapping": (
            output_dir / names.mapping_file,
            reports.render_mapping_json(input_file, schema_file, generated_at),
        ),
        "docs": (
            output_dir / names.docs_file,
            reports.render_usage_doc(output_dir, input_file, generated_at),
        ),
    }

    written = {}
    for kind, (path, content) in artifacts.items():
        logger.info(f"Writing {path.name}...")
        path.write_text(content, encoding="utf-8")
        written[kind] = path
    return written
