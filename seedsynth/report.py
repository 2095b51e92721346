"""Provenance report (mapping.json) and usage guide (TESTDATA.md) generation."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from seedsynth.config import Settings
from seedsynth.state import PipelineState


class Statistics(BaseModel):
    """Aggregate counts for a run."""

    model_config = ConfigDict(populate_by_name=True)

    total_records: int = Field(default=0, alias="totalRecords")
    workgroups: int = 0
    meetings: int = 0
    names: int = 0
    tags: int = 0
    errors: int = 0
    warnings: int = 0

    @classmethod
    def from_state(cls, state: PipelineState) -> Statistics:
        return cls(
            total_records=state.records_seen,
            workgroups=len(state.groups),
            meetings=len(state.events),
            names=len(state.names),
            tags=len(state.tags),
            errors=len(state.errors),
            warnings=len(state.warnings),
        )


def _iso_utc(moment: datetime) -> str:
    """ISO 8601 with millisecond precision and a Z suffix."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc).replace(tzinfo=None)
    return moment.isoformat(timespec="milliseconds") + "Z"


def truncated_listing(items: list[str], limit: int, noun: str) -> list[str]:
    """
    Markdown bullets for the first ``limit`` items plus an overflow line.

    Example:
        >>> truncated_listing(["a", "b", "c"], 2, "errors")
        ['- a', '- b', '- ... and 1 more errors']
    """
    lines = [f"- {item}" for item in items[:limit]]
    if len(items) > limit:
        lines.append(f"- ... and {len(items) - limit} more {noun}")
    return lines


class ReportGenerator:
    """Builds mapping.json and TESTDATA.md from a finished PipelineState."""

    def __init__(self, state: PipelineState, settings: Optional[Settings] = None):
        self.state = state
        self.settings = settings or Settings()

    @property
    def statistics(self) -> Statistics:
        return Statistics.from_state(self.state)

    def build_mapping(
        self,
        input_file: str,
        schema_file: str,
        generated_at: Optional[datetime] = None,
    ) -> dict[str, Any]:
        """
        Assemble the provenance document.

        Args:
            input_file: Records file as given on the command line
            schema_file: Schema file as given on the command line
            generated_at: Generation time (defaults to now)

        Returns:
            JSON-ready dict
        """
        generated_at = generated_at or datetime.now(timezone.utc)
        mappings, synthetic_fields = self.state.provenance.as_dicts()
        return {
            "version": self.settings.report.mapping_version,
            "generatedAt": _iso_utc(generated_at),
            "inputFile": input_file,
            "schemaFile": schema_file,
            "mappings": mappings,
            "syntheticFields": synthetic_fields,
            "statistics": self.statistics.model_dump(by_alias=True),
        }

    def render_mapping_json(
        self,
        input_file: str,
        schema_file: str,
        generated_at: Optional[datetime] = None,
    ) -> str:
        """mapping.json content, indented by two spaces."""
        return json.dumps(
            self.build_mapping(input_file, schema_file, generated_at),
            indent=2,
            ensure_ascii=False,
        )

    def render_usage_doc(
        self,
        output_dir: Path | str,
        input_file: str,
        generated_at: Optional[datetime] = None,
    ) -> str:
        """
        Build the TESTDATA.md usage guide.

        Args:
            output_dir: Directory seed.sql is written to
            input_file: Records file as given on the command line
            generated_at: Generation time (defaults to now)

        Returns:
            Markdown text
        """
        generated_at = generated_at or datetime.now(timezone.utc)
        stats = self.statistics
        seed_path = Path(output_dir) / self.settings.output.seed_file
        limit = self.settings.report.max_listed
        tables = self.settings.tables

        md = [
            "# Test Data Usage Guide",
            "",
            f"**Generated**: {_iso_utc(generated_at)}",
            f"**Source File**: {input_file}",
            "",
            "## Usage Instructions",
            "",
            "### Option 1: Using psql",
            "",
            "```bash",
            f"psql -h localhost -U your_user -d your_database -f {seed_path}",
            "```",
            "",
            "### Option 2: Using Supabase CLI",
            "",
            "```bash",
            "# If using Supabase local development",
            "supabase db reset",
            f"psql -h localhost -p 54322 -U postgres -d postgres -f {seed_path}",
            "```",
            "",
            "## Data Summary",
            "",
            f"- **Total Records Processed**: {stats.total_records}",
            f"- **Workgroups**: {stats.workgroups}",
            f"- **Meetings**: {stats.meetings}",
            f"- **Names**: {stats.names}",
            f"- **Tags**: {stats.tags}",
            "",
            "## Limitations and Assumptions",
            "",
            "- UUIDs are generated deterministically using SHA-256 hashing",
            "- Dates are parsed from ISO format (YYYY-MM-DD)",
            "- Duplicate records are skipped with warnings",
            "- Foreign key constraints are satisfied by INSERT ordering",
            "",
            "## Error and Warning Summary",
            "",
            f"- **Total Errors**: {stats.errors}",
            f"- **Total Warnings**: {stats.warnings}",
            "",
        ]

        if self.state.errors:
            md += ["### Errors", ""]
            md += truncated_listing(self.state.errors, limit, "errors")
            md.append("")

        if self.state.warnings:
            md += ["### Warnings", ""]
            md += truncated_listing(self.state.warnings, limit, "warnings")
            md.append("")

        md += [
            "## Regeneration Instructions",
            "",
            "To regenerate seed data:",
            "",
            "```bash",
            f"seedsynth generate {input_file}",
            "```",
            "",
            "## Common Issues and Solutions",
            "",
            "### Foreign Key Constraint Violations",
            "The tool automatically orders INSERTs to satisfy foreign keys. "
            "If you see errors:",
            f"1. Check {self.settings.output.docs_file} for error details",
            f"2. Verify that {tables.groups} are inserted before {tables.events}",
            "3. Check that all referenced workgroup_ids exist",
            "",
            "### Duplicate Key Violations",
            "The tool skips duplicates automatically. "
            f"Check {self.settings.output.docs_file} for warnings about skipped duplicates.",
            "",
        ]

        return "\n".join(md) + "\n"
