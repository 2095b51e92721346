"""Render normalized entities as SQL INSERT statements."""

import json
import logging
from datetime import datetime
from typing import Any, Callable, Optional

from seedsynth.config import Settings
from seedsynth.identity import format_canonical_timestamp
from seedsynth.state import PipelineState

logger = logging.getLogger(__name__)


def escape_sql_string(value: Any) -> str:
    """
    Escape a value for use inside a single-quoted SQL literal.

    Backslashes and single quotes are doubled. None becomes an empty string.

    Example:
        >>> escape_sql_string("O'Brien")
        "O''Brien"
    """
    if value is None:
        return ""
    return str(value).replace("\\", "\\\\").replace("'", "''")


def sql_literal(value: Any) -> str:
    """
    Render a Python value as a SQL literal.

    Booleans and None render as keywords; datetimes use the canonical
    timestamp format; everything else is a quoted, escaped string.
    """
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, datetime):
        return f"'{format_canonical_timestamp(value)}'"
    return f"'{escape_sql_string(value)}'"


def render_insert(table: str, values: dict[str, Any]) -> str:
    """Build a two-line INSERT statement for one row."""
    columns = ", ".join(values)
    literals = ", ".join(sql_literal(v) for v in values.values())
    return f"INSERT INTO {table} ({columns})\nVALUES ({literals});"


class StatementGenerator:
    """Renders the entity stores of a PipelineState into seed SQL."""

    def __init__(self, state: PipelineState, settings: Optional[Settings] = None):
        self.state = state
        self.tables = (settings or Settings()).tables
        self._renderers: dict[str, Callable[[], list[str]]] = {
            self.tables.groups: self.render_groups,
            self.tables.names: self.render_names,
            self.tables.tags: self.render_tags,
            self.tables.events: self.render_events,
        }

    def render_groups(self) -> list[str]:
        statements = []
        for group in self.state.groups.values():
            template = group.preferred_template
            statements.append(
                render_insert(
                    self.tables.groups,
                    {
                        "workgroup_id": group.group_id,
                        "workgroup": group.display_name,
                        "created_at": group.created_at,
                        "user_id": group.synthetic_owner_id,
                        "preferred_template": json.dumps(template) if template else None,
                    },
                )
            )
        return statements

    def render_names(self) -> list[str]:
        return [
            render_insert(
                self.tables.names,
                {
                    "name": name.display_name,
                    "user_id": name.synthetic_owner_id,
                    "approved": name.approved,
                    "created_at": name.created_at,
                },
            )
            for name in self.state.names.values()
        ]

    def render_tags(self) -> list[str]:
        return [
            render_insert(
                self.tables.tags,
                {
                    "tag": tag.tag_text,
                    "type": tag.tag_type,
                    "user_id": tag.synthetic_owner_id,
                    "created_at": tag.created_at,
                },
            )
            for tag in self.state.tags.values()
        ]

    def render_events(self) -> list[str]:
        return [
            render_insert(
                self.tables.events,
                {
                    "meeting_id": event.event_id,
                    "name": event.title,
                    "date": event.event_date,
                    "workgroup_id": event.group_id,
                    "user_id": event.synthetic_owner_id,
                    "template": event.template_kind,
                    "summary": event.serialized_payload,
                    "confirmed": event.confirmed,
                    "created_at": event.created_at,
                    "updated_at": event.updated_at,
                },
            )
            for event in self.state.events
        ]

    def statements_for(self, table: str) -> list[str]:
        """INSERT statements for one table, or [] if no entity kind maps to it."""
        renderer = self._renderers.get(table)
        return renderer() if renderer else []

    def generate(self, table_order: list[str]) -> str:
        """
        Build the seed SQL file.

        Tables are emitted in ``table_order``; rows within a table keep the
        order they were first seen in. Tables with no matching entity kind
        are skipped.

        Args:
            table_order: Dependency-ordered table names

        Returns:
            seed.sql content
        """
        lines = [
            "-- Generated seed data",
            "-- TRUNCATE statements (commented out by default)",
            "-- Uncomment to clear existing data before inserting:",
        ]
        lines.extend(f"-- TRUNCATE TABLE {table} CASCADE;" for table in self.tables.all())
        sql = "\n".join(lines) + "\n\n"

        for table in table_order:
            statements = self.statements_for(table)
            if statements:
                logger.debug(f"Writing {len(statements)} rows for '{table}'")
            for statement in statements:
                sql += statement + "\n\n"

        return sql
