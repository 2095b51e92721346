"""
Core data models for seedsynth.

Defines the data structures used throughout the package for representing
parsed schema information (tables, columns, constraints) and the normalized
entities that are rendered into seed statements.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional


@dataclass(frozen=True)
class TableDescriptor:
    """A CREATE TABLE block found in the schema text."""

    name: str
    raw_body: str


@dataclass
class ColumnInfo:
    """
    Column metadata recovered from a CREATE TABLE body.

    Best-effort only: column info is informational and never gates acceptance
    of generated rows.
    """

    name: str
    data_type: str
    definition: str
    is_nullable: bool = True
    has_default: bool = False


@dataclass(frozen=True)
class ForeignKeyInfo:
    """Represents a foreign key constraint."""

    column: str
    referenced_table: str
    referenced_column: str

    def is_self_reference(self, table_name: str) -> bool:
        """Check if this FK references the table that declares it."""
        return self.referenced_table == table_name


@dataclass
class ConstraintSet:
    """Constraints declared for a single table via ALTER TABLE statements."""

    primary_key_column: Optional[str] = None
    foreign_keys: list[ForeignKeyInfo] = field(default_factory=list)
    unique_groups: list[list[str]] = field(default_factory=list)

    @property
    def referenced_tables(self) -> list[str]:
        """Referenced table names in FK declaration order, without repeats."""
        seen: list[str] = []
        for fk in self.foreign_keys:
            if fk.referenced_table not in seen:
                seen.append(fk.referenced_table)
        return seen


@dataclass
class GroupEntity:
    """A normalized group row (one per distinct group id)."""

    group_id: str
    display_name: str
    created_at: datetime
    synthetic_owner_id: str
    preferred_template: Optional[Any] = None


@dataclass
class NameEntity:
    """A participant name, deduplicated by exact display name."""

    display_name: str
    synthetic_owner_id: str
    created_at: datetime
    approved: bool = True


@dataclass
class TagEntity:
    """A tag of a given type, deduplicated by (tag_text, tag_type)."""

    tag_text: str
    tag_type: str
    synthetic_owner_id: str
    created_at: datetime

    @property
    def key(self) -> tuple[str, str]:
        return (self.tag_text, self.tag_type)


@dataclass
class EventEntity:
    """
    A meeting summary row.

    Attributes:
        event_id: Surrogate id derived from title, raw date text and group id
        title: Meeting name
        event_date: Parsed meeting date
        group_id: Id of the owning group (must match the group it came from)
        synthetic_owner_id: Id derived from the owning group's display name
        template_kind: Template name from the record (defaults to "custom")
        serialized_payload: JSON serialization of the whole source record
        confirmed: Always False for generated rows
    """

    event_id: str
    title: str
    event_date: datetime
    group_id: str
    synthetic_owner_id: str
    template_kind: str
    serialized_payload: str
    created_at: datetime
    updated_at: datetime
    confirmed: bool = False
