"""Pipeline state - in-memory entity stores, diagnostics and provenance.

One PipelineState is created per run and passed explicitly to the normalizer
and the generators. Nothing here is module-level, so tests can build and
inspect a state in isolation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from seedsynth.core.models import EventEntity, GroupEntity, NameEntity, TagEntity
from seedsynth.identity import format_canonical_timestamp
from seedsynth.provenance import ProvenanceLog

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_PARTIAL = 2


@dataclass(frozen=True)
class Diagnostic:
    """An accumulated error or warning."""

    severity: str
    message: str
    record_id: Optional[str] = None

    def __str__(self) -> str:
        if self.record_id:
            return f"[{self.record_id}] {self.message}"
        return self.message


def event_key(event: EventEntity) -> tuple[str, str, str, str]:
    """
    Composite duplicate key for meeting summaries.

    The owner id is derived from the group's display name, so it only
    differs when one group id arrives under different names. It stays in the
    key to match existing seed files.
    """
    return (
        event.title,
        format_canonical_timestamp(event.event_date),
        event.group_id,
        event.synthetic_owner_id,
    )


@dataclass
class PipelineState:
    """
    Everything accumulated while processing records.

    Attributes:
        groups: Group id -> group, in first-seen order
        names: Display name -> name, in first-seen order
        tags: (tag, type) -> tag, in first-seen order
        events: Accepted meeting summaries, in input order
        records_seen: Number of records handed to the normalizer
        diagnostics: Errors and warnings, in the order they were raised
        provenance: Mapping and synthetic-field log
    """

    groups: dict[str, GroupEntity] = field(default_factory=dict)
    names: dict[str, NameEntity] = field(default_factory=dict)
    tags: dict[tuple[str, str], TagEntity] = field(default_factory=dict)
    events: list[EventEntity] = field(default_factory=list)
    records_seen: int = 0
    diagnostics: list[Diagnostic] = field(default_factory=list)
    provenance: ProvenanceLog = field(default_factory=ProvenanceLog)
    _event_keys: set[tuple[str, str, str, str]] = field(default_factory=set, repr=False)

    # -- diagnostics -------------------------------------------------------

    def add_error(self, message: str, record_id: Optional[str] = None) -> None:
        diagnostic = Diagnostic("error", message, record_id)
        self.diagnostics.append(diagnostic)
        logger.error(str(diagnostic))

    def add_warning(self, message: str, record_id: Optional[str] = None) -> None:
        diagnostic = Diagnostic("warning", message, record_id)
        self.diagnostics.append(diagnostic)
        logger.warning(str(diagnostic))

    @property
    def errors(self) -> list[str]:
        return [str(d) for d in self.diagnostics if d.severity == "error"]

    @property
    def warnings(self) -> list[str]:
        return [str(d) for d in self.diagnostics if d.severity == "warning"]

    def exit_code(self) -> int:
        """0 for a clean run, 2 if any error or warning was recorded."""
        return EXIT_PARTIAL if self.diagnostics else EXIT_OK

    # -- entity stores -----------------------------------------------------

    def add_group(self, group: GroupEntity, record_id: Optional[str] = None) -> GroupEntity:
        """
        Store a group; the first occurrence of a group id wins.

        Returns:
            The stored group (the earlier one if group_id was already present)
        """
        existing = self.groups.get(group.group_id)
        if existing is not None:
            self.add_warning(
                f"Duplicate workgroup_id: {group.group_id} (using first occurrence)",
                record_id,
            )
            return existing
        self.groups[group.group_id] = group
        return group

    def add_name(self, name: NameEntity) -> bool:
        """Store a name unless an identical display name exists. True if added."""
        if name.display_name in self.names:
            return False
        self.names[name.display_name] = name
        return True

    def add_tag(self, tag: TagEntity) -> bool:
        """Store a tag unless (tag, type) exists. True if added."""
        if tag.key in self.tags:
            return False
        self.tags[tag.key] = tag
        return True

    def add_event(self, event: EventEntity, record_id: Optional[str] = None) -> bool:
        """Store a meeting summary; duplicates are dropped with a warning."""
        key = event_key(event)
        if key in self._event_keys:
            self.add_warning(
                "Duplicate meeting summary (name, date, workgroup_id, user_id) - skipping",
                record_id,
            )
            return False
        self._event_keys.add(key)
        self.events.append(event)
        return True
