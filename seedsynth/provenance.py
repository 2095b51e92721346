"""Field provenance tracking.

Records how each output column was derived from the input records. Each
derivation rule is recorded once, however many records exercise it.
"""

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass(frozen=True)
class ProvenanceEntry:
    """How one output column is derived from one input path."""

    source_path: str
    target_table: str
    target_column: str
    transform_kind: str
    is_synthetic: bool = False
    context_hint: Optional[str] = None

    @property
    def key(self) -> tuple[str, str, str]:
        return (self.source_path, self.target_table, self.target_column)

    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonPath": self.source_path,
            "table": self.target_table,
            "column": self.target_column,
            "transformation": self.transform_kind,
            "synthetic": self.is_synthetic,
            "context": self.context_hint,
        }


@dataclass(frozen=True)
class SyntheticFieldNote:
    """A column whose value is generated rather than read from the input."""

    table: str
    column: str
    generation_kind: str
    source_description: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "table": self.table,
            "column": self.column,
            "generation": self.generation_kind,
            "source": self.source_description,
        }


@dataclass
class ProvenanceLog:
    """Append-only, deduplicated log of mappings and synthetic fields."""

    mappings: list[ProvenanceEntry] = field(default_factory=list)
    synthetic_fields: list[SyntheticFieldNote] = field(default_factory=list)

    def add_mapping(
        self,
        source_path: str,
        target_table: str,
        target_column: str,
        transform_kind: str,
        is_synthetic: bool = False,
        context_hint: Optional[str] = None,
    ) -> bool:
        """
        Record a mapping unless (source_path, table, column) is already known.

        Returns:
            True if the entry was added
        """
        key = (source_path, target_table, target_column)
        if any(entry.key == key for entry in self.mappings):
            return False
        self.mappings.append(
            ProvenanceEntry(
                source_path=source_path,
                target_table=target_table,
                target_column=target_column,
                transform_kind=transform_kind,
                is_synthetic=is_synthetic,
                context_hint=context_hint,
            )
        )
        return True

    def add_synthetic(
        self, table: str, column: str, generation_kind: str, source_description: str
    ) -> bool:
        """
        Record a synthetic field unless (table, column) is already known.

        Returns:
            True if the note was added
        """
        if any(n.table == table and n.column == column for n in self.synthetic_fields):
            return False
        self.synthetic_fields.append(
            SyntheticFieldNote(table, column, generation_kind, source_description)
        )
        return True

    def as_dicts(self) -> tuple[list[dict[str, Any]], list[dict[str, Any]]]:
        """Mappings and synthetic fields as report-ready dicts."""
        return (
            [entry.to_dict() for entry in self.mappings],
            [note.to_dict() for note in self.synthetic_fields],
        )
