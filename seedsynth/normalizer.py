"""Record normalization - folds meeting summary records into table rows.

Each input record is a loosely structured meeting summary. One record yields
at most one group, any number of names and tags, and at most one meeting
summary. Problems with one record are recorded as diagnostics on the shared
PipelineState and never affect other records.

Record layout::

    {
        "workgroup": "Alpha",
        "workgroup_id": "…",                   # optional
        "type": "custom",                      # optional
        "meetingInfo": {
            "name": "Standup",
            "date": "2024-01-15",
            "peoplePresent": "Ann, Bob"
        },
        "tags": {
            "topicsCovered": "a, b",
            "emotions": "c",
            "gamesPlayed": "d",
            "other": "free text, not split"
        }
    }
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, Optional

from seedsynth.config import Settings
from seedsynth.core.models import EventEntity, GroupEntity, NameEntity, TagEntity
from seedsynth.exceptions import InvalidInputError
from seedsynth.identity import (
    IdentifierValidator,
    SurrogateIdGenerator,
    parse_flexible_date,
    utc_now,
)
from seedsynth.state import PipelineState

logger = logging.getLogger(__name__)

# Tag sub-fields split on commas
DELIMITED_TAG_FIELDS = ("topicsCovered", "emotions", "gamesPlayed")

# Tag sub-field taken as a single tag
SINGLE_TAG_FIELD = "other"


def split_delimited(value: Any) -> list[str]:
    """Split a comma separated string, trimming pieces and dropping empties."""
    if not isinstance(value, str):
        return []
    return [piece.strip() for piece in value.split(",") if piece.strip()]


def validate_records(records: Any, state: PipelineState) -> list[Mapping[str, Any]]:
    """
    Check that input is a list of objects.

    Args:
        records: Decoded input document
        state: State receiving the empty-input warning

    Returns:
        The records, unchanged

    Raises:
        InvalidInputError: If input isn't a list, or an item isn't an object
    """
    if not isinstance(records, list):
        raise InvalidInputError("JSON input must be an array")

    if not records:
        state.add_warning("JSON input array is empty")

    for index, item in enumerate(records):
        if not isinstance(item, Mapping):
            raise InvalidInputError(f"JSON array item at index {index} must be an object")

    return records


class RecordNormalizer:
    """Extracts normalized entities from meeting summary records."""

    def __init__(self, state: PipelineState, settings: Optional[Settings] = None):
        self.state = state
        self.settings = settings or Settings()
        self.tables = self.settings.tables
        self.ids = SurrogateIdGenerator()
        self.validator = IdentifierValidator()

    @property
    def provenance(self):
        return self.state.provenance

    def process_all(self, records: Iterable[Mapping[str, Any]]) -> PipelineState:
        """Process records strictly in input order."""
        for index, record in enumerate(records):
            self.process(record, index)

        logger.info(f"Extracted {len(self.state.groups)} workgroups")
        logger.info(f"Extracted {len(self.state.names)} unique names")
        logger.info(f"Extracted {len(self.state.tags)} unique tags")
        logger.info(f"Extracted {len(self.state.events)} meeting summaries")
        return self.state

    def process(self, record: Mapping[str, Any], index: int) -> Optional[EventEntity]:
        """
        Normalize one record into the shared state.

        Args:
            record: Meeting summary record
            index: Position of the record in the input

        Returns:
            The accepted meeting summary, or None if none was stored
        """
        record_id = f"record-{index}"
        self.state.records_seen += 1

        meeting_info = record.get("meetingInfo")
        if not isinstance(meeting_info, Mapping):
            meeting_info = None
        meeting_date = parse_flexible_date(meeting_info.get("date")) if meeting_info else None

        group = self.extract_group(record, meeting_date, record_id)
        if group is not None:
            self.state.add_group(group, record_id)

        self.extract_names(meeting_info, meeting_date)
        self.extract_tags(record, meeting_date)

        if group is None:
            return None

        event = self.extract_event(record, group, record_id)
        if event is None:
            return None

        if event.group_id != group.group_id:
            logger.debug(f"[{record_id}] Meeting references another workgroup, dropped")
            return None

        if not self.state.add_event(event, record_id):
            return None
        return event

    # -- groups ------------------------------------------------------------

    def extract_group(
        self,
        record: Mapping[str, Any],
        meeting_date: Optional[datetime],
        record_id: str,
    ) -> Optional[GroupEntity]:
        """
        Build the group for a record.

        A supplied well-formed workgroup_id is used as-is. Otherwise the id is
        derived from the group name; a warning is recorded only when a
        malformed id was supplied and discarded.
        """
        display_name = record.get("workgroup")
        if not display_name or not isinstance(display_name, str):
            self.state.add_error("Missing workgroup field", record_id)
            return None

        supplied_id = record.get("workgroup_id")
        result = self.validator.validate(supplied_id)
        if result.valid:
            group_id = supplied_id
            transformation = "direct"
        else:
            group_id = self.ids.group_id(display_name)
            transformation = "deterministic-uuid"
            if supplied_id is not None and supplied_id != "":
                self.state.add_warning(
                    "Invalid workgroup_id format, generated deterministic UUID", record_id
                )

        table = self.tables.groups
        self.provenance.add_mapping("workgroup", table, "workgroup", "direct")
        self.provenance.add_mapping(
            "workgroup_id", table, "workgroup_id", transformation, context_hint=display_name
        )
        self.provenance.add_synthetic(table, "created_at", "timestamp", "meeting date")
        self.provenance.add_synthetic(table, "user_id", "deterministic-uuid", "workgroup name")
        self.provenance.add_synthetic(table, "preferred_template", "default", "NULL")

        return GroupEntity(
            group_id=group_id,
            display_name=display_name,
            created_at=meeting_date or utc_now(),
            synthetic_owner_id=self.ids.owner_id(display_name),
        )

    # -- names -------------------------------------------------------------

    def extract_names(
        self, meeting_info: Optional[Mapping[str, Any]], meeting_date: Optional[datetime]
    ) -> list[NameEntity]:
        """Add participants from meetingInfo.peoplePresent. Returns new names."""
        if meeting_info is None:
            return []

        people = split_delimited(meeting_info.get("peoplePresent"))
        if not people:
            return []

        table = self.tables.names
        self.provenance.add_mapping(
            "meetingInfo.peoplePresent", table, "name", "extract-comma-separated"
        )

        added = []
        for person in people:
            if person in self.state.names:
                continue
            self.provenance.add_synthetic(table, "user_id", "deterministic-uuid", "name context")
            self.provenance.add_synthetic(table, "approved", "default", "true")
            self.provenance.add_synthetic(table, "created_at", "timestamp", "meeting date")

            name = NameEntity(
                display_name=person,
                synthetic_owner_id=self.ids.owner_id(person),
                created_at=meeting_date or utc_now(),
            )
            self.state.add_name(name)
            added.append(name)
        return added

    # -- tags --------------------------------------------------------------

    def extract_tags(
        self, record: Mapping[str, Any], meeting_date: Optional[datetime]
    ) -> list[TagEntity]:
        """Add tags from the record's tags object. Returns new tags."""
        tags = record.get("tags")
        if not isinstance(tags, Mapping):
            return []

        pairs: list[tuple[str, str]] = []
        for tag_type in DELIMITED_TAG_FIELDS:
            pairs.extend((text, tag_type) for text in split_delimited(tags.get(tag_type)))

        other = tags.get(SINGLE_TAG_FIELD)
        if isinstance(other, str) and other.strip():
            pairs.append((other.strip(), SINGLE_TAG_FIELD))

        table = self.tables.tags
        added = []
        for text, tag_type in pairs:
            self.provenance.add_mapping(
                f"tags.{tag_type}", table, "tag", "extract-comma-separated"
            )
            self.provenance.add_mapping(f"tags.{tag_type}", table, "type", "direct")

            if (text, tag_type) in self.state.tags:
                continue
            self.provenance.add_synthetic(
                table, "user_id", "deterministic-uuid", "tag + type context"
            )
            self.provenance.add_synthetic(table, "created_at", "timestamp", "meeting date")

            tag = TagEntity(
                tag_text=text,
                tag_type=tag_type,
                synthetic_owner_id=self.ids.tag_owner_id(text, tag_type),
                created_at=meeting_date or utc_now(),
            )
            self.state.add_tag(tag)
            added.append(tag)
        return added

    # -- meeting summaries -------------------------------------------------

    def extract_event(
        self, record: Mapping[str, Any], group: GroupEntity, record_id: str
    ) -> Optional[EventEntity]:
        """
        Build the meeting summary for a record.

        Requires meetingInfo with a name and a parseable date. Each missing
        piece is reported as its own error.
        """
        meeting_info = record.get("meetingInfo")
        if not isinstance(meeting_info, Mapping):
            self.state.add_error("Missing meetingInfo field", record_id)
            return None

        title = meeting_info.get("name")
        date_text = meeting_info.get("date")

        if not title:
            self.state.add_error("Missing meetingInfo.name field", record_id)
            return None

        if not date_text:
            self.state.add_error("Missing meetingInfo.date field", record_id)
            return None

        event_date = parse_flexible_date(date_text)
        if event_date is None:
            self.state.add_error(f"Invalid date format: {date_text}", record_id)
            return None

        group_id = group.group_id
        if not group_id:
            self.state.add_error("Missing workgroup_id reference", record_id)
            return None

        title = str(title)
        table = self.tables.events
        self.provenance.add_mapping("meetingInfo.name", table, "name", "direct")
        self.provenance.add_mapping("meetingInfo.date", table, "date", "parse-iso-date")
        self.provenance.add_mapping("workgroup_id", table, "workgroup_id", "direct")
        self.provenance.add_mapping("type", table, "template", "direct")
        self.provenance.add_mapping("*", table, "summary", "json-stringify")

        self.provenance.add_synthetic(
            table, "meeting_id", "deterministic-uuid", "name + date + workgroup_id"
        )
        self.provenance.add_synthetic(table, "user_id", "deterministic-uuid", "workgroup context")
        self.provenance.add_synthetic(table, "confirmed", "default", "false")
        self.provenance.add_synthetic(table, "created_at", "timestamp", "meeting date")
        self.provenance.add_synthetic(table, "updated_at", "timestamp", "meeting date")

        return EventEntity(
            event_id=self.ids.event_id(title, str(date_text), group_id),
            title=title,
            event_date=event_date,
            group_id=group_id,
            synthetic_owner_id=self.ids.owner_id(group.display_name),
            template_kind=str(record.get("type") or self.settings.normalize.default_template),
            serialized_payload=json.dumps(
                record, ensure_ascii=False, separators=(",", ":"), default=str
            ),
            created_at=event_date,
            updated_at=event_date,
        )
