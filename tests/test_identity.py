"""Tests for surrogate ids, identifier validation and timestamps."""

import hashlib
from datetime import date, datetime, timedelta, timezone

import pytest

from seedsynth.identity import (
    IdentifierValidator,
    SurrogateIdGenerator,
    ValidationResult,
    format_canonical_timestamp,
    is_well_formed_identifier,
    parse_flexible_date,
    surrogate_id,
)


class TestSurrogateId:
    """Tests for surrogate_id()."""

    def test_same_context_same_id(self) -> None:
        assert surrogate_id("workgroup:Alpha") == surrogate_id("workgroup:Alpha")

    def test_different_context_different_id(self) -> None:
        assert surrogate_id("workgroup:Alpha") != surrogate_id("workgroup:alpha")

    def test_is_sha256_prefix_grouped(self) -> None:
        digest = hashlib.sha256("workgroup:Alpha".encode("utf-8")).hexdigest()

        value = surrogate_id("workgroup:Alpha")

        assert value.replace("-", "") == digest[:32]
        assert [len(part) for part in value.split("-")] == [8, 4, 4, 4, 12]

    def test_result_is_well_formed(self) -> None:
        assert is_well_formed_identifier(surrogate_id("anything"))

    def test_unicode_context(self) -> None:
        assert is_well_formed_identifier(surrogate_id("workgroup:Café"))


class TestSurrogateIdGenerator:
    """Tests for the context strings used per id kind."""

    def test_contexts(self) -> None:
        ids = SurrogateIdGenerator()

        assert ids.group_id("Alpha") == surrogate_id("workgroup:Alpha")
        assert ids.owner_id("Ann") == surrogate_id("user:Ann:user")
        assert ids.tag_owner_id("calm", "emotions") == surrogate_id("user:calm:emotions:user")
        assert ids.event_id("Standup", "2024-01-15", "g") == surrogate_id(
            "meeting:Standup:2024-01-15:g"
        )

    def test_event_id_uses_raw_date_text(self) -> None:
        ids = SurrogateIdGenerator()

        assert ids.event_id("Standup", "2024-01-15", "g") != ids.event_id(
            "Standup", "2024-01-15T00:00:00Z", "g"
        )


class TestIdentifierValidation:
    """Tests for is_well_formed_identifier() and IdentifierValidator."""

    @pytest.mark.parametrize(
        "value",
        [
            "123e4567-e89b-12d3-a456-426614174000",
            "123E4567-E89B-12D3-A456-426614174000",
        ],
    )
    def test_well_formed(self, value: str) -> None:
        assert is_well_formed_identifier(value)

    @pytest.mark.parametrize(
        "value",
        [None, "", "not-a-uuid", "123e4567e89b12d3a456426614174000", 42,
         "123e4567-e89b-12d3-a456-42661417400g"],
    )
    def test_malformed(self, value) -> None:
        assert not is_well_formed_identifier(value)

    def test_validator_missing(self) -> None:
        result = IdentifierValidator().validate(None)

        assert result.valid is False
        assert result.error == "Identifier is missing"

    def test_validator_invalid(self) -> None:
        result = IdentifierValidator().validate("wg-1")

        assert result.valid is False
        assert "Invalid identifier format" in result.error

    def test_validator_uppercase_warns(self) -> None:
        result = IdentifierValidator().validate("123E4567-E89B-12D3-A456-426614174000")

        assert result.valid is True
        assert len(result.warnings) == 1

    def test_validation_result_warnings_default(self) -> None:
        assert ValidationResult(valid=True).warnings == []


class TestParseFlexibleDate:
    """Tests for parse_flexible_date()."""

    def test_date_only(self) -> None:
        assert parse_flexible_date("2024-01-15") == datetime(2024, 1, 15)

    def test_zulu_datetime(self) -> None:
        assert parse_flexible_date("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30)

    def test_offset_converted_to_utc(self) -> None:
        assert parse_flexible_date("2024-01-15T10:30:00+02:00") == datetime(2024, 1, 15, 8, 30)

    @pytest.mark.parametrize(
        "text",
        ["2024/01/15", "15.01.2024", "January 15, 2024", "15 Jan 2024"],
    )
    def test_fallback_formats(self, text: str) -> None:
        assert parse_flexible_date(text) == datetime(2024, 1, 15)

    @pytest.mark.parametrize("text", [None, "", "   ", "soon", "2024-13-45", 20240115])
    def test_unparseable_returns_none(self, text) -> None:
        assert parse_flexible_date(text) is None

    def test_date_objects(self) -> None:
        assert parse_flexible_date(date(2024, 1, 15)) == datetime(2024, 1, 15)


class TestFormatCanonicalTimestamp:
    """Tests for format_canonical_timestamp()."""

    def test_format(self) -> None:
        assert format_canonical_timestamp(datetime(2024, 1, 15, 8, 5, 3, 999)) == (
            "2024-01-15 08:05:03"
        )

    def test_aware_value_rendered_in_utc(self) -> None:
        value = datetime(2024, 1, 15, 10, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_canonical_timestamp(value) == "2024-01-15 08:00:00"

    def test_none_uses_now(self) -> None:
        now = datetime(2030, 6, 1, 12, 0, 0)

        assert format_canonical_timestamp(None, now=now) == "2030-06-01 12:00:00"

    def test_none_without_override_is_current_time(self) -> None:
        value = format_canonical_timestamp(None)

        assert len(value) == 19
        assert value[:4].isdigit()
