"""Tests for SQL INSERT rendering."""

from datetime import datetime

import pytest

from seedsynth.core.models import GroupEntity
from seedsynth.normalizer import RecordNormalizer
from seedsynth.state import PipelineState
from seedsynth.statements import (
    StatementGenerator,
    escape_sql_string,
    render_insert,
    sql_literal,
)


class TestLiterals:
    """Tests for escape_sql_string() and sql_literal()."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("O'Brien", "O''Brien"),
            ("back\\slash", "back\\\\slash"),
            ("it's a \\'mix", "it''s a \\\\''mix"),
            (None, ""),
            (42, "42"),
        ],
    )
    def test_escape(self, value, expected: str) -> None:
        assert escape_sql_string(value) == expected

    def test_null(self) -> None:
        assert sql_literal(None) == "NULL"

    def test_booleans_are_keywords(self) -> None:
        assert sql_literal(True) == "true"
        assert sql_literal(False) == "false"

    def test_datetime(self) -> None:
        assert sql_literal(datetime(2024, 1, 15, 9, 30)) == "'2024-01-15 09:30:00'"

    def test_string_is_quoted(self) -> None:
        assert sql_literal("Ann") == "'Ann'"


def test_render_insert():
    statement = render_insert("names", {"name": "O'Brien", "approved": True})

    assert statement == "INSERT INTO names (name, approved)\nVALUES ('O''Brien', true);"


class TestStatementGenerator:
    """Tests for StatementGenerator."""

    ORDER = ["workgroups", "meetingsummaries", "names", "tags"]

    def test_header_lists_truncates_commented_out(self, state, settings) -> None:
        sql = StatementGenerator(state, settings).generate(self.ORDER)

        assert sql.startswith("-- Generated seed data\n")
        assert "-- TRUNCATE TABLE meetingsummaries CASCADE;" in sql
        assert "-- TRUNCATE TABLE workgroups CASCADE;" in sql
        assert "\nTRUNCATE" not in sql
        assert "INSERT" not in sql

    def test_tables_follow_insertion_order(self, normalizer, state, settings, alpha_record) -> None:
        normalizer.process(alpha_record, 0)

        sql = StatementGenerator(state, settings).generate(self.ORDER)

        positions = [sql.index(f"INSERT INTO {table} ") for table in self.ORDER]
        assert positions == sorted(positions)

    def test_rows_keep_first_seen_order(self, normalizer, state, settings, alpha_record) -> None:
        normalizer.process(alpha_record, 0)

        sql = StatementGenerator(state, settings).generate(self.ORDER)

        assert sql.index("VALUES ('Ann'") < sql.index("VALUES ('Bob'")

    def test_unknown_tables_are_skipped(self, normalizer, state, settings, alpha_record) -> None:
        normalizer.process(alpha_record, 0)
        generator = StatementGenerator(state, settings)

        assert generator.statements_for("audit_log") == []
        assert "audit_log" not in generator.generate(["audit_log", *self.ORDER])

    def test_event_row(self, normalizer, state, settings, alpha_record) -> None:
        alpha_record["meetingInfo"]["name"] = "Bob's sync"
        event = normalizer.process(alpha_record, 0)

        (statement,) = StatementGenerator(state, settings).render_events()

        assert statement.startswith(
            "INSERT INTO meetingsummaries (meeting_id, name, date, workgroup_id, user_id, "
            "template, summary, confirmed, created_at, updated_at)\n"
        )
        assert f"VALUES ('{event.event_id}', 'Bob''s sync', '2024-01-15 00:00:00'" in statement
        assert "'weekly'" in statement
        assert "\"name\":\"Bob''s sync\"" in statement
        assert statement.endswith(", false, '2024-01-15 00:00:00', '2024-01-15 00:00:00');")

    def test_group_preferred_template(self, state, settings) -> None:
        state.add_group(
            GroupEntity(
                group_id="g",
                display_name="Alpha",
                created_at=datetime(2024, 1, 15),
                synthetic_owner_id="u",
            )
        )
        state.add_group(
            GroupEntity(
                group_id="h",
                display_name="Beta",
                created_at=datetime(2024, 1, 15),
                synthetic_owner_id="v",
                preferred_template={"kind": "weekly"},
            )
        )

        first, second = StatementGenerator(state, settings).render_groups()

        assert first.endswith("'u', NULL);")
        assert second.endswith("""'v', '{"kind": "weekly"}');""")

    def test_name_and_tag_rows(self, normalizer, state, settings, alpha_record) -> None:
        normalizer.process(alpha_record, 0)
        generator = StatementGenerator(state, settings)

        names = generator.render_names()
        tags = generator.render_tags()

        assert len(names) == 2
        assert names[0].startswith("INSERT INTO names (name, user_id, approved, created_at)")
        assert ", true, '2024-01-15 00:00:00');" in names[0]
        assert len(tags) == 4
        assert "VALUES ('retro, maybe', 'other'," in tags[3]

    def test_output_is_deterministic(self, settings, alpha_record) -> None:
        outputs = []
        for _ in range(2):
            state = PipelineState()
            RecordNormalizer(state, settings).process(alpha_record, 0)
            outputs.append(StatementGenerator(state, settings).generate(self.ORDER))

        assert outputs[0] == outputs[1]
