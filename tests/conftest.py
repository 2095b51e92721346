"""Pytest configuration and shared fixtures."""

import copy

import pytest

from seedsynth.config import Settings
from seedsynth.normalizer import RecordNormalizer
from seedsynth.state import PipelineState

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS "public"."meetingsummaries" (
    "meeting_id" "uuid" DEFAULT "gen_random_uuid"() NOT NULL,
    "name" "text" NOT NULL,
    "date" timestamp with time zone NOT NULL,
    "workgroup_id" "uuid" NOT NULL,
    "user_id" "uuid",
    "template" "text" DEFAULT 'custom'::"text",
    "summary" "jsonb",
    "confirmed" boolean DEFAULT false,
    "created_at" timestamp with time zone DEFAULT "now"(),
    "updated_at" timestamp with time zone DEFAULT "now"()
);

CREATE TABLE IF NOT EXISTS "public"."names" (
    "name" "text" NOT NULL,
    "user_id" "uuid",
    "approved" boolean DEFAULT false,
    "created_at" timestamp with time zone DEFAULT "now"()
);

CREATE TABLE IF NOT EXISTS "public"."tags" (
    "tag" "text" NOT NULL,
    "type" "text" NOT NULL,
    "user_id" "uuid",
    "created_at" timestamp with time zone DEFAULT "now"()
);

CREATE TABLE IF NOT EXISTS "public"."workgroups" (
    "workgroup_id" "uuid" NOT NULL,
    "workgroup" "text" NOT NULL,
    "created_at" timestamp with time zone DEFAULT "now"(),
    "user_id" "uuid",
    "preferred_template" "jsonb"
);

ALTER TABLE ONLY "public"."meetingsummaries"
    ADD CONSTRAINT "meetingsummaries_pkey" PRIMARY KEY ("meeting_id");

ALTER TABLE ONLY "public"."meetingsummaries"
    ADD CONSTRAINT "meetingsummaries_unique" UNIQUE ("name", "date", "workgroup_id", "user_id");

ALTER TABLE ONLY "public"."names"
    ADD CONSTRAINT "names_pkey" PRIMARY KEY ("name");

ALTER TABLE ONLY "public"."tags"
    ADD CONSTRAINT "tags_pkey" PRIMARY KEY ("tag", "type");

ALTER TABLE ONLY "public"."workgroups"
    ADD CONSTRAINT "workgroups_pkey" PRIMARY KEY ("workgroup_id");

ALTER TABLE ONLY "public"."meetingsummaries"
    ADD CONSTRAINT "meetingsummaries_workgroup_id_fkey" FOREIGN KEY ("workgroup_id") REFERENCES "public"."workgroups"("workgroup_id");
"""

ALPHA_RECORD = {
    "workgroup": "Alpha",
    "meetingInfo": {
        "name": "Standup",
        "date": "2024-01-15",
        "peoplePresent": "Ann, Bob",
    },
    "tags": {
        "topicsCovered": "planning, budget",
        "emotions": "calm",
        "other": "retro, maybe",
    },
    "type": "weekly",
}


@pytest.fixture
def schema_sql() -> str:
    """pg_dump style schema with the four seed tables."""
    return SCHEMA_SQL


@pytest.fixture
def alpha_record() -> dict:
    """A complete meeting summary record (fresh copy per test)."""
    return copy.deepcopy(ALPHA_RECORD)


@pytest.fixture
def settings() -> Settings:
    return Settings()


@pytest.fixture
def state() -> PipelineState:
    return PipelineState()


@pytest.fixture
def normalizer(state: PipelineState, settings: Settings) -> RecordNormalizer:
    return RecordNormalizer(state, settings)
