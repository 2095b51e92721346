"""Tests for configuration loading."""

from pathlib import Path

import pytest

from seedsynth.config import CONFIG_FILENAME, Settings


def test_defaults():
    settings = Settings()

    assert settings.input.schema_file == "./schema.sql"
    assert settings.output.seed_file == "seed.sql"
    assert settings.output.mapping_file == "mapping.json"
    assert settings.output.docs_file == "TESTDATA.md"
    assert settings.tables.all() == ["meetingsummaries", "workgroups", "names", "tags"]
    assert settings.report.max_listed == 10
    assert settings.normalize.default_template == "custom"


def test_to_toml_round_trip(tmp_path: Path):
    settings = Settings()
    settings.tables.events = "meetings"
    settings.output.output_dir = "db/seed"
    settings.report.max_listed = 5
    path = tmp_path / CONFIG_FILENAME

    settings.to_toml(path)
    loaded = Settings.from_toml(path)

    assert loaded.tables.events == "meetings"
    assert loaded.output.output_dir == "db/seed"
    assert loaded.report.max_listed == 5
    assert loaded.input.schema_file == "./schema.sql"


def test_partial_file_keeps_defaults(tmp_path: Path):
    path = tmp_path / CONFIG_FILENAME
    path.write_text('[normalize]\ndefault_template = "weekly"\n')

    settings = Settings.from_toml(path)

    assert settings.normalize.default_template == "weekly"
    assert settings.tables.groups == "workgroups"


def test_from_toml_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        Settings.from_toml(tmp_path / "nope.toml")


def test_find_and_load_searches_parents(tmp_path: Path):
    (tmp_path / CONFIG_FILENAME).write_text('[output]\nseed_file = "data.sql"\n')
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert Settings.find_and_load(nested).output.seed_file == "data.sql"


def test_find_and_load_without_file_uses_defaults(tmp_path: Path):
    assert Settings.find_and_load(tmp_path).output.seed_file == "seed.sql"


def test_output_dir(tmp_path: Path):
    settings = Settings()
    input_file = tmp_path / "data.json"

    assert settings.get_output_dir(input_file) == tmp_path.resolve()

    settings.output.output_dir = "generated"
    assert settings.get_output_dir(input_file) == Path("generated")
