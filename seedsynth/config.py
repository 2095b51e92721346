"""
Configuration management for seedsynth.

Loads and validates configuration from seedsynth.toml files using Pydantic.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

CONFIG_FILENAME = "seedsynth.toml"


class SectionConfig(BaseSettings):
    """Base for config sections; environment overrides use a SEEDSYNTH_ prefix."""

    model_config = SettingsConfigDict(env_prefix="SEEDSYNTH_", extra="ignore")


class InputConfig(SectionConfig):
    """Input file configuration."""

    schema_file: str = Field(
        default="./schema.sql", description="Schema dump used when none is given"
    )


class OutputConfig(SectionConfig):
    """Generated artifact configuration."""

    seed_file: str = Field(default="seed.sql", description="INSERT statements file")
    mapping_file: str = Field(default="mapping.json", description="Provenance report")
    docs_file: str = Field(default="TESTDATA.md", description="Usage guide")
    output_dir: Optional[str] = Field(
        default=None,
        description="Directory for generated files (default: input file directory)",
    )


class TablesConfig(SectionConfig):
    """Target table names for each normalized entity kind."""

    groups: str = Field(default="workgroups", description="Group table")
    names: str = Field(default="names", description="Participant name table")
    tags: str = Field(default="tags", description="Tag table")
    events: str = Field(default="meetingsummaries", description="Meeting summary table")

    def all(self) -> list[str]:
        """Known tables, in the order their TRUNCATE statements are written."""
        return [self.events, self.groups, self.names, self.tags]


class ReportConfig(SectionConfig):
    """Report configuration."""

    max_listed: int = Field(
        default=10, description="Errors/warnings listed in the usage guide"
    )
    mapping_version: str = Field(default="1.0", description="mapping.json format version")


class NormalizeConfig(SectionConfig):
    """Record normalization configuration."""

    default_template: str = Field(
        default="custom", description="Template used when a record has no type"
    )


class Settings(SectionConfig):
    """Main configuration for seedsynth."""

    input: InputConfig = Field(default_factory=InputConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    tables: TablesConfig = Field(default_factory=TablesConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    normalize: NormalizeConfig = Field(default_factory=NormalizeConfig)

    @classmethod
    def from_toml(cls, path: Path | str) -> Settings:
        """
        Load configuration from TOML file.

        Args:
            path: Path to seedsynth.toml file

        Returns:
            Settings instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        return cls(**data)

    @classmethod
    def find_and_load(cls, start_dir: Optional[Path] = None) -> Settings:
        """
        Find and load seedsynth.toml, falling back to defaults.

        Searches from start_dir up through parent directories.

        Args:
            start_dir: Directory to start search (defaults to current directory)

        Returns:
            Settings instance (defaults if no config file exists)
        """
        if start_dir is None:
            start_dir = Path.cwd()

        current = Path(start_dir).resolve()

        while True:
            config_path = current / CONFIG_FILENAME
            if config_path.exists():
                return cls.from_toml(config_path)

            parent = current.parent
            if parent == current:
                break
            current = parent

        return cls()

    def to_toml(self, path: Path | str) -> None:
        """
        Write configuration to TOML file.

        Args:
            path: Path to write seedsynth.toml
        """
        config_path = Path(path)

        output_dir = (
            f'output_dir = "{self.output.output_dir}"\n'
            if self.output.output_dir
            else '# output_dir = "db/seed"\n'
        )

        # Build TOML content manually for better formatting
        toml_content = f"""# seedsynth configuration

[input]
schema_file = "{self.input.schema_file}"

[output]
seed_file = "{self.output.seed_file}"
mapping_file = "{self.output.mapping_file}"
docs_file = "{self.output.docs_file}"
{output_dir}
[tables]
groups = "{self.tables.groups}"
names = "{self.tables.names}"
tags = "{self.tables.tags}"
events = "{self.tables.events}"

[report]
max_listed = {self.report.max_listed}
mapping_version = "{self.report.mapping_version}"

[normalize]
default_template = "{self.normalize.default_template}"
"""

        config_path.write_text(toml_content)

    def get_output_dir(self, input_file: Path | str) -> Path:
        """Directory for generated files: configured, else the input's directory."""
        if self.output.output_dir:
            return Path(self.output.output_dir)
        return Path(input_file).resolve().parent
