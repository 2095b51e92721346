"""Custom exceptions with helpful error messages."""


class SeedSynthError(Exception):
    """Base exception for seedsynth errors.

    Raised only for fatal conditions that stop a run before any artifact is
    written. Per-record problems are accumulated as diagnostics instead.
    """

    pass


class NoTablesFoundError(SeedSynthError):
    """Schema text contains no CREATE TABLE statements."""

    def __init__(self, source: str | None = None):
        where = f" in {source}" if source else ""
        super().__init__(
            f"No CREATE TABLE statements found{where}.\n\n"
            f"Suggestions:\n"
            f"1. Check that the schema file is a SQL dump, not a migration index\n"
            f"2. Export the schema with: pg_dump --schema-only -f schema.sql\n"
            f"3. Pass the schema path explicitly: seedsynth generate data.json schema.sql"
        )


class InvalidInputError(SeedSynthError):
    """Input records are not a list of objects."""

    def __init__(self, detail: str):
        super().__init__(
            f"{detail}\n\n"
            f"Suggestions:\n"
            f"1. The input file must contain a top-level array\n"
            f"2. Each array item must be an object (one meeting summary per item)"
        )


class InputFileNotFoundError(SeedSynthError):
    """Records file does not exist."""

    def __init__(self, path: str):
        super().__init__(f"JSON input file not found: {path}")


class SchemaFileNotFoundError(SeedSynthError):
    """Schema file does not exist."""

    def __init__(self, path: str):
        super().__init__(
            f"Schema file not found: {path}\n\n"
            f"Suggestions:\n"
            f"1. Pass the schema path as the second argument\n"
            f"2. Set [input] schema_file in seedsynth.toml"
        )
