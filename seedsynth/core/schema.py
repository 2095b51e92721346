"""Extract tables and constraints from SQL schema dumps.

This module recovers just enough structure from a schema dump to order seed
inserts: table names, column blocks, primary keys, foreign keys and UNIQUE
groups. It is pattern based, not a SQL grammar.

Coverage:
- ``CREATE TABLE [IF NOT EXISTS] [public.]name ( ... );``
- ``ALTER TABLE [ONLY] [public.]name ADD CONSTRAINT c PRIMARY KEY (col)``
- ``ALTER TABLE [ONLY] [public.]name ADD CONSTRAINT c FOREIGN KEY (col)
  REFERENCES [public.]other(col)``
- ``ALTER TABLE [ONLY] [public.]name ADD CONSTRAINT c UNIQUE (a, b)``

Not covered:
- Inline ``REFERENCES`` / ``PRIMARY KEY`` clauses inside CREATE TABLE
- Schema qualifiers other than ``public``
- Composite primary / foreign keys (only single columns are recognised)
"""

import logging
import re

from seedsynth.core.models import ColumnInfo, ConstraintSet, ForeignKeyInfo, TableDescriptor
from seedsynth.exceptions import NoTablesFoundError

logger = logging.getLogger(__name__)

# Optional quoted "public". qualifier in front of a table name
_QUALIFIER = r"""(?:["']?public["']?\.)?"""

CREATE_TABLE_PATTERN = re.compile(
    r"CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?"
    + _QUALIFIER
    + r"""["']?(\w+)["']?\s*\(([\s\S]*?)\);""",
    re.IGNORECASE,
)

ALTER_TABLE_PATTERN = re.compile(
    r"ALTER\s+TABLE\s+(?:ONLY\s+)?" + _QUALIFIER + r"""["']?(\w+)["']?([^;]*);""",
    re.IGNORECASE,
)

PRIMARY_KEY_PATTERN = re.compile(
    r"""ADD\s+CONSTRAINT\s+["']?\w+["']?\s+PRIMARY\s+KEY\s*\(\s*["']?(\w+)["']?\s*\)""",
    re.IGNORECASE,
)

FOREIGN_KEY_PATTERN = re.compile(
    r"""ADD\s+CONSTRAINT\s+["']?\w+["']?\s+FOREIGN\s+KEY\s*\(\s*["']?(\w+)["']?\s*\)\s*"""
    r"REFERENCES\s+" + _QUALIFIER + r"""["']?(\w+)["']?\s*\(\s*["']?(\w+)["']?\s*\)""",
    re.IGNORECASE,
)

UNIQUE_PATTERN = re.compile(
    r"""ADD\s+CONSTRAINT\s+["']?\w+["']?\s+UNIQUE\s*\(([^)]+)\)""",
    re.IGNORECASE,
)

# Column definitions never start with these keywords
_TABLE_CONSTRAINT_KEYWORDS = ("constraint", "primary", "foreign", "unique", "check", "exclude")


def parse_create_tables(schema_text: str) -> list[TableDescriptor]:
    """
    Find all CREATE TABLE blocks in schema text.

    Args:
        schema_text: SQL schema dump

    Returns:
        Table descriptors in declaration order

    Example:
        >>> parse_create_tables('CREATE TABLE "public"."tags" ("tag" text);')
        [TableDescriptor(name='tags', raw_body='"tag" text')]
    """
    return [
        TableDescriptor(name=match.group(1), raw_body=match.group(2))
        for match in CREATE_TABLE_PATTERN.finditer(schema_text)
    ]


def _split_top_level(body: str) -> list[str]:
    """Split a column block on commas that are not inside parentheses."""
    parts = []
    depth = 0
    current = []
    for char in body:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(0, depth - 1)
        elif char == "," and depth == 0:
            parts.append("".join(current))
            current = []
            continue
        current.append(char)
    parts.append("".join(current))
    return [part.strip() for part in parts if part.strip()]


def extract_columns(raw_body: str) -> list[ColumnInfo]:
    """
    Extract column names and declared types from a CREATE TABLE body.

    Args:
        raw_body: Text between the table's opening and closing parentheses

    Returns:
        Column metadata (best effort; table-level constraints are skipped)
    """
    columns = []
    for part in _split_top_level(raw_body):
        match = re.match(r"""["']?(\w+)["']?\s+(.+)$""", part, re.DOTALL)
        if not match:
            continue

        name = match.group(1)
        if name.lower() in _TABLE_CONSTRAINT_KEYWORDS:
            continue

        definition = " ".join(match.group(2).split())
        data_type = definition.split(" ")[0]
        if "(" in data_type:
            data_type = data_type[: data_type.index("(")]

        columns.append(
            ColumnInfo(
                name=name,
                data_type=data_type.strip('"').lower(),
                definition=definition,
                is_nullable=not re.search(r"\bNOT\s+NULL\b", definition, re.IGNORECASE),
                has_default=bool(re.search(r"\bDEFAULT\b", definition, re.IGNORECASE)),
            )
        )
    return columns


def extract_constraints(schema_text: str, table_name: str) -> ConstraintSet:
    """
    Collect PRIMARY KEY, FOREIGN KEY and UNIQUE constraints for one table.

    Only ``ALTER TABLE ... ADD CONSTRAINT`` statements are considered. Clauses
    that don't match a known shape are skipped.

    Args:
        schema_text: SQL schema dump
        table_name: Table whose constraints to collect

    Returns:
        ConstraintSet for the table (empty if nothing matched)
    """
    constraints = ConstraintSet()

    for statement in ALTER_TABLE_PATTERN.finditer(schema_text):
        if statement.group(1) != table_name:
            continue
        clause = statement.group(2)

        pk_match = PRIMARY_KEY_PATTERN.search(clause)
        if pk_match:
            if constraints.primary_key_column is None:
                constraints.primary_key_column = pk_match.group(1)
            continue

        fk_match = FOREIGN_KEY_PATTERN.search(clause)
        if fk_match:
            constraints.foreign_keys.append(
                ForeignKeyInfo(
                    column=fk_match.group(1),
                    referenced_table=fk_match.group(2),
                    referenced_column=fk_match.group(3),
                )
            )
            continue

        unique_match = UNIQUE_PATTERN.search(clause)
        if unique_match:
            columns = [c.strip().strip("\"'") for c in unique_match.group(1).split(",")]
            columns = [c for c in columns if c]
            if columns:
                constraints.unique_groups.append(columns)
            continue

        if "ADD CONSTRAINT" in clause.upper():
            logger.debug(f"Skipping unrecognised constraint on '{table_name}': {clause.strip()}")

    return constraints


class SchemaExtractor:
    """Parsed view of a schema dump with per-table caching."""

    def __init__(self, schema_text: str, source: str | None = None):
        """
        Parse schema text.

        Args:
            schema_text: SQL schema dump
            source: Optional file name, used in error messages

        Raises:
            NoTablesFoundError: If the text has no CREATE TABLE statements
        """
        self.schema_text = schema_text
        self.tables = parse_create_tables(schema_text)
        if not self.tables:
            raise NoTablesFoundError(source)

        self._by_name = {table.name: table for table in self.tables}
        self._constraint_cache: dict[str, ConstraintSet] = {}
        logger.info(f"Found {len(self.tables)} tables in schema")

    @property
    def table_names(self) -> list[str]:
        """Table names in declaration order."""
        return [table.name for table in self.tables]

    def has_table(self, name: str) -> bool:
        return name in self._by_name

    def get_constraints(self, table_name: str) -> ConstraintSet:
        """Get constraints for a table (cached)."""
        if table_name not in self._constraint_cache:
            self._constraint_cache[table_name] = extract_constraints(
                self.schema_text, table_name
            )
        return self._constraint_cache[table_name]

    def get_columns(self, table_name: str) -> list[ColumnInfo]:
        """Get best-effort column info for a table."""
        return extract_columns(self._by_name[table_name].raw_body)
