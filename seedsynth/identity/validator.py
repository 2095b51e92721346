"""Identifier validation."""

import re
from dataclasses import dataclass
from typing import Any

IDENTIFIER_REGEX = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$",
    re.IGNORECASE,
)


def is_well_formed_identifier(value: Any) -> bool:
    """Check that value is a string in 8-4-4-4-12 hexadecimal form."""
    if not isinstance(value, str):
        return False
    return bool(IDENTIFIER_REGEX.match(value))


@dataclass
class ValidationResult:
    """Identifier validation result."""

    valid: bool
    error: str | None = None
    warnings: list[str] | None = None

    def __post_init__(self) -> None:
        """Initialize warnings list."""
        if self.warnings is None:
            self.warnings = []


class IdentifierValidator:
    """Decides whether a supplied identifier can be used as-is."""

    def validate(self, value: Any) -> ValidationResult:
        """Validate a supplied identifier.

        Args:
            value: Identifier from the input record (any JSON value)

        Returns:
            Validation result
        """
        if value is None or value == "":
            return ValidationResult(valid=False, error="Identifier is missing")

        if not is_well_formed_identifier(value):
            return ValidationResult(
                valid=False, error=f"Invalid identifier format: {value}"
            )

        result = ValidationResult(valid=True)
        if value != value.lower():
            result.warnings.append(f"Identifier is not lowercase: {value}")
        return result
