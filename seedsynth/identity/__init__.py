"""
Identity synthesis - deterministic ids and timestamp handling.

Surrogate ids are SHA-256 based and depend only on their context string, so
re-running the generator on the same input yields the same keys.
"""

from seedsynth.identity.generator import SurrogateIdGenerator, surrogate_id
from seedsynth.identity.timestamps import (
    format_canonical_timestamp,
    parse_flexible_date,
    utc_now,
)
from seedsynth.identity.validator import (
    IdentifierValidator,
    ValidationResult,
    is_well_formed_identifier,
)

__all__ = [
    "IdentifierValidator",
    "SurrogateIdGenerator",
    "ValidationResult",
    "format_canonical_timestamp",
    "is_well_formed_identifier",
    "parse_flexible_date",
    "surrogate_id",
    "utc_now",
]
