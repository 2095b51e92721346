"""Deterministic surrogate identifier generation."""

import hashlib


def surrogate_id(context: str) -> str:
    """
    Derive a UUID-shaped identifier from a context string.

    The identifier is the first 32 hex characters of the SHA-256 digest of the
    UTF-8 encoded context, grouped 8-4-4-4-12. Same context, same id, every run.

    Args:
        context: Semantic context (e.g. "workgroup:Alpha")

    Returns:
        Identifier string

    Example:
        >>> surrogate_id("workgroup:Alpha") == surrogate_id("workgroup:Alpha")
        True
    """
    digest = hashlib.sha256(context.encode("utf-8")).hexdigest()
    return (
        f"{digest[0:8]}-{digest[8:12]}-{digest[12:16]}-{digest[16:20]}-{digest[20:32]}"
    )


class SurrogateIdGenerator:
    """Builds the context strings for each kind of synthesized id."""

    def group_id(self, display_name: str) -> str:
        """Id for a group that arrived without a usable id."""
        return surrogate_id(f"workgroup:{display_name}")

    def owner_id(self, name: str) -> str:
        """Synthetic owner id for a group or participant name."""
        return surrogate_id(f"user:{name}:user")

    def tag_owner_id(self, tag_text: str, tag_type: str) -> str:
        """Synthetic owner id for a tag."""
        return surrogate_id(f"user:{tag_text}:{tag_type}:user")

    def event_id(self, title: str, date_text: str, group_id: str) -> str:
        """
        Id for a meeting summary.

        Uses the raw date text, so "2024-01-15" and "2024-01-15T00:00:00Z"
        produce different ids even though they parse to the same instant.
        """
        return surrogate_id(f"meeting:{title}:{date_text}:{group_id}")
