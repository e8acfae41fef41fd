"""Helpers for identifiers received as raw path segments."""

from uuid import UUID


def parse_uuid(value: str | UUID) -> UUID | None:
    """Parse a UUID, returning None for anything malformed."""
    if isinstance(value, UUID):
        return value
    try:
        return UUID(value)
    except (ValueError, AttributeError, TypeError):
        return None
