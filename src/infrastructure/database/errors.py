"""Classification of integrity errors raised by the database driver."""

from sqlalchemy.exc import IntegrityError


def is_unique_violation(error: IntegrityError, column: str) -> bool:
    """Whether ``error`` is a unique-constraint violation on ``column``.

    PostgreSQL names the constraint (``profiles_user_id_key``), SQLite names
    the column (``UNIQUE constraint failed: profiles.user_id``). NOT NULL and
    foreign key failures return False so callers re-raise them.
    """
    orig = str(error.orig).lower() if error.orig else ""
    return ("unique" in orig or "duplicate" in orig) and column in orig
