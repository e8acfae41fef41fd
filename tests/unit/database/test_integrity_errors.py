"""Unit tests for integrity error classification."""

import pytest
from sqlalchemy.exc import IntegrityError

from infrastructure.database.errors import is_unique_violation


def _wrap(message: str) -> IntegrityError:
    return IntegrityError("INSERT INTO profiles ...", {}, Exception(message))


class TestIsUniqueViolation:
    @pytest.mark.parametrize(
        "message",
        [
            'duplicate key value violates unique constraint "profiles_user_id_key"',
            "UNIQUE constraint failed: profiles.user_id",
        ],
    )
    def test_unique_violation_on_column(self, message: str):
        assert is_unique_violation(_wrap(message), "user_id")

    @pytest.mark.parametrize(
        "message",
        [
            'insert or update on table "profiles" violates foreign key constraint '
            '"profiles_user_id_fkey"',
            "FOREIGN KEY constraint failed",
            'null value in column "user_id" violates not-null constraint',
            "NOT NULL constraint failed: profiles.user_id",
        ],
    )
    def test_other_integrity_failures(self, message: str):
        assert not is_unique_violation(_wrap(message), "user_id")

    def test_unique_violation_on_other_column(self):
        error = _wrap('duplicate key value violates unique constraint "users_email_key"')

        assert not is_unique_violation(error, "user_id")
