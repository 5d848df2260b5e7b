"""Unit tests for SqlAlchemyUnitOfWork.conflict_from"""

import sqlite3
import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm.exc import StaleDataError
from billing_ledger.adapter.services import SqlAlchemyUnitOfWork
from billing_ledger.domain.errors import ConcurrencyError


class _PgError(Exception):
    def __init__(self, message: str, sqlstate: str):
        super().__init__(message)
        self.sqlstate = sqlstate


@pytest.fixture
def uow():
    return SqlAlchemyUnitOfWork(MagicMock())


class TestConflictFrom:
    def test_sqlite_busy_timeout(self, uow):
        error = OperationalError("BEGIN IMMEDIATE", {}, sqlite3.OperationalError("database is locked"))

        conflict = uow.conflict_from(error)

        assert isinstance(conflict, ConcurrencyError)
        assert conflict.to_error().code == "CONCURRENCY_CONFLICT"
        assert conflict.to_error().category == "concurrency"

    @pytest.mark.parametrize("sqlstate", ["40001", "40P01", "55P03"])
    def test_postgres_serialization_and_deadlock(self, uow, sqlstate):
        error = OperationalError("UPDATE invoices", {}, _PgError("could not serialize access", sqlstate))

        conflict = uow.conflict_from(error)

        assert isinstance(conflict, ConcurrencyError)
        assert conflict.details["sqlstate"] == sqlstate

    def test_stale_row(self, uow):
        error = StaleDataError("UPDATE statement on table 'payments' expected to update 1 row(s); 0 were matched.")

        assert isinstance(uow.conflict_from(error), ConcurrencyError)

    def test_other_failures_pass_through(self, uow):
        integrity = IntegrityError("INSERT INTO invoices", {}, sqlite3.IntegrityError("UNIQUE constraint failed"))

        assert uow.conflict_from(integrity) is None
        assert uow.conflict_from(RuntimeError("boom")) is None
