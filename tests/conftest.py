"""Shared pytest fixtures for eventledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest

from eventledger.database.factories import create_memory_database, create_sqlite_database
from eventledger.domain.account import AccountService
from eventledger.domain.bank import BankTransactionService
from eventledger.domain.ledger import LedgerService
from eventledger.domain.planned_item import PlannedItemService
from eventledger.domain.reconciliation import ReconciliationService

FINANCIAL_ACCOUNT = "MBB-001"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # No retry delay in tests
    db = create_sqlite_database(database_path=db_path, read_backoff=0)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def memory_db():
    """Create an empty in-memory document store."""
    return create_memory_database()


@pytest.fixture(params=["sqlite", "memory"])
def any_db(request):
    """Run a test once against each storage backend."""
    return request.getfixturevalue("temp_db" if request.param == "sqlite" else "memory_db")


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def planned_item_service(temp_db):
    """Create a PlannedItemService with a temporary database."""
    return PlannedItemService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def bank_service(temp_db):
    """Create a BankTransactionService with a temporary database."""
    return BankTransactionService(temp_db)


@pytest.fixture
def reconciliation_service(temp_db):
    """Create a ReconciliationService with a temporary database."""
    return ReconciliationService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample event account linked to a financial account."""
    account_id = account_service.create_account(
        name="Annual Dinner", financial_account_id=FINANCIAL_ACCOUNT
    )
    return account_service.get_account(account_id)


def _add_entry(db, account_id, amount, description, day=date(2025, 3, 1), type="income",
               category="ticket", status="pending"):
    """Create a ledger entry directly through a database."""
    return LedgerService(db).create_entry(
        account_id=account_id,
        type=type,
        category=category,
        description=description,
        amount=Decimal(amount),
        transaction_date=day,
        status=status,
    )


def _add_bank(db, amount, description, day=date(2025, 3, 1), type="income",
              financial_account_id=FINANCIAL_ACCOUNT, **kwargs):
    """Record a bank transaction directly through a database."""
    return BankTransactionService(db).record_transaction(
        financial_account_id=financial_account_id,
        transaction_date=day,
        type=type,
        amount=Decimal(amount),
        description=description,
        **kwargs,
    )


@pytest.fixture
def add_entry():
    """Return a helper creating ledger entries: add_entry(db, account_id, amount, description, ...)."""
    return _add_entry


@pytest.fixture
def add_bank():
    """Return a helper recording bank transactions: add_bank(db, amount, description, ...)."""
    return _add_bank


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
