"""Shared pytest fixtures for opstrack tests."""

import tempfile
import os
import pytest

from opstrack.database.factories import create_sqlite_database
from opstrack.domain.account import BankAccountService
from opstrack.domain.entities import NewOperation
from opstrack.domain.operation import OperationService
from opstrack.domain.tag import TagService
from opstrack.domain.tag_rules import TagRuleService
from opstrack.domain.triage import TriageService
from opstrack.domain.operation_import import OperationImportService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    db.engine.dispose()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create a BankAccountService with a temporary database."""
    return BankAccountService(temp_db)


@pytest.fixture
def operation_service(temp_db):
    """Create an OperationService with a temporary database."""
    return OperationService(temp_db)


@pytest.fixture
def triage_service(temp_db):
    """Create a TriageService with a temporary database."""
    return TriageService(temp_db)


@pytest.fixture
def tag_service(temp_db):
    """Create a TagService with a temporary database."""
    return TagService(temp_db)


@pytest.fixture
def tag_rule_service(temp_db):
    """Create a TagRuleService with a temporary database."""
    return TagRuleService(temp_db)


@pytest.fixture
def import_service(temp_db):
    """Create an OperationImportService with a temporary database."""
    return OperationImportService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample bank account for testing."""
    account_id = account_service.create_account(name="Test Account")
    return account_service.get_account(account_id)


@pytest.fixture
def make_operation(sample_account):
    """Build NewOperation records with sensible defaults."""
    counter = {"n": 0}

    def _make(**overrides) -> NewOperation:
        counter["n"] += 1
        values = {
            "date": "2024-01-15",
            "type": "card",
            "type_display": "Card payment",
            "details": f"OPERATION {counter['n']}",
            "amount_in_cents": -1000,
            "hash": f"hash-{counter['n']}",
            "bank_account_id": sample_account.id,
        }
        values.update(overrides)
        return NewOperation(**values)

    return _make


@pytest.fixture
def sample_tags(tag_service):
    """Create a few tags and return their IDs by name."""
    return {
        name: tag_service.create_tag(name)
        for name in ("Housing", "Groceries", "Transfers")
    }


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
