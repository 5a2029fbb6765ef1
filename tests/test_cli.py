"""Tests for the command line interface."""

import json

import click
import pytest

from opstrack.cli.date_filters import resolve_cli_date_bounds
from opstrack.cli.main import cli
from opstrack.database.sqlalchemy_db import SQLAlchemyDatabase
from opstrack.domain.entities import OperationState
from opstrack.domain.errors import StorageError


def _ctx() -> click.Context:
    return click.Context(click.Command("test"))


@pytest.fixture
def invoke(cli_runner, temp_db):
    """Run the CLI against the temporary database."""

    def _invoke(*args, **kwargs):
        return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args], **kwargs)

    return _invoke


@pytest.fixture
def operations_file(tmp_path):
    path = tmp_path / "operations.json"
    path.write_text(
        json.dumps(
            [
                {"date": "2024-01-01", "type": "transfer", "type_display": "Transfer",
                 "details": "MONTHLY RENT PAYMENT", "amount": "-950.00", "hash": "h1"},
                {"date": "2024-01-01", "type": "transfer", "type_display": "Transfer",
                 "details": "MONTHLY RENT PAYMENT", "amount": "-950.00", "hash": "h1"},
                {"date": "2024-01-03", "type": "card", "type_display": "Card",
                 "details": "GROCERIES", "amount": "-42.10", "hash": "h2"},
            ]
        ),
        encoding="utf-8",
    )
    return str(path)


class TestAccountCommands:
    def test_create_and_list(self, invoke):
        result = invoke("account", "create", "Main Checking")

        assert result.exit_code == 0
        assert "Created account 'Main Checking' (ID: 1, slug: main-checking)" in result.output

        result = invoke("account", "list")
        assert result.exit_code == 0
        assert "Main Checking" in result.output

    def test_list_empty(self, invoke):
        result = invoke("account", "list")

        assert result.exit_code == 0
        assert "No accounts found." in result.output

    def test_duplicate_account(self, invoke):
        invoke("account", "create", "Main")
        result = invoke("account", "create", "Main")

        assert result.exit_code == 1
        assert "already exists" in result.output


class TestTagAndRuleCommands:
    def test_tag_create_and_list_json(self, invoke):
        result = invoke("tag", "create", "Housing", "--color", "#ff8800")
        assert result.exit_code == 0
        assert "Created tag 'Housing' (ID: 1)" in result.output

        result = invoke("tag", "list", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output) == [{"id": 1, "name": "Housing", "color": "#ff8800"}]

    def test_rule_create_list_delete(self, invoke):
        invoke("tag", "create", "Housing")

        result = invoke("rule", "create", "Housing", "--details-contains", "RENT")
        assert result.exit_code == 0
        assert "Created rule 1 for tag 'Housing'" in result.output

        result = invoke("rule", "list")
        assert "Housing <- details_contains 'RENT'" in result.output

        result = invoke("rule", "delete", "1")
        assert result.exit_code == 0
        assert "Deleted rule 1" in result.output
        assert "No rules found." in invoke("rule", "list").output

    def test_amount_range_rule(self, invoke):
        invoke("tag", "create", "Big")

        result = invoke("rule", "create", "Big", "--max-amount", "-500.00")
        assert result.exit_code == 0

        rules = json.loads(invoke("rule", "list", "--json").output)
        assert rules[0]["kind"] == "amount_range"
        assert rules[0]["min_amount_in_cents"] is None
        assert rules[0]["max_amount_in_cents"] == -50000

    def test_rule_needs_exactly_one_predicate(self, invoke):
        invoke("tag", "create", "Housing")

        result = invoke("rule", "create", "Housing", "--details-contains", "RENT", "--type", "transfer")

        assert result.exit_code == 1
        assert "exactly one predicate" in result.output

    def test_malformed_regex_rejected(self, invoke):
        invoke("tag", "create", "Housing")

        result = invoke("rule", "create", "Housing", "--details-matches", "(")

        assert result.exit_code == 1
        assert "Invalid regular expression" in result.output

    def test_rule_for_unknown_tag(self, invoke):
        result = invoke("rule", "create", "Nope", "--type", "card")

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestImportAndTriageCommands:
    def _setup(self, invoke, operations_file):
        invoke("account", "create", "Main Checking")
        invoke("tag", "create", "Housing")
        invoke("rule", "create", "Housing", "--details-contains", "rent")
        return invoke("import", operations_file, "--account", "main-checking")

    def test_import_reports_statistics(self, invoke, operations_file):
        result = self._setup(invoke, operations_file)

        assert result.exit_code == 0
        assert "Imported: 3 operations" in result.output
        assert "Flagged for triage: 2" in result.output
        assert "Tagged by rules: 2" in result.output

    def test_import_unknown_account(self, invoke, operations_file):
        result = invoke("import", operations_file, "--account", "missing")

        assert result.exit_code == 1
        assert "Bank account 'missing' not found" in result.output

    def test_operations_list_and_triage(self, invoke, operations_file):
        self._setup(invoke, operations_file)

        result = invoke("operations", "list", "--json")
        operations = json.loads(result.output)
        assert [op["date"] for op in operations] == ["2024-01-03", "2024-01-01", "2024-01-01"]
        assert operations[0]["state"] == "ok"
        assert operations[1]["state"] == "pending_triage"
        assert operations[1]["tags_ids"] == [1]

        result = invoke("operations", "triage")
        assert result.exit_code == 0
        assert result.output.count("MONTHLY RENT PAYMENT") == 2
        assert all(line.startswith("!") for line in result.output.splitlines())

    def test_operations_list_date_filter(self, invoke, operations_file):
        self._setup(invoke, operations_file)

        result = invoke("operations", "list", "--start-date", "2024-01-02", "--json")

        assert [op["details"] for op in json.loads(result.output)] == ["GROCERIES"]

    def test_resolve_and_delete(self, invoke, operations_file, temp_db):
        self._setup(invoke, operations_file)
        first, second = [op.id for op in temp_db.list_triage_operations()]

        result = invoke("resolve", str(first), "RENT (checked)")
        assert result.exit_code == 0
        assert f"Operation {first} resolved" in result.output
        assert temp_db.get_operation(first).state is OperationState.OK

        result = invoke("delete", str(second), "--yes")
        assert result.exit_code == 0
        assert f"Deleted operation {second}" in result.output
        assert "Nothing to triage." in invoke("operations", "triage").output

    def test_delete_asks_for_confirmation(self, invoke, operations_file, temp_db):
        self._setup(invoke, operations_file)
        operation_id = temp_db.list_operations()[0].id

        result = invoke("delete", str(operation_id), input="n\n")

        assert result.exit_code == 1
        assert temp_db.get_operation(operation_id) is not None

    def test_show_missing_operation(self, invoke):
        result = invoke("operations", "show", "99")

        assert result.exit_code == 1
        assert "Operation 99 not found" in result.output

    def test_detect_and_retag(self, invoke, operations_file):
        self._setup(invoke, operations_file)
        invoke("tag", "create", "Food")
        invoke("rule", "create", "Food", "--type", "card")

        result = invoke("detect")
        assert result.exit_code == 0
        assert "Flagged 0 operation(s) for triage" in result.output

        result = invoke("retag")
        assert "Tagged 1 operation(s)" in result.output
        result = invoke("retag", "--all")
        assert "Tagged 0 operation(s)" in result.output


def test_schema_failure_exits_and_disconnects(cli_runner, temp_db, monkeypatch):
    disconnected = []

    def failing_initialize(self):
        raise StorageError("Schema upgrade failed: database is locked")

    monkeypatch.setattr(SQLAlchemyDatabase, "initialize_schema", failing_initialize)
    monkeypatch.setattr(SQLAlchemyDatabase, "disconnect", lambda self: disconnected.append(self))

    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 2
    assert "Storage error: Schema upgrade failed" in result.output
    assert len(disconnected) == 1


class TestDateBounds:
    def test_parses_explicit_dates(self):
        assert resolve_cli_date_bounds(_ctx(), start_date="2024-01-02", end_date="Jan 5 2024") == (
            "2024-01-02",
            "2024-01-05",
        )

    def test_open_bounds(self):
        assert resolve_cli_date_bounds(_ctx(), start_date=None, end_date=None) == (None, None)

    def test_rejects_inverted_range(self, capsys):
        with pytest.raises(click.exceptions.Exit) as excinfo:
            resolve_cli_date_bounds(_ctx(), start_date="2024-02-01", end_date="2024-01-01")

        assert excinfo.value.exit_code == 1
        assert "after end date" in capsys.readouterr().err

    def test_rejects_garbage(self, capsys):
        with pytest.raises(click.exceptions.Exit):
            resolve_cli_date_bounds(_ctx(), start_date="not a date", end_date=None)

        assert "Invalid start date" in capsys.readouterr().err
