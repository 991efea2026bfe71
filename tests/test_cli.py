"""Tests for CLI commands, end to end against a temporary database."""

import re

from eventledger.cli.main import cli


def run(cli_runner, temp_db, *args):
    return cli_runner.invoke(cli, ["--db-path", temp_db.database_path, *args])


def created_id(result):
    """Extract the ID from output like "Created account 'X' (ID: 1)"."""
    match = re.search(r"ID: (\d+)", result.output)
    assert match is not None, result.output
    return match.group(1)


def test_help_does_not_need_a_database(cli_runner):
    result = cli_runner.invoke(cli, ["--help"])

    assert result.exit_code == 0
    assert "reconcile" in result.output


def test_account_create_and_list(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "account", "create", "Annual Dinner", "--financial-account", "MBB-001")
    assert result.exit_code == 0
    assert "Created account 'Annual Dinner'" in result.output

    result = run(cli_runner, temp_db, "account", "list")
    assert result.exit_code == 0
    assert "Annual Dinner" in result.output
    assert "MBB-001" in result.output


def test_account_create_duplicate(cli_runner, temp_db, sample_account):
    result = run(cli_runner, temp_db, "account", "create", sample_account.name)

    assert result.exit_code == 1
    assert "already exists" in result.output


def test_unknown_account(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "ledger", "list", "--account", "Nope")

    assert result.exit_code == 1
    assert "Account 'Nope' not found" in result.output


def test_reconcile_workflow(cli_runner, temp_db, sample_account):
    """Record, auto-reconcile, inspect and cancel."""
    result = run(
        cli_runner, temp_db, "ledger", "add", "--account", "Annual Dinner", "--type", "income",
        "--category", "ticket", "--description", "Ticket ABC sales", "--amount", "100.00",
        "--date", "2025-02-15",
    )
    assert result.exit_code == 0
    entry_id = created_id(result)

    result = run(
        cli_runner, temp_db, "bank", "record", "--financial-account", "MBB-001", "--date", "2025-02-15",
        "--type", "income", "--amount", "100.00", "--description", "Ticket ABC",
    )
    assert result.exit_code == 0
    bank_id = created_id(result)

    result = run(cli_runner, temp_db, "reconcile", "auto", "--account", "Annual Dinner", "--dry-run")
    assert result.exit_code == 0
    assert f"Would link entry {entry_id} -> bank {bank_id}" in result.output

    result = run(cli_runner, temp_db, "reconcile", "auto", "--account", "Annual Dinner")
    assert result.exit_code == 0
    assert "1 linked, 0 failed, 0 without a match" in result.output

    result = run(cli_runner, temp_db, "reconcile", "status", entry_id)
    assert f"reconciled with bank transaction {bank_id}" in result.output

    result = run(cli_runner, temp_db, "ledger", "list", "--account", "Annual Dinner", "--unreconciled")
    assert "No ledger entries found." in result.output

    result = run(cli_runner, temp_db, "reconcile", "cancel", entry_id)
    assert result.exit_code == 0
    assert f"Cancelled reconciliation of entry {entry_id}" in result.output

    result = run(cli_runner, temp_db, "reconcile", "status", entry_id)
    assert f"Entry {entry_id} is not reconciled" in result.output


def test_manual_confirm_rejects_second_entry(cli_runner, temp_db, sample_account, add_entry, add_bank):
    first = add_entry(temp_db, sample_account.id, "50", "Catering deposit", type="expense", category="food")
    second = add_entry(temp_db, sample_account.id, "50", "Catering balance", type="expense", category="food")
    bank_id = add_bank(temp_db, "50", "Catering", type="expense")

    result = run(cli_runner, temp_db, "reconcile", "candidates", str(first))
    assert f"ID: {bank_id:4d}" in result.output

    result = run(cli_runner, temp_db, "reconcile", "confirm", str(first), str(bank_id))
    assert result.exit_code == 0

    result = run(cli_runner, temp_db, "reconcile", "confirm", str(second), str(bank_id))
    assert result.exit_code == 1
    assert "already reconciled" in result.output

    result = run(cli_runner, temp_db, "reconcile", "candidates", str(second))
    assert "No candidate bank transactions." in result.output


def test_auto_reconcile_reports_unmatched(cli_runner, temp_db, sample_account, add_entry, add_bank):
    add_entry(temp_db, sample_account.id, "50", "Catering deposit", type="expense", category="food")
    add_entry(temp_db, sample_account.id, "50", "Catering balance", type="expense", category="food")
    add_bank(temp_db, "50", "Catering", type="expense")

    result = run(cli_runner, temp_db, "reconcile", "auto", "--account", str(sample_account.id))

    assert result.exit_code == 0
    assert "1 linked, 0 failed, 1 without a match" in result.output


def test_ledger_import(cli_runner, temp_db, sample_account, tmp_path):
    csv_file = tmp_path / "entries.csv"
    csv_file.write_text(
        "transaction_date,type,category,description,amount,notes\n"
        "2025-03-01,income,ticket,Ticket John,RM 80.00,\n"
        "2025-03-01,income,ticket,Ticket Mary,,paid cash\n",
        encoding="utf-8",
    )

    result = run(cli_runner, temp_db, "ledger", "import", str(csv_file), "--account", "Annual Dinner", "-v")

    assert result.exit_code == 1
    assert "1 succeeded, 1 failed" in result.output
    assert "row 2: Missing required field: amount" in result.output

    result = run(cli_runner, temp_db, "ledger", "list", "--account", "Annual Dinner")
    assert "Ticket John" in result.output
    assert "Ticket Mary" not in result.output


def test_plan_and_consolidation_report(cli_runner, temp_db, sample_account, tmp_path):
    result = run(
        cli_runner, temp_db, "plan", "add", "--account", "Annual Dinner", "--type", "expense",
        "--category", "venue", "--description", "Hotel hall", "--amount", "500",
    )
    assert result.exit_code == 0
    item_id = created_id(result)

    result = run(cli_runner, temp_db, "plan", "list", "--account", "Annual Dinner")
    assert "Hotel hall" in result.output

    result = run(cli_runner, temp_db, "report", "consolidation", "--account", "Annual Dinner", "--risks",
                 "--recommendations")
    assert result.exit_code == 0
    assert "Venue" in result.output
    assert "pending" in result.output
    assert "Risks" in result.output
    assert "Recommendations" in result.output
    assert "[success] Expenses came in 100.0% under budget" in result.output

    export = tmp_path / "report.csv"
    result = run(cli_runner, temp_db, "report", "consolidation", "--account", "Annual Dinner",
                 "--export", str(export))
    assert result.exit_code == 0
    content = export.read_text(encoding="utf-8")
    assert content.startswith("Overall")
    assert "Venue,500.00,0.00,-500.00,0.0%,pending" in content

    result = run(cli_runner, temp_db, "plan", "delete", item_id, "999")
    assert result.exit_code == 1
    assert "1 succeeded, 1 failed" in result.output


def test_event_match_preview(cli_runner, temp_db):
    result = run(
        cli_runner, temp_db, "event", "create", "Annual Dinner", "--date", "2025-03-15",
        "--member", "80", "--regular", "100",
    )
    assert result.exit_code == 0

    run(
        cli_runner, temp_db, "bank", "record", "--financial-account", "MBB-001", "--date", "2025-03-15",
        "--type", "income", "--amount", "80", "--description", "Annual dinner member",
    )

    result = run(cli_runner, temp_db, "match", "preview")
    assert result.exit_code == 0
    assert "best: Annual Dinner" in result.output
    assert "(auto)" in result.output

    result = run(cli_runner, temp_db, "match", "stats")
    assert "High confidence:   1" in result.output


def test_bank_list_needs_one_selector(cli_runner, temp_db):
    result = run(cli_runner, temp_db, "bank", "list")

    assert result.exit_code == 1
    assert "exactly one" in result.output


def test_bank_suggest(cli_runner, temp_db):
    run(
        cli_runner, temp_db, "bank", "record", "--financial-account", "MBB-001", "--date", "2025-03-15",
        "--type", "expense", "--amount", "300", "--description", "Catering",
    )

    result = run(cli_runner, temp_db, "bank", "suggest")

    assert result.exit_code == 0
    assert "Food & Beverage" in result.output
