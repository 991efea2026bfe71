"""Ledger entry commands."""

import csv

import click

from eventledger.cli.account_resolution import resolve_account_or_exit
from eventledger.cli.error_handling import handle_domain_error, report_batch
from eventledger.domain.account import AccountService
from eventledger.domain.entities import LedgerStatus, category_label
from eventledger.domain.errors import DomainError
from eventledger.domain.ledger import LedgerService

TYPE_CHOICE = click.Choice(["income", "expense"], case_sensitive=False)
STATUS_CHOICE = click.Choice([s.value for s in LedgerStatus], case_sensitive=False)


@click.group()
def ledger_group():
    """Manage recorded ledger entries."""
    pass


@ledger_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--type", "txn_type", required=True, type=TYPE_CHOICE, help="income or expense")
@click.option("--category", required=True, help="Category code, e.g. ticket")
@click.option("--description", required=True, help="Description")
@click.option("--amount", required=True, help="Amount")
@click.option("--date", "transaction_date", help="Transaction date (YYYY-MM-DD)")
@click.option("--payer-payee", help="Counterparty")
@click.option("--notes", help="Notes")
@click.pass_context
def add_entry(ctx, account, txn_type, category, description, amount, transaction_date, payer_payee, notes):
    """Record a ledger entry.

    Examples:
        eventledger ledger add --account "Annual Dinner" --type income \\
            --category ticket --description "Ticket John" --amount 80 --date 2025-03-01
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    service = LedgerService(db)

    try:
        entry_id = service.create_entry(
            account_id=account_id,
            type=txn_type,
            category=category,
            description=description,
            amount=amount,
            transaction_date=transaction_date,
            payer_payee=payer_payee,
            notes=notes,
            user_id=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created ledger entry (ID: {entry_id})")


@ledger_group.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", required=True, help="Account name or ID")
@click.option("--verbose", "-v", is_flag=True, help="List each rejected row")
@click.pass_context
def import_entries(ctx, csv_file, account, verbose):
    """Import ledger entries from a CSV file.

    The header row names the fields: type, category, description and amount
    are required; transaction_date, payer_payee, notes and status are optional.
    Rejected rows are reported and the rest are imported.
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    service = LedgerService(db)

    with open(csv_file, newline="", encoding="utf-8-sig") as f:
        rows = [
            {key.strip(): value for key, value in row.items() if key and value not in (None, "")}
            for row in csv.DictReader(f)
        ]

    try:
        result = service.bulk_create(account_id, rows, user_id=ctx.obj["user"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    report_batch(ctx, result, verbose=verbose)


@ledger_group.command("list")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--unreconciled", is_flag=True, help="Only entries without a bank transaction")
@click.pass_context
def list_entries(ctx, account, unreconciled):
    """List an account's ledger entries."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    service = LedgerService(db)

    entries = service.list_entries(account_id, unreconciled_only=unreconciled)
    if not entries:
        click.echo("No ledger entries found.")
        return

    click.echo(
        f"{'ID':>4} | {'Date':10} | {'Type':7} | {'Category':22} | {'Amount':>12} | "
        f"{'Status':9} | {'Bank':>5} | Description"
    )
    click.echo("-" * 100)
    for entry in entries:
        entry_date = entry.transaction_date.isoformat() if entry.transaction_date else "-"
        bank = str(entry.reconciled_bank_transaction_id) if entry.is_reconciled else "-"
        click.echo(
            f"{entry.id:4d} | {entry_date:10} | {entry.type.value:7} | "
            f"{category_label(entry.category)[:22]:22} | {entry.amount:12.2f} | "
            f"{entry.status.value:9} | {bank:>5} | {entry.description}"
        )


@ledger_group.command("update")
@click.argument("entry_id", type=int)
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="income or expense")
@click.option("--category", help="Category code")
@click.option("--description", help="Description")
@click.option("--amount", help="Amount")
@click.option("--date", "transaction_date", help="Transaction date (YYYY-MM-DD)")
@click.option("--payer-payee", help="Counterparty")
@click.option("--notes", help="Notes")
@click.option("--status", type=STATUS_CHOICE, help="Entry status")
@click.pass_context
def update_entry(ctx, entry_id, txn_type, category, description, amount, transaction_date,
                 payer_payee, notes, status):
    """Update a ledger entry. Only the given fields change."""
    service = LedgerService(ctx.obj["db"])

    try:
        service.update_entry(
            entry_id,
            transaction_date=transaction_date,
            type=txn_type,
            category=category,
            description=description,
            amount=amount,
            payer_payee=payer_payee,
            notes=notes,
            status=status,
            user_id=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated ledger entry {entry_id}")


@ledger_group.command("delete")
@click.argument("entry_ids", nargs=-1, type=int, required=True)
@click.option("--verbose", "-v", is_flag=True, help="List each failure")
@click.pass_context
def delete_entries(ctx, entry_ids, verbose):
    """Delete one or more ledger entries."""
    service = LedgerService(ctx.obj["db"])
    report_batch(ctx, service.delete_entries(entry_ids), verbose=verbose)


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group, name="ledger")
