"""Reconciliation commands: automatic and manual linking of ledger entries to bank transactions."""

import click

from eventledger.cli.account_resolution import resolve_account_or_exit
from eventledger.cli.error_handling import handle_domain_error
from eventledger.domain.account import AccountService
from eventledger.domain.auto_reconcile import AutoReconcileService
from eventledger.domain.errors import DomainError, ledger_entry_not_found
from eventledger.domain.ledger import LedgerService
from eventledger.domain.manual import ManualReconciliationService


@click.group()
def reconcile_group():
    """Link ledger entries to bank transactions."""
    pass


@reconcile_group.command("auto")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--dry-run", is_flag=True, help="Show the links without saving them")
@click.option("--verbose", "-v", is_flag=True, help="List each link and failure")
@click.pass_context
def auto_reconcile(ctx, account, dry_run, verbose):
    """Link every unreconciled entry to a bank transaction with the same date, amount and type.

    Descriptions must share at least one word. Each bank transaction is used
    at most once.
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    service = AutoReconcileService(db)

    if dry_run:
        try:
            plan = service.plan(account_id)
        except DomainError as e:
            handle_domain_error(ctx, e)
            return
        for assignment in plan.assignments:
            click.echo(f"Would link entry {assignment.ledger_entry_id} -> bank {assignment.bank_transaction_id}")
        click.echo(
            f"{len(plan.assignments)} would be linked, "
            f"{len(plan.unmatched_entry_ids)} without a match, "
            f"{len(plan.skipped_entry_ids)} skipped"
        )
        return

    try:
        result = service.run(account_id, user_id=ctx.obj["user"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if verbose:
        for assignment in result.linked:
            click.echo(f"Linked entry {assignment.ledger_entry_id} -> bank {assignment.bank_transaction_id}")
        for entry_id, message in result.failed:
            click.echo(f"  entry {entry_id}: {message}", err=True)
    click.echo(
        f"{result.success_count} linked, {len(result.failed)} failed, "
        f"{len(result.unmatched_entry_ids)} without a match"
    )
    if result.failed:
        ctx.exit(1)


@reconcile_group.command("candidates")
@click.argument("entry_id", type=int)
@click.pass_context
def list_candidates(ctx, entry_id):
    """List bank transactions that could be linked to a ledger entry."""
    service = ManualReconciliationService(ctx.obj["db"])

    try:
        candidates = service.list_candidates(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not candidates:
        click.echo("No candidate bank transactions.")
        return

    for txn in candidates:
        click.echo(
            f"ID: {txn.id:4d} | {txn.transaction_date.isoformat()} | {txn.amount:12.2f} | {txn.description}"
        )


@reconcile_group.command("confirm")
@click.argument("entry_id", type=int)
@click.argument("bank_transaction_id", type=int)
@click.pass_context
def confirm(ctx, entry_id, bank_transaction_id):
    """Link a ledger entry to a bank transaction."""
    service = ManualReconciliationService(ctx.obj["db"])

    try:
        service.confirm(entry_id, bank_transaction_id, user_id=ctx.obj["user"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Linked entry {entry_id} to bank transaction {bank_transaction_id}")


@reconcile_group.command("cancel")
@click.argument("entry_id", type=int)
@click.pass_context
def cancel(ctx, entry_id):
    """Remove a ledger entry's link to its bank transaction."""
    service = ManualReconciliationService(ctx.obj["db"])

    try:
        removed = service.cancel(entry_id, user_id=ctx.obj["user"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if removed:
        click.echo(f"Cancelled reconciliation of entry {entry_id}")
    else:
        click.echo(f"Entry {entry_id} was not reconciled")


@reconcile_group.command("status")
@click.argument("entry_id", type=int)
@click.pass_context
def status(ctx, entry_id):
    """Show whether a ledger entry is reconciled."""
    entry = LedgerService(ctx.obj["db"]).get_entry(entry_id)
    if entry is None:
        click.echo(f"Error: {ledger_entry_not_found(entry_id)}", err=True)
        ctx.exit(1)

    if entry.is_reconciled:
        click.echo(f"Entry {entry_id} is reconciled with bank transaction {entry.reconciled_bank_transaction_id}")
    else:
        click.echo(f"Entry {entry_id} is not reconciled")


def register_commands(cli):
    """Register reconciliation commands with main CLI."""
    cli.add_command(reconcile_group, name="reconcile")
