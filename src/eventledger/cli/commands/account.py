"""Account management commands."""

import click

from eventledger.cli.error_handling import handle_domain_error
from eventledger.domain.account import AccountService
from eventledger.domain.errors import DomainError


@click.group()
def account_group():
    """Manage event accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--financial-account",
    help="Bank account reference whose transactions back this event account",
)
@click.pass_context
def create_account(ctx, name: str, financial_account: str | None):
    """Create a new event account.

    Examples:
        eventledger account create "Annual Dinner 2025" --financial-account MBB-001
        eventledger account create "Workshop"
    """
    service = AccountService(ctx.obj["db"])

    try:
        account_id = service.create_account(name=name, financial_account_id=financial_account)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created account '{name}' (ID: {account_id})")
    if financial_account is None:
        click.echo("No financial account linked; reconciliation will find no bank transactions.")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts."""
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        click.echo(f"ID: {acc.id:3d} | {acc.name:24s} | Financial account: {acc.financial_account_id or '-'}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
