"""Planned item (budget line) commands."""

import click

from eventledger.cli.account_resolution import resolve_account_or_exit
from eventledger.cli.error_handling import handle_domain_error, report_batch
from eventledger.domain.account import AccountService
from eventledger.domain.entities import PlanStatus, category_label
from eventledger.domain.errors import DomainError
from eventledger.domain.planned_item import PlannedItemService

TYPE_CHOICE = click.Choice(["income", "expense"], case_sensitive=False)
STATUS_CHOICE = click.Choice([s.value for s in PlanStatus], case_sensitive=False)


@click.group()
def plan_group():
    """Manage planned income and expense items."""
    pass


@plan_group.command("add")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--type", "txn_type", required=True, type=TYPE_CHOICE, help="income or expense")
@click.option("--category", required=True, help="Category code, e.g. food")
@click.option("--description", required=True, help="What the line is for")
@click.option("--amount", required=True, help="Planned amount")
@click.option("--expected-date", help="Expected date (YYYY-MM-DD)")
@click.option("--remark", help="Free-form remark")
@click.pass_context
def add_item(ctx, account, txn_type, category, description, amount, expected_date, remark):
    """Add a planned item to an account.

    Examples:
        eventledger plan add --account "Annual Dinner" --type expense \\
            --category venue --description "Hotel ballroom" --amount 5000
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    service = PlannedItemService(db)

    try:
        item_id = service.create_item(
            account_id=account_id,
            type=txn_type,
            category=category,
            description=description,
            amount=amount,
            expected_date=expected_date,
            remark=remark,
            user_id=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created planned item (ID: {item_id})")


@plan_group.command("list")
@click.option("--account", required=True, help="Account name or ID")
@click.pass_context
def list_items(ctx, account):
    """List an account's planned items."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)
    service = PlannedItemService(db)

    items = service.list_items(account_id)
    if not items:
        click.echo("No planned items found.")
        return

    click.echo(f"{'ID':>4} | {'Type':7} | {'Category':22} | {'Amount':>12} | {'Status':9} | Description")
    click.echo("-" * 90)
    for item in items:
        click.echo(
            f"{item.id:4d} | {item.type.value:7} | {category_label(item.category)[:22]:22} | "
            f"{item.amount:12.2f} | {item.status.value:9} | {item.description}"
        )


@plan_group.command("update")
@click.argument("item_id", type=int)
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="income or expense")
@click.option("--category", help="Category code")
@click.option("--description", help="Description")
@click.option("--amount", help="Planned amount")
@click.option("--expected-date", help="Expected date (YYYY-MM-DD)")
@click.option("--status", type=STATUS_CHOICE, help="Item status")
@click.option("--remark", help="Free-form remark")
@click.pass_context
def update_item(ctx, item_id, txn_type, category, description, amount, expected_date, status, remark):
    """Update a planned item. Only the given fields change."""
    service = PlannedItemService(ctx.obj["db"])

    try:
        service.update_item(
            item_id,
            type=txn_type,
            category=category,
            description=description,
            amount=amount,
            expected_date=expected_date,
            status=status,
            remark=remark,
            user_id=ctx.obj["user"],
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Updated planned item {item_id}")


@plan_group.command("delete")
@click.argument("item_ids", nargs=-1, type=int, required=True)
@click.option("--verbose", "-v", is_flag=True, help="List each failure")
@click.pass_context
def delete_items(ctx, item_ids, verbose):
    """Delete one or more planned items."""
    service = PlannedItemService(ctx.obj["db"])
    report_batch(ctx, service.delete_items(item_ids), verbose=verbose)


def register_commands(cli):
    """Register planned item commands with main CLI."""
    cli.add_command(plan_group, name="plan")
