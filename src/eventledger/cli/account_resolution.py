"""CLI helpers for account resolution and value parsing."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import click

from eventledger.domain.account import AccountService
from eventledger.domain.errors import DomainError
from eventledger.utils.account_resolver import resolve_account
from eventledger.utils.amount_parser import parse_amount
from eventledger.utils.date_parser import parse_date


def resolve_account_or_exit(
    ctx: click.Context, account_service: AccountService, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error."""
    try:
        return resolve_account(account_service, account)
    except DomainError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, value: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)
