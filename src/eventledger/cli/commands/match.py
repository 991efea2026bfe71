"""Auto-match preview commands."""

import click

from eventledger.cli.account_resolution import resolve_account_or_exit
from eventledger.cli.error_handling import handle_domain_error
from eventledger.domain.account import AccountService
from eventledger.domain.auto_match import AutoMatchService
from eventledger.domain.entities import MatchOutcome, MatchResult
from eventledger.domain.errors import DomainError


def _describe(result: MatchResult) -> str:
    return (
        f"{result.candidate_name} (ID: {result.candidate_id}) score {result.total_score} "
        f"[{result.confidence.value}] {result.explanation}"
    )


def _print_outcome(outcome: MatchOutcome, show_all: bool) -> None:
    txn = outcome.bank_transaction
    click.echo(f"Bank {txn.id} | {txn.transaction_date.isoformat()} | {txn.amount:.2f} | {txn.description}")
    if outcome.best_match is not None:
        marker = " (auto)" if outcome.can_auto_apply else ""
        click.echo(f"  best: {_describe(outcome.best_match)}{marker}")
        if show_all:
            for result in outcome.matches[1:]:
                click.echo(f"  also: {_describe(result)}")
    elif outcome.top_attempt is not None:
        click.echo(f"  no match; closest: {_describe(outcome.top_attempt)}")
    else:
        click.echo("  no match")


@click.group()
def match_group():
    """Suggest events and planned items for bank transactions."""
    pass


@match_group.command("preview")
@click.option("--all", "show_all", is_flag=True, help="Show every match, not only the best")
@click.pass_context
def preview(ctx, show_all):
    """Match unclassified bank transactions against events. Nothing is saved."""
    service = AutoMatchService(ctx.obj["db"])

    outcomes = service.preview()
    if not outcomes:
        click.echo("No unclassified bank transactions.")
        return

    for outcome in outcomes:
        _print_outcome(outcome, show_all)


@match_group.command("stats")
@click.pass_context
def stats(ctx):
    """Count unclassified bank transactions by match confidence."""
    result = AutoMatchService(ctx.obj["db"]).statistics()

    click.echo(f"Total:             {result.total}")
    click.echo(f"With a match:      {result.has_match}")
    click.echo(f"High confidence:   {result.high_confidence}")
    click.echo(f"Medium confidence: {result.medium_confidence}")
    click.echo(f"Low confidence:    {result.low_confidence}")
    click.echo(f"No match:          {result.no_match}")


@match_group.command("planned")
@click.argument("bank_transaction_id", type=int)
@click.option("--account", required=True, help="Account name or ID")
@click.option("--all", "show_all", is_flag=True, help="Show every match, not only the best")
@click.pass_context
def planned(ctx, bank_transaction_id, account, show_all):
    """Match one bank transaction against an account's planned items."""
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        outcome = AutoMatchService(db).match_planned_items(bank_transaction_id, account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    _print_outcome(outcome, show_all)


def register_commands(cli):
    """Register match commands with main CLI."""
    cli.add_command(match_group, name="match")
