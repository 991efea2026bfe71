"""Consolidation report commands."""

import click

from eventledger.cli.account_resolution import resolve_account_or_exit
from eventledger.cli.error_handling import handle_domain_error
from eventledger.domain.account import AccountService
from eventledger.domain.consolidation import (
    ConsolidationService,
    analyze_recommendations,
    analyze_risks,
    export_consolidation_csv,
)
from eventledger.domain.entities import CategoryComparison
from eventledger.domain.errors import DomainError


def _print_comparison(title: str, rows: tuple[CategoryComparison, ...]) -> None:
    click.echo(f"\n{title}")
    click.echo(f"{'Category':24} | {'Forecast':>12} | {'Actual':>12} | {'Variance':>12} | {'%':>7} | Status")
    click.echo("-" * 90)
    if not rows:
        click.echo("(none)")
        return
    for row in rows:
        click.echo(
            f"{row.category_label[:24]:24} | {row.forecast:12.2f} | {row.actual:12.2f} | "
            f"{row.variance:12.2f} | {row.percentage:6.1f}% | {row.status.value}"
        )


@click.group()
def report_group():
    """Forecast versus actual reports."""
    pass


@report_group.command("consolidation")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--export", "export_path", type=click.Path(dir_okay=False), help="Write the report as CSV")
@click.option("--risks", is_flag=True, help="Also list risk findings")
@click.option("--recommendations", is_flag=True, help="Also list recommendations")
@click.pass_context
def consolidation(ctx, account, export_path, risks, recommendations):
    """Compare planned items with recorded ledger entries for an account.

    Examples:
        eventledger report consolidation --account "Annual Dinner" --risks --recommendations
        eventledger report consolidation --account 1 --export dinner.csv
    """
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, AccountService(db), account)

    try:
        snapshot = ConsolidationService(db).snapshot(account_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if export_path:
        with open(export_path, "w", newline="", encoding="utf-8") as f:
            f.write(export_consolidation_csv(snapshot))
        click.echo(f"Report written to {export_path}")
        return

    click.echo(f"{'':10} {'Forecast':>12} {'Actual':>12}")
    click.echo(f"{'Income':10} {snapshot.forecast_income:12.2f} {snapshot.actual_income:12.2f}")
    click.echo(f"{'Expense':10} {snapshot.forecast_expense:12.2f} {snapshot.actual_expense:12.2f}")
    click.echo(f"{'Profit':10} {snapshot.forecast_profit:12.2f} {snapshot.actual_profit:12.2f}")
    click.echo(
        f"\nBank: income {snapshot.bank_income_total:.2f} ({snapshot.bank_income_count}), "
        f"expense {snapshot.bank_expense_total:.2f} ({snapshot.bank_expense_count})"
    )
    click.echo(
        f"Unreconciled: income {snapshot.unreconciled_income_total:.2f} ({snapshot.unreconciled_income_count}), "
        f"expense {snapshot.unreconciled_expense_total:.2f} ({snapshot.unreconciled_expense_count})"
    )

    _print_comparison("Income by category", snapshot.income_comparison)
    _print_comparison("Expense by category", snapshot.expense_comparison)

    if risks:
        findings = analyze_risks(snapshot)
        click.echo("\nRisks")
        if not findings:
            click.echo("No risks found.")
        for finding in findings:
            click.echo(f"[{finding.level}] {finding.message}")

    if recommendations:
        findings = analyze_recommendations(snapshot)
        click.echo("\nRecommendations")
        if not findings:
            click.echo("No recommendations.")
        for finding in findings:
            click.echo(f"[{finding.level}] {finding.message}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
