"""Bank transaction commands."""

import click

from eventledger.cli.account_resolution import resolve_account_or_exit
from eventledger.cli.error_handling import handle_domain_error
from eventledger.domain.account import AccountService
from eventledger.domain.bank import BankTransactionService
from eventledger.domain.category_mapping import needs_review, suggest_for_transactions
from eventledger.domain.entities import BankVerificationStatus, category_label
from eventledger.domain.errors import DomainError

TYPE_CHOICE = click.Choice(["income", "expense"], case_sensitive=False)


@click.group()
def bank_group():
    """Record and inspect bank transactions."""
    pass


@bank_group.command("record")
@click.option("--financial-account", required=True, help="Bank account reference")
@click.option("--date", "transaction_date", required=True, help="Transaction date (YYYY-MM-DD)")
@click.option("--type", "txn_type", required=True, type=TYPE_CHOICE, help="income or expense")
@click.option("--amount", required=True, help="Amount")
@click.option("--description", default="", help="Bank description")
@click.option("--payer-payee", help="Counterparty")
@click.option("--category", help="Category code, if already classified")
@click.option(
    "--verified",
    is_flag=True,
    help="Mark as verified; verified transactions are not offered as manual candidates",
)
@click.pass_context
def record_transaction(ctx, financial_account, transaction_date, txn_type, amount, description,
                       payer_payee, category, verified):
    """Record a bank transaction.

    Examples:
        eventledger bank record --financial-account MBB-001 --date 2025-03-01 \\
            --type income --amount 80 --description "IBG Ticket John"
    """
    service = BankTransactionService(ctx.obj["db"])
    status = BankVerificationStatus.VERIFIED if verified else BankVerificationStatus.PENDING

    try:
        txn_id = service.record_transaction(
            financial_account_id=financial_account,
            transaction_date=transaction_date,
            type=txn_type,
            amount=amount,
            description=description,
            payer_payee=payer_payee,
            verification_status=status,
            category=category,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Recorded bank transaction (ID: {txn_id})")


@bank_group.command("list")
@click.option("--account", help="Event account name or ID")
@click.option("--financial-account", help="Bank account reference")
@click.option("--unclassified", is_flag=True, help="All transactions without a category")
@click.pass_context
def list_transactions(ctx, account, financial_account, unclassified):
    """List bank transactions.

    Choose the transactions with exactly one of --account, --financial-account
    or --unclassified.
    """
    db = ctx.obj["db"]
    service = BankTransactionService(db)

    if sum(bool(x) for x in (account, financial_account, unclassified)) != 1:
        click.echo("Error: Give exactly one of --account, --financial-account or --unclassified", err=True)
        ctx.exit(1)

    try:
        if account:
            account_id = resolve_account_or_exit(ctx, AccountService(db), account)
            transactions = service.list_for_account(account_id)
        elif financial_account:
            transactions = service.list_for_financial_account(financial_account)
        else:
            transactions = service.list_unclassified()
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not transactions:
        click.echo("No bank transactions found.")
        return

    click.echo(f"{'ID':>4} | {'Date':10} | {'Type':7} | {'Amount':>12} | {'Status':8} | {'Category':20} | Description")
    click.echo("-" * 100)
    for txn in transactions:
        click.echo(
            f"{txn.id:4d} | {txn.transaction_date.isoformat()} | {txn.type.value:7} | "
            f"{txn.amount:12.2f} | {txn.verification_status.value:8} | "
            f"{(category_label(txn.category) if txn.category else '-')[:20]:20} | {txn.description}"
        )


@bank_group.command("suggest")
@click.pass_context
def suggest_categories(ctx):
    """Suggest categories for unclassified bank transactions from their descriptions.

    Nothing is saved; suggestions marked [review] need a person to confirm.
    """
    service = BankTransactionService(ctx.obj["db"])

    transactions = service.list_unclassified()
    if not transactions:
        click.echo("No unclassified bank transactions.")
        return

    for txn, suggestion in suggest_for_transactions(transactions):
        flag = " [review]" if needs_review(suggestion) else ""
        if suggestion.category is None:
            click.echo(f"{txn.id:4d} | {txn.description[:40]:40} | no suggestion{flag}")
            continue
        click.echo(
            f"{txn.id:4d} | {txn.description[:40]:40} | {category_label(suggestion.category)} "
            f"({suggestion.confidence:.0%}, keyword \"{suggestion.matched_keyword}\"){flag}"
        )


def register_commands(cli):
    """Register bank transaction commands with main CLI."""
    cli.add_command(bank_group, name="bank")
