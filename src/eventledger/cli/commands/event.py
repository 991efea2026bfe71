"""Event commands."""

import click

from eventledger.cli.account_resolution import parse_amount_or_exit, parse_date_or_exit
from eventledger.cli.error_handling import handle_domain_error
from eventledger.domain.entities import EventPricing
from eventledger.domain.errors import DomainError
from eventledger.domain.event import EventService


@click.group()
def event_group():
    """Manage events and their ticket prices."""
    pass


@event_group.command("create")
@click.argument("name", metavar="EVENT_NAME")
@click.option("--date", "start_date", required=True, help="Event date (YYYY-MM-DD)")
@click.option("--regular", default="0", help="Regular ticket price")
@click.option("--member", default="0", help="Member ticket price")
@click.option("--alumni", default="0", help="Alumni ticket price")
@click.option("--early-bird", default="0", help="Early-bird ticket price")
@click.option("--committee", default="0", help="Committee ticket price")
@click.option("--currency", default="RM", show_default=True, help="Currency label")
@click.pass_context
def create_event(ctx, name, start_date, regular, member, alumni, early_bird, committee, currency):
    """Create an event with a ticket price table.

    Examples:
        eventledger event create "Annual Dinner" --date 2025-03-15 --member 80 --regular 100
    """
    service = EventService(ctx.obj["db"])

    event_date = parse_date_or_exit(ctx, start_date)
    pricing = EventPricing(
        regular_price=parse_amount_or_exit(ctx, regular),
        member_price=parse_amount_or_exit(ctx, member),
        alumni_price=parse_amount_or_exit(ctx, alumni),
        early_bird_price=parse_amount_or_exit(ctx, early_bird),
        committee_price=parse_amount_or_exit(ctx, committee),
        currency=currency,
    )

    try:
        event_id = service.create_event(name=name, start_date=event_date, pricing=pricing)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created event '{name}' (ID: {event_id})")


@event_group.command("list")
@click.pass_context
def list_events(ctx):
    """List events, most recent first."""
    service = EventService(ctx.obj["db"])

    events = service.list_events()
    if not events:
        click.echo("No events found.")
        return

    click.echo(f"{'ID':>4} | {'Date':10} | {'Name':30} | Prices")
    click.echo("-" * 80)
    for evt in events:
        prices = ", ".join(
            f"{label} {price}" for label, price in evt.pricing.tiers().items() if price > 0
        )
        click.echo(f"{evt.id:4d} | {evt.start_date.isoformat()} | {evt.name[:30]:30} | {prices or '-'}")


def register_commands(cli):
    """Register event commands with main CLI."""
    cli.add_command(event_group, name="event")
