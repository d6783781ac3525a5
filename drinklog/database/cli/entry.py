"""
Entry Commands
--------------

Log drinks and review them with their standard-unit estimates.

Commands:
    - add: Log an entry against a catalog drink
    - list: List a person's entries, newest first

Usage:
    drinklog entry add 3 1-2 --date 2024-10-01 --time evening --volume 355mL
    drinklog entry list --from 2024-10-01 --to 2024-10-31
"""
from datetime import date

import click

from drinklog.core.logging_manager import handle_cli_error
from drinklog.core.exceptions import DrinkLogError
from drinklog.ledger.enums import TimePeriod
from drinklog.ledger.parsers import parse_quantity, parse_volume
from . import get_config, get_db


@click.group()
@click.pass_context
def entry(ctx: click.Context) -> None:
    """Log and review drink entries."""
    pass


@entry.command("add")
@click.argument("drink_id", type=int)
@click.argument("quantity")
@click.option("--date", "drank_on", default=None, help="ISO date (default: today)")
@click.option(
    "--time",
    "time_period",
    type=click.Choice(TimePeriod.choices(), case_sensitive=False),
    default=TimePeriod.EVENING.value,
    show_default=True,
    help="Time of day",
)
@click.option("--volume", default=None, help='Serving volume, e.g. "355mL", "~12 fl oz"')
@click.option("--person-id", type=int, default=None, help="Owner (default: from config)")
@click.pass_context
def entry_add(ctx, drink_id, quantity, drank_on, time_period, volume, person_id):
    """Log QUANTITY servings (e.g. "2", "1-2", "~3") of DRINK_ID."""
    try:
        config = get_config(ctx)
        low, high = parse_quantity(quantity)
        amount, unit = parse_volume(volume) or (None, None)
        if person_id is None:
            person_id = config.default_person_id

        db = get_db(ctx)
        with db.session_scope():
            db.people.get_or_create(person_id)
            created = db.entries.create(
                {
                    "person_id": person_id,
                    "drink_id": drink_id,
                    "drank_on": drank_on or date.today(),
                    "time_period": time_period,
                    "min_quantity": low,
                    "max_quantity": high,
                    "volume": amount,
                    "volume_unit": unit,
                }
            )
            estimate = db.entries.normalize(created, config.density_constant)
            click.echo(
                f"✅ Logged entry {created.id}: {created.quantity_display} × "
                f"{created.drink.name} ({_format_units(estimate, config.approx_modifier)})"
            )

    except DrinkLogError as e:
        handle_cli_error(
            ctx, e, "entry_add", additional_context={"drink_id": drink_id}
        )


@entry.command("list")
@click.option("--person-id", type=int, default=None, help="Owner (default: from config)")
@click.option("--from", "start", default=None, help="Earliest ISO date")
@click.option("--to", "end", default=None, help="Latest ISO date")
@click.pass_context
def entry_list(ctx, person_id, start, end):
    """List entries with their standard-unit ranges."""
    try:
        config = get_config(ctx)
        if person_id is None:
            person_id = config.default_person_id

        db = get_db(ctx)
        with db.session_scope():
            entries = db.entries.list_for_person(person_id, start, end)

            if not entries:
                click.echo("No entries found")
                return

            click.echo(f"\n📅 Entries ({len(entries)}):")
            for item in entries:
                estimate = db.entries.normalize(item, config.density_constant)
                volume = f" @ {item.volume_display}" if item.volume is not None else ""
                click.echo(
                    f"  {item.drank_on.isoformat()} {item.time_period.value:<9} "
                    f"{item.quantity_display} × {item.drink.name}{volume}  "
                    f"{_format_units(estimate, config.approx_modifier)}"
                )

    except DrinkLogError as e:
        handle_cli_error(ctx, e, "entry_list", additional_context={"person_id": person_id})


def _format_units(estimate, modifier: float) -> str:
    low, high = estimate.bounds(modifier)
    prefix = "~" if estimate.is_approximate else ""
    if round(low, 2) == round(high, 2):
        return f"{prefix}{low:.2f} units"
    return f"{prefix}{low:.2f}-{high:.2f} units"
