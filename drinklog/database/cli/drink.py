"""
Drink Catalog Commands
----------------------

Register and browse catalog drinks.

Commands:
    - add: Register a drink
    - show: Display one drink
    - list: List drinks, optionally filtered by name

Usage:
    drinklog drink add "Guinness" --abv 4.2%
    drinklog drink add "Double Whisky" --abv ~40%
    drinklog drink show 3
    drinklog drink list --search stout
"""
import sys
import click

from drinklog.core.logging_manager import handle_cli_error
from drinklog.core.exceptions import DrinkLogError
from drinklog.ledger.parsers import multiplier_for_name, parse_abv
from . import get_db


@click.group()
@click.pass_context
def drink(ctx: click.Context) -> None:
    """Manage the drink catalog."""
    pass


@drink.command("add")
@click.argument("name")
@click.option("--abv", default=None, help='ABV or range, e.g. "5%", "4-6%", "~40%"')
@click.option(
    "--multiplier",
    type=float,
    default=None,
    help="Servings one serving counts as (default: 2 for doubles, else 1)",
)
@click.pass_context
def drink_add(ctx, name, abv, multiplier):
    """Register a new drink."""
    try:
        low, high = parse_abv(abv) or (None, None)
        if multiplier is None:
            multiplier = multiplier_for_name(name)

        db = get_db(ctx)
        with db.session_scope():
            created = db.drinks.register(name, low, high, multiplier)
            click.echo(f"✅ Registered drink {created.id}: {created}")

    except DrinkLogError as e:
        handle_cli_error(ctx, e, "drink_add", additional_context={"name": name})


@drink.command("show")
@click.argument("drink_id", type=int)
@click.pass_context
def drink_show(ctx, drink_id):
    """Display a single drink."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            found = db.drinks.get(drink_id)
            if found is None:
                click.echo(f"❌ No drink found with id {drink_id}", err=True)
                sys.exit(1)

            click.echo(f"\n🍺 {found.name}")
            click.echo(f"  ID: {found.id}")
            click.echo(f"  ABV: {found.abv_display}")
            click.echo(f"  Multiplier: {found.multiplier:g}")
            click.echo(f"  Entries: {db.drinks.reference_count(found)}")

    except DrinkLogError as e:
        handle_cli_error(ctx, e, "drink_show", additional_context={"drink_id": drink_id})


@drink.command("list")
@click.option("--search", default=None, help="Only drinks whose name contains this")
@click.pass_context
def drink_list(ctx, search):
    """List catalog drinks."""
    try:
        db = get_db(ctx)
        with db.session_scope():
            drinks = db.drinks.search(search)

            if not drinks:
                click.echo("No drinks found")
                return

            click.echo(f"\n🍺 Drinks ({len(drinks)}):")
            for item in drinks:
                multiplier = f" ×{item.multiplier:g}" if item.multiplier != 1.0 else ""
                click.echo(f"  {item.id:>4}  {item.name} ({item.abv_display}){multiplier}")

    except DrinkLogError as e:
        handle_cli_error(ctx, e, "drink_list")
