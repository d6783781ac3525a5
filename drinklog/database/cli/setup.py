"""
Setup & Initialization Commands
--------------------------------

Database initialization commands.

Commands:
    - init: Create the database, or bring an existing one up to date
"""
import click

from drinklog.core.logging_manager import handle_cli_error
from drinklog.core.exceptions import DatabaseError
from . import get_db


@click.command()
@click.pass_context
def init(ctx):
    """Initialize the database (create tables and seed lookup rows)."""
    try:
        click.echo("🚀 Initializing DrinkLog database...")
        db = get_db(ctx)
        click.echo("🗄️  Checking database schema...")
        db.initialize_schema()

        status = db.get_migration_history()
        click.echo(f"✅ Database ready at {db.db_path}")
        click.echo(f"   Revision: {status.get('current_revision', 'None')}")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "init")
