"""
Migration Management Commands
------------------------------

Schema migration commands for ledger databases, using Alembic.

Revision 3a1f5c2e9b70 is the generation-1 layout (time period and volume
unit stored inline on each entry); 7c4d9e1b2f86 moves them into the
time_period and volume_unit lookup tables and rewrites every entry.

Commands:
    - upgrade: Upgrade to a revision (rewrites entries when crossing generations)
    - downgrade: Downgrade to a revision
    - status: Show the current and latest revision and schema generation

Usage:
    # Bring an old ledger up to the lookup-table layout
    drinklog migration upgrade

    # Go back to the generation-1 layout
    drinklog migration downgrade 3a1f5c2e9b70

    # Show current migration status
    drinklog migration status
"""
import click

from drinklog.core.logging_manager import handle_cli_error
from drinklog.core.exceptions import DatabaseError
from . import get_db

SCHEMA_GENERATIONS = {
    "3a1f5c2e9b70": "generation 1 (inline time period and volume unit)",
    "7c4d9e1b2f86": "generation 2 (lookup tables)",
}


def describe_revision(revision):
    """Revision id with its schema generation, for display."""
    if revision is None:
        return "None (empty database)"
    generation = SCHEMA_GENERATIONS.get(revision)
    return f"{revision} - {generation}" if generation else revision


@click.group()
@click.pass_context
def migration(ctx: click.Context) -> None:
    """Ledger schema migrations (Alembic operations)."""
    pass


@migration.command("upgrade")
@click.option("--revision", default="head", help="Target revision (default: head)")
@click.pass_context
def migration_upgrade(ctx, revision):
    """Upgrade the ledger schema, migrating existing entries."""
    try:
        db = get_db(ctx)
        before = db.get_migration_history().get("current_revision")
        click.echo(f"⬆️  Upgrading ledger from {describe_revision(before)} to: {revision}")
        db.upgrade_database(revision)

        after = db.get_migration_history().get("current_revision")
        click.echo(f"✅ Ledger schema at {describe_revision(after)}")

    except DatabaseError as e:
        handle_cli_error(
            ctx,
            e,
            "migration_upgrade",
            additional_context={"revision": revision},
        )


@migration.command("downgrade")
@click.argument("revision")
@click.pass_context
def migration_downgrade(ctx, revision):
    """Downgrade the ledger schema to REVISION."""
    try:
        click.echo(f"⬇️  Downgrading ledger to: {describe_revision(revision)}")
        db = get_db(ctx)
        db.downgrade_database(revision)
        click.echo("✅ Ledger schema downgraded")

    except DatabaseError as e:
        handle_cli_error(
            ctx,
            e,
            "migration_downgrade",
            additional_context={"revision": revision},
        )


@migration.command("status")
@click.pass_context
def migration_status(ctx):
    """Show current migration status."""
    try:
        db = get_db(ctx)
        status = db.get_migration_history()

        click.echo("\n📊 Migration Status")
        click.echo("=" * 50)
        if "error" in status:
            click.echo(f"⚠️  Error: {status['error']}")
            return

        click.echo(f"Current Revision: {describe_revision(status['current_revision'])}")
        click.echo(f"Latest Revision: {describe_revision(status['head_revision'])}")
        click.echo(f"Status: {status['status']}")
        if status["status"] == "needs_migration":
            click.echo("Run 'drinklog migration upgrade' to migrate existing entries.")

    except DatabaseError as e:
        handle_cli_error(ctx, e, "migration_status")
