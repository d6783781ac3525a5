#!/usr/bin/env python3
"""
DrinkLog Database Management CLI
--------------------------------

Command-line interface over the drinks ledger database.

This module provides the main CLI group and shared context setup
for all commands.

Command Structure:
    - Setup & Initialization (init)
    - Migration Management (migration)
    - Legacy Log Import (import)
    - Drink Catalog (drink)
    - Entries (entry)

Usage:
    # Get general help
    drinklog --help

    # Get help for a specific command group
    drinklog drink --help

    # Get help for a specific command
    drinklog entry add --help
"""
import click
import logging
from pathlib import Path

from drinklog.core.config import LedgerConfig, load_config
from drinklog.core.paths import DB_PATH, ALEMBIC_DIR, LOG_DIR, CONFIG_PATH
from drinklog.database.manager import DrinkLogDB


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    default=str(DB_PATH),
    help="Path to database file",
)
@click.option(
    "--alembic-dir",
    type=click.Path(),
    default=str(ALEMBIC_DIR),
    help="Path to Alembic directory",
)
@click.option(
    "--log-dir",
    type=click.Path(),
    default=str(LOG_DIR),
    help="Path to log directory",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(),
    default=str(CONFIG_PATH),
    help="Path to YAML configuration file",
)
@click.option(
    "--verbose",
    is_flag=True,
    help="Show detailed errors and tracebacks",
)
@click.pass_context
def cli(ctx, db_path, alembic_dir, log_dir, config_path, verbose):
    """DrinkLog Database Management CLI"""

    # Suppress Alembic INFO logging by default
    logging.getLogger("alembic").setLevel(logging.WARNING)

    ctx.ensure_object(dict)
    ctx.obj["db_path"] = Path(db_path)
    ctx.obj["alembic_dir"] = Path(alembic_dir)
    ctx.obj["log_dir"] = Path(log_dir)
    ctx.obj["config_path"] = Path(config_path)
    ctx.obj["verbose"] = verbose


def get_db(ctx) -> DrinkLogDB:
    """Get or create database instance from context."""
    if "db" not in ctx.obj:
        ctx.obj["db"] = DrinkLogDB(
            db_path=ctx.obj["db_path"],
            alembic_dir=ctx.obj["alembic_dir"],
            log_dir=ctx.obj["log_dir"],
        )
        ctx.obj["logger"] = ctx.obj["db"].logger
    return ctx.obj["db"]


def get_config(ctx) -> LedgerConfig:
    """Get or load the ledger configuration from context."""
    if "config" not in ctx.obj:
        ctx.obj["config"] = load_config(ctx.obj["config_path"])
    return ctx.obj["config"]


# Import and register command modules
# These imports must come after CLI group definition
from .setup import init  # noqa: E402
from .migration import migration  # noqa: E402
from .importer import import_log  # noqa: E402
from .drink import drink  # noqa: E402
from .entry import entry  # noqa: E402

# Register top-level commands
cli.add_command(init)
cli.add_command(import_log)

# Register command groups
cli.add_command(migration)
cli.add_command(drink)
cli.add_command(entry)


if __name__ == "__main__":
    cli(obj={})
