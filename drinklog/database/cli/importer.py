"""
Legacy Log Import Command
-------------------------

Import a hand-written drinks log (one entry per line).

Usage:
    drinklog import drinks.txt
    drinklog import drinks.txt --person-id 2 --dry-run
"""
import click

from drinklog.core.logging_manager import handle_cli_error
from drinklog.core.exceptions import ConfigError, DatabaseError, ImportParseError
from drinklog.pipeline.txt_import import import_file, setup_logger
from . import get_config, get_db


@click.command("import")
@click.argument("file_path", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--person-id",
    type=int,
    default=None,
    help="Owner of the imported entries (default: from config)",
)
@click.option("--dry-run", is_flag=True, help="Parse and report without writing")
@click.pass_context
def import_log(ctx, file_path, person_id, dry_run):
    """Import entries from a legacy text log."""
    try:
        config = get_config(ctx)
        db = get_db(ctx)
        logger = setup_logger(ctx.obj["log_dir"])
        if person_id is None:
            person_id = config.default_person_id

        click.echo(f"📥 Importing {file_path}{' (dry run)' if dry_run else ''}...")
        stats = import_file(
            file_path, db, person_id=person_id, logger=logger, dry_run=dry_run
        )

        for line_number, message in stats.failures:
            click.echo(f"  ⚠️  line {line_number}: {message}", err=True)
        click.echo(f"✅ {stats.summary()}")

    except (ConfigError, DatabaseError, ImportParseError) as e:
        handle_cli_error(ctx, e, "import_log", additional_context={"file": file_path})
