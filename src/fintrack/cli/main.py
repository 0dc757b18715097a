"""Main CLI entry point."""

import logging

import click
from fintrack.database.factories import create_database
from fintrack.domain.user import UserService

# Import and register all commands at module level
from fintrack.cli.commands import (
    account,
    category,
    dashboard,
    import_cmd,
    transaction,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to SQLite database file (overrides FINTRACK_DB_PATH environment variable)",
    envvar="FINTRACK_DB_PATH",
)
@click.option(
    "--database-url",
    help="SQLAlchemy database URL, wins over --db-path (FINTRACK_DATABASE_URL)",
    envvar="FINTRACK_DATABASE_URL",
)
@click.option(
    "--owner",
    default="local",
    show_default=True,
    help="Owner whose data the command works on (FINTRACK_OWNER)",
    envvar="FINTRACK_OWNER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level (FINTRACK_LOG_LEVEL)",
    envvar="FINTRACK_LOG_LEVEL",
)
@click.pass_context
def cli(ctx, db_path: str | None, database_url: str | None, owner: str, log_level: str):
    """Fintrack - Personal finance tracking.

    Record income and expenses against accounts, import bank and credit card
    statements, and summarize the current period on a dashboard.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=database_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        UserService(db).ensure_user(owner)
        ctx.obj["db"] = db
        ctx.obj["owner"] = owner
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
import_cmd.register_commands(cli)
dashboard.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
