"""Main CLI entry point."""

import click
from bizdocs.database.factories import create_sqlite_database
from bizdocs.logging_config import setup_logging

# Import and register all commands at module level
from bizdocs.cli.commands import proposal, quote

DEFAULT_USER = "local"


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BIZDOCS_DB_PATH environment variable)",
    envvar="BIZDOCS_DB_PATH",
)
@click.option(
    "--user",
    default=DEFAULT_USER,
    show_default=True,
    help="Owner of created documents and author of version entries",
    envvar="BIZDOCS_USER",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug output to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, user: str, verbose: bool):
    """Bizdocs - Quotations and commercial proposals.

    Build priced quotations, keep proposals and their embedded quotations in
    step, and prepare both for export.
    """
    ctx.ensure_object(dict)
    setup_logging("DEBUG" if verbose else None)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user"] = user
        ctx.call_on_close(db.disconnect)


# Register all commands
quote.register_commands(cli)
proposal.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
