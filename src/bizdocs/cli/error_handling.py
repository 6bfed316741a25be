"""CLI error handling helpers."""

import logging

import click

from bizdocs.domain.errors import DomainError

log = logging.getLogger("bizdocs.cli")


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error on stderr and exit with status 1.

    The error type goes to the debug log so --verbose shows what was raised.
    """
    log.debug("%s in '%s'", type(error).__name__, ctx.command_path, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def echo_problems(label: str, problems: list[str]) -> None:
    """Print a heading and one indented line per problem.

    Both go to stdout with the rest of the import report.
    """
    if not problems:
        return
    click.echo(f"  {label}: {len(problems)}")
    for problem in problems:
        click.echo(f"    {problem}")
