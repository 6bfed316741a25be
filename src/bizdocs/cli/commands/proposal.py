"""Proposal commands."""

from pathlib import Path

import click

from bizdocs.cli.error_handling import handle_domain_error
from bizdocs.domain.export import prepare_proposal_export
from bizdocs.domain.formatting import format_money
from bizdocs.domain.proposal import PROPOSAL_CURRENCY, ProposalService
from bizdocs.domain.snapshot import snapshot_to_json, snapshot_totals
from bizdocs.utils.item_spec import parse_commercial_item_spec


def echo_quotation_totals(snapshot: dict | None) -> None:
    if not snapshot:
        click.echo("  Quotation: none (no commercial items)")
        return
    totals = snapshot_totals(snapshot)
    currency = snapshot.get("currency", PROPOSAL_CURRENCY)
    click.echo(f"  Quotation {snapshot.get('number', '')}:")
    click.echo(f"    Subtotal: {format_money(totals.subtotal, currency)}")
    click.echo(f"    VAT ({snapshot.get('taxRate', '15')}%): {format_money(totals.tax_amount, currency)}")
    click.echo(f"    Total: {format_money(totals.grand_total, currency)}")


@click.group()
def proposal_group():
    """Manage commercial proposals."""
    pass


@proposal_group.command("create")
@click.argument("title")
@click.option("--company", default="", help="Client company name")
@click.option("--contact", default="", help="Client contact person")
@click.option("--email", default="", help="Client email")
@click.option("--phone", default="", help="Client phone")
@click.pass_context
def create_proposal(ctx, title: str, company: str, contact: str, email: str, phone: str):
    """Create a new proposal.

    Examples:
        bizdocs proposal create "Campus network upgrade" --company "Acme Trading"
    """
    db = ctx.obj["db"]
    service = ProposalService(db)

    try:
        proposal_id = service.create_proposal(
            title=title,
            owner_id=ctx.obj["user"],
            client_company_name=company,
            client_contact_person=contact,
            client_email=email,
            client_phone=phone,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created proposal '{title.strip()}' (ID: {proposal_id})")


@proposal_group.command("list")
@click.option("--all", "all_owners", is_flag=True, help="Include proposals of every user")
@click.pass_context
def list_proposals(ctx, all_owners: bool):
    """List proposals."""
    db = ctx.obj["db"]
    service = ProposalService(db)

    proposals = service.list_proposals(owner_id=None if all_owners else ctx.obj["user"])
    if not proposals:
        click.echo("No proposals found.")
        return

    click.echo("\nProposals:")
    click.echo("-" * 80)
    for proposal in proposals:
        total = "-"
        if proposal.quotation_data:
            total = format_money(
                snapshot_totals(proposal.quotation_data).grand_total, PROPOSAL_CURRENCY
            )
        click.echo(
            f"ID: {proposal.id:3d} | {proposal.title[:30]:30s} | v{proposal.version:6s} | {total:>16s}"
        )


@proposal_group.command("show")
@click.argument("proposal_id", type=int, metavar="PROPOSAL_ID")
@click.pass_context
def show_proposal(ctx, proposal_id: int):
    """Show a proposal with its commercial items, quotation and version history."""
    db = ctx.obj["db"]
    service = ProposalService(db)

    try:
        proposal = service.require_proposal(proposal_id)
        items = service.get_commercial_items(proposal_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nProposal {proposal.id}: {proposal.title} (version {proposal.version})")
    if proposal.client_company_name:
        click.echo(f"  Client: {proposal.client_company_name}")
    if proposal.client_contact_person:
        click.echo(f"  Contact: {proposal.client_contact_person}")
    if proposal.payment_terms:
        click.echo(f"  Payment terms: {proposal.payment_terms}")
    if proposal.project_duration_days is not None:
        click.echo(f"  Project duration: {proposal.project_duration_days} days")

    if items:
        click.echo("\n  Commercial items:")
        for item in items:
            unit = f" {item.unit}" if item.unit else ""
            click.echo(
                f"  {item.serial_number:3d}. {item.description[:35]:35s} "
                f"{str(item.quantity) + unit:>10s} x {format_money(item.unit_price, PROPOSAL_CURRENCY)}"
                f" = {format_money(item.total, PROPOSAL_CURRENCY)}"
            )
    click.echo()
    echo_quotation_totals(proposal.quotation_data)

    if proposal.version_history:
        click.echo("\n  Version history:")
        for entry in proposal.version_history:
            click.echo(
                f"    {entry.version:6s} {entry.date:%Y-%m-%d %H:%M} {entry.author}: {entry.changes}"
            )


@proposal_group.command("items")
@click.argument("proposal_id", type=int, metavar="PROPOSAL_ID")
@click.option(
    "--item",
    "items",
    multiple=True,
    help="Commercial item as 'DESCRIPTION;QTY;PRICE[;UNIT]' (repeatable)",
)
@click.option("--payment-terms", default="", help="Payment terms")
@click.option("--duration", type=int, help="Project duration in days")
@click.pass_context
def save_items(
    ctx, proposal_id: int, items: tuple[str, ...], payment_terms: str, duration: int | None
):
    """Replace a proposal's commercial items.

    The embedded quotation is rebuilt from the given items. With no --item
    the items are removed and the quotation is cleared.

    Examples:
        bizdocs proposal items 3 --item "Core switch;2;18500;Each" --duration 45
    """
    db = ctx.obj["db"]
    service = ProposalService(db)

    try:
        parsed = [parse_commercial_item_spec(spec) for spec in items]
        proposal = service.save_commercial_items(
            proposal_id, parsed, payment_terms=payment_terms, project_duration_days=duration
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Saved {len(parsed)} commercial items for proposal {proposal_id}")
    echo_quotation_totals(proposal.quotation_data)


@proposal_group.command("version")
@click.argument("proposal_id", type=int, metavar="PROPOSAL_ID")
@click.argument("version")
@click.option("--changes", required=True, help="What changed in this version")
@click.pass_context
def record_version(ctx, proposal_id: int, version: str, changes: str):
    """Record a new document version.

    Examples:
        bizdocs proposal version 3 1.1 --changes "Added UPS units"
    """
    db = ctx.obj["db"]
    service = ProposalService(db)

    try:
        proposal = service.update_version(proposal_id, version, changes, author=ctx.obj["user"])
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(
        f"Proposal {proposal_id} is now version {proposal.version} "
        f"({len(proposal.version_history)} entries in history)"
    )


@proposal_group.command("export")
@click.argument("proposal_id", type=int, metavar="PROPOSAL_ID")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write JSON to this file")
@click.pass_context
def export_proposal(ctx, proposal_id: int, output: str | None):
    """Export proposal data, with its quotation, as JSON."""
    db = ctx.obj["db"]
    service = ProposalService(db)

    try:
        data = prepare_proposal_export(service.require_proposal(proposal_id))
    except ValueError as e:
        handle_domain_error(ctx, e)

    text = snapshot_to_json(data)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Exported proposal {proposal_id} to {output}")
    else:
        click.echo(text)


def register_commands(cli):
    """Register proposal commands with main CLI."""
    cli.add_command(proposal_group, name="proposal")
