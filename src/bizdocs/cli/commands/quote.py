"""Quotation commands."""

from pathlib import Path

import click

from bizdocs.cli.error_handling import echo_problems, handle_domain_error
from bizdocs.domain.entities import (
    Customer,
    Flat,
    QuotationRecord,
    QuotationStatus,
    Section,
    Sectioned,
)
from bizdocs.domain.excel_import import ExcelImportService
from bizdocs.domain.export import prepare_quotation_export
from bizdocs.domain.formatting import CURRENCIES, format_money, totals_summary
from bizdocs.domain.pricing import make_discount
from bizdocs.domain.quotation import QuotationService
from bizdocs.domain.section import DEFAULT_SECTION_TITLE, flatten_items
from bizdocs.domain.snapshot import snapshot_to_json
from bizdocs.utils.date_parser import parse_date
from bizdocs.utils.item_spec import parse_item_spec


def build_collection(item_specs: tuple[str, ...]) -> Flat | Sectioned:
    """Build a priced collection from item specs.

    When any spec names a section, the result is sectioned and items
    without one go to the default section.
    """
    parsed = [parse_item_spec(spec) for spec in item_specs]
    if not any(section for section, _ in parsed):
        return Flat(items=tuple(item for _, item in parsed))

    grouped: dict[str, list] = {}
    for section, item in parsed:
        grouped.setdefault(section or DEFAULT_SECTION_TITLE, []).append(item)
    return Sectioned(
        sections=tuple(
            Section(id=str(index), title=title, line_items=tuple(items))
            for index, (title, items) in enumerate(grouped.items(), start=1)
        )
    )


def echo_totals(record: QuotationRecord) -> None:
    for label, text in totals_summary(record.document):
        click.echo(f"  {label + ':':20s} {text:>20s}")


@click.group()
def quote_group():
    """Manage quotations."""
    pass


@quote_group.command("create")
@click.argument("company", metavar="COMPANY_NAME")
@click.option(
    "--item",
    "items",
    multiple=True,
    help="Line item as '[SECTION > ]SERVICE;QTY;PRICE[;UNIT[;PART]]' (repeatable)",
)
@click.option("--contact", default="", help="Contact person")
@click.option("--phone", default="", help="Customer phone")
@click.option("--email", default="", help="Customer email")
@click.option("--cr", "cr_number", default="", help="Commercial registration number")
@click.option("--vat", "vat_number", default="", help="Customer VAT number")
@click.option("--discount", default="0", help="Discount value")
@click.option(
    "--discount-type",
    type=click.Choice(["percentage", "fixed"]),
    default="percentage",
    show_default=True,
    help="Percentage of the subtotal, or a fixed amount",
)
@click.option("--tax-rate", help="Tax rate in percent (VAT is fixed at 15%)")
@click.option(
    "--currency",
    type=click.Choice(sorted(CURRENCIES)),
    default="SAR",
    show_default=True,
)
@click.option("--date", "issue_date", help="Issue date (defaults to today)")
@click.option("--valid-until", help="Validity date (defaults to 30 days after issue)")
@click.option("--terms", help="Terms text (defaults to the standard terms)")
@click.option("--notes", default="", help="Notes")
@click.option("--number", help="Quote number; an existing quotation with it is replaced")
@click.pass_context
def create_quote(
    ctx,
    company: str,
    items: tuple[str, ...],
    contact: str,
    phone: str,
    email: str,
    cr_number: str,
    vat_number: str,
    discount: str,
    discount_type: str,
    tax_rate: str | None,
    currency: str,
    issue_date: str | None,
    valid_until: str | None,
    terms: str | None,
    notes: str,
    number: str | None,
):
    """Create or replace a quotation.

    Quotations are saved by number: giving --number of a stored quotation
    replaces it, anything else inserts a new one.

    Examples:
        bizdocs quote create "Acme Trading" --item "Site survey;1;2500"
        bizdocs quote create "Acme" --item "Cabling > Cat6 run;10;45;m" --discount 10
        bizdocs quote create "Acme" --item "Audit;1;900" --discount 100 --discount-type fixed
    """
    db = ctx.obj["db"]
    service = QuotationService(db)

    try:
        issue = parse_date(issue_date) if issue_date else None
        valid = parse_date(valid_until) if valid_until else None
        record = service.new_quotation(
            customer=Customer(
                company_name=company,
                contact_name=contact,
                phone=phone,
                email=email,
                cr_number=cr_number,
                vat_number=vat_number,
            ),
            collection=build_collection(items),
            discount=make_discount(discount_type, discount),
            tax_rate=tax_rate,
            currency=currency,
            issue_date=issue,
            valid_until=valid,
            terms=terms,
            notes=notes,
            number=number,
        )
        replacing = service.get_quotation(record.number) is not None
        quotation_id = service.save_quotation(record, owner_id=ctx.obj["user"])
    except ValueError as e:
        handle_domain_error(ctx, e)

    verb = "Updated" if replacing else "Created"
    click.echo(f"{verb} quotation {record.number} (ID: {quotation_id})")
    echo_totals(record)


@quote_group.command("list")
@click.option(
    "--status",
    type=click.Choice([s.value for s in QuotationStatus]),
    help="Only show quotations with this status",
)
@click.option("--all", "all_owners", is_flag=True, help="Include quotations of every user")
@click.pass_context
def list_quotes(ctx, status: str | None, all_owners: bool):
    """List quotations, newest first."""
    db = ctx.obj["db"]
    service = QuotationService(db)

    owner_id = None if all_owners else ctx.obj["user"]
    quotations = service.list_quotations(owner_id=owner_id, status=status)
    if not quotations:
        click.echo("No quotations found.")
        return

    click.echo("\nQuotations:")
    click.echo("-" * 90)
    for record in quotations:
        total = format_money(record.document.grand_total, record.document.currency)
        click.echo(
            f"{record.number:15s} | {record.issue_date} | "
            f"{record.customer.company_name[:25]:25s} | {record.status.value:8s} | {total:>16s}"
        )


@quote_group.command("show")
@click.argument("number", metavar="QUOTE_NUMBER")
@click.pass_context
def show_quote(ctx, number: str):
    """Show a quotation with its line items and totals."""
    db = ctx.obj["db"]
    service = QuotationService(db)

    try:
        record = service.require_quotation(number)
    except ValueError as e:
        handle_domain_error(ctx, e)

    customer = record.customer
    currency = record.document.currency
    click.echo(f"\nQuotation {record.number} [{record.status.value}]")
    click.echo(f"  Date: {record.issue_date}    Valid until: {record.valid_until}")
    click.echo(f"  Customer: {customer.company_name}")
    if customer.contact_name:
        click.echo(f"  Contact: {customer.contact_name}")
    for label, value in (
        ("Phone", customer.phone),
        ("Email", customer.email),
        ("CR", customer.cr_number),
        ("VAT no.", customer.vat_number),
    ):
        if value:
            click.echo(f"  {label}: {value}")

    click.echo("\n  #   Service                          Qty      Unit price            Total")
    click.echo("  " + "-" * 86)
    current_section = None
    for serial, (section, item) in enumerate(flatten_items(record.document.collection), start=1):
        if section is not None and section != current_section:
            click.echo(f"  [{section}]")
            current_section = section
        unit = f" {item.unit}" if item.unit else ""
        click.echo(
            f"  {serial:<3d} {item.service[:30]:30s} {str(item.quantity) + unit:>10s} "
            f"{format_money(item.unit_price, currency):>15s} {format_money(item.total, currency):>16s}"
        )
    click.echo()
    echo_totals(record)

    if record.terms:
        click.echo(f"\nTerms:\n{record.terms}")
    if record.notes:
        click.echo(f"\nNotes: {record.notes}")


@quote_group.command("status")
@click.argument("number", metavar="QUOTE_NUMBER")
@click.argument("status", type=click.Choice([s.value for s in QuotationStatus]))
@click.pass_context
def set_status(ctx, number: str, status: str):
    """Set the status of a quotation.

    Examples:
        bizdocs quote status QUO-2026-0042 sent
    """
    db = ctx.obj["db"]
    service = QuotationService(db)

    try:
        record = service.update_status(number, status)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Quotation {record.number} is now {record.status.value}")


@quote_group.command("delete")
@click.argument("number", metavar="QUOTE_NUMBER")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_quote(ctx, number: str, yes: bool):
    """Delete a quotation."""
    db = ctx.obj["db"]
    service = QuotationService(db)

    if not yes and not click.confirm(f"Delete quotation {number}?"):
        click.echo("Cancelled.")
        return

    try:
        service.delete_quotation(number)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted quotation {number}")


@quote_group.command("export")
@click.argument("number", metavar="QUOTE_NUMBER")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write JSON to this file")
@click.pass_context
def export_quote(ctx, number: str, output: str | None):
    """Export quotation data as JSON for document rendering.

    Export is refused when the quotation has no company name, no named
    service, or a zero total.
    """
    db = ctx.obj["db"]
    service = QuotationService(db)

    try:
        data = prepare_quotation_export(service.require_quotation(number))
    except ValueError as e:
        handle_domain_error(ctx, e)

    text = snapshot_to_json(data)
    if output:
        Path(output).write_text(text + "\n", encoding="utf-8")
        click.echo(f"Exported {number} to {output}")
    else:
        click.echo(text)


@quote_group.command("import")
@click.argument("workbook", type=click.Path(exists=True, dir_okay=False))
@click.option("--dry-run", is_flag=True, help="Show the quotations without saving them")
@click.pass_context
def import_quotes(ctx, workbook: str, dry_run: bool):
    """Import quotations from an Excel workbook.

    The first sheet is read; each distinct customer becomes one quotation
    and each row one of its line items.
    """
    db = ctx.obj["db"]
    service = ExcelImportService(db)

    try:
        result = service.import_workbook(workbook, owner_id=ctx.obj["user"], save=not dry_run)
    except (ValueError, FileNotFoundError) as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:" if not dry_run else "\nDry run, nothing saved:")
    for record in result["quotations"]:
        total = format_money(record.document.grand_total, record.document.currency)
        click.echo(f"  {record.number}  {record.customer.company_name}  {total}")
    click.echo(f"  Imported: {result['imported']} quotations")
    echo_problems("Skipped", result["skipped"])
    echo_problems("Errors", result["errors"])


def register_commands(cli):
    """Register quote commands with main CLI."""
    cli.add_command(quote_group, name="quote")
