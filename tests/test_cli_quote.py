"""Tests for quote commands."""

import json
import pytest
from openpyxl import Workbook

from bizdocs.cli.main import cli


def invoke(cli_runner, temp_db, *args, user="alice"):
    return cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", user, "quote", *args]
    )


@pytest.fixture
def created_quote(cli_runner, temp_db):
    """Create QUO-2026-0100 through the CLI."""
    result = invoke(
        cli_runner,
        temp_db,
        "create",
        "Acme Trading",
        "--item",
        "Cabling;3;100",
        "--item",
        "Rack;1;250;Each;RK-42",
        "--discount",
        "10",
        "--number",
        "QUO-2026-0100",
        "--date",
        "2026-03-01",
    )
    assert result.exit_code == 0, result.output
    return "QUO-2026-0100"


def test_quote_create(cli_runner, temp_db):
    """Test creating a quotation prints its number and totals."""
    result = invoke(cli_runner, temp_db, "create", "Acme Trading", "--item", "Survey;2;100")

    assert result.exit_code == 0
    assert "Created quotation QUO-" in result.output
    assert "ID:" in result.output
    assert "SAR 200.00" in result.output
    assert "VAT (15%)" in result.output
    assert "SAR 230.00" in result.output


def test_quote_create_scenario_totals(created_quote, temp_db):
    """Test stored totals of a created quotation."""
    record = temp_db.get_quotation_by_number(created_quote)
    assert str(record.document.grand_total) == "569.25"
    assert record.owner_id == "alice"
    assert record.valid_until.isoformat() == "2026-03-31"


def test_quote_create_same_number_updates(cli_runner, temp_db, created_quote):
    """Test that --number of a stored quotation replaces it."""
    result = invoke(
        cli_runner, temp_db, "create", "Acme Trading", "--item", "Audit;1;1000", "--number", created_quote
    )

    assert result.exit_code == 0
    assert f"Updated quotation {created_quote}" in result.output
    assert len(temp_db.list_quotations()) == 1


def test_quote_create_sectioned(cli_runner, temp_db):
    """Test that section prefixes produce a sectioned quotation."""
    result = invoke(
        cli_runner,
        temp_db,
        "create",
        "Acme",
        "--item",
        "Power Infrastructure > UPS;2;900",
        "--item",
        "Commissioning;1;500",
        "--number",
        "QUO-2026-0200",
    )
    assert result.exit_code == 0

    show = invoke(cli_runner, temp_db, "show", "QUO-2026-0200")
    assert "[Power Infrastructure]" in show.output
    assert "[General Services]" in show.output


def test_quote_create_fixed_discount_negative_total(cli_runner, temp_db):
    """Test that a discount above the subtotal is kept and shown negative."""
    result = invoke(
        cli_runner,
        temp_db,
        "create",
        "Acme",
        "--item",
        "Cabling;3;100",
        "--item",
        "Rack;1;250",
        "--discount",
        "600",
        "--discount-type",
        "fixed",
    )
    assert result.exit_code == 0
    assert "-SAR 57.50" in result.output


def test_quote_create_bad_item(cli_runner, temp_db):
    """Test that a malformed item fails."""
    result = invoke(cli_runner, temp_db, "create", "Acme", "--item", "Survey;2")
    assert result.exit_code == 1
    assert "Error: Invalid item" in result.output


def test_quote_create_other_tax_rate_refused(cli_runner, temp_db):
    """Test that VAT cannot be changed on a quotation."""
    result = invoke(cli_runner, temp_db, "create", "Acme", "--item", "Survey;1;10", "--tax-rate", "5")
    assert result.exit_code == 1
    assert "fixed at 15%" in result.output


def test_quote_list_empty(cli_runner, temp_db):
    """Test listing when there are no quotations."""
    result = invoke(cli_runner, temp_db, "list")
    assert result.exit_code == 0
    assert "No quotations found" in result.output


def test_quote_list_by_user(cli_runner, temp_db, created_quote):
    """Test that list shows the current user's quotations unless --all is given."""
    result = invoke(cli_runner, temp_db, "list")
    assert created_quote in result.output
    assert "Acme Trading" in result.output
    assert "SAR 569.25" in result.output

    other = invoke(cli_runner, temp_db, "list", user="bob")
    assert "No quotations found" in other.output

    everyone = invoke(cli_runner, temp_db, "list", "--all", user="bob")
    assert created_quote in everyone.output


def test_quote_show(cli_runner, temp_db, created_quote):
    """Test showing a quotation."""
    result = invoke(cli_runner, temp_db, "show", created_quote)

    assert result.exit_code == 0
    assert f"Quotation {created_quote} [draft]" in result.output
    assert "Rack" in result.output
    assert "Discount (10%)" in result.output
    assert "Saudi Riyals" in result.output


def test_quote_show_missing(cli_runner, temp_db):
    """Test showing an unknown quotation."""
    result = invoke(cli_runner, temp_db, "show", "QUO-0000-0000")
    assert result.exit_code == 1
    assert "not found" in result.output


def test_quote_status(cli_runner, temp_db, created_quote):
    """Test changing status."""
    result = invoke(cli_runner, temp_db, "status", created_quote, "approved")
    assert result.exit_code == 0
    assert "is now approved" in result.output

    listed = invoke(cli_runner, temp_db, "list", "--status", "approved")
    assert created_quote in listed.output


def test_quote_status_invalid_choice(cli_runner, temp_db, created_quote):
    """Test that click rejects unknown statuses."""
    result = invoke(cli_runner, temp_db, "status", created_quote, "archived")
    assert result.exit_code == 2


def test_quote_delete(cli_runner, temp_db, created_quote):
    """Test deleting with --yes."""
    result = invoke(cli_runner, temp_db, "delete", created_quote, "--yes")
    assert result.exit_code == 0
    assert f"Deleted quotation {created_quote}" in result.output
    assert temp_db.get_quotation_by_number(created_quote) is None


def test_quote_delete_cancelled(cli_runner, temp_db, created_quote):
    """Test that declining the prompt keeps the quotation."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "quote", "delete", created_quote],
        input="n\n",
    )
    assert "Cancelled" in result.output
    assert temp_db.quotation_number_exists(created_quote)


def test_quote_export_stdout(cli_runner, temp_db, created_quote):
    """Test exporting JSON to stdout."""
    result = invoke(cli_runner, temp_db, "export", created_quote)

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["number"] == created_quote
    assert data["total"] == data["grandTotal"]
    assert data["discountPercent"] == "10"


def test_quote_export_to_file(cli_runner, temp_db, created_quote, tmp_path):
    """Test exporting JSON to a file."""
    output = tmp_path / "quote.json"
    result = invoke(cli_runner, temp_db, "export", created_quote, "--output", str(output))

    assert result.exit_code == 0
    data = json.loads(output.read_text(encoding="utf-8"))
    assert data["customer"]["companyName"] == "Acme Trading"


def test_quote_export_blocked(cli_runner, temp_db):
    """Test that a quotation with a zero total cannot be exported."""
    invoke(cli_runner, temp_db, "create", "Acme", "--item", "Survey;1;0", "--number", "QUO-2026-0300")

    result = invoke(cli_runner, temp_db, "export", "QUO-2026-0300")
    assert result.exit_code == 1
    assert "Cannot export QUO-2026-0300" in result.output
    assert "total is zero" in result.output


def test_quote_import(cli_runner, temp_db, tmp_path):
    """Test importing quotations from a workbook."""
    path = tmp_path / "quotes.xlsx"
    workbook = Workbook()
    sheet = workbook.active
    sheet.append(["Customer", "Service", "Qty", "Price"])
    sheet.append(["Acme", "Survey", 1, 500])
    sheet.append(["Gulf Tech", "Audit", 2, 300])
    sheet.append([None, "Stray", 1, 1])
    workbook.save(path)

    result = invoke(cli_runner, temp_db, "import", str(path))

    assert result.exit_code == 0
    assert "Imported: 2 quotations" in result.output
    assert "Row 4: no customer name" in result.output
    assert len(temp_db.list_quotations(owner_id="alice")) == 2


def test_quote_import_dry_run(cli_runner, temp_db, tmp_path):
    """Test that --dry-run saves nothing."""
    path = tmp_path / "quotes.xlsx"
    workbook = Workbook()
    workbook.active.append(["Customer", "Service", "Qty", "Price"])
    workbook.active.append(["Acme", "Survey", 1, 500])
    workbook.save(path)

    result = invoke(cli_runner, temp_db, "import", str(path), "--dry-run")

    assert result.exit_code == 0
    assert "Dry run" in result.output
    assert "SAR 575.00" in result.output
    assert temp_db.list_quotations() == []
