"""Tests for proposal commands."""

import json
import pytest

from bizdocs.cli.main import cli


def invoke(cli_runner, temp_db, *args, user="alice"):
    return cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--user", user, "proposal", *args]
    )


@pytest.fixture
def proposal_id(cli_runner, temp_db):
    """Create a proposal through the CLI and return its ID."""
    result = invoke(
        cli_runner, temp_db, "create", "Campus network upgrade", "--company", "Acme Trading"
    )
    assert result.exit_code == 0, result.output
    return result.output.split("ID:")[1].strip().rstrip(")")


def test_proposal_create(cli_runner, temp_db):
    """Test creating a proposal."""
    result = invoke(cli_runner, temp_db, "create", "Campus network upgrade")
    assert result.exit_code == 0
    assert "Created proposal 'Campus network upgrade'" in result.output


def test_proposal_create_blank_title(cli_runner, temp_db):
    """Test that a blank title is refused."""
    result = invoke(cli_runner, temp_db, "create", "   ")
    assert result.exit_code == 1
    assert "title is required" in result.output


def test_proposal_list(cli_runner, temp_db, proposal_id):
    """Test listing proposals of the current user."""
    result = invoke(cli_runner, temp_db, "list")
    assert result.exit_code == 0
    assert "Campus network upgrade" in result.output

    assert "No proposals found" in invoke(cli_runner, temp_db, "list", user="bob").output
    assert "Campus network upgrade" in invoke(cli_runner, temp_db, "list", "--all", user="bob").output


def test_proposal_items(cli_runner, temp_db, proposal_id):
    """Test saving commercial items rebuilds the quotation."""
    result = invoke(
        cli_runner,
        temp_db,
        "items",
        proposal_id,
        "--item",
        "Core switch;2;18500;Each",
        "--item",
        "Installation;1;4000",
        "--payment-terms",
        "50% advance",
        "--duration",
        "45",
    )

    assert result.exit_code == 0
    assert "Saved 2 commercial items" in result.output
    assert "SAR 41,000.00" in result.output
    assert "SAR 47,150.00" in result.output

    proposal = temp_db.get_proposal(int(proposal_id))
    assert proposal.quotation_data["notes"] == "Project Duration: 45 days"


def test_proposal_items_cleared(cli_runner, temp_db, proposal_id):
    """Test that saving no items clears the quotation."""
    invoke(cli_runner, temp_db, "items", proposal_id, "--item", "Survey;1;100")
    result = invoke(cli_runner, temp_db, "items", proposal_id)

    assert result.exit_code == 0
    assert "Quotation: none" in result.output
    assert temp_db.get_proposal(int(proposal_id)).quotation_data is None


def test_proposal_items_bad_spec(cli_runner, temp_db, proposal_id):
    """Test that a malformed item fails without saving."""
    result = invoke(cli_runner, temp_db, "items", proposal_id, "--item", "Survey;1")
    assert result.exit_code == 1
    assert "Error: Invalid item" in result.output


def test_proposal_items_missing_proposal(cli_runner, temp_db):
    """Test saving items of an unknown proposal."""
    result = invoke(cli_runner, temp_db, "items", "999", "--item", "Survey;1;100")
    assert result.exit_code == 1
    assert "Proposal 999 not found" in result.output


def test_proposal_version(cli_runner, temp_db, proposal_id):
    """Test recording versions with the current user as author."""
    first = invoke(cli_runner, temp_db, "version", proposal_id, "1.1", "--changes", "Added UPS")
    second = invoke(
        cli_runner, temp_db, "version", proposal_id, "1.2", "--changes", "Less cable", user="bob"
    )

    assert first.exit_code == 0
    assert "now version 1.1 (1 entries in history)" in first.output
    assert "now version 1.2 (2 entries in history)" in second.output

    show = invoke(cli_runner, temp_db, "show", proposal_id)
    assert "Version history" in show.output
    assert "bob: Less cable" in show.output
    assert "alice: Added UPS" in show.output


def test_proposal_version_requires_changes(cli_runner, temp_db, proposal_id):
    """Test that an empty changes text is refused."""
    result = invoke(cli_runner, temp_db, "version", proposal_id, "1.1", "--changes", " ")
    assert result.exit_code == 1
    assert "Describe the changes" in result.output


def test_proposal_show(cli_runner, temp_db, proposal_id):
    """Test showing a proposal with items."""
    invoke(cli_runner, temp_db, "items", proposal_id, "--item", "Survey;1;100", "--duration", "5")
    result = invoke(cli_runner, temp_db, "show", proposal_id)

    assert result.exit_code == 0
    assert "Campus network upgrade (version 1.0)" in result.output
    assert "Client: Acme Trading" in result.output
    assert "Project duration: 5 days" in result.output
    assert "Survey" in result.output
    assert "SAR 115.00" in result.output


def test_proposal_export(cli_runner, temp_db, proposal_id):
    """Test exporting a proposal with its quotation."""
    invoke(cli_runner, temp_db, "items", proposal_id, "--item", "Survey;1;100")
    result = invoke(cli_runner, temp_db, "export", proposal_id)

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["title"] == "Campus network upgrade"
    assert data["quotation_data"]["vat"] == data["quotation_data"]["taxAmount"]
    assert data["quotation_data"]["currency"] == "SAR"


def test_proposal_export_without_items(cli_runner, temp_db, proposal_id):
    """Test that a proposal without items cannot be exported."""
    result = invoke(cli_runner, temp_db, "export", proposal_id)
    assert result.exit_code == 1
    assert "add at least one commercial item" in result.output
