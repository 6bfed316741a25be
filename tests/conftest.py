"""Shared pytest fixtures for bizdocs tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from bizdocs.database.factories import create_sqlite_database
from bizdocs.domain.entities import (
    Customer,
    Discount,
    DiscountType,
    Flat,
    LineItem,
    PricingDocument,
    QuotationRecord,
    Section,
    Sectioned,
)
from bizdocs.domain.excel_import import ExcelImportService
from bizdocs.domain.proposal import ProposalService
from bizdocs.domain.quotation import QuotationService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def quotation_service(temp_db):
    """Create a QuotationService with a temporary database."""
    return QuotationService(temp_db)


@pytest.fixture
def proposal_service(temp_db):
    """Create a ProposalService with a temporary database."""
    return ProposalService(temp_db)


@pytest.fixture
def excel_import_service(temp_db):
    """Create an ExcelImportService with a temporary database."""
    return ExcelImportService(temp_db)


@pytest.fixture
def sample_items():
    """Two priced line items: 2 x 100 and 1 x 50."""
    return (
        LineItem(id="a", service="Site survey", quantity=Decimal("2"), unit_price=Decimal("100")),
        LineItem(id="b", service="Report", quantity=Decimal("1"), unit_price=Decimal("50")),
    )


@pytest.fixture
def sample_customer():
    """A customer with every field filled in."""
    return Customer(
        company_name="Acme Trading",
        contact_name="Sara Ali",
        phone="+966 11 000 0000",
        email="sara@acme.example",
        cr_number="1010101010",
        vat_number="300000000000003",
    )


@pytest.fixture
def sample_record(sample_items, sample_customer):
    """An unsaved flat quotation: subtotal 250, 10% discount, 15% VAT."""
    return QuotationRecord(
        number="QUO-2026-0001",
        issue_date=date(2026, 3, 1),
        valid_until=date(2026, 3, 31),
        customer=sample_customer,
        document=PricingDocument(
            collection=Flat(items=sample_items),
            discount=Discount(DiscountType.PERCENTAGE, Decimal("10")),
            tax_rate=Decimal("15"),
            currency="SAR",
        ),
        terms="Payment: 100%",
        notes="Call before delivery",
    )


@pytest.fixture
def sectioned_record(sample_record, sample_items):
    """The sample record with its items split over two sections."""
    collection = Sectioned(
        sections=(
            Section(id="s1", title="Professional Services & Integration", line_items=sample_items[:1]),
            Section(id="s2", title="Training & Support", line_items=sample_items[1:]),
        )
    )
    document = PricingDocument(
        collection=collection,
        discount=sample_record.document.discount,
        tax_rate=sample_record.document.tax_rate,
        currency="SAR",
    )
    return QuotationRecord(
        number="QUO-2026-0002",
        issue_date=sample_record.issue_date,
        valid_until=sample_record.valid_until,
        customer=sample_record.customer,
        document=document,
    )


@pytest.fixture
def sample_proposal(proposal_service):
    """Create a sample proposal and return it."""
    proposal_id = proposal_service.create_proposal(
        title="Campus network upgrade",
        owner_id="alice",
        client_company_name="Acme Trading",
        client_contact_person="Sara Ali",
        client_email="sara@acme.example",
        client_phone="+966 11 000 0000",
    )
    return proposal_service.get_proposal(proposal_id)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
