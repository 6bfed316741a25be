"""Proposal domain service and the proposal-quotation binding.

A proposal embeds a quotation snapshot derived from its commercial items.
The snapshot is a denormalized copy: it is rebuilt from scratch from the
current items on every save and never patched.
"""

import logging
from dataclasses import replace
from datetime import date, datetime, UTC
from typing import Any, Iterable, Optional

from bizdocs.database.base import Database
from bizdocs.domain.entities import (
    CommercialItem,
    Customer,
    Flat,
    LineItem,
    NO_DISCOUNT,
    PricingDocument,
    Proposal,
    ProposalQuotationBinding,
    QuotationRecord,
    VersionEntry,
)
from bizdocs.domain.errors import NotFoundError, ValidationError, proposal_not_found
from bizdocs.domain.pricing import FIXED_VAT
from bizdocs.domain.snapshot import build_snapshot
from bizdocs.utils.amount_parser import coerce_number
from bizdocs.utils.date_parser import default_valid_until

log = logging.getLogger("bizdocs.proposal")

PROPOSAL_CURRENCY = "SAR"
DEFAULT_UNIT = "Each"
DEFAULT_CUSTOMER_NAME = "Commercial Proposal Customer"


def make_commercial_item(
    description: str, quantity: Any = 1, unit_price: Any = 0, unit: str = ""
) -> CommercialItem:
    """Build a commercial item from raw input, coercing numeric fields."""
    return CommercialItem(
        description=description,
        quantity=coerce_number(quantity),
        unit_price=coerce_number(unit_price),
        unit=unit or "",
    )


def normalize_commercial_item(item: CommercialItem) -> CommercialItem:
    """Coerce an item's quantity and unit price to the Decimals that get stored."""
    return replace(
        item, quantity=coerce_number(item.quantity), unit_price=coerce_number(item.unit_price)
    )


def renumber(items: Iterable[CommercialItem]) -> tuple[CommercialItem, ...]:
    """Assign serial numbers 1..n in list order."""
    return tuple(replace(item, serial_number=index) for index, item in enumerate(items, start=1))


def commercial_line_items(items: Iterable[CommercialItem]) -> tuple[LineItem, ...]:
    """Convert commercial items to priced line items, in order."""
    return tuple(
        LineItem(
            id=str(index),
            service=item.description or f"Commercial Item {index}",
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            unit=item.unit or DEFAULT_UNIT,
        )
        for index, item in enumerate(items, start=1)
    )


def binding_quote_number(proposal_id: int) -> str:
    return f"QUO-{str(proposal_id)[-8:]}"


def build_binding_snapshot(
    proposal: Proposal,
    items: Iterable[CommercialItem],
    payment_terms: str,
    project_duration_days: Optional[int],
    issue_date: Optional[date] = None,
) -> Optional[dict[str, Any]]:
    """Build the quotation snapshot embedded in a proposal.

    Pricing uses the fixed 15% VAT configuration with no discount. Returns
    None when there are no commercial items.
    """
    line_items = commercial_line_items(items)
    if not line_items:
        return None

    issue_date = issue_date or date.today()
    duration = "" if project_duration_days is None else project_duration_days
    record = QuotationRecord(
        number=binding_quote_number(proposal.id),
        issue_date=issue_date,
        valid_until=default_valid_until(issue_date),
        customer=Customer(
            company_name=proposal.client_company_name or DEFAULT_CUSTOMER_NAME,
            contact_name=proposal.client_contact_person,
            phone=proposal.client_phone,
            email=proposal.client_email,
        ),
        document=PricingDocument(
            collection=Flat(items=line_items),
            discount=NO_DISCOUNT,
            tax_rate=FIXED_VAT.resolve(),
            currency=PROPOSAL_CURRENCY,
        ),
        terms=payment_terms,
        notes=f"Project Duration: {duration} days",
    )
    return build_snapshot(record)


def rebuild_binding(
    binding: ProposalQuotationBinding,
    proposal: Proposal,
    items: Iterable[CommercialItem],
    payment_terms: str,
    project_duration_days: Optional[int],
    issue_date: Optional[date] = None,
) -> ProposalQuotationBinding:
    """Return binding with its snapshot regenerated from items.

    The version label and history are carried over unchanged.
    """
    snapshot = build_binding_snapshot(
        proposal, items, payment_terms, project_duration_days, issue_date=issue_date
    )
    return replace(binding, snapshot=snapshot)


def record_version(
    binding: ProposalQuotationBinding,
    version: str,
    changes: str,
    author: str,
    when: Optional[datetime] = None,
) -> ProposalQuotationBinding:
    """Return binding with a new version entry prepended and the label set.

    Earlier entries are kept as they are; the history only grows.

    Raises:
        ValidationError: If version or changes is empty
    """
    version = (version or "").strip()
    changes = (changes or "").strip()
    if not version:
        raise ValidationError("New version number is required")
    if not changes:
        raise ValidationError("Describe the changes made in this version")

    entry = VersionEntry(
        version=version,
        date=when or datetime.now(UTC),
        author=author,
        changes=changes,
    )
    return replace(binding, version=version, version_history=(entry,) + binding.version_history)


class ProposalService:
    """Service for managing proposals and their embedded quotations."""

    def __init__(self, db: Database):
        """Initialize proposal service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_proposal(
        self,
        title: str,
        owner_id: Optional[str],
        client_company_name: str = "",
        client_contact_person: str = "",
        client_email: str = "",
        client_phone: str = "",
    ) -> int:
        """Create a proposal with an empty binding.

        Returns:
            Proposal ID

        Raises:
            ValidationError: If title is empty
        """
        if not title or not title.strip():
            raise ValidationError("Proposal title is required")
        return self.db.create_proposal(
            title=title.strip(),
            owner_id=owner_id,
            client_company_name=client_company_name,
            client_contact_person=client_contact_person,
            client_email=client_email,
            client_phone=client_phone,
        )

    def get_proposal(self, proposal_id: int) -> Optional[Proposal]:
        """Get proposal by ID."""
        return self.db.get_proposal(proposal_id)

    def require_proposal(self, proposal_id: int) -> Proposal:
        """Get proposal by ID or raise NotFoundError."""
        proposal = self.db.get_proposal(proposal_id)
        if proposal is None:
            raise NotFoundError(proposal_not_found(proposal_id))
        return proposal

    def list_proposals(self, owner_id: Optional[str] = None) -> list[Proposal]:
        """List proposals, optionally filtered by owner."""
        return self.db.list_proposals(owner_id=owner_id)

    def get_commercial_items(self, proposal_id: int) -> list[CommercialItem]:
        """Get a proposal's commercial items in display order."""
        self.require_proposal(proposal_id)
        return self.db.get_commercial_items(proposal_id)

    def save_commercial_items(
        self,
        proposal_id: int,
        items: Iterable[CommercialItem],
        payment_terms: str = "",
        project_duration_days: Optional[int] = None,
    ) -> Proposal:
        """Replace a proposal's commercial items and regenerate its quotation.

        Items are renumbered 1..n. The embedded snapshot is rebuilt from the
        new items; with no items it is cleared.

        Returns:
            The updated proposal

        Raises:
            NotFoundError: If the proposal does not exist
            PersistenceError: If the store rejects the write
        """
        proposal = self.require_proposal(proposal_id)
        items = renumber(normalize_commercial_item(item) for item in items)
        binding = rebuild_binding(
            proposal.binding, proposal, items, payment_terms, project_duration_days
        )

        self.db.save_commercial_items(
            proposal_id=proposal_id,
            items=list(items),
            payment_terms=payment_terms,
            project_duration_days=project_duration_days,
            quotation_data=binding.snapshot,
        )
        log.info(
            "Rebuilt quotation of proposal %s from %d commercial items", proposal_id, len(items)
        )
        return self.require_proposal(proposal_id)

    def update_version(
        self, proposal_id: int, version: str, changes: str, author: str
    ) -> Proposal:
        """Record a new document version for a proposal.

        Args:
            proposal_id: Proposal ID
            version: New version label, e.g. "1.3"
            changes: Description of what changed
            author: Who made the change

        Returns:
            The updated proposal

        Raises:
            ValidationError: If version or changes is empty
            NotFoundError: If the proposal does not exist
        """
        proposal = self.require_proposal(proposal_id)
        binding = record_version(proposal.binding, version, changes, author)
        self.db.update_proposal_version(proposal_id, binding.version, binding.version_history)
        log.info("Proposal %s version %s -> %s", proposal_id, proposal.version, binding.version)
        return self.require_proposal(proposal_id)
