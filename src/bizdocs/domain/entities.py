"""Domain model entities for bizdocs.

These are pure data classes representing commercial documents, independent of
the database schema. Pricing figures are never stored on them: totals are
derived from line items on access, so an entity cannot carry a stale total.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional, Union


class DiscountType(str, Enum):
    """How a discount value is applied to the subtotal."""

    PERCENTAGE = "percentage"
    FIXED = "fixed"


class QuotationStatus(str, Enum):
    """Lifecycle status of a quotation. Transitions are user-driven."""

    DRAFT = "draft"
    SENT = "sent"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class LineItem:
    """A single priced service or product entry."""

    id: str
    service: str = ""
    description: str = ""
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")
    unit: Optional[str] = None
    part_number: Optional[str] = None

    @property
    def total(self) -> Decimal:
        """Quantity times unit price. Always derived."""
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class Section:
    """A titled, ordered group of line items."""

    id: str
    title: str
    line_items: tuple[LineItem, ...] = ()


@dataclass(frozen=True)
class Flat:
    """Priced collection made of a plain list of line items."""

    items: tuple[LineItem, ...] = ()


@dataclass(frozen=True)
class Sectioned:
    """Priced collection made of sections of line items."""

    sections: tuple[Section, ...] = ()


PricedCollection = Union[Flat, Sectioned]


@dataclass(frozen=True)
class Discount:
    """Discount descriptor applied before tax."""

    type: DiscountType = DiscountType.PERCENTAGE
    value: Decimal = Decimal("0")


NO_DISCOUNT = Discount()


@dataclass(frozen=True)
class PricingTotals:
    """Computed figures of a pricing document, in computation order."""

    subtotal: Decimal
    discount_amount: Decimal
    taxable_amount: Decimal
    tax_amount: Decimal
    grand_total: Decimal


@dataclass(frozen=True)
class PricingDocument:
    """Priced collection plus discount, tax rate and currency.

    The computed figures are properties backed by compute_pricing, so they
    always reflect the current items.
    """

    collection: PricedCollection = field(default_factory=Flat)
    discount: Discount = NO_DISCOUNT
    tax_rate: Decimal = Decimal("0")
    currency: str = "SAR"

    @property
    def totals(self) -> PricingTotals:
        # Imported here; pricing depends on these entities
        from bizdocs.domain.pricing import compute_pricing

        return compute_pricing(self.collection, self.discount, self.tax_rate)

    @property
    def subtotal(self) -> Decimal:
        return self.totals.subtotal

    @property
    def discount_amount(self) -> Decimal:
        return self.totals.discount_amount

    @property
    def taxable_amount(self) -> Decimal:
        return self.totals.taxable_amount

    @property
    def tax_amount(self) -> Decimal:
        return self.totals.tax_amount

    @property
    def grand_total(self) -> Decimal:
        return self.totals.grand_total


@dataclass(frozen=True)
class Customer:
    """Customer reference attached to a quotation."""

    company_name: str = ""
    contact_name: str = ""
    phone: str = ""
    email: str = ""
    cr_number: str = ""
    vat_number: str = ""


@dataclass(frozen=True)
class QuotationRecord:
    """A pricing document with its commercial metadata."""

    number: str
    issue_date: date
    valid_until: date
    customer: Customer
    document: PricingDocument
    terms: str = ""
    notes: str = ""
    status: QuotationStatus = QuotationStatus.DRAFT
    id: Optional[int] = None
    owner_id: Optional[str] = None


@dataclass(frozen=True)
class VersionEntry:
    """One entry of a proposal's version history."""

    version: str
    date: datetime
    author: str
    changes: str


@dataclass(frozen=True)
class CommercialItem:
    """A commercial line of a proposal, as edited in the proposal editor."""

    description: str
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = Decimal("0")
    unit: str = ""
    serial_number: int = 0
    id: Optional[int] = None

    @property
    def total(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class ProposalQuotationBinding:
    """Quotation snapshot embedded in a proposal, with its version history.

    version_history is ordered newest first.
    """

    proposal_id: int
    snapshot: Optional[dict[str, Any]] = None
    version: str = "1.0"
    version_history: tuple[VersionEntry, ...] = ()


@dataclass(frozen=True)
class Proposal:
    """Proposal domain entity."""

    id: int
    title: str
    owner_id: Optional[str]
    client_company_name: str
    client_contact_person: str
    client_email: str
    client_phone: str
    payment_terms: str
    project_duration_days: Optional[int]
    version: str
    version_history: tuple[VersionEntry, ...]
    quotation_data: Optional[dict[str, Any]]
    created_at: datetime

    @property
    def binding(self) -> ProposalQuotationBinding:
        return ProposalQuotationBinding(
            proposal_id=self.id,
            snapshot=self.quotation_data,
            version=self.version,
            version_history=self.version_history,
        )
