"""Pricing computation for quotations, invoices and proposals.

Computation order is fixed:

    subtotal -> discount amount -> taxable amount -> tax amount -> grand total

Nothing is rounded or clamped here. A fixed discount larger than the subtotal
yields a negative taxable amount, and the tax and grand total follow that sign;
exported documents already carry such figures. Rounding belongs to
bizdocs.domain.formatting.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from bizdocs.domain.entities import (
    NO_DISCOUNT,
    Discount,
    DiscountType,
    Flat,
    LineItem,
    PricedCollection,
    PricingTotals,
    Section,
    Sectioned,
)
from bizdocs.domain.errors import ValidationError
from bizdocs.utils.amount_parser import coerce_number

HUNDRED = Decimal("100")
ZERO = Decimal("0")


def as_collection(
    value: Union[PricedCollection, Iterable[LineItem], Iterable[Section]],
) -> PricedCollection:
    """Wrap a sequence of line items or sections in its collection variant."""
    if isinstance(value, (Flat, Sectioned)):
        return value
    values = tuple(value)
    if values and all(isinstance(v, Section) for v in values):
        return Sectioned(sections=values)
    if all(isinstance(v, LineItem) for v in values):
        return Flat(items=values)
    raise TypeError("Expected line items or sections, not a mix of both")


def item_total(item: LineItem) -> Decimal:
    """Quantity times unit price, with both coerced."""
    return coerce_number(item.quantity) * coerce_number(item.unit_price)


def subtotal(collection: PricedCollection) -> Decimal:
    """Sum of line item totals over the whole collection."""
    if isinstance(collection, Sectioned):
        return sum(
            (item_total(item) for section in collection.sections for item in section.line_items),
            ZERO,
        )
    if isinstance(collection, Flat):
        return sum((item_total(item) for item in collection.items), ZERO)
    raise TypeError(f"Unsupported priced collection: {type(collection).__name__}")


def discount_amount(base: Decimal, discount: Discount) -> Decimal:
    """Discount taken off base. Fixed discounts are used as given."""
    if discount.type == DiscountType.PERCENTAGE:
        return base * discount.value / HUNDRED
    return discount.value


def compute_pricing(
    collection: Union[PricedCollection, Iterable[LineItem], Iterable[Section]],
    discount: Optional[Discount] = None,
    tax_rate: Decimal = ZERO,
) -> PricingTotals:
    """Compute all figures of a pricing document.

    Args:
        collection: Flat or Sectioned collection (plain sequences are wrapped)
        discount: Discount descriptor; no discount when None. Its value and
            tax_rate are coerced, so invalid input counts as 0
        tax_rate: Tax rate in percent

    Returns:
        PricingTotals
    """
    discount = discount or NO_DISCOUNT
    discount = make_discount(discount.type, discount.value)
    base = subtotal(as_collection(collection))
    discount_value = discount_amount(base, discount)
    taxable = base - discount_value
    tax = taxable * coerce_number(tax_rate) / HUNDRED
    return PricingTotals(
        subtotal=base,
        discount_amount=discount_value,
        taxable_amount=taxable,
        tax_amount=tax,
        grand_total=taxable + tax,
    )


def parse_discount_type(value: Any) -> DiscountType:
    """Parse a discount type; anything other than "fixed" is a percentage."""
    if isinstance(value, DiscountType):
        return value
    if str(value or "").strip().lower() == DiscountType.FIXED.value:
        return DiscountType.FIXED
    return DiscountType.PERCENTAGE


def make_discount(discount_type: Any = DiscountType.PERCENTAGE, value: Any = 0) -> Discount:
    """Build a discount from raw input, coercing the value."""
    return Discount(type=parse_discount_type(discount_type), value=coerce_number(value))


@dataclass(frozen=True)
class TaxPolicy:
    """A tax configuration of compute_pricing.

    Attributes:
        name: Short label for logs and errors
        default_rate: Rate used when the caller does not supply one
        editable: Whether callers may supply a different rate
    """

    name: str
    default_rate: Decimal
    editable: bool

    def resolve(self, requested: Any = None) -> Decimal:
        """Return the tax rate to use for a requested rate.

        Raises:
            ValidationError: If the policy is fixed and another rate is requested
        """
        if requested is None:
            return self.default_rate
        rate = coerce_number(requested)
        if not self.editable and rate != self.default_rate:
            raise ValidationError(
                f"Tax rate is fixed at {self.default_rate}% for {self.name} documents"
            )
        return rate

    def compute(
        self,
        collection: Union[PricedCollection, Iterable[LineItem], Iterable[Section]],
        discount: Optional[Discount] = None,
        tax_rate: Any = None,
    ) -> PricingTotals:
        return compute_pricing(collection, discount, self.resolve(tax_rate))


FIXED_VAT = TaxPolicy(name="fixed VAT", default_rate=Decimal("15"), editable=False)
EDITABLE_TAX = TaxPolicy(name="editable tax", default_rate=ZERO, editable=True)
