"""Line item editing operations.

Items are immutable; every edit returns a new item or a new tuple of items.
"""

import uuid
from dataclasses import replace
from decimal import Decimal
from typing import Any, Iterable, Optional

from bizdocs.domain.entities import LineItem
from bizdocs.domain.errors import ValidationError
from bizdocs.utils.amount_parser import coerce_number

NUMERIC_FIELDS = frozenset({"quantity", "unit_price"})
TEXT_FIELDS = frozenset({"service", "description", "unit", "part_number"})
OPTIONAL_TEXT_FIELDS = frozenset({"unit", "part_number"})


def new_item_id() -> str:
    """Return a fresh line item identifier."""
    return uuid.uuid4().hex[:12]


def new_line_item(item_id: Optional[str] = None) -> LineItem:
    """Create a blank line item: quantity 1, unit price 0, total 0."""
    return LineItem(
        id=item_id or new_item_id(),
        service="",
        description="",
        quantity=Decimal("1"),
        unit_price=Decimal("0"),
    )


def make_line_item(
    service: str = "",
    quantity: Any = 1,
    unit_price: Any = 0,
    description: str = "",
    unit: Optional[str] = None,
    part_number: Optional[str] = None,
    item_id: Optional[str] = None,
) -> LineItem:
    """Build a line item from raw input, coercing numeric fields."""
    return LineItem(
        id=item_id or new_item_id(),
        service=service,
        description=description,
        quantity=coerce_number(quantity),
        unit_price=coerce_number(unit_price),
        unit=unit or None,
        part_number=part_number or None,
    )


def update_line_item(item: LineItem, field: str, value: Any) -> LineItem:
    """Return a copy of item with one field changed.

    Quantity and unit price are coerced (invalid input becomes 0). The total
    is a derived property, so it reflects the change immediately.

    Args:
        item: Line item to update
        field: Field name (service, description, quantity, unit_price, unit, part_number)
        value: New raw value

    Returns:
        Updated line item

    Raises:
        ValidationError: If field is not an editable line item field
    """
    if field in NUMERIC_FIELDS:
        return replace(item, **{field: coerce_number(value)})
    if field in TEXT_FIELDS:
        text = "" if value is None else str(value)
        if field in OPTIONAL_TEXT_FIELDS and not text:
            return replace(item, **{field: None})
        return replace(item, **{field: text})
    if field == "total":
        raise ValidationError("Line item total is derived from quantity and unit price")
    raise ValidationError(f"Unknown line item field '{field}'")


def add_line_item(
    items: Iterable[LineItem], item: Optional[LineItem] = None
) -> tuple[LineItem, ...]:
    """Append item (a blank one if omitted) to items."""
    return tuple(items) + (item if item is not None else new_line_item(),)


def update_item_in(
    items: Iterable[LineItem], item_id: str, field: str, value: Any
) -> tuple[LineItem, ...]:
    """Update one field of the item with item_id; other items are untouched."""
    return tuple(
        update_line_item(item, field, value) if item.id == item_id else item for item in items
    )


def remove_line_item(items: Iterable[LineItem], item_id: str) -> tuple[LineItem, ...]:
    """Remove the item with item_id."""
    return tuple(item for item in items if item.id != item_id)
