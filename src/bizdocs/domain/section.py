"""Section editing operations."""

import uuid
from dataclasses import replace
from typing import Any, Iterable, Iterator, Optional

from bizdocs.domain.entities import Flat, LineItem, PricedCollection, Section, Sectioned
from bizdocs.domain import line_item as line_items

DEFAULT_SECTION_TITLE = "General Services"

SECTION_TITLES = (
    "Civil Infrastructure",
    "Power Infrastructure",
    "Structured Cabling & Networking",
    "Security & Monitoring",
    "Professional Services & Integration",
    "Hardware & Equipment",
    "Software & Licensing",
    "Installation & Configuration",
    "Testing & Commissioning",
    "Training & Support",
    "Maintenance & Warranty",
    "Project Management",
)


def new_section(title: Optional[str] = None, position: int = 1) -> Section:
    """Create a section holding one blank line item.

    Args:
        title: Section title; defaults to "Section <position>"
        position: 1-based position of the new section, used for the default title
    """
    return Section(
        id=uuid.uuid4().hex[:12],
        title=title or f"Section {position}",
        line_items=(line_items.new_line_item(),),
    )


def add_section(sections: Iterable[Section], title: Optional[str] = None) -> tuple[Section, ...]:
    """Append a new section."""
    sections = tuple(sections)
    return sections + (new_section(title, position=len(sections) + 1),)


def rename_section(sections: Iterable[Section], section_id: str, title: str) -> tuple[Section, ...]:
    """Set the title of the section with section_id."""
    return tuple(
        replace(section, title=title) if section.id == section_id else section
        for section in sections
    )


def remove_section(sections: Iterable[Section], section_id: str) -> tuple[Section, ...]:
    """Remove the section with section_id.

    Keeping at least one section is left to the caller.
    """
    return tuple(section for section in sections if section.id != section_id)


def _with_items(sections, section_id, change) -> tuple[Section, ...]:
    return tuple(
        replace(section, line_items=change(section.line_items))
        if section.id == section_id
        else section
        for section in sections
    )


def add_item_to_section(
    sections: Iterable[Section], section_id: str, item: Optional[LineItem] = None
) -> tuple[Section, ...]:
    """Append a line item (blank if omitted) to one section."""
    return _with_items(sections, section_id, lambda items: line_items.add_line_item(items, item))


def update_item_in_section(
    sections: Iterable[Section], section_id: str, item_id: str, field: str, value: Any
) -> tuple[Section, ...]:
    """Update one field of one item inside one section."""
    return _with_items(
        sections, section_id, lambda items: line_items.update_item_in(items, item_id, field, value)
    )


def remove_item_from_section(
    sections: Iterable[Section], section_id: str, item_id: str
) -> tuple[Section, ...]:
    """Remove one item from one section. Empty sections are allowed."""
    return _with_items(
        sections, section_id, lambda items: line_items.remove_line_item(items, item_id)
    )


def flatten_items(collection: PricedCollection) -> Iterator[tuple[Optional[str], LineItem]]:
    """Yield (section title, item) pairs in display order.

    Flat collections yield None as the section title.
    """
    if isinstance(collection, Sectioned):
        for section in collection.sections:
            for item in section.line_items:
                yield section.title, item
    else:
        for item in collection.items:
            yield None, item


def all_items(collection: PricedCollection) -> tuple[LineItem, ...]:
    """Return every line item of collection, in order."""
    return tuple(item for _, item in flatten_items(collection))


def as_single_section(collection: Flat, title: str = DEFAULT_SECTION_TITLE) -> Sectioned:
    """Wrap a flat list as one implicit section."""
    return Sectioned(sections=(Section(id="1", title=title, line_items=tuple(collection.items)),))
