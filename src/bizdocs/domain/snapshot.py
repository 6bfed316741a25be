"""Serialization of quotation records to snapshot data.

A snapshot is the JSON-compatible dict stored in a single column of a
quotation or proposal row, and handed to PDF export. There is one canonical
schema; export consumers that expect other field names get them through the
adapters at the bottom of this module.

Money and quantity values are written as decimal strings so a snapshot
survives a JSON round trip without precision loss.
"""

import json
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from bizdocs.domain.entities import (
    Customer,
    DiscountType,
    Flat,
    LineItem,
    PricingDocument,
    PricingTotals,
    QuotationRecord,
    QuotationStatus,
    Section,
    Sectioned,
)
from bizdocs.domain.pricing import make_discount
from bizdocs.domain.section import flatten_items
from bizdocs.utils.amount_parser import coerce_number
from bizdocs.utils.date_parser import coerce_date, default_valid_until

CUSTOMER_FIELDS = {
    "companyName": "company_name",
    "contactName": "contact_name",
    "phone": "phone",
    "email": "email",
    "crNumber": "cr_number",
    "vatNumber": "vat_number",
}


def _num(value: Decimal) -> str:
    return str(value)


def customer_to_dict(customer: Customer) -> dict[str, str]:
    return {key: getattr(customer, attr) for key, attr in CUSTOMER_FIELDS.items()}


def customer_from_dict(data: Optional[dict[str, Any]]) -> Customer:
    data = data or {}
    return Customer(
        **{attr: str(data.get(key) or "") for key, attr in CUSTOMER_FIELDS.items()}
    )


def line_item_to_dict(item: LineItem) -> dict[str, Any]:
    return {
        "id": item.id,
        "service": item.service,
        "description": item.description,
        "partNumber": item.part_number or "",
        "quantity": _num(item.quantity),
        "unit": item.unit or "",
        "unitPrice": _num(item.unit_price),
        "total": _num(item.total),
    }


def line_item_from_dict(data: dict[str, Any], position: int) -> LineItem:
    return LineItem(
        id=str(data.get("id") or position),
        service=str(data.get("service") or ""),
        description=str(data.get("description") or ""),
        quantity=coerce_number(data.get("quantity")),
        unit_price=coerce_number(data.get("unitPrice")),
        unit=data.get("unit") or None,
        part_number=data.get("partNumber") or None,
    )


def totals_to_dict(totals: PricingTotals) -> dict[str, str]:
    return {
        "subtotal": _num(totals.subtotal),
        "discountAmount": _num(totals.discount_amount),
        "taxableAmount": _num(totals.taxable_amount),
        "taxAmount": _num(totals.tax_amount),
        "grandTotal": _num(totals.grand_total),
    }


def build_snapshot(record: QuotationRecord) -> dict[str, Any]:
    """Freeze a quotation record into canonical snapshot data.

    Line items are flattened and numbered from 1. Sectioned documents also
    keep their sections, and each flattened item names its section.
    """
    document = record.document
    collection = document.collection

    flattened = []
    for serial, (section_title, item) in enumerate(flatten_items(collection), start=1):
        entry = {"serialNumber": serial, **line_item_to_dict(item)}
        if section_title is not None:
            entry["sectionTitle"] = section_title
        flattened.append(entry)

    snapshot: dict[str, Any] = {
        "number": record.number,
        "date": record.issue_date.isoformat(),
        "validUntil": record.valid_until.isoformat(),
        "customer": customer_to_dict(record.customer),
        "currency": document.currency,
        "discountType": document.discount.type.value,
        "discountValue": _num(document.discount.value),
        "taxRate": _num(document.tax_rate),
        "lineItems": flattened,
    }
    if isinstance(collection, Sectioned):
        snapshot["sections"] = [
            {
                "id": section.id,
                "title": section.title,
                "lineItems": [line_item_to_dict(item) for item in section.line_items],
            }
            for section in collection.sections
        ]
    snapshot.update(totals_to_dict(document.totals))
    snapshot["customTerms"] = record.terms
    snapshot["notes"] = record.notes
    return snapshot


def document_from_snapshot(data: dict[str, Any]) -> PricingDocument:
    """Rebuild the pricing document stored in a snapshot."""
    sections = data.get("sections")
    if isinstance(sections, list) and sections:
        collection = Sectioned(
            sections=tuple(
                Section(
                    id=str(section.get("id") or index),
                    title=str(section.get("title") or ""),
                    line_items=tuple(
                        line_item_from_dict(item, position)
                        for position, item in enumerate(section.get("lineItems") or [], start=1)
                    ),
                )
                for index, section in enumerate(sections, start=1)
            )
        )
    else:
        collection = Flat(
            items=tuple(
                line_item_from_dict(item, position)
                for position, item in enumerate(data.get("lineItems") or [], start=1)
            )
        )

    return PricingDocument(
        collection=collection,
        discount=make_discount(data.get("discountType"), data.get("discountValue")),
        tax_rate=coerce_number(data.get("taxRate")),
        currency=str(data.get("currency") or "SAR"),
    )


def record_from_snapshot(
    data: dict[str, Any],
    status: QuotationStatus = QuotationStatus.DRAFT,
    record_id: Optional[int] = None,
    owner_id: Optional[str] = None,
) -> QuotationRecord:
    """Rebuild a quotation record from snapshot data."""
    issue_date = coerce_date(data.get("date")) or date.today()
    return QuotationRecord(
        number=str(data.get("number") or ""),
        issue_date=issue_date,
        valid_until=coerce_date(data.get("validUntil")) or default_valid_until(issue_date),
        customer=customer_from_dict(data.get("customer")),
        document=document_from_snapshot(data),
        terms=str(data.get("customTerms") or ""),
        notes=str(data.get("notes") or ""),
        status=status,
        id=record_id,
        owner_id=owner_id,
    )


def snapshot_totals(data: dict[str, Any]) -> PricingTotals:
    """Read the totals frozen into a snapshot, without recomputing them."""
    return PricingTotals(
        subtotal=coerce_number(data.get("subtotal")),
        discount_amount=coerce_number(data.get("discountAmount", data.get("discount"))),
        taxable_amount=coerce_number(data.get("taxableAmount")),
        tax_amount=coerce_number(data.get("taxAmount", data.get("vat"))),
        grand_total=coerce_number(data.get("grandTotal", data.get("total"))),
    )


def snapshot_to_json(data: dict[str, Any]) -> str:
    return json.dumps(data, indent=2, ensure_ascii=False)


def snapshot_from_json(text: str) -> dict[str, Any]:
    return json.loads(text)


def to_quotation_export(snapshot: dict[str, Any]) -> dict[str, Any]:
    """Shape a snapshot for the quotation PDF export.

    Adds ``discount`` (the amount), ``vat`` and ``total``, plus
    ``discountPercent`` for percentage discounts.
    """
    data = dict(snapshot)
    data["discount"] = snapshot["discountAmount"]
    data["vat"] = snapshot["taxAmount"]
    data["total"] = snapshot["grandTotal"]
    if snapshot.get("discountType") == DiscountType.PERCENTAGE.value:
        data["discountPercent"] = snapshot.get("discountValue", "0")
    return data


def to_proposal_export(snapshot: dict[str, Any]) -> dict[str, Any]:
    """Shape a snapshot for the proposal PDF export.

    Adds ``vat``, ``total`` and ``discount`` (the amount).
    """
    data = dict(snapshot)
    data["discount"] = snapshot["discountAmount"]
    data["vat"] = snapshot["taxAmount"]
    data["total"] = snapshot["grandTotal"]
    return data
