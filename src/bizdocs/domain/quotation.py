"""Quotation domain service."""

import logging
import time
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable, Optional

from bizdocs.database.base import Database
from bizdocs.domain.entities import (
    Customer,
    Flat,
    NO_DISCOUNT,
    Discount,
    PricedCollection,
    PricingDocument,
    QuotationRecord,
    QuotationStatus,
)
from bizdocs.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    quotation_not_found,
    unknown_status,
)
from bizdocs.domain.formatting import DEFAULT_CURRENCY, currency_name
from bizdocs.domain.pricing import FIXED_VAT, TaxPolicy
from bizdocs.domain.snapshot import build_snapshot
from bizdocs.utils.date_parser import default_valid_until

log = logging.getLogger("bizdocs.quotation")

QUOTE_NUMBER_SUFFIX_RANGE = 10_000


def default_terms(currency: str = DEFAULT_CURRENCY) -> str:
    """Return the standard terms text for a currency."""
    return (
        "• Payment: 100%\n"
        f"• All prices in {currency_name(currency)}\n"
        "• Delivery– 1 Week after PO\n"
        "• Offers will be confirmed based on your purchase order.\n"
        "• Product availability and prices are subject to change without notice"
    )


def format_quote_number(year: int, suffix: int) -> str:
    """Format a quote number as QUO-<year>-<4 digits>."""
    return f"QUO-{year}-{suffix % QUOTE_NUMBER_SUFFIX_RANGE:04d}"


def parse_status(value: Any) -> QuotationStatus:
    """Parse a quotation status, case-insensitively.

    Raises:
        ValidationError: If the status is unknown
    """
    if isinstance(value, QuotationStatus):
        return value
    try:
        return QuotationStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(unknown_status(str(value), [s.value for s in QuotationStatus]))


def upsert_by_number(
    records: Iterable[QuotationRecord], record: QuotationRecord
) -> list[QuotationRecord]:
    """Replace the record with the same number in place, or append it."""
    records = list(records)
    for index, existing in enumerate(records):
        if existing.number == record.number:
            records[index] = record
            return records
    records.append(record)
    return records


class QuotationService:
    """Service for managing quotations."""

    def __init__(self, db: Database, tax_policy: TaxPolicy = FIXED_VAT):
        """Initialize quotation service.

        Args:
            db: Database instance
            tax_policy: Tax configuration used by new_quotation
        """
        self.db = db
        self.tax_policy = tax_policy

    def generate_quote_number(
        self, now: Optional[datetime] = None, offset: int = 0, reserved: Iterable[str] = ()
    ) -> str:
        """Generate a quote number of the form QUO-<year>-<4 digits>.

        The suffix is the last four digits of the millisecond timestamp plus
        offset. On collision with a stored number or one in reserved, the
        suffix is bumped until a free number is found.

        Args:
            now: Time to derive the number from (defaults to now)
            offset: Added to the timestamp, for numbering a batch
            reserved: Numbers already handed out but not yet stored

        Returns:
            Quote number

        Raises:
            ConflictError: If every suffix of the year is taken
        """
        if now is None:
            millis = int(time.time() * 1000)
            year = date.today().year
        else:
            millis = int(now.timestamp() * 1000)
            year = now.year

        reserved = set(reserved)
        for bump in range(QUOTE_NUMBER_SUFFIX_RANGE):
            number = format_quote_number(year, millis + offset + bump)
            if number not in reserved and not self.db.quotation_number_exists(number):
                if bump:
                    log.info("Quote number collision; bumped suffix %d times to %s", bump, number)
                return number
        raise ConflictError(f"No free quote numbers left for {year}")

    def new_quotation(
        self,
        customer: Customer,
        collection: Optional[PricedCollection] = None,
        discount: Discount = NO_DISCOUNT,
        tax_rate: Any = None,
        currency: str = DEFAULT_CURRENCY,
        issue_date: Optional[date] = None,
        valid_until: Optional[date] = None,
        terms: Optional[str] = None,
        notes: str = "",
        number: Optional[str] = None,
    ) -> QuotationRecord:
        """Build an unsaved quotation record.

        The tax rate is resolved through the service's tax policy; the
        validity date defaults to 30 days after issue and the terms to the
        standard text for the currency.
        """
        issue_date = issue_date or date.today()
        document = PricingDocument(
            collection=collection if collection is not None else Flat(),
            discount=discount,
            tax_rate=self.tax_policy.resolve(tax_rate),
            currency=currency,
        )
        return QuotationRecord(
            number=number or self.generate_quote_number(),
            issue_date=issue_date,
            valid_until=valid_until or default_valid_until(issue_date),
            customer=customer,
            document=document,
            terms=default_terms(currency) if terms is None else terms,
            notes=notes,
        )

    def save_quotation(self, record: QuotationRecord, owner_id: Optional[str]) -> int:
        """Save a quotation, updating the stored one with the same number.

        The record's totals are frozen into the stored snapshot at this point.

        Args:
            record: Quotation record
            owner_id: Owner to attach to the stored record

        Returns:
            Quotation ID

        Raises:
            ValidationError: If the record has no quote number
            PersistenceError: If the store rejects the write
        """
        if not record.number:
            raise ValidationError("Quotation number is required")

        snapshot = build_snapshot(record)
        existing = self.db.get_quotation_by_number(record.number)
        if existing is not None:
            log.info("Updating existing quotation %s", record.number)
            self.db.update_quotation(
                quotation_id=existing.id,
                owner_id=owner_id,
                issue_date=record.issue_date,
                valid_until=record.valid_until,
                status=record.status.value,
                document_data=snapshot,
            )
            return existing.id

        log.info("Inserting new quotation %s", record.number)
        return self.db.create_quotation(
            number=record.number,
            owner_id=owner_id,
            issue_date=record.issue_date,
            valid_until=record.valid_until,
            status=record.status.value,
            document_data=snapshot,
        )

    def get_quotation(self, number: str) -> Optional[QuotationRecord]:
        """Get quotation by number.

        Args:
            number: Quote number

        Returns:
            Quotation record or None if not found
        """
        return self.db.get_quotation_by_number(number)

    def require_quotation(self, number: str) -> QuotationRecord:
        """Get quotation by number or raise NotFoundError."""
        record = self.db.get_quotation_by_number(number)
        if record is None:
            raise NotFoundError(quotation_not_found(number))
        return record

    def list_quotations(
        self, owner_id: Optional[str] = None, status: Optional[Any] = None
    ) -> list[QuotationRecord]:
        """List quotations, newest first.

        Args:
            owner_id: Optional owner filter
            status: Optional status filter

        Returns:
            List of quotation records
        """
        status_value = parse_status(status).value if status is not None else None
        return self.db.list_quotations(owner_id=owner_id, status=status_value)

    def update_status(self, number: str, status: Any) -> QuotationRecord:
        """Set a quotation's status. Any transition is allowed.

        Raises:
            ValidationError: If status is unknown
            NotFoundError: If the quotation does not exist
        """
        new_status = parse_status(status)
        record = self.require_quotation(number)
        self.db.update_quotation_status(number, new_status.value)
        log.info("Quotation %s status %s -> %s", number, record.status.value, new_status.value)
        return replace(record, status=new_status)

    def delete_quotation(self, number: str) -> None:
        """Delete a quotation.

        Raises:
            NotFoundError: If the quotation does not exist
        """
        self.require_quotation(number)
        self.db.delete_quotation(number)
