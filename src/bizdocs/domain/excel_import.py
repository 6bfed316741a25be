"""Excel import domain service.

Reads the first worksheet of an ``.xlsx`` workbook with ``openpyxl`` and
turns it into one quotation per distinct customer, each row becoming one
line item. Totals come from the regular pricing path.
"""

import logging
import re
import zipfile
from datetime import date
from pathlib import Path
from typing import Any, Optional

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from bizdocs.database.base import Database
from bizdocs.domain.entities import Customer, Flat, LineItem, QuotationRecord
from bizdocs.domain.errors import ValidationError
from bizdocs.domain.line_item import make_line_item
from bizdocs.domain.quotation import QuotationService, default_terms
from bizdocs.utils.date_parser import coerce_date

log = logging.getLogger("bizdocs.excel_import")

# Normalized header -> field name
COLUMN_SYNONYMS = {
    "customer": "customerName",
    "customername": "customerName",
    "company": "customerName",
    "companyname": "customerName",
    "client": "customerName",
    "clientname": "customerName",
    "contact": "contactName",
    "contactname": "contactName",
    "contactperson": "contactName",
    "person": "contactName",
    "phone": "phone",
    "phonenumber": "phone",
    "mobile": "phone",
    "tel": "phone",
    "telephone": "phone",
    "email": "email",
    "emailaddress": "email",
    "mail": "email",
    "service": "service",
    "servicename": "service",
    "product": "service",
    "productname": "service",
    "item": "service",
    "itemname": "service",
    "description": "description",
    "desc": "description",
    "details": "description",
    "partnumber": "partNumber",
    "partno": "partNumber",
    "sku": "partNumber",
    "code": "partNumber",
    "productcode": "partNumber",
    "quantity": "quantity",
    "qty": "quantity",
    "amount": "quantity",
    "count": "quantity",
    "unitprice": "unitPrice",
    "price": "unitPrice",
    "rate": "unitPrice",
    "cost": "unitPrice",
    "unit": "unit",
    "uom": "unit",
    "currency": "currency",
    "curr": "currency",
    "crnumber": "crNumber",
    "cr": "crNumber",
    "commercialregistration": "crNumber",
    "vatnumber": "vatNumber",
    "vat": "vatNumber",
    "taxnumber": "vatNumber",
    "validuntil": "validUntil",
    "expiry": "validUntil",
    "expirydate": "validUntil",
    "validdate": "validUntil",
    "notes": "notes",
    "note": "notes",
    "comments": "notes",
    "comment": "notes",
    "remarks": "notes",
}


def normalize_column_name(name: Any) -> str:
    """Lowercase a header and keep only letters and digits."""
    if name is None:
        return ""
    return re.sub(r"[^a-z0-9]", "", str(name).lower())


def map_column_name(name: Any) -> str:
    """Map a header to its field name; unknown headers are kept as they are."""
    return COLUMN_SYNONYMS.get(normalize_column_name(name), str(name or "").strip())


def customer_key(name: str) -> str:
    """Grouping key for a customer name."""
    return re.sub(r"\s+", "_", name.strip().lower())


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        # Spreadsheet numbers such as CR numbers come back as floats
        return str(int(value))
    return str(value).strip()


class ExcelImportService:
    """Service for importing quotations from Excel workbooks."""

    def __init__(self, db: Database):
        """Initialize Excel import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.quotation_service = QuotationService(db)

    def read_rows(self, workbook_path: str) -> list[dict[str, Any]]:
        """Read the first worksheet into dicts keyed by mapped field names.

        Raises:
            FileNotFoundError: If the workbook does not exist
            ValidationError: If the file is not a readable workbook
        """
        path = Path(workbook_path)
        if not path.exists():
            raise FileNotFoundError(f"Workbook not found: {workbook_path}")

        try:
            workbook = load_workbook(filename=path, read_only=True, data_only=True)
        except (InvalidFileException, zipfile.BadZipFile, OSError, KeyError, ValueError) as e:
            raise ValidationError(f"Could not read workbook {workbook_path}: {e}")

        try:
            sheet = workbook.worksheets[0]
            rows = sheet.iter_rows(values_only=True)
            header_row = next(rows, None)
            if header_row is None:
                return []
            headers = [map_column_name(header) for header in header_row]

            records = []
            for row in rows:
                if row is None or all(value in (None, "") for value in row):
                    continue
                records.append(
                    {header: value for header, value in zip(headers, row) if header}
                )
            return records
        finally:
            workbook.close()

    def build_quotations(
        self, rows: list[dict[str, Any]], issue_date: Optional[date] = None
    ) -> dict[str, Any]:
        """Group rows by customer into unsaved quotation records.

        Args:
            rows: Rows keyed by mapped field names
            issue_date: Issue date for every quotation (defaults to today)

        Returns:
            Dict with:
            - quotations: list of QuotationRecord
            - skipped: messages for rows without a customer name
        """
        issue_date = issue_date or date.today()
        groups: dict[str, dict[str, Any]] = {}
        skipped = []

        # Header is row 1
        for row_num, row in enumerate(rows, start=2):
            customer_name = _text(row.get("customerName"))
            if not customer_name:
                skipped.append(f"Row {row_num}: no customer name")
                log.debug("Skipping row %d: no customer name", row_num)
                continue

            key = customer_key(customer_name)
            group = groups.get(key)
            if group is None:
                currency = "USD" if _text(row.get("currency")).upper() == "USD" else "SAR"
                group = {
                    "customer": Customer(
                        company_name=customer_name,
                        contact_name=_text(row.get("contactName")),
                        phone=_text(row.get("phone")),
                        email=_text(row.get("email")),
                        cr_number=_text(row.get("crNumber")),
                        vat_number=_text(row.get("vatNumber")),
                    ),
                    "currency": currency,
                    "valid_until": coerce_date(row.get("validUntil")),
                    "notes": _text(row.get("notes")),
                    "items": [],
                }
                groups[key] = group

            service = _text(row.get("service"))
            if service:
                group["items"].append(self._row_item(row, service, f"{key}_{len(group['items']) + 1}"))

        reserved: list[str] = []
        quotations = []
        for index, group in enumerate(groups.values()):
            number = self.quotation_service.generate_quote_number(offset=index, reserved=reserved)
            reserved.append(number)
            quotations.append(
                self.quotation_service.new_quotation(
                    customer=group["customer"],
                    collection=Flat(items=tuple(group["items"])),
                    currency=group["currency"],
                    issue_date=issue_date,
                    valid_until=group["valid_until"],
                    terms=default_terms(group["currency"]),
                    notes=group["notes"],
                    number=number,
                )
            )
        return {"quotations": quotations, "skipped": skipped}

    @staticmethod
    def _row_item(row: dict[str, Any], service: str, item_id: str) -> LineItem:
        item = make_line_item(
            service=service,
            quantity=row.get("quantity"),
            unit_price=row.get("unitPrice"),
            description=_text(row.get("description")),
            unit=_text(row.get("unit")),
            part_number=_text(row.get("partNumber")),
            item_id=item_id,
        )
        if item.quantity == 0:
            # Missing or unreadable quantity means one unit
            return make_line_item(
                service=item.service,
                quantity=1,
                unit_price=item.unit_price,
                description=item.description,
                unit=item.unit,
                part_number=item.part_number,
                item_id=item.id,
            )
        return item

    def import_workbook(
        self, workbook_path: str, owner_id: Optional[str] = None, save: bool = False
    ) -> dict[str, Any]:
        """Import quotations from an Excel workbook.

        Args:
            workbook_path: Path to the .xlsx file
            owner_id: Owner attached to saved quotations
            save: If True, save every quotation

        Returns:
            Dict with import results:
            - quotations: list of QuotationRecord
            - imported: number of quotations built (and saved, when save is set)
            - skipped: messages for rows that were skipped
            - errors: messages for quotations that could not be saved

        Raises:
            FileNotFoundError: If the workbook does not exist
            ValidationError: If the workbook cannot be read
        """
        rows = self.read_rows(workbook_path)
        result = self.build_quotations(rows)
        quotations: list[QuotationRecord] = result["quotations"]
        errors = []

        imported = len(quotations)
        if save:
            imported = 0
            for record in quotations:
                try:
                    self.quotation_service.save_quotation(record, owner_id=owner_id)
                    imported += 1
                except ValueError as e:
                    errors.append(f"{record.number}: {e}")
                    log.warning("Could not save imported quotation %s: %s", record.number, e)

        log.info(
            "Imported %d quotations from %s (%d rows skipped)",
            imported,
            workbook_path,
            len(result["skipped"]),
        )
        return {
            "quotations": quotations,
            "imported": imported,
            "skipped": result["skipped"],
            "errors": errors,
        }
