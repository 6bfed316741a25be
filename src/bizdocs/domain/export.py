"""Export preparation for quotations and proposals.

Pricing never refuses to compute. The checks that block an export (no
customer, no services, zero total) live here, in the flow that triggers the
export.
"""

import logging
from typing import Any

from bizdocs.domain.entities import Proposal, QuotationRecord
from bizdocs.domain.errors import ValidationError, export_blocked
from bizdocs.domain.section import all_items
from bizdocs.domain.snapshot import build_snapshot, to_proposal_export, to_quotation_export

log = logging.getLogger("bizdocs.export")


def export_problems(record: QuotationRecord) -> list[str]:
    """List the problems that block exporting a quotation. Empty when ready."""
    problems = []
    if not record.customer.company_name.strip():
        problems.append("enter a company name")

    items = all_items(record.document.collection)
    if not items or all(not item.service.strip() for item in items):
        problems.append("add at least one service item")

    if record.document.grand_total == 0:
        problems.append("total is zero; enter a quantity and unit price")
    return problems


def prepare_quotation_export(record: QuotationRecord) -> dict[str, Any]:
    """Return the quotation export data for record.

    Raises:
        ValidationError: If the quotation is not ready for export
    """
    problems = export_problems(record)
    if problems:
        log.info("Export of %s blocked: %s", record.number, problems)
        raise ValidationError(export_blocked(record.number, problems))
    return to_quotation_export(build_snapshot(record))


def prepare_proposal_export(proposal: Proposal) -> dict[str, Any]:
    """Return the proposal export data: the proposal fields plus its quotation.

    Raises:
        ValidationError: If the proposal has no commercial items
    """
    if not proposal.quotation_data:
        raise ValidationError(
            export_blocked(f"proposal {proposal.id}", ["add at least one commercial item"])
        )
    return {
        "id": proposal.id,
        "title": proposal.title,
        "clientCompanyName": proposal.client_company_name,
        "clientContactPerson": proposal.client_contact_person,
        "clientEmail": proposal.client_email,
        "clientPhone": proposal.client_phone,
        "paymentTerms": proposal.payment_terms,
        "projectDurationDays": proposal.project_duration_days,
        "version": proposal.version,
        "versionHistory": [
            {
                "version": entry.version,
                "date": entry.date.isoformat(),
                "author": entry.author,
                "changes": entry.changes,
            }
            for entry in proposal.version_history
        ],
        "quotation_data": to_proposal_export(proposal.quotation_data),
    }
