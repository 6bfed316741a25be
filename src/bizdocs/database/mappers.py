"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the (de)serialization of
snapshot and version history values stored in JSON columns.
"""

from dataclasses import replace
from datetime import datetime
from decimal import Decimal
from typing import Any

from bizdocs.domain import entities as domain
from bizdocs.domain.snapshot import record_from_snapshot
from bizdocs.database.models import (
    Quotation as ORMQuotation,
    Proposal as ORMProposal,
    ProposalCommercialItem as ORMCommercialItem,
)


def quotation_to_domain(orm_quotation: ORMQuotation) -> domain.QuotationRecord:
    """Convert SQLAlchemy Quotation model to domain QuotationRecord entity.

    Columns win over the snapshot for the fields stored in both.
    """
    record = record_from_snapshot(
        orm_quotation.document_data or {},
        status=domain.QuotationStatus(orm_quotation.status),
        record_id=orm_quotation.id,
        owner_id=orm_quotation.owner_id,
    )
    return replace(
        record,
        number=orm_quotation.number,
        issue_date=orm_quotation.issue_date,
        valid_until=orm_quotation.valid_until,
    )


def version_entry_to_dict(entry: domain.VersionEntry) -> dict[str, str]:
    """Serialize a version entry for the version_history column."""
    return {
        "version": entry.version,
        "date": entry.date.isoformat(),
        "author": entry.author,
        "changes": entry.changes,
    }


def version_entry_from_dict(data: dict[str, Any]) -> domain.VersionEntry:
    """Deserialize a version entry from the version_history column."""
    return domain.VersionEntry(
        version=str(data.get("version", "")),
        date=datetime.fromisoformat(data["date"]),
        author=str(data.get("author", "")),
        changes=str(data.get("changes", "")),
    )


def proposal_to_domain(orm_proposal: ORMProposal) -> domain.Proposal:
    """Convert SQLAlchemy Proposal model to domain Proposal entity."""
    return domain.Proposal(
        id=orm_proposal.id,
        title=orm_proposal.title,
        owner_id=orm_proposal.owner_id,
        client_company_name=orm_proposal.client_company_name or "",
        client_contact_person=orm_proposal.client_contact_person or "",
        client_email=orm_proposal.client_email or "",
        client_phone=orm_proposal.client_phone or "",
        payment_terms=orm_proposal.payment_terms or "",
        project_duration_days=orm_proposal.project_duration_days,
        version=orm_proposal.version_number,
        version_history=tuple(
            version_entry_from_dict(entry) for entry in (orm_proposal.version_history or [])
        ),
        quotation_data=orm_proposal.quotation_data,
        created_at=orm_proposal.created_at,
    )


def commercial_item_to_domain(orm_item: ORMCommercialItem) -> domain.CommercialItem:
    """Convert SQLAlchemy ProposalCommercialItem model to domain CommercialItem entity."""
    return domain.CommercialItem(
        id=orm_item.id,
        serial_number=orm_item.serial_number,
        description=orm_item.description or "",
        quantity=Decimal(orm_item.quantity),
        unit=orm_item.unit or "",
        unit_price=Decimal(orm_item.unit_price),
    )
