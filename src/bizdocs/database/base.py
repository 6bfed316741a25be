"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from datetime import date

# Import entities directly; the domain services import this module
from bizdocs.domain.entities import (
    CommercialItem,
    Proposal,
    QuotationRecord,
    VersionEntry,
)


class Database(ABC):
    """Abstract database interface for bizdocs.

    Pricing internals are not stored as columns. A quotation's pricing
    document, and a proposal's embedded quotation, are stored as one
    snapshot value each.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Quotation operations
    @abstractmethod
    def create_quotation(
        self,
        number: str,
        owner_id: Optional[str],
        issue_date: date,
        valid_until: date,
        status: str,
        document_data: dict[str, Any],
    ) -> int:
        """Create a quotation. Returns quotation ID."""
        pass

    @abstractmethod
    def update_quotation(
        self,
        quotation_id: int,
        owner_id: Optional[str],
        issue_date: date,
        valid_until: date,
        status: str,
        document_data: dict[str, Any],
    ) -> None:
        """Replace the stored fields of a quotation."""
        pass

    @abstractmethod
    def get_quotation_by_number(self, number: str) -> Optional[QuotationRecord]:
        """Get quotation by quote number."""
        pass

    @abstractmethod
    def quotation_number_exists(self, number: str) -> bool:
        """Check if a quotation with the given number is stored."""
        pass

    @abstractmethod
    def list_quotations(
        self, owner_id: Optional[str] = None, status: Optional[str] = None
    ) -> list[QuotationRecord]:
        """List quotations, newest first, optionally filtered by owner and status."""
        pass

    @abstractmethod
    def update_quotation_status(self, number: str, status: str) -> None:
        """Update quotation status."""
        pass

    @abstractmethod
    def delete_quotation(self, number: str) -> None:
        """Delete a quotation."""
        pass

    # Proposal operations
    @abstractmethod
    def create_proposal(
        self,
        title: str,
        owner_id: Optional[str],
        client_company_name: str = "",
        client_contact_person: str = "",
        client_email: str = "",
        client_phone: str = "",
        version: str = "1.0",
    ) -> int:
        """Create a proposal. Returns proposal ID."""
        pass

    @abstractmethod
    def get_proposal(self, proposal_id: int) -> Optional[Proposal]:
        """Get proposal by ID."""
        pass

    @abstractmethod
    def list_proposals(self, owner_id: Optional[str] = None) -> list[Proposal]:
        """List proposals, optionally filtered by owner."""
        pass

    @abstractmethod
    def get_commercial_items(self, proposal_id: int) -> list[CommercialItem]:
        """Get the commercial items of a proposal in display order."""
        pass

    @abstractmethod
    def save_commercial_items(
        self,
        proposal_id: int,
        items: list[CommercialItem],
        payment_terms: str,
        project_duration_days: Optional[int],
        quotation_data: Optional[dict[str, Any]],
    ) -> None:
        """Replace a proposal's commercial items and embedded quotation in one transaction."""
        pass

    @abstractmethod
    def update_proposal_version(
        self, proposal_id: int, version: str, version_history: tuple[VersionEntry, ...]
    ) -> None:
        """Store the current version label and the full version history."""
        pass
