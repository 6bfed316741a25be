"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class PersistenceError(DomainError):
    """The storage layer rejected a write. In-memory state is unchanged."""


def quotation_not_found(number: str) -> str:
    """Return message for missing quotation."""
    return f"Quotation '{number}' not found"


def proposal_not_found(proposal_id: int) -> str:
    """Return message for missing proposal."""
    return f"Proposal {proposal_id} not found"


def duplicate_quote_number(number: str) -> str:
    """Return message for a quote number that is already stored."""
    return f"Quotation with number '{number}' already exists"


def unknown_status(status: str, allowed: list[str]) -> str:
    """Return message for an unrecognised quotation status."""
    return f"Unknown status '{status}'. Expected one of: {', '.join(allowed)}"


def export_blocked(number: str, problems: list[str]) -> str:
    """Return message when a document is not ready for export."""
    return f"Cannot export {number}: {'; '.join(problems)}"
