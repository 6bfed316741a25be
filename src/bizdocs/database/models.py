"""SQLAlchemy models for bizdocs database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Quotation(Base):
    """Quotation model. The pricing document is stored as one snapshot value."""

    __tablename__ = "quotations"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=True)
    number = Column(String, unique=True, nullable=False)
    issue_date = Column(Date, nullable=False)
    valid_until = Column(Date, nullable=False)
    status = Column(String, default="draft", nullable=False)
    document_data = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(
        DateTime,
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
    )


class Proposal(Base):
    """Proposal model with its embedded quotation snapshot."""

    __tablename__ = "proposals"

    id = Column(Integer, primary_key=True)
    owner_id = Column(String, nullable=True)
    title = Column(String, nullable=False)
    client_company_name = Column(String, default="", nullable=False)
    client_contact_person = Column(String, default="", nullable=False)
    client_email = Column(String, default="", nullable=False)
    client_phone = Column(String, default="", nullable=False)
    payment_terms = Column(String, default="", nullable=False)
    project_duration_days = Column(Integer, nullable=True)
    version_number = Column(String, default="1.0", nullable=False)
    version_history = Column(JSON, default=list, nullable=False)
    quotation_data = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    commercial_items = relationship(
        "ProposalCommercialItem",
        back_populates="proposal",
        cascade="all, delete-orphan",
        order_by="ProposalCommercialItem.sort_order",
    )


class ProposalCommercialItem(Base):
    """Commercial line of a proposal."""

    __tablename__ = "proposal_commercial_items"

    id = Column(Integer, primary_key=True)
    proposal_id = Column(Integer, ForeignKey("proposals.id"), nullable=False)
    serial_number = Column(Integer, nullable=False)
    description = Column(String, default="", nullable=False)
    # Decimal text, exact as priced into quotation_data
    quantity = Column(String, nullable=False)
    unit = Column(String, default="", nullable=False)
    unit_price = Column(String, nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)

    # Relationships
    proposal = relationship("Proposal", back_populates="commercial_items")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
