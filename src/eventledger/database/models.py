"""SQLAlchemy models for eventledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Account(Base):
    """Event account model."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    financial_account_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=_utcnow, nullable=False)

    # Relationships
    planned_items = relationship("PlannedItem", back_populates="account", cascade="all, delete-orphan")
    ledger_entries = relationship("LedgerEntry", back_populates="account", cascade="all, delete-orphan")


class Event(Base):
    """Event model with its ticket price table."""

    __tablename__ = "events"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    regular_price = Column(Numeric(12, 2), nullable=False, default=0)
    member_price = Column(Numeric(12, 2), nullable=False, default=0)
    alumni_price = Column(Numeric(12, 2), nullable=False, default=0)
    early_bird_price = Column(Numeric(12, 2), nullable=False, default=0)
    committee_price = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String, nullable=False, default="RM")
    created_at = Column(DateTime, default=_utcnow, nullable=False)


class PlannedItem(Base):
    """Planned (forecast) line item model."""

    __tablename__ = "planned_items"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, nullable=False)
    remark = Column(String, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    expected_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="planned")
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)

    # Relationships
    account = relationship("Account", back_populates="planned_items")


class LedgerEntry(Base):
    """Ledger entry (event account transaction) model."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    transaction_date = Column(Date, nullable=True)
    type = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payer_payee = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    status = Column(String, nullable=False, default="pending")
    # NULL is the relational form of an absent link
    reconciled_bank_transaction_id = Column(
        Integer, ForeignKey("bank_transactions.id"), nullable=True, index=True
    )
    created_at = Column(DateTime, default=_utcnow, nullable=False)
    updated_at = Column(DateTime, default=_utcnow, nullable=False)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)

    # Relationships
    account = relationship("Account", back_populates="ledger_entries")


class BankTransaction(Base):
    """Bank transaction model, written only by the bank feed."""

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True)
    financial_account_id = Column(String, nullable=False, index=True)
    transaction_date = Column(Date, nullable=False)
    type = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False, default="")
    payer_payee = Column(String, nullable=True)
    verification_status = Column(String, nullable=False, default="pending")
    category = Column(String, nullable=True)
    imported_at = Column(DateTime, default=_utcnow, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
