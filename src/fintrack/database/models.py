"""SQLAlchemy models for fintrack database."""

from datetime import datetime, UTC
from sqlalchemy import (
    JSON,
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class User(Base):
    """User model. uid is the owner string used by every other table."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    uid = Column(String, unique=True, nullable=False)
    username = Column(String, unique=True, nullable=False)
    display_name = Column(String, nullable=True)
    email = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    icon = Column(String, nullable=True)
    color = Column(String, nullable=True)
    category_type = Column("type", String, nullable=False)
    owner = Column(String, nullable=False, index=True)

    transactions = relationship("Transaction", back_populates="category")


class Account(Base):
    """Account model. balance changes only through transaction writes."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    account_type = Column("type", String, nullable=False)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    owner = Column(String, nullable=False, index=True)

    transactions = relationship("Transaction", back_populates="account")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    description = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    date = Column(Date, nullable=False)
    transaction_type = Column("type", String, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=True)
    notes = Column(String, nullable=True)
    receipt_url = Column(String, nullable=True)
    status = Column(String, nullable=False, default="completed")
    owner = Column(String, nullable=False)

    __table_args__ = (Index("ix_transactions_owner_date", "owner", "date"),)

    account = relationship("Account", back_populates="transactions")
    category = relationship("Category", back_populates="transactions")


class Import(Base):
    """Statement import record."""

    __tablename__ = "imports"

    id = Column(Integer, primary_key=True)
    filename = Column(String, nullable=False)
    filesize = Column(Integer, nullable=True)
    import_type = Column("type", String, nullable=False)
    date_imported = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    transaction_count = Column(Integer, nullable=False, default=0)
    status = Column(String, nullable=False, default="processing")
    owner = Column(String, nullable=False, index=True)
    metadata_ = Column("metadata", JSON, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
