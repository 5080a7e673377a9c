"""SQLAlchemy models for finreport database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Entity(Base):
    """Reporting entity (company) model."""

    __tablename__ = "entities"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    tax_number = Column(String, nullable=True)
    account_code_separator = Column(String(1), default=".", nullable=False)
    property_name1 = Column(String, nullable=True)
    property_name2 = Column(String, nullable=True)
    property_name3 = Column(String, nullable=True)
    property_name4 = Column(String, nullable=True)
    property_name5 = Column(String, nullable=True)
    # JSON list of override rules; NULL means nothing stored
    override_rules_json = Column(Text, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    ledger_accounts = relationship(
        "LedgerAccount", back_populates="entity", cascade="all, delete-orphan"
    )
    report_templates = relationship(
        "ReportTemplate", back_populates="entity", cascade="all, delete-orphan"
    )


class LedgerAccount(Base):
    """Account plan item model."""

    __tablename__ = "ledger_accounts"

    id = Column(Integer, primary_key=True)
    entity_id = Column(Integer, ForeignKey("entities.id"), nullable=False)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False, default="")
    cost_center = Column(String, nullable=True)
    level = Column(Integer, default=1, nullable=False)
    parent_id = Column(Integer, ForeignKey("ledger_accounts.id"), nullable=True)
    is_leaf = Column(Boolean, default=True, nullable=False)
    property1 = Column(String, nullable=True)
    property2 = Column(String, nullable=True)
    property3 = Column(String, nullable=True)
    property4 = Column(String, nullable=True)
    property5 = Column(String, nullable=True)
    assigned_property_index = Column(Integer, nullable=True)
    assigned_property_value = Column(String, nullable=True)

    __table_args__ = (UniqueConstraint("entity_id", "code", name="uq_entity_account_code"),)

    # Relationships
    entity = relationship("Entity", back_populates="ledger_accounts")
    parent = relationship("LedgerAccount", remote_side=[id])
    balances = relationship("MonthlyBalance", back_populates="account", cascade="all, delete-orphan")


class MonthlyBalance(Base):
    """Trial balance line of one account in one month."""

    __tablename__ = "monthly_balances"

    id = Column(Integer, primary_key=True)
    entity_id = Column(Integer, ForeignKey("entities.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("ledger_accounts.id"), nullable=False)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    debit = Column(Numeric(18, 2), default=0, nullable=False)
    credit = Column(Numeric(18, 2), default=0, nullable=False)
    debit_balance = Column(Numeric(18, 2), default=0, nullable=False)
    credit_balance = Column(Numeric(18, 2), default=0, nullable=False)

    __table_args__ = (
        UniqueConstraint("account_id", "year", "month", name="uq_account_period"),
    )

    # Relationships
    account = relationship("LedgerAccount", back_populates="balances")


class ReportTemplate(Base):
    """Saved grouped report definition."""

    __tablename__ = "report_templates"

    id = Column(Integer, primary_key=True)
    entity_id = Column(Integer, ForeignKey("entities.id"), nullable=False)
    name = Column(String, nullable=False)
    groups_json = Column(Text, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("entity_id", "name", name="uq_entity_template_name"),)

    # Relationships
    entity = relationship("Entity", back_populates="report_templates")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
