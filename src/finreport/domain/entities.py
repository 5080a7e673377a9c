"""Domain model entities for finreport.

These are pure data classes representing business concepts, independent of
database schema. Report rows and statements are built from these and never
from ORM objects, so the reporting engine can be fed from any ledger store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

TOTAL_KEY = "Total"
PROPERTY_SLOTS = 5


class Section(str, Enum):
    """Statement side an account code (and an override rule) belongs to."""

    ASSETS = "assets"
    LIABILITIES = "liabilities"
    INCOME = "income"


class RowKind(str, Enum):
    """Kind of a report row, so consumers can branch without type checks."""

    PLAIN = "plain"
    CATEGORY = "category"
    SUBTOTAL = "subtotal"
    GRAND_TOTAL = "grand_total"


class ReportScope(str, Enum):
    """Account range covered by an ad-hoc grouped report."""

    REVENUE = "6"
    EXPENSE = "7"

    @property
    def prefix(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class Period:
    """A (year, month) pair for which ledger balances exist."""

    year: int
    month: int

    @property
    def key(self) -> str:
        """Value map key for this period."""
        return str(self.month)


@dataclass(frozen=True)
class Entity:
    """Company owning a ledger and its override rules."""

    id: int
    name: str
    tax_number: Optional[str]
    account_code_separator: str
    property_names: tuple[Optional[str], ...]
    created_at: datetime

    def property_name(self, index: int) -> str:
        """Display name of property slot ``index`` (1-based)."""
        name = self.property_names[index - 1] if index <= len(self.property_names) else None
        return name or f"Property {index}"


@dataclass(frozen=True)
class LedgerAccount:
    """Account plan item."""

    id: int
    entity_id: int
    code: str
    name: str
    level: int
    parent_id: Optional[int]
    is_leaf: bool
    properties: tuple[Optional[str], ...]
    assigned_property_index: Optional[int] = None
    assigned_property_value: Optional[str] = None
    cost_center: Optional[str] = None


@dataclass(frozen=True)
class LeafEntry:
    """Debit/credit totals of one leaf account in one month."""

    account_code: str
    account_name: str
    year: int
    month: int
    debit: Decimal
    credit: Decimal
    properties: tuple[Optional[str], ...] = ()

    @property
    def period(self) -> Period:
        return Period(self.year, self.month)


@dataclass(frozen=True)
class BalanceInput:
    """One trial balance line to record for a period."""

    account_code: str
    account_name: str
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    debit_balance: Decimal = Decimal("0")
    credit_balance: Decimal = Decimal("0")
    cost_center: Optional[str] = None


@dataclass(frozen=True)
class PeriodUpload:
    """Outcome of recording one period's trial balance."""

    rows_processed: int
    accounts_added: int
    accounts_renamed: int


@dataclass(frozen=True)
class PeriodBalance:
    """Stored balance line of a period, as shown in the trial balance view."""

    account_code: str
    account_name: str
    debit: Decimal
    credit: Decimal
    debit_balance: Decimal
    credit_balance: Decimal
    is_leaf: bool


@dataclass(frozen=True)
class OverrideRule:
    """Entity-specific replacement of the default key-to-row mapping."""

    grouping_key: str
    section: Section
    label: str
    display_order: int = 0
    prefixes: tuple[str, ...] = ()


@dataclass(frozen=True)
class RowDefinition:
    """Resolved row: label plus the account codes it captures."""

    label: str
    grouping_key: Optional[str]
    section: Section
    account_codes: tuple[str, ...]
    source: str
    subsection_digit: Optional[str] = None


@dataclass(frozen=True)
class PeriodValues:
    """Per-period values of a row plus their sum."""

    values: tuple[tuple[Period, Decimal], ...]
    total: Decimal

    def get(self, period: Period) -> Decimal:
        for candidate, value in self.values:
            if candidate == period:
                return value
        return Decimal("0")

    def as_map(self) -> dict[str, Decimal]:
        """Month keys in ascending order plus the ``Total`` key."""
        mapping = {period.key: value for period, value in self.values}
        mapping[TOTAL_KEY] = self.total
        return mapping


@dataclass(frozen=True)
class ReportRow:
    """One row of a computed report."""

    kind: RowKind
    label: str
    values: PeriodValues
    grouping_key: Optional[str] = None

    @property
    def total(self) -> Decimal:
        return self.values.total


@dataclass(frozen=True)
class BalanceSheet:
    """Balance sheet for one entity and year."""

    year: int
    periods: tuple[Period, ...]
    asset_rows: tuple[ReportRow, ...] = ()
    liability_rows: tuple[ReportRow, ...] = ()


@dataclass(frozen=True)
class IncomeStatement:
    """Income statement cascade for one entity and year."""

    year: int
    periods: tuple[Period, ...]
    rows: tuple[ReportRow, ...] = ()


@dataclass(frozen=True)
class PropertyFilter:
    """Exact-match filter on one of the five account properties."""

    index: int
    value: str


@dataclass(frozen=True)
class GroupItem:
    """Named line of an ad-hoc group."""

    name: str
    property_filters: tuple[PropertyFilter, ...] = ()
    account_code_prefix: Optional[str] = None


@dataclass(frozen=True)
class ReportGroup:
    """Caller-defined group of line items."""

    name: str
    display_order: int = 0
    items: tuple[GroupItem, ...] = ()


@dataclass(frozen=True)
class GroupResult:
    """Computed ad-hoc group."""

    name: str
    display_order: int
    items: tuple[ReportRow, ...]
    total: PeriodValues


@dataclass(frozen=True)
class GroupedReport:
    """Ad-hoc grouped report for one entity and year."""

    year: int
    periods: tuple[Period, ...]
    groups: tuple[GroupResult, ...] = ()


@dataclass(frozen=True)
class AccountDetail:
    """Leaf account feeding a summary row."""

    account_code: str
    account_name: str
    values: PeriodValues

    @property
    def total(self) -> Decimal:
        return self.values.total


@dataclass(frozen=True)
class RowDetail:
    """Drill-down of a summary row into its leaf accounts."""

    grouping_key: str
    year: int
    periods: tuple[Period, ...]
    accounts: tuple[AccountDetail, ...] = ()


@dataclass(frozen=True)
class PreviewRow:
    """Resolved row layout without values."""

    grouping_key: Optional[str]
    label: str
    subsection: str
    account_codes: tuple[str, ...]
    prefixes: tuple[str, ...]
    source: str


@dataclass(frozen=True)
class RowPreview:
    """Row layout of both balance sheet sides."""

    year: int
    asset_rows: tuple[PreviewRow, ...] = ()
    liability_rows: tuple[PreviewRow, ...] = ()


@dataclass(frozen=True)
class PropertyOptions:
    """Distinct values present for one property slot."""

    index: int
    name: str
    values: tuple[str, ...]


@dataclass(frozen=True)
class ReportTemplate:
    """Saved ad-hoc report definition."""

    id: int
    entity_id: int
    name: str
    groups: tuple[ReportGroup, ...]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class ReportTemplateSummary:
    """Template listing entry."""

    id: int
    name: str
    created_at: datetime
    updated_at: datetime


@dataclass
class PlanRecalculation:
    """Computed structure of one account plan item."""

    account_id: int
    level: int
    parent_id: Optional[int]
    is_leaf: bool
    properties: list[Optional[str]] = field(default_factory=list)
