"""Income statement domain service.

The statement is a fixed cascade. Category steps aggregate ledger lines;
derived steps are signed combinations of steps computed before them and never
look at ledger entries again.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import Optional, Union

from finreport.database.base import Database
from finreport.domain.aggregation import aggregate, combine, convention_for_code, sum_values
from finreport.domain.entities import (
    IncomeStatement,
    LeafEntry,
    Period,
    PeriodValues,
    ReportRow,
    RowKind,
    Section,
)
from finreport.domain.errors import NotFoundError, entity_not_found
from finreport.domain.overrides import OverrideResolver
from finreport.domain.taxonomy import grouping_key, matches_prefix
from finreport.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class CategoryStep:
    """Cascade step summing ledger lines (three-character codes)."""

    name: str
    label: str
    lines: tuple[str, ...]
    negative: bool = False
    # Single-line category shown without line rows, keyed by its line code.
    inline: bool = False


@dataclass(frozen=True)
class DerivedStep:
    """Cascade step computed from earlier steps."""

    name: str
    label: str
    terms: tuple[tuple[int, str], ...]
    kind: RowKind = RowKind.SUBTOTAL


CascadeStep = Union[CategoryStep, DerivedStep]

INCOME_STATEMENT_CASCADE: tuple[CascadeStep, ...] = (
    CategoryStep("A", "A- GROSS SALES", ("600", "601", "602")),
    CategoryStep("B", "B- SALES DEDUCTIONS (-)", ("610", "611", "612"), negative=True),
    DerivedStep("C", "C- NET SALES", ((1, "A"), (-1, "B"))),
    CategoryStep("D", "D- COST OF SALES (-)", ("620", "621", "622", "623"), negative=True),
    DerivedStep("gross_profit", "GROSS SALES PROFIT OR LOSS", ((1, "C"), (-1, "D"))),
    CategoryStep("E", "E- OPERATING EXPENSES (-)", ("630", "631", "632"), negative=True),
    DerivedStep("operating_profit", "OPERATING PROFIT OR LOSS", ((1, "gross_profit"), (-1, "E"))),
    CategoryStep(
        "F",
        "F- OTHER ORDINARY INCOME AND GAINS",
        ("640", "641", "642", "643", "644", "645", "646", "647", "648", "649"),
    ),
    CategoryStep(
        "G",
        "G- OTHER ORDINARY EXPENSES AND LOSSES (-)",
        ("653", "654", "655", "656", "657", "658", "659"),
        negative=True,
    ),
    CategoryStep("H", "H- FINANCING EXPENSES (-)", ("660", "661"), negative=True),
    DerivedStep(
        "ordinary_profit",
        "ORDINARY PROFIT OR LOSS",
        ((1, "operating_profit"), (1, "F"), (-1, "G"), (-1, "H")),
    ),
    CategoryStep("I", "I- EXTRAORDINARY INCOME AND GAINS", ("671", "679")),
    CategoryStep("J", "J- EXTRAORDINARY EXPENSES AND LOSSES (-)", ("680", "681", "689"), negative=True),
    DerivedStep("period_profit", "PROFIT OR LOSS FOR THE PERIOD", ((1, "ordinary_profit"), (1, "I"), (-1, "J"))),
    CategoryStep(
        "K",
        "K- TAX AND OTHER LEGAL LIABILITY PROVISIONS (-)",
        ("691",),
        negative=True,
        inline=True,
    ),
    DerivedStep(
        "net_profit",
        "NET PROFIT OR LOSS FOR THE PERIOD",
        ((1, "period_profit"), (-1, "K")),
        kind=RowKind.GRAND_TOTAL,
    ),
)

NEGATIVE_LINES = frozenset(
    line
    for step in INCOME_STATEMENT_CASCADE
    if isinstance(step, CategoryStep) and step.negative
    for line in step.lines
)


def is_negative_line(code: str, separator: str = ".") -> bool:
    """Return True if ``code`` feeds a negative-presentation line."""
    return grouping_key(code, 3, separator) in NEGATIVE_LINES


class IncomeStatementService:
    """Service for building income statements."""

    def __init__(self, db: Database):
        """Initialize income statement service.

        Args:
            db: Database instance
        """
        self.db = db

    def build(
        self, entity_id: int, year: Optional[int] = None, detailed: bool = True
    ) -> IncomeStatement:
        """Build the income statement cascade of an entity for one year.

        Args:
            entity_id: Entity ID
            year: Report year. Defaults to the latest year with balances
            detailed: Include a row for every ledger line before its category.
                When False only the sixteen cascade rows are returned

        Returns:
            IncomeStatement; year 0 and no rows when the entity has no data

        Raises:
            NotFoundError: If entity doesn't exist
        """
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))

        if year is None:
            year = self.db.get_latest_year(entity_id)
        if year is None:
            return IncomeStatement(year=0, periods=())

        periods = tuple(self.db.list_periods(entity_id, year))
        if not periods:
            return IncomeStatement(year=year, periods=())

        separator = entity.account_code_separator
        entries_by_code: dict[str, list[LeafEntry]] = defaultdict(list)
        for entry in self.db.get_leaf_entries(entity_id, year, code_prefix="6"):
            entries_by_code[entry.account_code].append(entry)

        resolver = OverrideResolver(self.db, entity_id, separator)
        computed: dict[str, PeriodValues] = {}
        rows: list[ReportRow] = []

        for step in INCOME_STATEMENT_CASCADE:
            if isinstance(step, DerivedStep):
                values = combine(((sign, computed[name]) for sign, name in step.terms), periods)
                computed[step.name] = values
                rows.append(ReportRow(kind=step.kind, label=step.label, values=values))
                continue

            line_rows = [
                self._line_row(resolver, line, step.negative, entries_by_code, periods)
                for line in step.lines
            ]
            values = sum_values((row.values for row in line_rows), periods)
            computed[step.name] = values
            if step.inline:
                rows.append(
                    ReportRow(
                        kind=RowKind.CATEGORY,
                        label=step.label,
                        values=values,
                        grouping_key=step.lines[0],
                    )
                )
                continue
            if detailed:
                rows.extend(line_rows)
            rows.append(ReportRow(kind=RowKind.CATEGORY, label=step.label, values=values))

        logger.debug(
            "income statement built",
            entity_id=entity_id,
            year=year,
            periods=len(periods),
            rows=len(rows),
        )
        return IncomeStatement(year=year, periods=periods, rows=tuple(rows))

    def _line_row(
        self,
        resolver: OverrideResolver,
        line: str,
        negative: bool,
        entries_by_code: dict[str, list[LeafEntry]],
        periods: tuple[Period, ...],
    ) -> ReportRow:
        candidates = [code for code in entries_by_code if matches_prefix(code, line, resolver.separator)]
        definition = resolver.resolve_row(line, Section.INCOME, candidates)
        line_entries = [e for code in definition.account_codes for e in entries_by_code[code]]
        return ReportRow(
            kind=RowKind.PLAIN,
            label=definition.label,
            values=aggregate(line_entries, periods, convention_for_code(line), negative=negative),
            grouping_key=line,
        )
