"""Balance sheet domain service."""

from collections import defaultdict
from typing import Optional

from finreport.database.base import Database
from finreport.domain.aggregation import SignConvention, aggregate, sum_values
from finreport.domain.entities import (
    BalanceSheet,
    LeafEntry,
    Period,
    ReportRow,
    RowKind,
    Section,
)
from finreport.domain.errors import NotFoundError, entity_not_found
from finreport.domain.layout import SIDE_ORDER, SubsectionLayout, layout_side, split_by_subsection
from finreport.domain.overrides import OverrideResolver
from finreport.logger import get_logger

logger = get_logger(__name__)

GRAND_TOTAL_LABELS = {
    Section.ASSETS: "TOTAL ASSETS",
    Section.LIABILITIES: "TOTAL LIABILITIES AND EQUITY",
}


class BalanceSheetService:
    """Service for building balance sheets."""

    def __init__(self, db: Database):
        """Initialize balance sheet service.

        Args:
            db: Database instance
        """
        self.db = db

    def build(self, entity_id: int, year: Optional[int] = None) -> BalanceSheet:
        """Build the balance sheet of an entity for one year.

        Args:
            entity_id: Entity ID
            year: Report year. Defaults to the latest year with balances

        Returns:
            BalanceSheet. Without any data the year is 0 and both sides are
            empty; a year without periods keeps the year with empty sides.

        Raises:
            NotFoundError: If entity doesn't exist
        """
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))

        if year is None:
            year = self.db.get_latest_year(entity_id)
        if year is None:
            return BalanceSheet(year=0, periods=())

        periods = tuple(self.db.list_periods(entity_id, year))
        if not periods:
            return BalanceSheet(year=year, periods=())

        entries = self.db.get_leaf_entries(entity_id, year)
        entries_by_code: dict[str, list[LeafEntry]] = defaultdict(list)
        for entry in entries:
            entries_by_code[entry.account_code].append(entry)

        resolver = OverrideResolver(self.db, entity_id, entity.account_code_separator)
        by_subsection = split_by_subsection(entries_by_code, entity.account_code_separator)

        sides = {}
        for section in SIDE_ORDER:
            layout = layout_side(resolver, section, by_subsection)
            sides[section] = self._side_rows(section, layout, entries_by_code, periods)

        logger.debug(
            "balance sheet built",
            entity_id=entity_id,
            year=year,
            periods=len(periods),
            asset_rows=len(sides[Section.ASSETS]),
            liability_rows=len(sides[Section.LIABILITIES]),
        )
        return BalanceSheet(
            year=year,
            periods=periods,
            asset_rows=sides[Section.ASSETS],
            liability_rows=sides[Section.LIABILITIES],
        )

    def _side_rows(
        self,
        section: Section,
        layout: tuple[SubsectionLayout, ...],
        entries_by_code: dict[str, list[LeafEntry]],
        periods: tuple[Period, ...],
    ) -> tuple[ReportRow, ...]:
        rows: list[ReportRow] = []
        subtotals = []
        for block in layout:
            if not block.rows:
                continue
            block_rows = []
            for definition in block.rows:
                row_entries = [e for code in definition.account_codes for e in entries_by_code[code]]
                block_rows.append(
                    ReportRow(
                        kind=RowKind.PLAIN,
                        label=definition.label,
                        values=aggregate(row_entries, periods, SignConvention.DEBIT_NORMAL),
                        grouping_key=definition.grouping_key,
                    )
                )
            subtotal = sum_values((row.values for row in block_rows), periods)
            subtotals.append(subtotal)
            rows.extend(block_rows)
            rows.append(
                ReportRow(
                    kind=RowKind.SUBTOTAL,
                    label=f"TOTAL {block.subsection.title}",
                    values=subtotal,
                )
            )

        if subtotals:
            rows.append(
                ReportRow(
                    kind=RowKind.GRAND_TOTAL,
                    label=GRAND_TOTAL_LABELS[section],
                    values=sum_values(subtotals, periods),
                )
            )
        return tuple(rows)
