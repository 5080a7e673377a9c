"""Row detail drill-down domain service."""

from collections import defaultdict
from typing import Optional

from finreport.database.base import Database
from finreport.domain.aggregation import SignConvention, aggregate, convention_for_code
from finreport.domain.entities import AccountDetail, LeafEntry, RowDetail, Section
from finreport.domain.errors import NotFoundError, ValidationError, entity_not_found
from finreport.domain.income_statement import is_negative_line
from finreport.domain.layout import layout_subsection
from finreport.domain.overrides import OverrideResolver
from finreport.domain.taxonomy import first_segment, matches_prefix, subsection_for_digit
from finreport.logger import get_logger

logger = get_logger(__name__)


class RowDetailService:
    """Service listing the leaf accounts behind a report row."""

    def __init__(self, db: Database):
        """Initialize row detail service.

        Args:
            db: Database instance
        """
        self.db = db

    def details(self, entity_id: int, grouping_key: str, year: Optional[int] = None) -> RowDetail:
        """List the leaf accounts feeding the row of a grouping key.

        Balance sheet keys (digits 1-5) return exactly the accounts of the
        balance sheet row, so overrides and legacy merges apply. Income keys
        (digits 6-7) return the accounts matching the key, signed per account
        as on the income statement.

        Args:
            entity_id: Entity ID
            grouping_key: Row key, e.g. "10" or "632"
            year: Report year. Defaults to the latest year with balances

        Returns:
            RowDetail with accounts sorted by code

        Raises:
            NotFoundError: If entity doesn't exist
            ValidationError: If the key's first digit maps to no section
        """
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))

        key = (grouping_key or "").strip()
        subsection = subsection_for_digit(key[:1]) if key else None
        if subsection is None:
            raise ValidationError(f"Cannot infer a statement section for row '{grouping_key}'")

        if year is None:
            year = self.db.get_latest_year(entity_id)
        if year is None:
            return RowDetail(grouping_key=key, year=0, periods=())

        periods = tuple(self.db.list_periods(entity_id, year))
        if not periods:
            return RowDetail(grouping_key=key, year=year, periods=())

        separator = entity.account_code_separator
        entries_by_code: dict[str, list[LeafEntry]] = defaultdict(list)
        for entry in self.db.get_leaf_entries(entity_id, year, code_prefix=subsection.digit):
            if first_segment(entry.account_code, separator)[:1] == subsection.digit:
                entries_by_code[entry.account_code].append(entry)

        resolver = OverrideResolver(self.db, entity_id, separator)
        section = subsection.section
        if section == Section.INCOME:
            candidates = [code for code in entries_by_code if matches_prefix(code, key, separator)]
            codes = resolver.resolve_row(key, section, candidates).account_codes
        else:
            row_key = resolver.route_key(section, key)
            layout = layout_subsection(resolver, subsection, entries_by_code)
            codes = ()
            for row in layout.rows:
                if row.grouping_key == row_key:
                    codes = row.account_codes
                    break

        accounts = []
        for code in sorted(codes):
            code_entries = entries_by_code[code]
            if section == Section.INCOME:
                values = aggregate(
                    code_entries,
                    periods,
                    convention_for_code(code),
                    negative=is_negative_line(code, separator),
                )
            else:
                values = aggregate(code_entries, periods, SignConvention.DEBIT_NORMAL)
            accounts.append(
                AccountDetail(
                    account_code=code,
                    account_name=code_entries[0].account_name if code_entries else "",
                    values=values,
                )
            )

        logger.debug(
            "row details built",
            entity_id=entity_id,
            grouping_key=key,
            year=year,
            accounts=len(accounts),
        )
        return RowDetail(grouping_key=key, year=year, periods=periods, accounts=tuple(accounts))
