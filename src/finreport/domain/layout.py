"""Balance sheet row layout.

Turns the leaf codes of each subsection into resolved row definitions. Both
the balance sheet and the override preview are built from this layout, so
they always agree on which row an account lands in.
"""

from dataclasses import dataclass
from typing import Iterable, Mapping

from finreport.domain.defaults import SOURCE_UNMAPPED, UNMAPPED_LABEL
from finreport.domain.entities import RowDefinition, Section
from finreport.domain.errors import TaxonomyError
from finreport.domain.taxonomy import (
    DEFAULT_SEPARATOR,
    StatementContext,
    Subsection,
    grouping_key,
    section_of,
)

SIDE_ORDER = {
    Section.ASSETS: (Subsection.NON_CURRENT_ASSETS, Subsection.CURRENT_ASSETS),
    Section.LIABILITIES: (
        Subsection.EQUITY,
        Subsection.LONG_TERM_LIABILITIES,
        Subsection.CURRENT_LIABILITIES,
    ),
}


@dataclass(frozen=True)
class SubsectionLayout:
    """Resolved rows of one subsection in display order."""

    subsection: Subsection
    rows: tuple[RowDefinition, ...]


def split_by_subsection(
    codes: Iterable[str], separator: str = DEFAULT_SEPARATOR
) -> dict[Subsection, list[str]]:
    """Group balance sheet codes by subsection; other codes are left out."""
    result: dict[Subsection, list[str]] = {}
    for code in sorted(set(codes)):
        try:
            subsection = section_of(code, StatementContext.BALANCE_SHEET)
        except TaxonomyError:
            # income statement and off-chart accounts
            continue
        if subsection is None:
            continue
        result.setdefault(subsection, []).append(code)
    return result


def layout_subsection(resolver, subsection: Subsection, codes: Iterable[str]) -> SubsectionLayout:
    """Resolve the rows of one subsection.

    Rows are emitted per grouping key in ascending order, then for override
    rules declaring keys without accounts, then one row collecting accounts no
    other row captured. Each account is captured by the first row that
    claims it.
    """
    section = subsection.section
    separator = resolver.separator
    codes = sorted(set(codes))

    routed = {code: resolver.route_key(section, grouping_key(code, 2, separator)) for code in codes}
    keys = sorted({key for key in routed.values() if key})

    claimed: set[str] = set()
    rows: list[RowDefinition] = []
    for key in keys:
        unclaimed = [code for code in codes if code not in claimed]
        if not any(routed[code] == key for code in unclaimed):
            continue
        row = resolver.resolve_row(key, section, unclaimed)
        claimed.update(row.account_codes)
        rows.append(row)

    seen_keys = set(keys)
    for rule in resolver.rules_for(section):
        if rule.grouping_key in seen_keys or resolver.declared_digit(rule) != subsection.digit:
            continue
        row = resolver.resolve_declared_row(rule, codes, exclude=claimed)
        if row is None:
            continue
        seen_keys.add(rule.grouping_key)
        claimed.update(row.account_codes)
        rows.append(row)

    leftover = tuple(code for code in codes if code not in claimed)
    if leftover:
        rows.append(
            RowDefinition(
                label=UNMAPPED_LABEL,
                grouping_key=None,
                section=section,
                account_codes=leftover,
                source=SOURCE_UNMAPPED,
                subsection_digit=subsection.digit,
            )
        )

    return SubsectionLayout(subsection=subsection, rows=tuple(rows))


def layout_side(
    resolver, section: Section, codes_by_subsection: Mapping[Subsection, list[str]]
) -> tuple[SubsectionLayout, ...]:
    """Resolve every subsection of one balance sheet side in display order."""
    return tuple(
        layout_subsection(resolver, subsection, codes_by_subsection.get(subsection, ()))
        for subsection in SIDE_ORDER[section]
    )
