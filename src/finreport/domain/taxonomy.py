"""Account code taxonomy.

Account codes follow the uniform chart of accounts: the first digit selects
the statement section, the first two characters of the first segment form
the grouping key ("NOT code") a balance sheet row is built from, and the
first three characters identify an income statement line.
"""

from enum import Enum
from typing import Iterable, Optional

from finreport.domain.entities import Section
from finreport.domain.errors import TaxonomyError, undefined_section_digit

DEFAULT_SEPARATOR = "."


class StatementContext(str, Enum):
    """Statement a code is being classified for."""

    BALANCE_SHEET = "balance_sheet"
    INCOME_STATEMENT = "income_statement"


class Subsection(Enum):
    """Top-level digit of an account code."""

    CURRENT_ASSETS = ("1", Section.ASSETS, "CURRENT ASSETS")
    NON_CURRENT_ASSETS = ("2", Section.ASSETS, "NON-CURRENT ASSETS")
    CURRENT_LIABILITIES = ("3", Section.LIABILITIES, "CURRENT LIABILITIES")
    LONG_TERM_LIABILITIES = ("4", Section.LIABILITIES, "LONG-TERM LIABILITIES")
    EQUITY = ("5", Section.LIABILITIES, "EQUITY")
    REVENUE = ("6", Section.INCOME, "REVENUE")
    EXPENSE = ("7", Section.INCOME, "EXPENSE")

    def __init__(self, digit: str, section: Section, title: str):
        self.digit = digit
        self.section = section
        self.title = title


_BY_DIGIT = {subsection.digit: subsection for subsection in Subsection}

_CONTEXT_SECTIONS = {
    StatementContext.BALANCE_SHEET: (Section.ASSETS, Section.LIABILITIES),
    StatementContext.INCOME_STATEMENT: (Section.INCOME,),
}


def first_segment(code: str, separator: str = DEFAULT_SEPARATOR) -> str:
    """Return the part of ``code`` before the first separator."""
    if not code:
        return ""
    return code.strip().split(separator, 1)[0]


def grouping_key(code: str, width: int = 2, separator: str = DEFAULT_SEPARATOR) -> str:
    """Return the grouping key of ``code`` at the given specificity.

    The key is the first ``width`` characters of the first segment, or the
    whole segment when it is shorter. Empty codes yield an empty key.
    """
    segment = first_segment(code, separator)
    if len(segment) >= width:
        return segment[:width]
    return segment


def subsection_for_digit(digit: str) -> Optional[Subsection]:
    """Return the subsection a leading digit maps to, if any."""
    return _BY_DIGIT.get(digit)


def subsections_of(section: Section) -> tuple[Subsection, ...]:
    """Return the subsections of a statement side in digit order."""
    return tuple(s for s in Subsection if s.section == section)


def section_for_key(key: str) -> Optional[Section]:
    """Return the statement side a grouping key belongs to."""
    subsection = subsection_for_digit(key[:1]) if key else None
    return subsection.section if subsection is not None else None


def section_of(code: str, context: StatementContext) -> Optional[Subsection]:
    """Classify ``code`` into its top-level subsection.

    Args:
        code: Account code
        context: Statement the code is classified for

    Returns:
        Subsection, or None for empty codes and for income statement codes
        outside digits 6-7

    Raises:
        TaxonomyError: If a non-empty code falls outside digits 1-5 in
            balance sheet context
    """
    stripped = (code or "").strip()
    if not stripped:
        return None

    subsection = _BY_DIGIT.get(stripped[0])
    if subsection is not None and subsection.section in _CONTEXT_SECTIONS[context]:
        return subsection

    if context == StatementContext.BALANCE_SHEET:
        raise TaxonomyError(undefined_section_digit(code))
    return None


def matches_prefix(code: str, prefix: str, separator: str = DEFAULT_SEPARATOR) -> bool:
    """Length-aware prefix match against the first segment of ``code``.

    A prefix only matches when the first segment is at least as long as the
    prefix, so ``"13"`` never matches the one-character segment ``"1"``.
    """
    if not prefix:
        return False
    segment = first_segment(code, separator)
    return len(segment) >= len(prefix) and segment[: len(prefix)] == prefix


def matches_any_prefix(
    code: str, prefixes: Iterable[str], separator: str = DEFAULT_SEPARATOR
) -> bool:
    """Return True if ``code`` matches at least one of ``prefixes``."""
    return any(matches_prefix(code, prefix, separator) for prefix in prefixes)


def derive_prefixes(codes: Iterable[str], separator: str = DEFAULT_SEPARATOR) -> tuple[str, ...]:
    """Return the sorted 2- and 3-character prefixes covering ``codes``."""
    prefixes: set[str] = set()
    for code in codes:
        segment = first_segment(code, separator)
        if len(segment) >= 2:
            prefixes.add(segment[:2])
        if len(segment) >= 3:
            prefixes.add(segment[:3])
    return tuple(sorted(prefixes))
