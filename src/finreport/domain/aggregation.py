"""Period aggregation of leaf ledger entries.

All arithmetic is done on Decimal values. A row total is only ever computed
as the sum of its period values, so the two can never drift apart.
"""

from collections import defaultdict
from decimal import Decimal
from enum import Enum
from typing import Iterable, Mapping, Optional, Sequence

from finreport.domain.entities import LeafEntry, Period, PeriodValues

ZERO = Decimal("0")


class SignConvention(str, Enum):
    """How a debit/credit pair nets into a reported value."""

    DEBIT_NORMAL = "debit_normal"
    CREDIT_NORMAL = "credit_normal"


def convention_for_code(code: str) -> SignConvention:
    """Return the income statement sign convention for an account code.

    Expense accounts (leading 7) are debit-normal; revenue accounts (leading
    6) and anything else are credit-normal.
    """
    if code.strip().startswith("7"):
        return SignConvention.DEBIT_NORMAL
    return SignConvention.CREDIT_NORMAL


def net_amount(debit: Decimal, credit: Decimal, convention: SignConvention) -> Decimal:
    """Net a debit/credit pair under ``convention``."""
    if convention == SignConvention.DEBIT_NORMAL:
        return debit - credit
    return credit - debit


def values_from(periods: Sequence[Period], amounts: Mapping[Period, Decimal]) -> PeriodValues:
    """Build a value map for ``periods``, filling missing periods with zero."""
    values = tuple((period, amounts.get(period, ZERO)) for period in periods)
    return PeriodValues(values=values, total=sum((value for _, value in values), ZERO))


def zero_values(periods: Sequence[Period]) -> PeriodValues:
    """Value map with zero for every period."""
    return values_from(periods, {})


def combine_entries(entries: Iterable[LeafEntry]) -> dict[tuple[str, Period], tuple[Decimal, Decimal]]:
    """Sum debits and credits per (account code, period)."""
    combined: dict[tuple[str, Period], list[Decimal]] = defaultdict(lambda: [ZERO, ZERO])
    for entry in entries:
        totals = combined[(entry.account_code, entry.period)]
        totals[0] += entry.debit
        totals[1] += entry.credit
    return {key: (debit, credit) for key, (debit, credit) in combined.items()}


def aggregate(
    entries: Iterable[LeafEntry],
    periods: Sequence[Period],
    convention: SignConvention,
    negative: bool = False,
) -> PeriodValues:
    """Aggregate leaf entries into per-period values.

    Args:
        entries: Leaf entries of the accounts captured by one row
        periods: Ordered periods of the report year
        convention: Sign convention of the row
        negative: Present every account's per-period net as a negative
            magnitude (deduction and expense rows)

    Returns:
        PeriodValues ordered like ``periods``; entries outside ``periods``
        are ignored
    """
    wanted = set(periods)
    amounts: dict[Period, Decimal] = defaultdict(lambda: ZERO)
    for (_, period), (debit, credit) in combine_entries(entries).items():
        if period not in wanted:
            continue
        net = net_amount(debit, credit, convention)
        if negative:
            net = -abs(net)
        amounts[period] += net
    return values_from(periods, amounts)


def aggregate_by_account(
    entries: Iterable[LeafEntry],
    periods: Sequence[Period],
    convention: Optional[SignConvention] = None,
    negative: bool = False,
) -> dict[str, PeriodValues]:
    """Aggregate entries separately for each account code.

    When ``convention`` is None each account uses :func:`convention_for_code`.
    """
    by_code: dict[str, list[LeafEntry]] = defaultdict(list)
    for entry in entries:
        by_code[entry.account_code].append(entry)
    return {
        code: aggregate(
            code_entries,
            periods,
            convention if convention is not None else convention_for_code(code),
            negative=negative,
        )
        for code, code_entries in by_code.items()
    }


def sum_values(items: Iterable[PeriodValues], periods: Sequence[Period]) -> PeriodValues:
    """Per-period sum of several value maps."""
    return combine(((1, item) for item in items), periods)


def combine(terms: Iterable[tuple[int, PeriodValues]], periods: Sequence[Period]) -> PeriodValues:
    """Signed linear combination of value maps, e.g. ``[(1, a), (-1, b)]``."""
    amounts: dict[Period, Decimal] = defaultdict(lambda: ZERO)
    for sign, item in terms:
        for period in periods:
            amounts[period] += sign * item.get(period)
    return values_from(periods, amounts)
