"""Table rendering for report commands."""

import click

from finreport.domain.entities import TOTAL_KEY, Period, PeriodValues, ReportRow, RowKind

LABEL_WIDTH = 44
AMOUNT_WIDTH = 15


def format_amount(value) -> str:
    """Format an amount with thousands separators, negatives in parentheses."""
    if value < 0:
        return f"({-value:,.2f})"
    return f"{value:,.2f}"


def _value_cells(values: PeriodValues, periods: tuple[Period, ...]) -> str:
    cells = [f"{format_amount(values.get(p)):>{AMOUNT_WIDTH}}" for p in periods]
    cells.append(f"{format_amount(values.total):>{AMOUNT_WIDTH}}")
    return " ".join(cells)


def echo_header(periods: tuple[Period, ...], title: str = "") -> None:
    months = [f"{p.year}/{p.month:02d}" for p in periods] + [TOTAL_KEY]
    header = " ".join(f"{m:>{AMOUNT_WIDTH}}" for m in months)
    click.echo(f"{title:<{LABEL_WIDTH}} {header}")
    click.echo("-" * (LABEL_WIDTH + 1 + len(header)))


def echo_line(label: str, values: PeriodValues, periods: tuple[Period, ...], indent: int = 0) -> None:
    text = (" " * indent + label)[:LABEL_WIDTH]
    click.echo(f"{text:<{LABEL_WIDTH}} {_value_cells(values, periods)}")


def echo_rows(rows: tuple[ReportRow, ...], periods: tuple[Period, ...]) -> None:
    """Print report rows; plain rows are indented under their totals."""
    for row in rows:
        if row.kind == RowKind.PLAIN:
            label = f"{row.grouping_key} {row.label}" if row.grouping_key else row.label
            echo_line(label, row.values, periods, indent=2)
        elif row.kind == RowKind.GRAND_TOTAL:
            click.echo("=" * LABEL_WIDTH)
            echo_line(row.label, row.values, periods)
        else:
            echo_line(row.label, row.values, periods)
