"""Ledger (trial balance) domain service."""

import csv
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from finreport.database.base import Database
from finreport.domain.account_plan import AccountPlanService
from finreport.domain.entities import BalanceInput, Period, PeriodBalance, PeriodUpload
from finreport.domain.errors import NotFoundError, ValidationError, entity_not_found
from finreport.logger import get_logger
from finreport.utils.amount_parser import parse_balance_amount

logger = get_logger(__name__)

# Column order of a trial balance export without a header row
TRIAL_BALANCE_COLUMNS = (
    "account_code",
    "account_name",
    "debit",
    "credit",
    "debit_balance",
    "credit_balance",
    "cost_center",
)


def validate_period(year: int, month: int) -> None:
    """Raise ValidationError unless (year, month) is a real calendar month."""
    if not 1 <= month <= 12:
        raise ValidationError(f"Month must be between 1 and 12, got {month}")
    if not 1900 <= year <= 9999:
        raise ValidationError(f"Year {year} is out of range")


def read_trial_balance(csv_file_path: str) -> list[BalanceInput]:
    """Read trial balance rows from a CSV file.

    The file needs a header row naming at least ``account_code`` and
    ``account_name``; amount columns may use Turkish (1.234,56) or English
    (1,234.56) notation. Rows without an account code are skipped.

    Args:
        csv_file_path: Path to CSV file

    Returns:
        Parsed rows in file order

    Raises:
        FileNotFoundError: If CSV file doesn't exist
        ValidationError: If required columns are missing or an amount is invalid
    """
    csv_path = Path(csv_file_path)
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

    rows: list[BalanceInput] = []
    with open(csv_path, "r", encoding="utf-8-sig", newline="") as f:
        # Try to detect delimiter; Turkish exports use ';'
        sample = f.read(1024)
        f.seek(0)
        try:
            delimiter = csv.Sniffer().sniff(sample, delimiters=",;\t").delimiter
        except csv.Error:
            delimiter = ","

        reader = csv.DictReader(f, delimiter=delimiter)
        if reader.fieldnames is None:
            raise ValidationError("CSV file has no columns")
        columns = {name.strip().lower() for name in reader.fieldnames if name}
        missing = {"account_code", "account_name"} - columns
        if missing:
            raise ValidationError(f"CSV file missing required columns: {', '.join(sorted(missing))}")

        for row_num, raw in enumerate(reader, start=2):
            row = {(k or "").strip().lower(): (v or "").strip() for k, v in raw.items() if k is not None}
            code = row.get("account_code", "")
            if not code:
                continue
            try:
                rows.append(
                    BalanceInput(
                        account_code=code,
                        account_name=row.get("account_name", ""),
                        debit=parse_balance_amount(row.get("debit")),
                        credit=parse_balance_amount(row.get("credit")),
                        debit_balance=parse_balance_amount(row.get("debit_balance")),
                        credit_balance=parse_balance_amount(row.get("credit_balance")),
                        cost_center=row.get("cost_center") or None,
                    )
                )
            except ValueError as e:
                raise ValidationError(f"Row {row_num}: {e}")
    return rows


class LedgerService:
    """Service for recording and inspecting monthly trial balances."""

    def __init__(self, db: Database):
        """Initialize ledger service.

        Args:
            db: Database instance
        """
        self.db = db
        self.account_plan_service = AccountPlanService(db)

    def _require_entity(self, entity_id: int) -> None:
        if self.db.get_entity(entity_id) is None:
            raise NotFoundError(entity_not_found(entity_id))

    def record_period(
        self, entity_id: int, year: int, month: int, rows: Sequence[BalanceInput]
    ) -> PeriodUpload:
        """Replace the trial balance of one period.

        The period's previous balances are replaced as one unit. Unknown
        account codes become new ledger accounts, known ones take the new
        name, and the account plan is recalculated afterwards. Lines repeating
        an account code are added together; the first line gives the name and
        cost center.

        Args:
            entity_id: Entity ID
            year: Period year
            month: Period month (1-12)
            rows: Trial balance lines

        Returns:
            PeriodUpload counts

        Raises:
            NotFoundError: If entity doesn't exist
            ValidationError: If the period is invalid or a code is blank
        """
        self._require_entity(entity_id)
        validate_period(year, month)

        merged: dict[str, BalanceInput] = {}
        for row in rows:
            code = row.account_code.strip()
            if not code:
                raise ValidationError("Account code cannot be empty")
            first = merged.get(code)
            if first is not None:
                merged[code] = replace(
                    first,
                    debit=first.debit + row.debit,
                    credit=first.credit + row.credit,
                    debit_balance=first.debit_balance + row.debit_balance,
                    credit_balance=first.credit_balance + row.credit_balance,
                )
                continue
            merged[code] = BalanceInput(
                account_code=code,
                account_name=row.account_name.strip(),
                debit=row.debit,
                credit=row.credit,
                debit_balance=row.debit_balance,
                credit_balance=row.credit_balance,
                cost_center=row.cost_center,
            )

        result = self.db.replace_period_balances(entity_id, year, month, list(merged.values()))
        self.account_plan_service.recalculate(entity_id)
        logger.info(
            "period recorded",
            entity_id=entity_id,
            year=year,
            month=month,
            rows=result.rows_processed,
            accounts_added=result.accounts_added,
        )
        return result

    def import_csv(self, entity_id: int, year: int, month: int, csv_file_path: str) -> PeriodUpload:
        """Record a period from a trial balance CSV file."""
        return self.record_period(entity_id, year, month, read_trial_balance(csv_file_path))

    def delete_period(self, entity_id: int, year: int, month: int) -> int:
        """Delete the balances of one period.

        Returns:
            Number of deleted balance rows

        Raises:
            NotFoundError: If entity doesn't exist or the period has no balances
        """
        self._require_entity(entity_id)
        deleted = self.db.delete_period(entity_id, year, month)
        if deleted == 0:
            raise NotFoundError(f"No balances recorded for {year}/{month:02d}")
        logger.info("period deleted", entity_id=entity_id, year=year, month=month, rows=deleted)
        return deleted

    def list_periods(self, entity_id: int, year: Optional[int] = None) -> list[Period]:
        """List recorded periods, most recent first."""
        self._require_entity(entity_id)
        return sorted(self.db.list_periods(entity_id, year), reverse=True)

    def period_balances(self, entity_id: int, year: int, month: int) -> list[PeriodBalance]:
        """Get the stored trial balance of one period ordered by account code."""
        self._require_entity(entity_id)
        validate_period(year, month)
        return self.db.get_period_balances(entity_id, year, month)
