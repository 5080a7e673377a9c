"""Shared pytest fixtures for finreport tests."""

import tempfile
import os
from decimal import Decimal
from pathlib import Path
import pytest

from finreport.database.factories import create_sqlite_database
from finreport.domain.account_plan import AccountPlanService
from finreport.domain.balance_sheet import BalanceSheetService
from finreport.domain.drilldown import RowDetailService
from finreport.domain.entities import BalanceInput
from finreport.domain.entity import EntityService
from finreport.domain.grouped_report import GroupedReportService, ReportTemplateService
from finreport.domain.income_statement import IncomeStatementService
from finreport.domain.ledger import LedgerService
from finreport.domain.overrides import OverrideService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def entity_service(temp_db):
    """Create an EntityService with a temporary database."""
    return EntityService(temp_db)


@pytest.fixture
def ledger_service(temp_db):
    """Create a LedgerService with a temporary database."""
    return LedgerService(temp_db)


@pytest.fixture
def account_plan_service(temp_db):
    """Create an AccountPlanService with a temporary database."""
    return AccountPlanService(temp_db)


@pytest.fixture
def override_service(temp_db):
    """Create an OverrideService with a temporary database."""
    return OverrideService(temp_db)


@pytest.fixture
def balance_sheet_service(temp_db):
    """Create a BalanceSheetService with a temporary database."""
    return BalanceSheetService(temp_db)


@pytest.fixture
def income_statement_service(temp_db):
    """Create an IncomeStatementService with a temporary database."""
    return IncomeStatementService(temp_db)


@pytest.fixture
def grouped_report_service(temp_db):
    """Create a GroupedReportService with a temporary database."""
    return GroupedReportService(temp_db)


@pytest.fixture
def template_service(temp_db):
    """Create a ReportTemplateService with a temporary database."""
    return ReportTemplateService(temp_db)


@pytest.fixture
def row_detail_service(temp_db):
    """Create a RowDetailService with a temporary database."""
    return RowDetailService(temp_db)


@pytest.fixture
def sample_entity(entity_service):
    """Create a sample entity for testing."""
    entity_id = entity_service.create_entity(name="Acme Ltd", tax_number="1234567890")
    return entity_service.get_entity(entity_id)


@pytest.fixture
def record_balances(ledger_service):
    """Return a helper recording closing balances for one period.

    Rows are (code, name, debit_balance, credit_balance) tuples.
    """

    def _record(entity_id, year, month, rows):
        inputs = [
            BalanceInput(
                account_code=code,
                account_name=name,
                debit=Decimal(str(debit)),
                credit=Decimal(str(credit)),
                debit_balance=Decimal(str(debit)),
                credit_balance=Decimal(str(credit)),
            )
            for code, name, debit, credit in rows
        ]
        return ledger_service.record_period(entity_id, year, month, inputs)

    return _record


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
