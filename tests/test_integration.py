"""Integration tests for end-to-end workflows."""

import json
from decimal import Decimal

from finreport.cli.main import cli


def test_full_workflow(cli_runner, temp_db, fixtures_dir):
    """Test complete workflow: entity → trial balance → reports → drill-down."""
    # Step 1: Create entity
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "entity",
            "create",
            "Acme Ltd",
            "--tax-number",
            "1234567890",
        ],
    )
    assert result.exit_code == 0
    entity_id = None
    for line in result.output.split("\n"):
        if "ID:" in line:
            # Extract entity ID from output like "Created entity 'Acme Ltd' (ID: 1)"
            parts = line.split("ID:")
            if len(parts) > 1:
                entity_id = parts[1].strip().rstrip(")")
                break

    assert entity_id is not None

    # Step 2: Record January trial balance
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "ledger",
            "add",
            entity_id,
            str(fixtures_dir / "trial_balance_2024_01.csv"),
            "--year",
            "2024",
            "--month",
            "1",
        ],
    )
    assert result.exit_code == 0
    assert "Recorded 7 rows" in result.output

    # Step 3: Balance sheet
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "report", "balance-sheet", entity_id, "--json"],
    )
    assert result.exit_code == 0
    sheet = json.loads(result.output)
    rows = {row["grouping_key"]: row for row in sheet["asset_rows"] + sheet["liability_rows"]}
    assert Decimal(rows["10"]["total"]) == Decimal("4000")
    assert Decimal(rows["32"]["total"]) == Decimal("-1200")
    assert Decimal(rows["50"]["total"]) == Decimal("-2000")
    assert rows["50"]["label"] == "Paid-in Capital"

    # Step 4: Income statement
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "report", "income-statement", entity_id, "--json"],
    )
    assert result.exit_code == 0
    statement = json.loads(result.output)
    lines = {row["grouping_key"]: row for row in statement["rows"] if row["kind"] == "plain"}
    assert Decimal(lines["600"]["total"]) == Decimal("5000")
    assert Decimal(lines["632"]["total"]) == Decimal("-3200")
    net = statement["rows"][-1]
    assert net["kind"] == "grand_total"
    assert net["label"] == "NET PROFIT OR LOSS FOR THE PERIOD"

    # Step 5: Drill into the cash row
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "report", "details", entity_id, "10"],
    )
    assert result.exit_code == 0
    assert "100 KASA" in result.output
    assert "102.01 VADESIZ TL" in result.output

    # Step 6: Re-record the month; the period is replaced, not duplicated
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "ledger",
            "add",
            entity_id,
            str(fixtures_dir / "trial_balance_2024_01.csv"),
            "--year",
            "2024",
            "--month",
            "1",
        ],
    )
    assert result.exit_code == 0
    assert "Added" not in result.output

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "report", "balance-sheet", entity_id, "--json"],
    )
    sheet = json.loads(result.output)
    assert Decimal(sheet["asset_rows"][-1]["total"]) == Decimal("4000")


def test_income_statement_cascade_with_costs(cli_runner, temp_db, tmp_path):
    """Derived rows follow the cascade from the category rows."""
    csv_file = tmp_path / "mizan.csv"
    csv_file.write_text(
        "account_code,account_name,debit_balance,credit_balance\n"
        "600,Sales,0,10000\n"
        "620,Cost of Goods Sold,6000,0\n"
        "632,Administration,1500,0\n",
        encoding="utf-8",
    )
    cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "entity", "create", "Beta"])
    result = cli_runner.invoke(
        cli,
        [
            "--db-path",
            temp_db.database_path,
            "ledger",
            "add",
            "Beta",
            str(csv_file),
            "--year",
            "2024",
            "--month",
            "6",
        ],
    )
    assert result.exit_code == 0, result.output

    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "report", "income-statement", "Beta", "--summary", "--json"],
    )
    assert result.exit_code == 0
    rows = json.loads(result.output)["rows"]
    assert len(rows) == 16
    totals = {row["label"]: Decimal(row["total"]) for row in rows}
    assert totals["A- GROSS SALES"] == Decimal("10000")
    assert totals["D- COST OF SALES (-)"] == Decimal("-6000")
    assert totals["E- OPERATING EXPENSES (-)"] == Decimal("-1500")
    assert totals["GROSS SALES PROFIT OR LOSS"] == totals["C- NET SALES"] - totals["D- COST OF SALES (-)"]
    assert totals["OPERATING PROFIT OR LOSS"] == (
        totals["GROSS SALES PROFIT OR LOSS"] - totals["E- OPERATING EXPENSES (-)"]
    )
    assert totals["NET PROFIT OR LOSS FOR THE PERIOD"] == (
        totals["PROFIT OR LOSS FOR THE PERIOD"] - totals["K- TAX AND OTHER LEGAL LIABILITY PROVISIONS (-)"]
    )
