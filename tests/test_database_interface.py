"""Tests for Database interface returning domain models."""

import pytest
from datetime import datetime
from decimal import Decimal

from finreport.domain import entities
from finreport.domain.entities import BalanceInput, OverrideRule, Period, ReportGroup, Section
from finreport.domain.errors import NotFoundError


def _balance(code, debit_balance="0", credit_balance="0", name=None):
    return BalanceInput(
        account_code=code,
        account_name=name or f"Account {code}",
        debit_balance=Decimal(debit_balance),
        credit_balance=Decimal(credit_balance),
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_entity_returns_domain_model(self, temp_db):
        """Test that get_entity returns a domain Entity."""
        entity_id = temp_db.create_entity(name="Acme", tax_number="42", account_code_separator="-")

        entity = temp_db.get_entity(entity_id)

        assert isinstance(entity, entities.Entity)
        assert entity.id == entity_id
        assert entity.name == "Acme"
        assert entity.tax_number == "42"
        assert entity.account_code_separator == "-"
        assert entity.property_names == (None,) * 5
        assert isinstance(entity.created_at, datetime)

    def test_get_entity_by_name_and_list(self, temp_db):
        temp_db.create_entity(name="Beta")
        temp_db.create_entity(name="Alpha")

        assert temp_db.get_entity_by_name("Beta").name == "Beta"
        assert temp_db.get_entity_by_name("Gamma") is None
        assert [e.name for e in temp_db.list_entities()] == ["Alpha", "Beta"]
        assert temp_db.get_entity(999) is None

    def test_update_property_names(self, temp_db):
        entity_id = temp_db.create_entity(name="Acme")

        temp_db.update_property_names(entity_id, ["Department", None, "Region"])

        entity = temp_db.get_entity(entity_id)
        assert entity.property_names == ("Department", None, "Region", None, None)
        assert entity.property_name(2) == "Property 2"
        assert entity.property_name(3) == "Region"

    def test_override_rules_roundtrip(self, temp_db):
        entity_id = temp_db.create_entity(name="Acme")
        rules = [
            OverrideRule("13", Section.ASSETS, "Receivables", 1, ("131", "132")),
            OverrideRule("632", Section.INCOME, "Admin"),
        ]

        assert temp_db.get_override_rules(entity_id) == []
        temp_db.replace_override_rules(entity_id, rules)

        assert temp_db.get_override_rules(entity_id) == rules

    def test_replace_override_rules_unknown_entity(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.replace_override_rules(404, [])

    def test_replace_period_balances(self, temp_db):
        entity_id = temp_db.create_entity(name="Acme")

        first = temp_db.replace_period_balances(
            entity_id, 2024, 1, [_balance("100", "10"), _balance("320", credit_balance="5")]
        )
        second = temp_db.replace_period_balances(
            entity_id, 2024, 1, [_balance("100", "12", name="Cash")]
        )

        assert (first.rows_processed, first.accounts_added, first.accounts_renamed) == (2, 2, 0)
        assert (second.rows_processed, second.accounts_added, second.accounts_renamed) == (1, 0, 1)
        balances = temp_db.get_period_balances(entity_id, 2024, 1)
        assert len(balances) == 1
        assert isinstance(balances[0], entities.PeriodBalance)
        assert balances[0].debit_balance == Decimal("12")
        assert balances[0].account_name == "Cash"
        assert len(temp_db.list_ledger_accounts(entity_id)) == 2

    def test_periods_and_latest_year(self, temp_db):
        entity_id = temp_db.create_entity(name="Acme")
        assert temp_db.get_latest_year(entity_id) is None

        temp_db.replace_period_balances(entity_id, 2024, 2, [_balance("100", "1")])
        temp_db.replace_period_balances(entity_id, 2023, 11, [_balance("100", "1")])
        temp_db.replace_period_balances(entity_id, 2024, 1, [_balance("100", "1")])

        assert temp_db.list_periods(entity_id) == [Period(2023, 11), Period(2024, 1), Period(2024, 2)]
        assert temp_db.list_periods(entity_id, 2024) == [Period(2024, 1), Period(2024, 2)]
        assert temp_db.get_latest_year(entity_id) == 2024
        assert temp_db.delete_period(entity_id, 2024, 2) == 1
        assert temp_db.delete_period(entity_id, 2024, 2) == 0

    def test_get_leaf_entries_uses_closing_balances(self, temp_db):
        entity_id = temp_db.create_entity(name="Acme")
        temp_db.replace_period_balances(
            entity_id,
            2024,
            1,
            [
                BalanceInput(
                    account_code="600",
                    account_name="Sales",
                    debit=Decimal("100"),
                    credit=Decimal("900"),
                    debit_balance=Decimal("0"),
                    credit_balance=Decimal("800"),
                ),
                _balance("100", "50"),
            ],
        )

        entries = temp_db.get_leaf_entries(entity_id, 2024)
        income = temp_db.get_leaf_entries(entity_id, 2024, code_prefix="6")

        assert [e.account_code for e in entries] == ["100", "600"]
        assert [e.account_code for e in income] == ["600"]
        assert isinstance(income[0], entities.LeafEntry)
        assert income[0].debit == Decimal("0")
        assert income[0].credit == Decimal("800")
        assert income[0].period == Period(2024, 1)
        assert temp_db.get_leaf_entries(entity_id, 2023) == []

    def test_non_leaf_accounts_are_excluded(self, temp_db):
        entity_id = temp_db.create_entity(name="Acme")
        temp_db.replace_period_balances(
            entity_id, 2024, 1, [_balance("102", "30"), _balance("102.01", "30")]
        )
        parent = temp_db.get_ledger_account_by_code(entity_id, "102")
        child = temp_db.get_ledger_account_by_code(entity_id, "102.01")

        temp_db.apply_plan_recalculation(
            [
                entities.PlanRecalculation(parent.id, 1, None, False, ["Banks"]),
                entities.PlanRecalculation(child.id, 2, parent.id, True, ["Banks", "Bank A"]),
            ]
        )

        entries = temp_db.get_leaf_entries(entity_id, 2024)
        assert [e.account_code for e in entries] == ["102.01"]
        assert entries[0].properties == ("Banks", "Bank A", None, None, None)
        assert temp_db.get_ledger_account(child.id).parent_id == parent.id

    def test_set_assigned_property(self, temp_db):
        entity_id = temp_db.create_entity(name="Acme")
        temp_db.replace_period_balances(entity_id, 2024, 1, [_balance("100", "1")])
        account = temp_db.get_ledger_account_by_code(entity_id, "100")

        temp_db.set_assigned_property(account.id, 2, "Treasury")

        updated = temp_db.get_ledger_account(account.id)
        assert updated.assigned_property_index == 2
        assert updated.assigned_property_value == "Treasury"
        with pytest.raises(NotFoundError):
            temp_db.set_assigned_property(999, 1, None)

    def test_report_templates(self, temp_db):
        entity_id = temp_db.create_entity(name="Acme")
        groups = [ReportGroup(name="Costs", display_order=1)]

        template_id = temp_db.create_report_template(entity_id, "Monthly", groups)
        temp_db.update_report_template(template_id, groups + [ReportGroup(name="Other")])

        template = temp_db.get_report_template(template_id)
        assert isinstance(template, entities.ReportTemplate)
        assert [g.name for g in template.groups] == ["Costs", "Other"]
        assert template.updated_at >= template.created_at
        assert temp_db.report_template_exists(template_id)
        assert [t.name for t in temp_db.list_report_templates(entity_id)] == ["Monthly"]

        temp_db.delete_report_template(template_id)
        assert temp_db.get_report_template(template_id) is None
        assert not temp_db.report_template_exists(template_id)
        with pytest.raises(NotFoundError):
            temp_db.delete_report_template(template_id)
