"""Tests for the account plan hierarchy."""

import pytest

from finreport.domain.account_plan import compute_plan
from finreport.domain.entities import LedgerAccount
from finreport.domain.errors import NotFoundError, ValidationError


def _account(account_id, code, name, index=None, value=None):
    return LedgerAccount(
        id=account_id,
        entity_id=1,
        code=code,
        name=name,
        level=1,
        parent_id=None,
        is_leaf=True,
        properties=(None,) * 5,
        assigned_property_index=index,
        assigned_property_value=value,
    )


class TestComputePlan:
    """Tests for compute_plan."""

    def test_levels_parents_and_leaves(self):
        accounts = [
            _account(3, "632.01", "Rent"),
            _account(1, "632", "Administration"),
            _account(2, "600", "Sales"),
        ]

        plan = {r.account_id: r for r in compute_plan(accounts, ".")}

        assert plan[1].level == 1
        assert plan[1].is_leaf is False
        assert plan[3].level == 2
        assert plan[3].parent_id == 1
        assert plan[3].is_leaf is True
        assert plan[2].is_leaf is True

    def test_properties_inherit_and_fill(self):
        accounts = [_account(1, "632", "Administration"), _account(2, "632.01", "Rent")]

        plan = {r.account_id: r for r in compute_plan(accounts, ".")}

        assert plan[1].properties == ["Administration", None, None, None, None]
        assert plan[2].properties == ["Administration", "Rent", "Rent", "Rent", "Rent"]

    def test_assigned_property(self):
        accounts = [
            _account(1, "632", "Administration", index=3, value="Overhead"),
            _account(2, "632.01", "Rent"),
        ]

        plan = {r.account_id: r for r in compute_plan(accounts, ".")}

        assert plan[2].properties == [None, "Rent", "Overhead", "Overhead", "Overhead"]

    def test_sibling_prefix_is_not_a_child(self):
        accounts = [_account(1, "10", "Ten"), _account(2, "100", "Hundred")]

        plan = {r.account_id: r for r in compute_plan(accounts, ".")}

        assert plan[1].is_leaf is True
        assert plan[2].parent_id is None

    def test_missing_parent(self):
        plan = compute_plan([_account(1, "632.01.001", "Deep")], ".")

        assert plan[0].level == 3
        assert plan[0].parent_id is None
        assert plan[0].properties == [None, None, "Deep", "Deep", "Deep"]


class TestAccountPlanService:
    """Tests for AccountPlanService."""

    def test_recalculate_after_recording(self, account_plan_service, sample_entity, record_balances):
        record_balances(
            sample_entity.id, 2024, 1, [("632", "Admin", 0, 0), ("632.01", "Rent", 10, 0)]
        )

        accounts = account_plan_service.list_accounts(sample_entity.id)
        leaves = account_plan_service.list_accounts(sample_entity.id, leaves_only=True)

        assert [a.code for a in accounts] == ["632", "632.01"]
        assert [a.code for a in leaves] == ["632.01"]
        assert leaves[0].parent_id == accounts[0].id
        assert leaves[0].properties[:2] == ("Admin", "Rent")
        assert account_plan_service.recalculate(sample_entity.id) == 2

    def test_assign_property(self, account_plan_service, temp_db, sample_entity, record_balances):
        record_balances(
            sample_entity.id, 2024, 1, [("632", "Admin", 0, 0), ("632.01", "Rent", 10, 0)]
        )
        parent = temp_db.get_ledger_account_by_code(sample_entity.id, "632")

        account_plan_service.assign_property(parent.id, 2, "Overhead")

        child = temp_db.get_ledger_account_by_code(sample_entity.id, "632.01")
        assert child.properties[0] is None
        assert child.properties[1] == "Rent"
        assert temp_db.get_ledger_account(parent.id).assigned_property_value == "Overhead"

    def test_assign_property_validation(self, account_plan_service, temp_db, sample_entity, record_balances):
        record_balances(sample_entity.id, 2024, 1, [("100", "Cash", 1, 0)])
        account = temp_db.get_ledger_account_by_code(sample_entity.id, "100")

        with pytest.raises(ValidationError):
            account_plan_service.assign_property(account.id, 6)
        with pytest.raises(NotFoundError):
            account_plan_service.assign_property(999, 1)

    def test_recalculate_empty_plan(self, account_plan_service, sample_entity):
        assert account_plan_service.recalculate(sample_entity.id) == 0

    def test_unknown_entity(self, account_plan_service):
        with pytest.raises(NotFoundError):
            account_plan_service.list_accounts(3)
