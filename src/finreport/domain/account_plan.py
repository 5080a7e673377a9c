"""Account plan domain service."""

from typing import Optional, Sequence

from finreport.database.base import Database
from finreport.domain.entities import PROPERTY_SLOTS, LedgerAccount, PlanRecalculation
from finreport.domain.errors import (
    NotFoundError,
    ValidationError,
    entity_not_found,
    invalid_property_index,
    ledger_account_not_found,
)
from finreport.logger import get_logger

logger = get_logger(__name__)


def compute_plan(accounts: Sequence[LedgerAccount], separator: str) -> list[PlanRecalculation]:
    """Derive level, parent, leaf flag and properties for an account plan.

    Accounts are processed in code order so a parent is always computed before
    its children. Each account inherits its parent's properties, then writes
    its own value (the assigned value, or its name) into the assigned slot,
    or into the slot of its level. Leaves fill empty slots with the value to
    their left.

    Args:
        accounts: Every account of one entity
        separator: Account code segment separator

    Returns:
        One PlanRecalculation per account, in code order
    """
    ordered = sorted(accounts, key=lambda account: account.code)
    by_code = {account.code: account for account in ordered}
    computed: dict[str, PlanRecalculation] = {}

    for i, account in enumerate(ordered):
        level = account.code.count(separator) + 1
        properties: list[Optional[str]] = [None] * PROPERTY_SLOTS
        parent_id = None

        parts = account.code.split(separator)
        if len(parts) > 1:
            parent = by_code.get(separator.join(parts[:-1]))
            if parent is not None:
                properties = list(computed[parent.code].properties)
                parent_id = parent.id

        index = account.assigned_property_index
        if index is not None and 1 <= index <= PROPERTY_SLOTS:
            target = index - 1
        else:
            target = level - 1
        if target < PROPERTY_SLOTS:
            properties[target] = account.assigned_property_value or account.name

        is_leaf = True
        if i < len(ordered) - 1 and ordered[i + 1].code.startswith(account.code + separator):
            is_leaf = False

        if is_leaf:
            last_value = None
            for k in range(PROPERTY_SLOTS):
                if properties[k] is not None:
                    last_value = properties[k]
                elif last_value is not None:
                    properties[k] = last_value

        computed[account.code] = PlanRecalculation(
            account_id=account.id,
            level=level,
            parent_id=parent_id,
            is_leaf=is_leaf,
            properties=properties,
        )

    return [computed[account.code] for account in ordered]


class AccountPlanService:
    """Service for maintaining the account plan hierarchy."""

    def __init__(self, db: Database):
        """Initialize account plan service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_accounts(self, entity_id: int, leaves_only: bool = False) -> list[LedgerAccount]:
        """List the account plan of an entity ordered by code.

        Raises:
            NotFoundError: If entity doesn't exist
        """
        if self.db.get_entity(entity_id) is None:
            raise NotFoundError(entity_not_found(entity_id))
        accounts = self.db.list_ledger_accounts(entity_id)
        if leaves_only:
            accounts = [account for account in accounts if account.is_leaf]
        return accounts

    def recalculate(self, entity_id: int) -> int:
        """Recompute the hierarchy and properties of every account.

        Args:
            entity_id: Entity ID

        Returns:
            Number of accounts recalculated

        Raises:
            NotFoundError: If entity doesn't exist
        """
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))

        accounts = self.db.list_ledger_accounts(entity_id)
        if not accounts:
            return 0

        recalculations = compute_plan(accounts, entity.account_code_separator)
        self.db.apply_plan_recalculation(recalculations)
        logger.debug("account plan recalculated", entity_id=entity_id, accounts=len(recalculations))
        return len(recalculations)

    def assign_property(
        self, account_id: int, index: Optional[int], value: Optional[str] = None
    ) -> None:
        """Assign the property slot an account writes for its subtree.

        Args:
            account_id: Ledger account ID
            index: Property slot 1-5, or None to fall back to the level slot
            value: Value to write, or None to use the account name

        Raises:
            NotFoundError: If account doesn't exist
            ValidationError: If index is outside 1-5
        """
        account = self.db.get_ledger_account(account_id)
        if account is None:
            raise NotFoundError(ledger_account_not_found(account_id))
        if index is not None and not 1 <= index <= PROPERTY_SLOTS:
            raise ValidationError(invalid_property_index(index))

        self.db.set_assigned_property(account_id, index, value or None)
        self.recalculate(account.entity_id)
