"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from finreport.domain.entities import (
    BalanceInput,
    Entity,
    LeafEntry,
    LedgerAccount,
    OverrideRule,
    Period,
    PeriodBalance,
    PeriodUpload,
    PlanRecalculation,
    ReportGroup,
    ReportTemplate,
    ReportTemplateSummary,
)


class Database(ABC):
    """Abstract database interface for finreport."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Entity operations
    @abstractmethod
    def create_entity(
        self, name: str, tax_number: Optional[str] = None, account_code_separator: str = "."
    ) -> int:
        """Create a new entity. Returns entity ID."""
        pass

    @abstractmethod
    def get_entity(self, entity_id: int) -> Optional[Entity]:
        """Get entity by ID."""
        pass

    @abstractmethod
    def get_entity_by_name(self, name: str) -> Optional[Entity]:
        """Get entity by name."""
        pass

    @abstractmethod
    def list_entities(self) -> list[Entity]:
        """List all entities ordered by name."""
        pass

    @abstractmethod
    def update_property_names(self, entity_id: int, names: Sequence[Optional[str]]) -> None:
        """Set the five property display names of an entity."""
        pass

    # Override rule operations
    @abstractmethod
    def get_override_rules(self, entity_id: int) -> list[OverrideRule]:
        """Get the stored override rules of an entity in stored order.

        Returns an empty list when nothing is stored. Raises
        OverrideConfigurationError when the stored payload cannot be read.
        """
        pass

    @abstractmethod
    def replace_override_rules(self, entity_id: int, rules: Sequence[OverrideRule]) -> None:
        """Replace the whole override rule set of an entity in one commit."""
        pass

    # Ledger account operations
    @abstractmethod
    def get_ledger_account(self, account_id: int) -> Optional[LedgerAccount]:
        """Get ledger account by ID."""
        pass

    @abstractmethod
    def get_ledger_account_by_code(self, entity_id: int, code: str) -> Optional[LedgerAccount]:
        """Get ledger account by entity and code."""
        pass

    @abstractmethod
    def list_ledger_accounts(self, entity_id: int) -> list[LedgerAccount]:
        """List the account plan of an entity ordered by code."""
        pass

    @abstractmethod
    def set_assigned_property(self, account_id: int, index: Optional[int], value: Optional[str]) -> None:
        """Set (or clear) the property slot an account assigns to its subtree."""
        pass

    @abstractmethod
    def apply_plan_recalculation(self, recalculations: Sequence[PlanRecalculation]) -> None:
        """Store computed levels, parents, leaf flags and properties."""
        pass

    # Balance operations
    @abstractmethod
    def replace_period_balances(
        self, entity_id: int, year: int, month: int, rows: Sequence[BalanceInput]
    ) -> PeriodUpload:
        """Replace all balances of a period in one commit.

        Missing ledger accounts are created and changed account names are
        updated in the same commit.
        """
        pass

    @abstractmethod
    def delete_period(self, entity_id: int, year: int, month: int) -> int:
        """Delete all balances of a period. Returns the number of deleted rows."""
        pass

    @abstractmethod
    def list_periods(self, entity_id: int, year: Optional[int] = None) -> list[Period]:
        """List distinct periods with balances, ascending."""
        pass

    @abstractmethod
    def get_latest_year(self, entity_id: int) -> Optional[int]:
        """Get the latest year with balances, or None."""
        pass

    @abstractmethod
    def get_leaf_entries(
        self, entity_id: int, year: int, code_prefix: Optional[str] = None
    ) -> list[LeafEntry]:
        """Get balances of leaf accounts for a year.

        Entries carry the closing debit/credit balances of each period and
        the account's five properties.
        """
        pass

    @abstractmethod
    def get_period_balances(self, entity_id: int, year: int, month: int) -> list[PeriodBalance]:
        """Get the stored trial balance of one period ordered by account code."""
        pass

    # Report template operations
    @abstractmethod
    def create_report_template(
        self, entity_id: int, name: str, groups: Sequence[ReportGroup]
    ) -> int:
        """Create a report template. Returns template ID."""
        pass

    @abstractmethod
    def update_report_template(self, template_id: int, groups: Sequence[ReportGroup]) -> None:
        """Replace the groups of a report template."""
        pass

    @abstractmethod
    def get_report_template(self, template_id: int) -> Optional[ReportTemplate]:
        """Get report template by ID."""
        pass

    @abstractmethod
    def report_template_exists(self, template_id: int) -> bool:
        """Check if a report template exists."""
        pass

    @abstractmethod
    def list_report_templates(self, entity_id: int) -> list[ReportTemplateSummary]:
        """List templates of an entity, most recently updated first."""
        pass

    @abstractmethod
    def delete_report_template(self, template_id: int) -> None:
        """Delete a report template."""
        pass
