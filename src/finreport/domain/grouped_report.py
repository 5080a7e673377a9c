"""Ad-hoc grouped revenue/expense reports and their saved templates."""

from typing import Optional, Sequence

from finreport.database.base import Database
from finreport.domain.aggregation import SignConvention, aggregate, sum_values
from finreport.domain.entities import (
    PROPERTY_SLOTS,
    Entity,
    GroupedReport,
    GroupItem,
    GroupResult,
    LeafEntry,
    LedgerAccount,
    Period,
    PropertyOptions,
    ReportGroup,
    ReportRow,
    ReportScope,
    ReportTemplate,
    ReportTemplateSummary,
    RowKind,
)
from finreport.domain.errors import (
    NotFoundError,
    ValidationError,
    entity_not_found,
    invalid_property_index,
    template_not_found,
)
from finreport.logger import get_logger

logger = get_logger(__name__)

DEFAULT_SEARCH_LIMIT = 100


def validate_groups(groups: Sequence[ReportGroup]) -> None:
    """Validate caller-supplied groups.

    Raises:
        ValidationError: If a property filter index is outside 1-5
    """
    for group in groups:
        for item in group.items:
            for prop in item.property_filters:
                if not 1 <= prop.index <= PROPERTY_SLOTS:
                    raise ValidationError(invalid_property_index(prop.index))


def item_matches(item: GroupItem, entry: LeafEntry) -> bool:
    """Return True if a leaf entry passes every filter of an item."""
    if item.account_code_prefix and not entry.account_code.startswith(item.account_code_prefix):
        return False
    for prop in item.property_filters:
        properties = entry.properties
        value = properties[prop.index - 1] if prop.index <= len(properties) else None
        if value != prop.value:
            return False
    return True


class GroupedReportService:
    """Service for building ad-hoc grouped reports."""

    def __init__(self, db: Database):
        """Initialize grouped report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_entity(self, entity_id: int) -> Entity:
        entity = self.db.get_entity(entity_id)
        if entity is None:
            raise NotFoundError(entity_not_found(entity_id))
        return entity

    def build(
        self,
        entity_id: int,
        scope: ReportScope,
        groups: Sequence[ReportGroup],
        year: Optional[int] = None,
    ) -> GroupedReport:
        """Build a grouped report over revenue or expense accounts.

        Each item is aggregated debit-normal from the leaf accounts passing
        its filters; no taxonomy lookup is involved.

        Args:
            entity_id: Entity ID
            scope: REVENUE (codes starting 6) or EXPENSE (codes starting 7)
            groups: Caller-defined groups
            year: Report year. Defaults to the latest year with balances

        Returns:
            GroupedReport with groups ordered by display order

        Raises:
            NotFoundError: If entity doesn't exist
            ValidationError: If a property filter index is out of range
        """
        self._require_entity(entity_id)
        validate_groups(groups)

        if year is None:
            year = self.db.get_latest_year(entity_id)
        if year is None:
            return GroupedReport(year=0, periods=())

        periods = tuple(self.db.list_periods(entity_id, year))
        if not periods:
            return GroupedReport(year=year, periods=())

        entries = self.db.get_leaf_entries(entity_id, year, code_prefix=scope.prefix)
        results = [
            self._group_result(group, entries, periods)
            for group in sorted(groups, key=lambda g: g.display_order)
        ]

        logger.debug(
            "grouped report built",
            entity_id=entity_id,
            scope=scope.name,
            year=year,
            groups=len(results),
        )
        return GroupedReport(year=year, periods=periods, groups=tuple(results))

    def _group_result(
        self, group: ReportGroup, entries: list[LeafEntry], periods: tuple[Period, ...]
    ) -> GroupResult:
        items = []
        for item in group.items:
            matched = [entry for entry in entries if item_matches(item, entry)]
            items.append(
                ReportRow(
                    kind=RowKind.PLAIN,
                    label=item.name,
                    values=aggregate(matched, periods, SignConvention.DEBIT_NORMAL),
                    grouping_key=item.account_code_prefix,
                )
            )
        return GroupResult(
            name=group.name,
            display_order=group.display_order,
            items=tuple(items),
            total=sum_values((row.values for row in items), periods),
        )

    def _scope_accounts(self, entity_id: int, scope: ReportScope) -> list[LedgerAccount]:
        return [
            account
            for account in self.db.list_ledger_accounts(entity_id)
            if account.is_leaf and account.code.startswith(scope.prefix)
        ]

    def available_properties(self, entity_id: int, scope: ReportScope) -> list[PropertyOptions]:
        """List the property values usable as filters within a scope.

        Args:
            entity_id: Entity ID
            scope: Report scope

        Returns:
            One entry per property slot that has values, with the slot's
            display name and its distinct values sorted

        Raises:
            NotFoundError: If entity doesn't exist
        """
        entity = self._require_entity(entity_id)
        accounts = self._scope_accounts(entity_id, scope)

        options = []
        for index in range(1, PROPERTY_SLOTS + 1):
            values = sorted(
                {
                    account.properties[index - 1]
                    for account in accounts
                    if index <= len(account.properties) and account.properties[index - 1]
                }
            )
            if values:
                options.append(
                    PropertyOptions(index=index, name=entity.property_name(index), values=tuple(values))
                )
        return options

    def search_accounts(
        self,
        entity_id: int,
        scope: ReportScope,
        search: Optional[str] = None,
        limit: int = DEFAULT_SEARCH_LIMIT,
    ) -> list[LedgerAccount]:
        """Find leaf accounts of a scope by code prefix or name.

        Args:
            entity_id: Entity ID
            scope: Report scope
            search: Code prefix or case-insensitive name fragment
            limit: Maximum number of accounts returned

        Returns:
            Matching accounts ordered by code

        Raises:
            NotFoundError: If entity doesn't exist
        """
        self._require_entity(entity_id)
        accounts = self._scope_accounts(entity_id, scope)
        if search:
            needle = search.strip().lower()
            accounts = [
                account
                for account in accounts
                if account.code.startswith(search.strip()) or needle in account.name.lower()
            ]
        return sorted(accounts, key=lambda account: account.code)[:limit]


class ReportTemplateService:
    """Service for saved grouped report definitions."""

    def __init__(self, db: Database):
        """Initialize report template service.

        Args:
            db: Database instance
        """
        self.db = db

    def save(self, entity_id: int, name: str, groups: Sequence[ReportGroup]) -> int:
        """Create a template, or replace the groups of the one with this name.

        Args:
            entity_id: Entity ID
            name: Template name, unique per entity
            groups: Groups to store

        Returns:
            Template ID

        Raises:
            NotFoundError: If entity doesn't exist
            ValidationError: If name is empty, there are no groups, or a
                property filter index is out of range
        """
        if self.db.get_entity(entity_id) is None:
            raise NotFoundError(entity_not_found(entity_id))
        name = (name or "").strip()
        if not name:
            raise ValidationError("Template name cannot be empty")
        if not groups:
            raise ValidationError("Template needs at least one group")
        validate_groups(groups)

        for existing in self.db.list_report_templates(entity_id):
            if existing.name == name:
                self.db.update_report_template(existing.id, list(groups))
                logger.info("report template updated", entity_id=entity_id, template_id=existing.id)
                return existing.id

        template_id = self.db.create_report_template(entity_id, name, list(groups))
        logger.info("report template created", entity_id=entity_id, template_id=template_id)
        return template_id

    def list_templates(self, entity_id: int) -> list[ReportTemplateSummary]:
        """List templates of an entity, most recently updated first."""
        if self.db.get_entity(entity_id) is None:
            raise NotFoundError(entity_not_found(entity_id))
        return self.db.list_report_templates(entity_id)

    def load(self, template_id: int) -> ReportTemplate:
        """Load a template.

        Raises:
            NotFoundError: If template doesn't exist
            ValidationError: If the stored groups cannot be read
        """
        template = self.db.get_report_template(template_id)
        if template is None:
            raise NotFoundError(template_not_found(template_id))
        return template

    def delete(self, template_id: int) -> None:
        """Delete a template.

        Raises:
            NotFoundError: If template doesn't exist
        """
        # Existence check only; unreadable templates must stay deletable.
        if not self.db.report_template_exists(template_id):
            raise NotFoundError(template_not_found(template_id))
        self.db.delete_report_template(template_id)
