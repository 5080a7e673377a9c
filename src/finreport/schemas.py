"""Pydantic schemas for stored JSON payloads and JSON report output."""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, TypeAdapter

from finreport.domain.entities import (
    PROPERTY_SLOTS,
    AccountDetail,
    BalanceSheet,
    GroupedReport,
    GroupItem,
    IncomeStatement,
    OverrideRule,
    Period,
    PeriodValues,
    PreviewRow,
    PropertyFilter,
    ReportGroup,
    ReportRow,
    RowDetail,
    RowKind,
    RowPreview,
    Section,
)


# Stored payloads


class OverrideRuleSchema(BaseModel):
    """One override rule as stored on the entity row."""

    grouping_key: str = Field(min_length=1)
    section: Section
    label: str = Field(min_length=1)
    display_order: int = 0
    prefixes: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, rule: OverrideRule) -> "OverrideRuleSchema":
        return cls(
            grouping_key=rule.grouping_key,
            section=rule.section,
            label=rule.label,
            display_order=rule.display_order,
            prefixes=list(rule.prefixes),
        )

    def to_domain(self) -> OverrideRule:
        return OverrideRule(
            grouping_key=self.grouping_key.strip(),
            section=self.section,
            label=self.label.strip(),
            display_order=self.display_order,
            prefixes=tuple(p.strip() for p in self.prefixes),
        )


class PropertyFilterSchema(BaseModel):
    index: int = Field(ge=1, le=PROPERTY_SLOTS)
    value: str


class GroupItemSchema(BaseModel):
    name: str
    property_filters: list[PropertyFilterSchema] = Field(default_factory=list)
    account_code_prefix: Optional[str] = None

    def to_domain(self) -> GroupItem:
        return GroupItem(
            name=self.name,
            property_filters=tuple(PropertyFilter(f.index, f.value) for f in self.property_filters),
            account_code_prefix=self.account_code_prefix or None,
        )


class ReportGroupSchema(BaseModel):
    """Ad-hoc report group as stored in templates and read from files."""

    name: str
    display_order: int = 0
    items: list[GroupItemSchema] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, group: ReportGroup) -> "ReportGroupSchema":
        return cls(
            name=group.name,
            display_order=group.display_order,
            items=[
                GroupItemSchema(
                    name=item.name,
                    property_filters=[
                        PropertyFilterSchema(index=f.index, value=f.value) for f in item.property_filters
                    ],
                    account_code_prefix=item.account_code_prefix,
                )
                for item in group.items
            ],
        )

    def to_domain(self) -> ReportGroup:
        return ReportGroup(
            name=self.name,
            display_order=self.display_order,
            items=tuple(item.to_domain() for item in self.items),
        )


_override_rules_adapter = TypeAdapter(list[OverrideRuleSchema])
_report_groups_adapter = TypeAdapter(list[ReportGroupSchema])


def dump_override_rules(rules: list[OverrideRule]) -> str:
    return _override_rules_adapter.dump_json(
        [OverrideRuleSchema.from_domain(rule) for rule in rules]
    ).decode()


def load_override_rules(payload: str) -> list[OverrideRule]:
    """Parse a JSON rule list. Raises pydantic.ValidationError when malformed."""
    return [schema.to_domain() for schema in _override_rules_adapter.validate_json(payload)]


def dump_report_groups(groups: list[ReportGroup]) -> str:
    return _report_groups_adapter.dump_json(
        [ReportGroupSchema.from_domain(group) for group in groups]
    ).decode()


def load_report_groups(payload: str) -> list[ReportGroup]:
    """Parse a JSON group list. Raises pydantic.ValidationError when malformed."""
    return [schema.to_domain() for schema in _report_groups_adapter.validate_json(payload)]


# Report output


class PeriodSchema(BaseModel):
    year: int
    month: int


def _periods(periods: tuple[Period, ...]) -> list[PeriodSchema]:
    return [PeriodSchema(year=p.year, month=p.month) for p in periods]


def _value_map(values: PeriodValues) -> dict[str, Decimal]:
    return values.as_map()


class ReportRowSchema(BaseModel):
    kind: RowKind
    label: str
    grouping_key: Optional[str] = None
    values: dict[str, Decimal]
    total: Decimal

    @classmethod
    def from_domain(cls, row: ReportRow) -> "ReportRowSchema":
        return cls(
            kind=row.kind,
            label=row.label,
            grouping_key=row.grouping_key,
            values=_value_map(row.values),
            total=row.total,
        )


class BalanceSheetResponse(BaseModel):
    year: int
    periods: list[PeriodSchema]
    asset_rows: list[ReportRowSchema]
    liability_rows: list[ReportRowSchema]

    @classmethod
    def from_domain(cls, sheet: BalanceSheet) -> "BalanceSheetResponse":
        return cls(
            year=sheet.year,
            periods=_periods(sheet.periods),
            asset_rows=[ReportRowSchema.from_domain(r) for r in sheet.asset_rows],
            liability_rows=[ReportRowSchema.from_domain(r) for r in sheet.liability_rows],
        )


class IncomeStatementResponse(BaseModel):
    year: int
    periods: list[PeriodSchema]
    rows: list[ReportRowSchema]

    @classmethod
    def from_domain(cls, statement: IncomeStatement) -> "IncomeStatementResponse":
        return cls(
            year=statement.year,
            periods=_periods(statement.periods),
            rows=[ReportRowSchema.from_domain(r) for r in statement.rows],
        )


class GroupResultSchema(BaseModel):
    name: str
    display_order: int
    items: list[ReportRowSchema]
    total: dict[str, Decimal]


class GroupedReportResponse(BaseModel):
    year: int
    periods: list[PeriodSchema]
    groups: list[GroupResultSchema]

    @classmethod
    def from_domain(cls, report: GroupedReport) -> "GroupedReportResponse":
        return cls(
            year=report.year,
            periods=_periods(report.periods),
            groups=[
                GroupResultSchema(
                    name=g.name,
                    display_order=g.display_order,
                    items=[ReportRowSchema.from_domain(r) for r in g.items],
                    total=_value_map(g.total),
                )
                for g in report.groups
            ],
        )


class AccountDetailSchema(BaseModel):
    account_code: str
    account_name: str
    values: dict[str, Decimal]
    total: Decimal

    @classmethod
    def from_domain(cls, account: AccountDetail) -> "AccountDetailSchema":
        return cls(
            account_code=account.account_code,
            account_name=account.account_name,
            values=_value_map(account.values),
            total=account.total,
        )


class RowDetailResponse(BaseModel):
    grouping_key: str
    year: int
    periods: list[PeriodSchema]
    accounts: list[AccountDetailSchema]

    @classmethod
    def from_domain(cls, detail: RowDetail) -> "RowDetailResponse":
        return cls(
            grouping_key=detail.grouping_key,
            year=detail.year,
            periods=_periods(detail.periods),
            accounts=[AccountDetailSchema.from_domain(a) for a in detail.accounts],
        )


class PreviewRowSchema(BaseModel):
    grouping_key: Optional[str] = None
    label: str
    subsection: str
    account_codes: list[str]
    prefixes: list[str]
    source: str

    @classmethod
    def from_domain(cls, row: PreviewRow) -> "PreviewRowSchema":
        return cls(
            grouping_key=row.grouping_key,
            label=row.label,
            subsection=row.subsection,
            account_codes=list(row.account_codes),
            prefixes=list(row.prefixes),
            source=row.source,
        )


class RowPreviewResponse(BaseModel):
    year: int
    asset_rows: list[PreviewRowSchema]
    liability_rows: list[PreviewRowSchema]

    @classmethod
    def from_domain(cls, preview: RowPreview) -> "RowPreviewResponse":
        return cls(
            year=preview.year,
            asset_rows=[PreviewRowSchema.from_domain(r) for r in preview.asset_rows],
            liability_rows=[PreviewRowSchema.from_domain(r) for r in preview.liability_rows],
        )
