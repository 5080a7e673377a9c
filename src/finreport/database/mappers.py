"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the JSON columns whose
payloads are validated with pydantic on the way out of the database.
"""

from decimal import Decimal

import pydantic

from finreport.domain import entities as domain
from finreport.domain.errors import OverrideConfigurationError, ValidationError
from finreport.database.models import (
    Entity as ORMEntity,
    LedgerAccount as ORMLedgerAccount,
    MonthlyBalance as ORMMonthlyBalance,
    ReportTemplate as ORMReportTemplate,
)
from finreport.schemas import load_override_rules, load_report_groups


def _properties(orm_account: ORMLedgerAccount) -> tuple:
    return (
        orm_account.property1,
        orm_account.property2,
        orm_account.property3,
        orm_account.property4,
        orm_account.property5,
    )


def _decimal(value) -> Decimal:
    return Decimal(value) if value is not None else Decimal("0")


def entity_to_domain(orm_entity: ORMEntity) -> domain.Entity:
    """Convert SQLAlchemy Entity model to domain Entity."""
    return domain.Entity(
        id=orm_entity.id,
        name=orm_entity.name,
        tax_number=orm_entity.tax_number,
        account_code_separator=orm_entity.account_code_separator or ".",
        property_names=(
            orm_entity.property_name1,
            orm_entity.property_name2,
            orm_entity.property_name3,
            orm_entity.property_name4,
            orm_entity.property_name5,
        ),
        created_at=orm_entity.created_at,
    )


def override_rules_to_domain(orm_entity: ORMEntity) -> list[domain.OverrideRule]:
    """Parse the override rules stored on an entity row.

    Raises:
        OverrideConfigurationError: If the stored payload is not a valid rule list
    """
    payload = orm_entity.override_rules_json
    if payload is None or not payload.strip():
        return []
    try:
        return load_override_rules(payload)
    except pydantic.ValidationError as e:
        raise OverrideConfigurationError(
            f"Stored override rules of entity {orm_entity.id} are invalid: {e.error_count()} error(s)"
        ) from e


def ledger_account_to_domain(orm_account: ORMLedgerAccount) -> domain.LedgerAccount:
    """Convert SQLAlchemy LedgerAccount model to domain LedgerAccount."""
    return domain.LedgerAccount(
        id=orm_account.id,
        entity_id=orm_account.entity_id,
        code=orm_account.code,
        name=orm_account.name,
        level=orm_account.level,
        parent_id=orm_account.parent_id,
        is_leaf=orm_account.is_leaf,
        properties=_properties(orm_account),
        assigned_property_index=orm_account.assigned_property_index,
        assigned_property_value=orm_account.assigned_property_value,
        cost_center=orm_account.cost_center,
    )


def balance_to_leaf_entry(
    orm_balance: ORMMonthlyBalance, orm_account: ORMLedgerAccount
) -> domain.LeafEntry:
    """Convert a stored balance line into the reporting read view.

    Reports work on closing balances, so the entry's debit and credit are the
    balance columns of the trial balance line.
    """
    return domain.LeafEntry(
        account_code=orm_account.code,
        account_name=orm_account.name,
        year=orm_balance.year,
        month=orm_balance.month,
        debit=_decimal(orm_balance.debit_balance),
        credit=_decimal(orm_balance.credit_balance),
        properties=_properties(orm_account),
    )


def balance_to_domain(
    orm_balance: ORMMonthlyBalance, orm_account: ORMLedgerAccount
) -> domain.PeriodBalance:
    """Convert a stored balance line into a trial balance view row."""
    return domain.PeriodBalance(
        account_code=orm_account.code,
        account_name=orm_account.name,
        debit=_decimal(orm_balance.debit),
        credit=_decimal(orm_balance.credit),
        debit_balance=_decimal(orm_balance.debit_balance),
        credit_balance=_decimal(orm_balance.credit_balance),
        is_leaf=orm_account.is_leaf,
    )


def report_template_to_domain(orm_template: ORMReportTemplate) -> domain.ReportTemplate:
    """Convert SQLAlchemy ReportTemplate model to domain ReportTemplate.

    Raises:
        ValidationError: If the stored groups cannot be read
    """
    try:
        groups = load_report_groups(orm_template.groups_json)
    except pydantic.ValidationError as e:
        raise ValidationError(
            f"Report template {orm_template.id} has unreadable groups: {e.error_count()} error(s)"
        ) from e
    return domain.ReportTemplate(
        id=orm_template.id,
        entity_id=orm_template.entity_id,
        name=orm_template.name,
        groups=tuple(groups),
        created_at=orm_template.created_at,
        updated_at=orm_template.updated_at,
    )


def report_template_to_summary(orm_template: ORMReportTemplate) -> domain.ReportTemplateSummary:
    """Convert SQLAlchemy ReportTemplate model to a listing entry."""
    return domain.ReportTemplateSummary(
        id=orm_template.id,
        name=orm_template.name,
        created_at=orm_template.created_at,
        updated_at=orm_template.updated_at,
    )
