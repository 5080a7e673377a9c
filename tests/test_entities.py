"""Tests for domain entities and EntityService."""

import pytest
from datetime import datetime, UTC
from decimal import Decimal

from finreport.domain.entities import (
    Entity,
    Period,
    PeriodValues,
    ReportRow,
    ReportScope,
    RowKind,
)
from finreport.domain.errors import ConflictError, NotFoundError, ValidationError


class TestEntity:
    """Tests for Entity dataclass."""

    def test_entity_immutability(self):
        entity = Entity(
            id=1,
            name="Acme",
            tax_number=None,
            account_code_separator=".",
            property_names=(None,) * 5,
            created_at=datetime.now(UTC),
        )
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            entity.name = "Other"

    def test_property_name_fallback(self):
        entity = Entity(1, "Acme", None, ".", ("Department",), datetime.now(UTC))

        assert entity.property_name(1) == "Department"
        assert entity.property_name(4) == "Property 4"


class TestValues:
    """Tests for period values and rows."""

    def test_periods_sort_chronologically(self):
        periods = [Period(2024, 2), Period(2023, 12), Period(2024, 1)]
        assert sorted(periods) == [Period(2023, 12), Period(2024, 1), Period(2024, 2)]

    def test_row_total(self):
        values = PeriodValues(values=((Period(2024, 1), Decimal("5")),), total=Decimal("5"))
        row = ReportRow(kind=RowKind.PLAIN, label="Cash", values=values, grouping_key="10")

        assert row.total == Decimal("5")
        assert values.get(Period(2024, 2)) == Decimal("0")

    def test_scope_prefix(self):
        assert ReportScope.REVENUE.prefix == "6"
        assert ReportScope.EXPENSE.prefix == "7"


class TestEntityService:
    """Tests for EntityService."""

    def test_create_and_get(self, entity_service):
        entity_id = entity_service.create_entity("  Acme Ltd ", tax_number="123")

        entity = entity_service.get_entity(entity_id)

        assert entity.name == "Acme Ltd"
        assert entity.tax_number == "123"
        assert entity.account_code_separator == "."

    def test_duplicate_name(self, entity_service):
        entity_service.create_entity("Acme")
        with pytest.raises(ConflictError, match="already exists"):
            entity_service.create_entity("Acme")

    def test_empty_name_or_separator(self, entity_service):
        with pytest.raises(ValidationError):
            entity_service.create_entity("  ")
        with pytest.raises(ValidationError):
            entity_service.create_entity("Acme", account_code_separator="")

    def test_list_entities(self, entity_service):
        entity_service.create_entity("Beta")
        entity_service.create_entity("Alpha")

        assert [e.name for e in entity_service.list_entities()] == ["Alpha", "Beta"]

    def test_set_property_names(self, entity_service, sample_entity):
        entity_service.set_property_names(sample_entity.id, ["Department", " ", "Region"])

        entity = entity_service.get_entity(sample_entity.id)
        assert entity.property_names == ("Department", None, "Region", None, None)

    def test_too_many_property_names(self, entity_service, sample_entity):
        with pytest.raises(ValidationError):
            entity_service.set_property_names(sample_entity.id, ["a"] * 6)

    def test_set_property_names_unknown_entity(self, entity_service):
        with pytest.raises(NotFoundError):
            entity_service.set_property_names(12, ["a"])
