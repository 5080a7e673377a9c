"""Tests for grouped reports and report templates."""

from decimal import Decimal

import pytest

from finreport.database.models import ReportTemplate as ORMReportTemplate
from finreport.domain.entities import GroupItem, PropertyFilter, ReportGroup, ReportScope
from finreport.domain.errors import NotFoundError, ValidationError

LEDGER = [
    ("600", "Satis", 0, 500),
    ("632", "Genel Yonetim", 0, 0),
    ("632.01", "Kira", 300, 0),
    ("632.02", "Elektrik", 100, 0),
    ("770", "Genel Yonetim Giderleri", 80, 0),
    ("770.01", "Personel", 60, 0),
]


@pytest.fixture
def ledger_entity(sample_entity, record_balances):
    record_balances(sample_entity.id, 2024, 1, LEDGER)
    return sample_entity


def _groups():
    return [
        ReportGroup(
            name="Sales",
            display_order=2,
            items=(GroupItem(name="Domestic", account_code_prefix="600"),),
        ),
        ReportGroup(
            name="Administration",
            display_order=1,
            items=(
                GroupItem(
                    name="All admin",
                    property_filters=(PropertyFilter(1, "Genel Yonetim"),),
                ),
                GroupItem(
                    name="Rent",
                    property_filters=(PropertyFilter(1, "Genel Yonetim"),),
                    account_code_prefix="632.01",
                ),
            ),
        ),
    ]


class TestGroupedReportService:
    """Tests for GroupedReportService."""

    def test_build_revenue_scope(self, grouped_report_service, ledger_entity):
        report = grouped_report_service.build(ledger_entity.id, ReportScope.REVENUE, _groups())

        assert report.year == 2024
        assert [g.name for g in report.groups] == ["Administration", "Sales"]

        admin, sales = report.groups
        assert [item.label for item in admin.items] == ["All admin", "Rent"]
        assert admin.items[0].total == Decimal("400")
        assert admin.items[1].total == Decimal("300")
        assert admin.total.total == Decimal("700")
        # Debit-normal for both scopes
        assert sales.items[0].total == Decimal("-500")
        assert sales.items[0].grouping_key == "600"

    def test_build_expense_scope(self, grouped_report_service, ledger_entity):
        groups = [
            ReportGroup(
                name="Costs",
                items=(
                    GroupItem(name="Cost accounts", account_code_prefix="7"),
                    GroupItem(name="Revenue prefix", account_code_prefix="600"),
                ),
            )
        ]

        report = grouped_report_service.build(ledger_entity.id, ReportScope.EXPENSE, groups)

        costs = report.groups[0]
        assert costs.items[0].total == Decimal("60")
        assert costs.items[1].total == Decimal("0")

    def test_item_without_filters_takes_whole_scope(self, grouped_report_service, ledger_entity):
        groups = [ReportGroup(name="All", items=(GroupItem(name="Everything"),))]

        report = grouped_report_service.build(ledger_entity.id, ReportScope.REVENUE, groups)

        assert report.groups[0].total.total == Decimal("-100")

    def test_invalid_property_index(self, grouped_report_service, ledger_entity):
        groups = [
            ReportGroup(
                name="Bad",
                items=(GroupItem(name="x", property_filters=(PropertyFilter(6, "y"),)),),
            )
        ]
        with pytest.raises(ValidationError, match="out of range"):
            grouped_report_service.build(ledger_entity.id, ReportScope.REVENUE, groups)

    def test_no_data(self, grouped_report_service, sample_entity):
        report = grouped_report_service.build(sample_entity.id, ReportScope.EXPENSE, _groups())

        assert report.year == 0
        assert report.groups == ()

    def test_available_properties(self, grouped_report_service, entity_service, ledger_entity):
        entity_service.set_property_names(ledger_entity.id, ["Department"])

        options = grouped_report_service.available_properties(ledger_entity.id, ReportScope.REVENUE)

        assert options[0].index == 1
        assert options[0].name == "Department"
        assert options[0].values == ("Genel Yonetim", "Satis")
        assert options[1].name == "Property 2"
        assert options[1].values == ("Elektrik", "Kira", "Satis")

    def test_search_accounts(self, grouped_report_service, ledger_entity):
        by_code = grouped_report_service.search_accounts(ledger_entity.id, ReportScope.REVENUE, "632")
        by_name = grouped_report_service.search_accounts(ledger_entity.id, ReportScope.REVENUE, "kira")
        limited = grouped_report_service.search_accounts(
            ledger_entity.id, ReportScope.REVENUE, limit=1
        )

        assert [a.code for a in by_code] == ["632.01", "632.02"]
        assert [a.code for a in by_name] == ["632.01"]
        assert [a.code for a in limited] == ["600"]

    def test_unknown_entity(self, grouped_report_service):
        with pytest.raises(NotFoundError):
            grouped_report_service.build(99, ReportScope.REVENUE, [])


class TestReportTemplateService:
    """Tests for ReportTemplateService."""

    def test_save_and_load(self, template_service, sample_entity):
        template_id = template_service.save(sample_entity.id, "Monthly admin", _groups())

        template = template_service.load(template_id)

        assert template.name == "Monthly admin"
        assert template.entity_id == sample_entity.id
        assert list(template.groups) == _groups()

    def test_save_same_name_overwrites(self, template_service, sample_entity):
        first = template_service.save(sample_entity.id, "Monthly", _groups())
        second = template_service.save(sample_entity.id, "Monthly", _groups()[:1])

        assert first == second
        assert len(template_service.load(first).groups) == 1
        assert len(template_service.list_templates(sample_entity.id)) == 1

    def test_list_most_recent_first(self, template_service, sample_entity):
        older = template_service.save(sample_entity.id, "Older", _groups())
        newer = template_service.save(sample_entity.id, "Newer", _groups())

        assert [t.id for t in template_service.list_templates(sample_entity.id)] == [newer, older]

    def test_save_requires_name_and_groups(self, template_service, sample_entity):
        with pytest.raises(ValidationError):
            template_service.save(sample_entity.id, "  ", _groups())
        with pytest.raises(ValidationError):
            template_service.save(sample_entity.id, "Empty", [])

    def test_delete(self, template_service, sample_entity):
        template_id = template_service.save(sample_entity.id, "Temp", _groups())

        template_service.delete(template_id)

        with pytest.raises(NotFoundError):
            template_service.load(template_id)
        with pytest.raises(NotFoundError):
            template_service.delete(template_id)

    def test_unreadable_template(self, template_service, temp_db, sample_entity):
        template_id = template_service.save(sample_entity.id, "Broken", _groups())
        session = temp_db._get_session()
        session.get(ORMReportTemplate, template_id).groups_json = "[{]"
        session.commit()

        with pytest.raises(ValidationError, match="unreadable"):
            template_service.load(template_id)
        # Still listed, overwritable and deletable
        assert template_service.save(sample_entity.id, "Broken", _groups()) == template_id
        template_service.delete(template_id)
