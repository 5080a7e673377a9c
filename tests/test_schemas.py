"""Tests for JSON schemas."""

import json
from decimal import Decimal

import pydantic
import pytest

from finreport.domain.entities import (
    BalanceSheet,
    GroupItem,
    OverrideRule,
    Period,
    PeriodValues,
    PropertyFilter,
    ReportGroup,
    ReportRow,
    RowKind,
    Section,
)
from finreport.schemas import (
    BalanceSheetResponse,
    dump_override_rules,
    dump_report_groups,
    load_override_rules,
    load_report_groups,
)


def test_override_rules_dump_shape():
    payload = json.loads(
        dump_override_rules([OverrideRule("13", Section.ASSETS, "Receivables", 1, ("131",))])
    )

    assert payload == [
        {
            "grouping_key": "13",
            "section": "assets",
            "label": "Receivables",
            "display_order": 1,
            "prefixes": ["131"],
        }
    ]


def test_override_rules_defaults():
    rules = load_override_rules('[{"grouping_key": "32", "section": "liabilities", "label": "Suppliers"}]')

    assert rules == [OverrideRule("32", Section.LIABILITIES, "Suppliers", 0, ())]


def test_report_groups_roundtrip_keeps_filters():
    groups = [
        ReportGroup(
            name="Admin",
            display_order=3,
            items=(GroupItem("Rent", (PropertyFilter(2, "Rent"),), "632"),),
        )
    ]

    assert load_report_groups(dump_report_groups(groups)) == groups


def test_property_filter_index_is_bounded():
    with pytest.raises(pydantic.ValidationError):
        load_report_groups('[{"name": "x", "items": [{"name": "y", "property_filters": [{"index": 0, "value": "v"}]}]}]')


def test_balance_sheet_response():
    jan = Period(2024, 1)
    values = PeriodValues(values=((jan, Decimal("800")),), total=Decimal("800"))
    sheet = BalanceSheet(
        year=2024,
        periods=(jan,),
        asset_rows=(ReportRow(RowKind.PLAIN, "Cash and Cash Equivalents", values, "10"),),
    )

    payload = json.loads(BalanceSheetResponse.from_domain(sheet).model_dump_json())

    assert payload["year"] == 2024
    assert payload["periods"] == [{"year": 2024, "month": 1}]
    row = payload["asset_rows"][0]
    assert row["kind"] == "plain"
    assert row["grouping_key"] == "10"
    assert Decimal(row["values"]["1"]) == Decimal("800")
    assert Decimal(row["values"]["Total"]) == Decimal("800")
    assert payload["liability_rows"] == []
