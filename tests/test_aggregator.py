"""Tests for usage document projections and totals."""

import json

import pytest

from core import aggregator, catalog
from core.aggregator import UsageDocument
from core.tables import TABLE_CURRENT, TABLES, project_row


def make_doc(**sections):
    return UsageDocument(project_id="proj-1", **sections)


class TestFromDict:
    def test_wrong_shaped_sections_become_absent(self):
        doc = UsageDocument.from_dict(
            {
                "hourlyUsage": [1, 2],
                "monthlyUsage": "nope",
                "resourcesUsage": {"type": "gateway"},
                "period": None,
                "id": 42,
            },
            project_id="proj-1",
        )
        assert doc.project_id == "proj-1"
        assert doc.id == ""
        assert doc.hourly_usage is None
        assert doc.monthly_usage is None
        assert doc.resources_usage is None
        assert doc.period is None

    def test_sections_are_passed_through(self, current_payload):
        doc = UsageDocument.from_dict(current_payload, project_id="proj-1")
        assert doc.hourly_usage is current_payload["hourlyUsage"]
        assert doc.resources_usage is current_payload["resourcesUsage"]
        assert doc.last_update == "2025-11-14T10:00:00Z"


class TestCategoryProjections:
    def test_detail_total_and_count(self, current_payload):
        doc = UsageDocument.from_dict(current_payload)
        assert aggregator.category_detail(doc, "volume") == current_payload["hourlyUsage"]["volume"]
        assert aggregator.category_total_price(doc, "volume") == 15.5
        assert aggregator.category_count(doc, "volume") == 2
        assert aggregator.category_count(doc, "snapshot") == 0
        assert aggregator.category_total_price(doc, "rancher") == 0.0
        assert aggregator.category_detail(doc, "rancher") is None

    def test_absent_hourly_usage(self):
        doc = make_doc()
        assert aggregator.category_total_price(doc, "volume") == 0.0
        assert aggregator.category_count(doc, "volume") == 0
        assert aggregator.category_detail(doc, "volume") is None


class TestQuantum:
    def test_notebook_sum(self):
        doc = make_doc(hourly_usage={"quantum": {"notebook": [{"totalPrice": 2}, {"totalPrice": "1.25"}]}})
        assert aggregator.quantum_total(doc) == 3.25

    def test_quantum_absent(self):
        assert aggregator.quantum_total(make_doc(hourly_usage={"volume": []})) == 0.0

    def test_quantum_not_a_mapping(self):
        doc = make_doc(hourly_usage={"quantum": [{"totalPrice": 5.0}]})
        assert aggregator.quantum_total(doc) == 0.0

    def test_notebook_absent(self):
        doc = make_doc(hourly_usage={"quantum": {"jobs": [{"totalPrice": 5.0}]}})
        assert aggregator.quantum_total(doc) == 0.0

    def test_notebook_not_an_array(self):
        doc = make_doc(hourly_usage={"quantum": {"notebook": {"totalPrice": 5.0}}})
        assert aggregator.quantum_total(doc) == 0.0


class TestTotals:
    def test_hourly_grand_total_is_sum_of_fixed_categories_and_quantum(self, current_payload):
        doc = UsageDocument.from_dict(current_payload)
        expected = sum(
            aggregator.category_total_price(doc, key) for key in catalog.HOURLY_CATEGORY_KEYS
        ) + aggregator.quantum_total(doc)
        assert aggregator.hourly_grand_total(doc) == pytest.approx(expected)
        # 15.5 + 100 + 0.25 + 0.75 + quantum 3.0
        assert aggregator.hourly_grand_total(doc) == pytest.approx(119.5)

    def test_unknown_categories_are_excluded_from_grand_total(self):
        hourly = {"volume": [{"totalPrice": 1.0}]}
        before = aggregator.hourly_grand_total(make_doc(hourly_usage=hourly))
        hourly["brandNewService"] = [{"totalPrice": 500.0}]
        after = aggregator.hourly_grand_total(make_doc(hourly_usage=hourly))
        assert before == after == 1.0

    def test_savings_plan_total_reads_nested_value(self, current_payload):
        doc = UsageDocument.from_dict(current_payload)
        assert aggregator.savings_plan_total(doc) == pytest.approx(24.5)
        assert aggregator.savings_plan_total(make_doc()) == 0.0

    def test_resources_totals(self):
        doc = make_doc(resources_usage=[
            {"type": "gateway", "totalPrice": 3.0},
            {"type": "floatingip", "totalPrice": 1.2},
            {"type": "gateway", "totalPrice": 2.0},
        ])
        assert aggregator.resource_type_total(doc, "gateway") == 5.0
        assert aggregator.resource_type_total(doc, "floatingip") == 1.2
        assert aggregator.resource_type_total(doc, "publicip") == 0.0
        assert aggregator.resource_type_total(doc, "octavia-loadbalancer") == 0.0
        assert aggregator.resources_total(doc) == pytest.approx(6.2)

    def test_comprehensive_total_combines_all_sections(self, current_payload):
        doc = UsageDocument.from_dict(current_payload)
        expected = (
            aggregator.hourly_grand_total(doc)
            + aggregator.savings_plan_total(doc)
            + aggregator.resources_total(doc)
        )
        assert aggregator.comprehensive_total(doc) == pytest.approx(expected)
        assert aggregator.comprehensive_total(doc) == pytest.approx(119.5 + 24.5 + 6.2)

    def test_comprehensive_total_without_monthly_and_resources(self):
        doc = make_doc(hourly_usage={
            "volume": [{"totalPrice": 10.0}, {"totalPrice": 5.5}],
            "instance": [{"totalPrice": 100}],
        })
        assert aggregator.category_total_price(doc, "volume") == 15.5
        assert aggregator.category_count(doc, "volume") == 2
        assert aggregator.category_total_price(doc, "instance") == 100.0
        assert aggregator.hourly_grand_total(doc) == 115.5
        assert aggregator.comprehensive_total(doc) == 115.5

    def test_comprehensive_total_survives_broken_section(self, monkeypatch):
        def broken(doc):
            raise TypeError("unexpected shape")

        broken.__name__ = "savings_plan_total"
        monkeypatch.setattr(aggregator, "savings_plan_total", broken)
        doc = make_doc(
            hourly_usage={"volume": [{"totalPrice": 1.0}]},
            resources_usage=[{"type": "gateway", "totalPrice": 2.0}],
        )
        assert aggregator.comprehensive_total(doc) == 3.0

    def test_huge_integer_prices_do_not_fail_the_row(self):
        huge = json.loads('{"totalPrice": 1' + "0" * 400 + "}")["totalPrice"]
        doc = make_doc(
            hourly_usage={"volume": [{"totalPrice": huge}, {"totalPrice": 1.5}]},
            resources_usage=[{"type": "gateway", "totalPrice": huge}, {"type": "gateway", "totalPrice": 2.0}],
        )
        assert aggregator.category_total_price(doc, "volume") == 1.5
        assert aggregator.resource_type_total(doc, "gateway") == 2.0
        assert aggregator.comprehensive_total(doc) == 3.5

        row = project_row(TABLES[TABLE_CURRENT], doc, ["total_volumes_price", "comprehensive_total_current_price"])
        assert row == {"total_volumes_price": 1.5, "comprehensive_total_current_price": 3.5}

    def test_empty_document_totals_are_zero(self):
        doc = make_doc()
        assert aggregator.hourly_grand_total(doc) == 0.0
        assert aggregator.resources_total(doc) == 0.0
        assert aggregator.comprehensive_total(doc) == 0.0


def test_period_and_credit_lookups(current_payload):
    doc = UsageDocument.from_dict(current_payload)
    assert aggregator.period_from(doc) == "2025-11-01T00:00:00Z"
    assert aggregator.period_to(doc) == "2025-11-14T10:00:00Z"
    assert aggregator.total_usable_credit(doc) == 12.5
    assert aggregator.total_usable_credit(make_doc()) is None
    assert aggregator.period_from(make_doc()) is None
