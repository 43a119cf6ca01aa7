"""Tests for the field-table renderer and the field metadata behind its headers."""

import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', '..', 'src'))

from model.PlanData import PlanData
from model.YearlySummary import YearlySummary
from model.field_metadata import (
    FIELD_METADATA, get_short_name, get_description, get_field_info, get_field_value, wrap_header,
)
from render.renderers import CustomRenderer, CUSTOM_RENDERERS, RENDERER_REGISTRY, get_custom_renderer_factory


@pytest.fixture
def plan_data():
    summaries = [YearlySummary(year=year, federal_income_tax=1000.0 * (year - 2024), state_income_tax=500.0,
                               converged=year != 2027)
                 for year in range(2025, 2029)]
    return PlanData.from_summaries(summaries)


class TestCustomRenderer:
    def test_title_and_headers(self, plan_data, capsys):
        CustomRenderer("My Taxes", ["federal_income_tax", "state_income_tax"]).render(plan_data)
        out = capsys.readouterr().out
        assert "MY TAXES" in out
        assert "Federal Tax" in out
        assert "State Tax" in out

    def test_totals_row(self, plan_data, capsys):
        CustomRenderer("Taxes", ["federal_income_tax", "total_taxes"]).render(plan_data)
        out = capsys.readouterr().out
        total_line = [line for line in out.splitlines() if line.strip().startswith("TOTAL")][0]
        assert "10,000" in total_line
        assert "12,000" in total_line

    def test_no_totals(self, plan_data, capsys):
        CustomRenderer("Taxes", ["federal_income_tax"], show_totals=False).render(plan_data)
        assert "TOTAL" not in capsys.readouterr().out

    def test_year_range(self, plan_data, capsys):
        CustomRenderer("Taxes", ["federal_income_tax"], 2026, 2027).render(plan_data)
        out = capsys.readouterr().out
        assert "2026" in out
        assert "2027" in out
        assert "2025" not in out
        assert "2028" not in out

    def test_boolean_field(self, plan_data, capsys):
        CustomRenderer("Settled", ["converged"], show_totals=False).render(plan_data)
        out = capsys.readouterr().out
        assert "Yes" in out
        assert "No" in out

    def test_format_value(self):
        renderer = CustomRenderer("T", ["cash"])
        assert renderer._format_value(None, 8).strip() == "N/A"
        formatted = renderer._format_value(1234.4, 10)
        assert formatted.startswith("$")
        assert formatted.endswith("1,234")
        assert len(formatted) == 9


class TestBuiltInTables:
    def test_registered(self):
        for name in CUSTOM_RENDERERS:
            assert name in RENDERER_REGISTRY

    def test_fields_have_metadata(self):
        for config in CUSTOM_RENDERERS.values():
            for field in config['fields']:
                assert field in FIELD_METADATA, field

    def test_factory(self, plan_data, capsys):
        factory = get_custom_renderer_factory('Quick', {'fields': ['state_income_tax'], 'showTotals': False})
        renderer = factory(2025, 2025)
        assert renderer.title == 'Quick'
        assert renderer.show_totals is False
        renderer.render(plan_data)
        assert "QUICK" in capsys.readouterr().out


class TestFieldMetadata:
    def test_lookup(self):
        assert get_short_name("rmd_withdrawals") == "RMD"
        assert get_short_name("unknown_field") == "unknown_field"
        assert get_description("deficit") == "Outflows that could not be funded"
        assert get_description("unknown_field") == ""
        assert get_field_info("cash").short_name == "Cash"
        assert get_field_info("unknown_field") is None

    def test_field_value_calls_derived_totals(self):
        yd = YearlySummary(year=2030, federal_income_tax=100.0, medicare_tax=5.0)
        assert get_field_value(yd, "federal_income_tax") == 100.0
        assert get_field_value(yd, "total_taxes") == 105.0

    def test_wrap_header(self):
        assert wrap_header("Cash", 14) == ["Cash"]
        assert wrap_header("Qualified Contribution", 10) == ["Qualified", "Contribution"]
        assert wrap_header("Net Worth Total", 10) == ["Net Worth", "Total"]

    def test_wrap_header_keeps_long_words_whole(self):
        assert wrap_header("Contributions", 8) == ["Contributions"]
