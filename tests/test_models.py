"""Tests for the input model: filing status, item types, people, entries and program specs."""

import json
import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from model.FilingStatus import FilingStatus
from model.FinancialEntry import FinancialEntry
from model.ItemType import ItemType
from model.Person import Person
from model.PlanData import PlanData
from model.PlanInputs import PlanInputs, load_plan_inputs
from model.YearlySummary import YearlySummary


class TestFilingStatus:
    @pytest.mark.parametrize("text,expected", [
        ("SINGLE", FilingStatus.SINGLE),
        ("single", FilingStatus.SINGLE),
        ("Married Filing Jointly", FilingStatus.MARRIED_FILING_JOINTLY),
        ("MFJ", FilingStatus.MARRIED_FILING_JOINTLY),
        ("married-filing-separately", FilingStatus.MARRIED_FILING_SEPARATELY),
        ("HOH", FilingStatus.HEAD_OF_HOUSEHOLD),
    ])
    def test_from_string(self, text, expected):
        assert FilingStatus.from_string(text) == expected

    @pytest.mark.parametrize("text", [None, "", "   ", "WIDOWED"])
    def test_from_string_rejects(self, text):
        with pytest.raises(ValueError):
            FilingStatus.from_string(text)


class TestItemType:
    @pytest.mark.parametrize("text,expected", [
        ("Income", ItemType.INCOME),
        ("Non-Qualified", ItemType.NON_QUALIFIED),
        ("life insurance benefit", ItemType.LIFE_INSURANCE_BENEFIT),
        ("401k", ItemType.QUALIFIED),
        ("SSA", ItemType.SOCIAL_SECURITY_BENEFITS),
        ("extra principal", ItemType.MORTGAGE_REPAYMENT),
    ])
    def test_from_string(self, text, expected):
        assert ItemType.from_string(text) == expected

    def test_unknown_item(self):
        with pytest.raises(ValueError):
            ItemType.from_string("Crypto")


class TestPerson:
    def test_age_in_year(self):
        assert Person("Alex", 1960).age_in_year(2026) == 66

    @pytest.mark.parametrize("name,year", [("", 1960), ("  ", 1960), ("Alex", 1850), ("Alex", 2200)])
    def test_invalid(self, name, year):
        with pytest.raises(ValueError):
            Person(name, year)


class TestFinancialEntry:
    def test_active_range_is_inclusive(self):
        entry = FinancialEntry(ItemType.EXPENSE, 1000, 2026, 2028)
        assert not entry.is_active_in_year(2025)
        assert entry.is_active_in_year(2026)
        assert entry.is_active_in_year(2028)
        assert not entry.is_active_in_year(2029)

    def test_value_compounds_from_start_year(self):
        entry = FinancialEntry(ItemType.EXPENSE, 10000, 2026, 2030)
        assert entry.value_for_year(2026, 3.0) == pytest.approx(10000)
        assert entry.value_for_year(2028, 3.0) == pytest.approx(10000 * 1.03 ** 2)
        assert entry.value_for_year(2028) == pytest.approx(10000)

    def test_value_outside_range_is_zero(self):
        entry = FinancialEntry(ItemType.INCOME, 10000, 2026, 2030)
        assert entry.value_for_year(2031, 3.0) == 0.0

    def test_invalid(self):
        with pytest.raises(ValueError):
            FinancialEntry(ItemType.INCOME, 1000, 2030, 2026)
        with pytest.raises(ValueError):
            FinancialEntry(ItemType.INCOME, -1, 2026, 2030)


def sample_spec():
    return {
        "filingStatus": "MFJ",
        "state": "NY",
        "persons": [{"name": "Alex", "yearOfBirth": 1962}, {"name": "Sam", "yearOfBirth": 1964}],
        "rates": {"Expense": 3, "401k": 6.5},
        "rothConversion": {"targetBracketThreshold": 150000},
        "capitalGains": {"costBasisFraction": 0.5, "rate": 0.15},
        "entries": [
            {"item": "Expense", "value": 80000, "startYear": 2026, "endYear": 2050},
            {"item": "Qualified", "value": 400000, "startYear": 2026, "endYear": 2050, "owner": "Alex",
             "description": "IRA"},
        ],
    }


class TestPlanInputs:
    def test_from_spec(self):
        inputs = PlanInputs.from_spec(sample_spec())
        assert inputs.filing_status == FilingStatus.MARRIED_FILING_JOINTLY
        assert inputs.state == "NY"
        assert list(inputs.persons) == ["Alex", "Sam"]
        assert inputs.rates == {ItemType.EXPENSE: 3.0, ItemType.QUALIFIED: 6.5}
        assert len(inputs.entries) == 2
        assert inputs.entries[0].owner is None
        assert inputs.entries[1].owner == "Alex"
        assert inputs.entries[1].description == "IRA"
        assert inputs.roth_target_threshold == 150000
        assert inputs.roth_target_bracket_rate == 0.22
        assert inputs.cost_basis_fraction == 0.5
        assert inputs.capital_gains_rate == 0.15
        assert inputs.validate is False

    def test_defaults(self):
        inputs = PlanInputs.from_spec({"entries": []})
        assert inputs.filing_status == FilingStatus.MARRIED_FILING_JOINTLY
        assert inputs.state == "NJ"
        assert inputs.persons == {}
        assert inputs.cost_basis_fraction is None

    def test_invalid_entry_reports_index(self):
        spec = sample_spec()
        spec["entries"].append({"item": "Expense", "value": 10, "startYear": 2030, "endYear": 2026})
        with pytest.raises(ValueError, match="index 2"):
            PlanInputs.from_spec(spec)

    def test_missing_entry_field(self):
        spec = sample_spec()
        spec["entries"].append({"item": "Expense", "value": 10})
        with pytest.raises(ValueError, match="Invalid entry"):
            PlanInputs.from_spec(spec)

    def test_invalid_person(self):
        spec = sample_spec()
        spec["persons"].append({"name": "Kid"})
        with pytest.raises(ValueError, match="Invalid person at index 2"):
            PlanInputs.from_spec(spec)

    def test_duplicate_person(self):
        spec = sample_spec()
        spec["persons"].append({"name": "Alex", "yearOfBirth": 1970})
        with pytest.raises(ValueError, match="Duplicate"):
            PlanInputs.from_spec(spec)

    def test_load_plan_inputs(self, tmp_path):
        path = tmp_path / "spec.json"
        path.write_text(json.dumps(sample_spec()))
        inputs = load_plan_inputs(str(path))
        assert inputs.state == "NY"


class TestPlanData:
    def test_empty(self):
        data = PlanData.from_summaries([])
        assert data.first_year == 0
        assert data.last_year == -1
        assert data.years() == []

    def test_totals(self):
        y1 = YearlySummary(year=2026, total_income=100000, federal_income_tax=10000, medicare_tax=1450,
                           roth_conversions=5000, cash=20000)
        y2 = YearlySummary(year=2027, total_income=50000, state_income_tax=2000, deficit=300,
                           cash=30000, mortgage_balance=10000)
        data = PlanData.from_summaries([y1, y2])
        assert (data.first_year, data.last_year) == (2026, 2027)
        assert data.total_income == 150000
        assert data.total_federal_tax == 10000
        assert data.total_state_tax == 2000
        assert data.total_fica == 1450
        assert data.total_taxes == 13450
        assert data.total_roth_conversions == 5000
        assert data.total_withdrawals == 5000
        assert data.total_deficit == 300
        assert data.final_total_assets == 30000
        assert data.final_net_worth == 20000
        assert data.deficit_years() == [2027]
        assert data.get_year(2026) is y1
        assert data.get_year(2030) is None
        assert [s.year for s in data.summaries()] == [2026, 2027]
