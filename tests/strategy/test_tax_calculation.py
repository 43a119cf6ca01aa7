import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))

from model.FilingStatus import FilingStatus
from model.Person import Person
from model.YearlySummary import YearlySummary, IndividualYearlySummary
from strategy.tax_calculation import TaxCalculationStrategy
from strategy.tax_optimization_strategy import state_ordinary_income
from tax.FederalDetails import FederalDetails
from tax.StateDetails import NewJerseyStateDetails, StateDetails

MFJ = FilingStatus.MARRIED_FILING_JOINTLY


def make_summary(*members):
    summary = YearlySummary(year=2026)
    for name, fields in members:
        summary.add_individual_summary(IndividualYearlySummary(name=name, year=2026, person=Person(name, 1970),
                                                               **fields))
    summary.sync_from_individuals()
    return summary


def test_name():
    assert TaxCalculationStrategy().name() == "Tax Calculation"


def test_payroll_taxes_per_person():
    summary = make_summary(("Alex", {"income": 100000}), ("Sam", {"income": 200000}))
    TaxCalculationStrategy(MFJ).optimize(None, summary)
    assert summary.get_individual_summary("Alex").social_security_tax == pytest.approx(6200)
    assert summary.get_individual_summary("Sam").social_security_tax == pytest.approx(168600 * 0.062)
    assert summary.social_security_tax == pytest.approx(6200 + 168600 * 0.062)
    # Surcharge on combined wages above the joint threshold
    assert summary.medicare_tax == pytest.approx(300000 * 0.0145 + 50000 * 0.009)


def test_income_taxes():
    summary = make_summary(("Alex", {"income": 100000}), ("Sam", {"income": 200000}))
    TaxCalculationStrategy(MFJ).optimize(None, summary)
    assert summary.federal_income_tax == pytest.approx(FederalDetails().calculateTax(300000, MFJ))
    assert summary.state_income_tax == pytest.approx(NewJerseyStateDetails().calculateTax(300000, MFJ))
    assert summary.capital_gains_tax == 0


def test_social_security_exempt_from_state_tax():
    summary = make_summary(("Alex", {"social_security_benefits": 40000, "non_qualified_withdrawals": 20000}))
    TaxCalculationStrategy(MFJ).optimize(None, summary)
    assert summary.federal_income_tax == pytest.approx(23850 * 0.10 + (34000 - 23850) * 0.12)
    assert summary.state_income_tax == 0
    # 75% of the sale is gain, taxed at 20% plus the lowest New Jersey rate
    assert summary.capital_gains_tax == pytest.approx(15000 * 0.20 + 15000 * 0.014)
    assert summary.social_security_tax == 0


def test_state_ordinary_income_keeps_benefits_where_taxed():
    summary = make_summary(("Alex", {"income": 10000, "social_security_benefits": 20000}))
    exempt = NewJerseyStateDetails()
    taxing = StateDetails(schedules=exempt.schedules, state_code='XX')
    assert state_ordinary_income(summary, exempt) == pytest.approx(10000)
    assert state_ordinary_income(summary, taxing) == pytest.approx(27000)
