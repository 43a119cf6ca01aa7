from typing import Optional

from calc.capital_gains_calculator import LongTermCapitalGainsCalculator
from model.FilingStatus import FilingStatus
from model.YearlySummary import YearlySummary
from strategy.tax_optimization_strategy import TaxOptimizationStrategy, state_ordinary_income
from tax.FederalDetails import FederalDetails
from tax.MedicareDetails import MedicareDetails
from tax.SocialSecurityDetails import SocialSecurityDetails
from tax.StateDetails import NewJerseyStateDetails


class TaxCalculationStrategy(TaxOptimizationStrategy):
    """Computes the year's federal, state, capital gains and payroll taxes from the ledger."""

    def __init__(self, filing_status: FilingStatus = FilingStatus.MARRIED_FILING_JOINTLY,
                 federal: Optional[FederalDetails] = None, state=None,
                 social_security: Optional[SocialSecurityDetails] = None,
                 medicare: Optional[MedicareDetails] = None,
                 capital_gains: Optional[LongTermCapitalGainsCalculator] = None):
        self.filing_status = filing_status
        self.federal = federal or FederalDetails()
        self.state = state or NewJerseyStateDetails()
        self.social_security = social_security or SocialSecurityDetails()
        self.medicare = medicare or MedicareDetails()
        self.capital_gains = capital_gains or LongTermCapitalGainsCalculator()

    def name(self) -> str:
        return "Tax Calculation"

    def description(self) -> str:
        return ("Calculates federal and state income tax on ordinary income, payroll taxes on wages, "
                "and capital gains tax on taxable account withdrawals.")

    def optimize(self, previous: Optional[YearlySummary], current: Optional[YearlySummary]) -> None:
        if current is None:
            return
        ordinary_income = current.ordinary_income()
        state_income = state_ordinary_income(current, self.state)

        current.federal_income_tax = self.federal.calculateTax(ordinary_income, self.filing_status)
        current.state_income_tax = self.state.calculateTax(state_income, self.filing_status)

        # Wage base and Medicare apply per person; the surcharge applies to the filing unit
        total_wages = 0.0
        for individual in current.individuals():
            individual.social_security_tax = self.social_security.total_contribution(individual.income)
            individual.medicare_tax = self.medicare.base_contribution(individual.income)
            total_wages += individual.income
        current.social_security_tax = sum(i.social_security_tax for i in current.individuals())
        current.medicare_tax = (sum(i.medicare_tax for i in current.individuals())
                                + self.medicare.surcharge(total_wages, self.filing_status))

        sales = current.non_qualified_withdrawals
        gain = self.capital_gains.calculate_capital_gain(sales)
        state_rate = self.state.getMarginalTaxRate(state_income, self.filing_status)
        current.capital_gains_tax = self.capital_gains.calculate_tax(sales) + gain * state_rate
