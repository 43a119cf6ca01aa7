import logging
from typing import Optional

from calc.capital_gains_calculator import LongTermCapitalGainsCalculator
from calc.incremental_income_calculator import IncrementalIncomeCalculator
from model.FilingStatus import FilingStatus
from model.YearlySummary import YearlySummary
from strategy.tax_optimization_strategy import (
    TaxOptimizationStrategy, QUALIFIED_WITHDRAWAL_MIN_AGE, CENT, is_withdrawal_eligible, state_ordinary_income,
)
from tax.FederalDetails import FederalDetails
from tax.StateDetails import NewJerseyStateDetails

logger = logging.getLogger(__name__)


class ExpenseManagementStrategy(TaxOptimizationStrategy):
    """Balances the year's cash flow.

    A surplus is saved to each member's non-qualified account in equal
    shares. A shortfall is funded from, in order: non-qualified accounts,
    qualified accounts (members aged 59 or older), Roth accounts, then the
    household's cash. Taxable withdrawals are grossed up so the after-tax
    amount covers the shortfall. Whatever cannot be funded is the deficit.
    """

    QUALIFIED_WITHDRAWAL_MIN_AGE = QUALIFIED_WITHDRAWAL_MIN_AGE
    MIN_NET_FACTOR = 0.01

    def __init__(self, filing_status: FilingStatus = FilingStatus.MARRIED_FILING_JOINTLY,
                 federal: Optional[FederalDetails] = None, state=None,
                 capital_gains: Optional[LongTermCapitalGainsCalculator] = None,
                 incremental: Optional[IncrementalIncomeCalculator] = None):
        self.filing_status = filing_status
        self.federal = federal or FederalDetails()
        self.state = state or NewJerseyStateDetails()
        self.capital_gains = capital_gains or LongTermCapitalGainsCalculator()
        self.incremental = incremental or IncrementalIncomeCalculator(self.federal, self.state)

    def name(self) -> str:
        return "Expense Management"

    def description(self) -> str:
        return ("Covers expenses each year: saves any surplus to non-qualified accounts and funds any "
                "deficit from non-qualified, qualified, Roth and cash balances in that order.")

    def calculate_surplus(self, summary: YearlySummary) -> float:
        return summary.cash_flow_surplus()

    def optimize(self, previous: Optional[YearlySummary], current: Optional[YearlySummary]) -> None:
        if current is None:
            return
        current.reset_deficit()
        surplus = self.calculate_surplus(current)
        if surplus > 0:
            self._distribute_surplus(current, surplus)
        elif surplus < 0:
            self._fund_shortfall(current, -surplus)
        if current.individual_summaries:
            current.sync_from_individuals()

    def _distribute_surplus(self, summary: YearlySummary, surplus: float):
        individuals = summary.individuals()
        if not individuals:
            logger.debug("%d: surplus of %.2f with no household members to save it", summary.year, surplus)
            return
        share = surplus / len(individuals)
        for individual in individuals:
            individual.add_surplus(share)

    def _fund_shortfall(self, summary: YearlySummary, shortfall: float):
        remaining = self._withdraw_non_qualified(summary, shortfall)
        remaining = self._withdraw_qualified(summary, remaining)
        remaining = self._withdraw_roth(summary, remaining)
        remaining = self._withdraw_cash(summary, remaining)
        if remaining < CENT:
            return

        individuals = summary.individuals()
        if individuals:
            for individual in individuals:
                individual.deficit = remaining / len(individuals)
        else:
            summary.deficit = remaining
        logger.debug("%d: unfunded deficit of %.2f", summary.year, remaining)

    def _non_qualified_net_factor(self, summary: YearlySummary) -> float:
        """After-tax share of each dollar sold from a non-qualified account."""
        state_rate = self.state.getMarginalTaxRate(state_ordinary_income(summary, self.state), self.filing_status)
        gain_fraction = 1 - self.capital_gains.cost_basis_fraction
        return max(self.MIN_NET_FACTOR, 1 - gain_fraction * (self.capital_gains.rate + state_rate))

    def _withdraw_non_qualified(self, summary: YearlySummary, shortfall: float) -> float:
        if shortfall < CENT:
            return 0.0
        net_factor = self._non_qualified_net_factor(summary)
        needed = shortfall / net_factor
        remaining = shortfall
        for individual in summary.individuals():
            if needed < CENT:
                break
            taken = individual.withdraw_non_qualified(needed)
            needed -= taken
            remaining -= taken * net_factor
        return max(0.0, remaining)

    def _withdraw_qualified(self, summary: YearlySummary, shortfall: float) -> float:
        remaining = shortfall
        for individual in summary.individuals():
            if remaining < CENT:
                break
            if not is_withdrawal_eligible(individual) or individual.qualified_assets <= 0:
                continue
            base_income = summary.ordinary_income()
            gross = self.incremental.calculate_incremental_income_required(base_income, remaining, self.filing_status)
            taken = individual.withdraw_qualified(gross)
            remaining -= self.incremental.calculate_net_after_tax(base_income, taken, self.filing_status)
        return max(0.0, remaining)

    def _withdraw_roth(self, summary: YearlySummary, shortfall: float) -> float:
        remaining = shortfall
        for individual in summary.individuals():
            if remaining < CENT:
                break
            remaining -= individual.withdraw_roth(remaining)
        return max(0.0, remaining)

    def _withdraw_cash(self, summary: YearlySummary, shortfall: float) -> float:
        if shortfall < CENT or summary.cash <= 0:
            return shortfall
        taken = min(shortfall, summary.cash)
        summary.cash -= taken
        individuals = summary.individuals()
        if individuals:
            for individual in individuals:
                individual.cash_withdrawals += taken / len(individuals)
        else:
            summary.cash_withdrawals += taken
        return shortfall - taken
