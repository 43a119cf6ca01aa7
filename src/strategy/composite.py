"""Per-year fixed-point loop over the individual strategies.

Order within a year:

    RMD -> balance cash flow -> Roth conversion (no deficit only) -> balance cash flow

Balancing alternates tax calculation and expense management until inflows
match outflows within a dollar, a deficit is recorded, or the pass limit
is reached.
"""

import logging
from typing import List, Optional

from calc.capital_gains_calculator import LongTermCapitalGainsCalculator
from calc.incremental_income_calculator import IncrementalIncomeCalculator
from calc.rmd_calculator import RMDCalculator
from model.FilingStatus import FilingStatus
from model.YearlySummary import YearlySummary
from strategy.expense_management import ExpenseManagementStrategy
from strategy.rmd_optimization import RMDOptimizationStrategy
from strategy.roth_conversion import RothConversionOptimizationStrategy, DEFAULT_TARGET_BRACKET_RATE
from strategy.tax_calculation import TaxCalculationStrategy
from strategy.tax_optimization_strategy import TaxOptimizationStrategy
from tax.FederalDetails import FederalDetails
from tax.MedicareDetails import MedicareDetails
from tax.SocialSecurityDetails import SocialSecurityDetails
from tax.StateDetails import NewJerseyStateDetails

logger = logging.getLogger(__name__)


class CompositeTaxOptimizationStrategy(TaxOptimizationStrategy):
    """Runs RMD, tax, expense and Roth conversion strategies until the year's cash flow settles."""

    CASH_FLOW_BALANCE_THRESHOLD = 1.0
    MAX_ITERATIONS = 20

    def __init__(self, filing_status: FilingStatus = FilingStatus.MARRIED_FILING_JOINTLY,
                 federal: Optional[FederalDetails] = None, state=None,
                 social_security: Optional[SocialSecurityDetails] = None,
                 medicare: Optional[MedicareDetails] = None,
                 capital_gains: Optional[LongTermCapitalGainsCalculator] = None,
                 rmd_calculator: Optional[RMDCalculator] = None,
                 target_bracket_rate: float = DEFAULT_TARGET_BRACKET_RATE,
                 target_threshold: Optional[float] = None):
        self.filing_status = filing_status
        federal = federal or FederalDetails()
        state = state or NewJerseyStateDetails()
        capital_gains = capital_gains or LongTermCapitalGainsCalculator()
        incremental = IncrementalIncomeCalculator(federal, state)

        self.rmd_strategy = RMDOptimizationStrategy(rmd_calculator)
        self.tax_strategy = TaxCalculationStrategy(filing_status, federal, state, social_security,
                                                   medicare, capital_gains)
        self.expense_strategy = ExpenseManagementStrategy(filing_status, federal, state, capital_gains, incremental)
        self.roth_strategy = RothConversionOptimizationStrategy(filing_status, federal, state, incremental,
                                                                target_bracket_rate, target_threshold)

    def name(self) -> str:
        return "Composite Tax Optimization"

    def description(self) -> str:
        return ("Applies RMDs, balances cash flow against taxes, converts to Roth when there is room "
                "in the target bracket, then re-balances.")

    def strategies(self) -> List[TaxOptimizationStrategy]:
        return [self.rmd_strategy, self.tax_strategy, self.expense_strategy, self.roth_strategy]

    def is_cash_flow_balanced(self, summary: YearlySummary) -> bool:
        return abs(summary.cash_flow_surplus()) < self.CASH_FLOW_BALANCE_THRESHOLD

    @staticmethod
    def has_deficit(summary: YearlySummary) -> bool:
        return summary.deficit > 0

    def optimize(self, previous: Optional[YearlySummary], current: Optional[YearlySummary]) -> None:
        if current is None:
            return
        self.rmd_strategy.optimize(previous, current)
        self._balance_cash_flow(previous, current)
        if not self.has_deficit(current):
            self.roth_strategy.optimize(previous, current)
        self._balance_cash_flow(previous, current)

    def _balance_cash_flow(self, previous: Optional[YearlySummary], current: YearlySummary):
        for iteration in range(self.MAX_ITERATIONS):
            self.tax_strategy.optimize(previous, current)
            if self.has_deficit(current):
                self.expense_strategy.optimize(previous, current)
                return
            if self.is_cash_flow_balanced(current):
                return
            self.expense_strategy.optimize(previous, current)
            if self.has_deficit(current) or self.is_cash_flow_balanced(current):
                logger.debug("%d: cash flow settled after %d passes", current.year, iteration + 1)
                return
        current.converged = False
        logger.warning("%d: cash flow did not settle after %d passes (off by %.2f)",
                       current.year, self.MAX_ITERATIONS, current.cash_flow_surplus())
