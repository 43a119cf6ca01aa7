import logging
from typing import Optional

from calc.incremental_income_calculator import IncrementalIncomeCalculator
from model.FilingStatus import FilingStatus
from model.YearlySummary import YearlySummary, IndividualYearlySummary
from strategy.tax_optimization_strategy import TaxOptimizationStrategy, is_withdrawal_eligible
from tax.FederalDetails import FederalDetails
from tax.StateDetails import NewJerseyStateDetails

logger = logging.getLogger(__name__)

DEFAULT_TARGET_BRACKET_RATE = 0.22


class RothConversionOptimizationStrategy(TaxOptimizationStrategy):
    """Fills the household's ordinary income up to a target bracket by converting qualified money to Roth.

    The target defaults to the top of the 22% federal bracket for the filing
    status. Only members aged 59 or older convert, in household order, until
    the room under the target is used up. The tax on each conversion is paid
    from that member's non-qualified savings for the year when possible and
    otherwise withheld from the converted amount.
    """

    def __init__(self, filing_status: FilingStatus = FilingStatus.MARRIED_FILING_JOINTLY,
                 federal: Optional[FederalDetails] = None, state=None,
                 incremental: Optional[IncrementalIncomeCalculator] = None,
                 target_bracket_rate: float = DEFAULT_TARGET_BRACKET_RATE,
                 target_threshold: Optional[float] = None):
        self.filing_status = filing_status
        self.federal = federal or FederalDetails()
        self.state = state or NewJerseyStateDetails()
        self.incremental = incremental or IncrementalIncomeCalculator(self.federal, self.state)
        self.target_bracket_rate = target_bracket_rate
        self.target_threshold = target_threshold

    def name(self) -> str:
        return "Roth Conversion Optimization"

    def description(self) -> str:
        return ("Converts qualified assets to Roth up to the top of the target tax bracket, "
                "paying the conversion tax from non-qualified savings when available.")

    def get_target_threshold(self) -> float:
        if self.target_threshold is not None:
            return self.target_threshold
        return self.federal.bracketCeiling(self.target_bracket_rate, self.filing_status)

    def calculate_optimal_conversion(self, current_income: float, available_qualified: float) -> float:
        """Conversion that fills the room between current income and the target, capped at the balance."""
        room = self.get_target_threshold() - current_income
        return max(0.0, min(room, available_qualified))

    def calculate_conversion_tax_cost(self, current_income: float, conversion_amount: float) -> float:
        """Federal plus state tax added by converting on top of the current income."""
        return self.incremental.calculate_incremental_tax(max(0.0, current_income), conversion_amount,
                                                          self.filing_status)

    def optimize(self, previous: Optional[YearlySummary], current: Optional[YearlySummary]) -> None:
        if current is None:
            return
        income = current.ordinary_income()
        for individual in current.individuals():
            if not is_withdrawal_eligible(individual):
                continue
            amount = self.calculate_optimal_conversion(income, individual.qualified_assets)
            if amount <= 0:
                continue
            tax_cost = self.calculate_conversion_tax_cost(income, amount)
            self._convert(individual, amount, tax_cost)
            income += amount
            logger.debug("%d: converted %.2f to Roth for %s (tax %.2f)",
                         current.year, amount, individual.name, tax_cost)
        if current.individual_summaries:
            current.sync_from_individuals()

    @staticmethod
    def _convert(individual: IndividualYearlySummary, amount: float, tax_cost: float):
        individual.qualified_assets -= amount
        individual.roth_conversions += amount

        # Pay the tax out of this year's savings first
        funded = max(0.0, min(tax_cost, individual.non_qualified_contributions, individual.non_qualified_assets))
        individual.non_qualified_contributions -= funded
        individual.non_qualified_assets -= funded

        deposited = amount - (tax_cost - funded)
        individual.roth_contributions += deposited
        individual.roth_assets += deposited
