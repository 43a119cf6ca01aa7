import logging

from model.FilingStatus import FilingStatus

logger = logging.getLogger(__name__)


class IncrementalIncomeCalculator:
    """Finds the extra pre-tax income needed to net a target amount on top of existing income.

    Federal and state taxes are layered on the base income, so the extra
    income is taxed at whatever brackets the base leaves open.
    """

    MAX_ITERATIONS = 10
    TOLERANCE = 0.01

    def __init__(self, federal, state):
        """
        Args:
            federal: Federal bracket calculator.
            state: State calculator (bracketed or no-income-tax).
        """
        self.federal = federal
        self.state = state

    @staticmethod
    def _check(base_income: float, amount: float, filing_status: FilingStatus):
        if filing_status is None:
            raise ValueError("Filing status is required")
        if base_income < 0:
            raise ValueError(f"Base income cannot be negative: {base_income}")
        if amount < 0:
            raise ValueError(f"Amount cannot be negative: {amount}")

    def _total_tax(self, income: float, filing_status: FilingStatus) -> float:
        return self.federal.calculateTax(income, filing_status) + self.state.calculateTax(income, filing_status)

    def get_combined_marginal_rate(self, income: float, filing_status: FilingStatus) -> float:
        return (self.federal.getMarginalTaxRate(income, filing_status)
                + self.state.getMarginalTaxRate(income, filing_status))

    def calculate_incremental_tax(self, base_income: float, additional_income: float,
                                  filing_status: FilingStatus) -> float:
        """Federal plus state tax attributable to additional_income stacked on base_income."""
        self._check(base_income, additional_income, filing_status)
        if additional_income == 0:
            return 0.0
        return (self._total_tax(base_income + additional_income, filing_status)
                - self._total_tax(base_income, filing_status))

    def calculate_net_after_tax(self, base_income: float, additional_income: float,
                                filing_status: FilingStatus) -> float:
        return additional_income - self.calculate_incremental_tax(base_income, additional_income, filing_status)

    def calculate_incremental_income_required(self, base_income: float, expenses: float,
                                              filing_status: FilingStatus) -> float:
        """Gross income to add to base_income so that it nets `expenses` after federal and state tax.

        Starts from the combined marginal rate at the base income and refines
        with the effective incremental rate until the net is within a cent.
        """
        self._check(base_income, expenses, filing_status)
        if expenses == 0:
            return 0.0

        estimate = expenses / (1 - self.get_combined_marginal_rate(base_income, filing_status))
        for _ in range(self.MAX_ITERATIONS):
            tax = self.calculate_incremental_tax(base_income, estimate, filing_status)
            shortfall = expenses - (estimate - tax)
            if abs(shortfall) < self.TOLERANCE:
                return estimate
            effective_rate = tax / estimate if estimate > 0 else 0.0
            estimate += shortfall / (1 - effective_rate)
        logger.debug("Gross-up of %.2f on base %.2f stopped after %d iterations",
                     expenses, base_income, self.MAX_ITERATIONS)
        return estimate
