"""Common contract and shared rules for the per-year optimization strategies."""

from abc import ABC, abstractmethod
from typing import Optional

from model.YearlySummary import YearlySummary, IndividualYearlySummary, TAXABLE_SOCIAL_SECURITY_FRACTION

# Earliest age for penalty-free qualified withdrawals and Roth conversions.
QUALIFIED_WITHDRAWAL_MIN_AGE = 59

# Amounts below a cent are treated as zero.
CENT = 0.01


class TaxOptimizationStrategy(ABC):
    """A step that adjusts one year's ledger in place."""

    @abstractmethod
    def optimize(self, previous: Optional[YearlySummary], current: Optional[YearlySummary]) -> None:
        """Adjust the current year's ledger.

        Args:
            previous: Last year's final ledger, or None in the first year.
            current: This year's ledger; nothing happens when None.
        """
        pass

    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def description(self) -> str:
        pass


def is_withdrawal_eligible(individual: IndividualYearlySummary) -> bool:
    """True when the member is a person at or past the qualified withdrawal age."""
    age = individual.age()
    return age is not None and age >= QUALIFIED_WITHDRAWAL_MIN_AGE


def state_ordinary_income(summary: YearlySummary, state) -> float:
    """Ordinary income as the state sees it; states that exempt Social Security drop the taxable share."""
    income = summary.ordinary_income()
    if not state.taxes_social_security:
        income -= summary.total_social_security * TAXABLE_SOCIAL_SECURITY_FRACTION
    return max(0.0, income)
