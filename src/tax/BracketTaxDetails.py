"""Progressive bracket tax shared by the federal and state calculators."""

import json
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from model.FilingStatus import FilingStatus
from model.TaxResult import TaxResult

REFERENCE_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference'))


@dataclass(frozen=True)
class BracketSchedule:
    """Ordered bracket upper bounds and the marginal rate of each bracket.

    There is one more rate than there are bounds; the last rate applies to
    income above the last bound.
    """
    max_incomes: Tuple[float, ...]
    rates: Tuple[float, ...]

    def __post_init__(self):
        if len(self.rates) != len(self.max_incomes) + 1:
            raise ValueError(
                f"Expected {len(self.max_incomes) + 1} rates for {len(self.max_incomes)} brackets, got {len(self.rates)}"
            )
        for i in range(1, len(self.max_incomes)):
            if self.max_incomes[i] <= self.max_incomes[i - 1]:
                raise ValueError("Bracket bounds must be strictly ascending")

    @classmethod
    def from_json(cls, max_incomes, rates) -> "BracketSchedule":
        return cls(tuple(float(b) for b in max_incomes), tuple(float(r) for r in rates))


def load_reference(file_name: str, ref_path: Optional[str] = None) -> dict:
    """Load a JSON reference table from the reference directory (or an explicit path)."""
    path = ref_path or os.path.join(REFERENCE_DIR, file_name)
    with open(path, 'r') as f:
        return json.load(f)


def parse_schedules(data: dict) -> Dict[FilingStatus, BracketSchedule]:
    """Build per-filing-status schedules from {"SINGLE": {"maxIncome": [...], "rates": [...]}, ...}."""
    schedules = {}
    for key, schedule in data.items():
        status = FilingStatus.from_string(key)
        schedules[status] = BracketSchedule.from_json(schedule["maxIncome"], schedule["rates"])
    return schedules


class BracketTaxDetails:
    """Progressive income tax over per-filing-status bracket schedules."""

    def __init__(self, schedules: Dict[FilingStatus, BracketSchedule]):
        missing = [s.name for s in FilingStatus if s not in schedules]
        if missing:
            raise ValueError(f"Missing bracket schedules for: {', '.join(missing)}")
        self.schedules = dict(schedules)

    def schedule(self, filing_status: FilingStatus) -> BracketSchedule:
        if filing_status is None:
            raise ValueError("Filing status is required")
        return self.schedules[filing_status]

    def calculateTax(self, income: float, filing_status: FilingStatus) -> float:
        """Tax owed on the given taxable income.

        Args:
            income: Taxable income (must not be negative).
            filing_status: Filing status selecting the bracket schedule.

        Returns:
            Total tax across all brackets the income reaches.
        """
        schedule = self.schedule(filing_status)
        if income < 0:
            raise ValueError(f"Income cannot be negative: {income}")
        if income == 0:
            return 0.0

        tax = 0.0
        previous = 0.0
        for bound, rate in zip(schedule.max_incomes, schedule.rates):
            if income <= bound:
                return tax + (income - previous) * rate
            tax += (bound - previous) * rate
            previous = bound
        return tax + (income - previous) * schedule.rates[-1]

    def getMarginalTaxRate(self, income: float, filing_status: FilingStatus) -> float:
        schedule = self.schedule(filing_status)
        if income <= 0:
            return schedule.rates[0]
        for bound, rate in zip(schedule.max_incomes, schedule.rates):
            if income <= bound:
                return rate
        return schedule.rates[-1]

    def getEffectiveTaxRate(self, income: float, filing_status: FilingStatus) -> float:
        if income <= 0:
            self.schedule(filing_status)
            return 0.0
        return self.calculateTax(income, filing_status) / income

    def calculatePreTaxAmount(self, net_amount: float, filing_status: FilingStatus) -> float:
        """Gross income whose after-tax remainder equals net_amount.

        Walks the brackets in after-tax space: each bracket ends at a known
        after-tax amount, and inside the bracket that contains the target the
        gross is solved directly at that bracket's rate.
        """
        schedule = self.schedule(filing_status)
        if net_amount < 0:
            raise ValueError(f"Net amount cannot be negative: {net_amount}")
        if net_amount == 0:
            return 0.0

        cumulative_tax = 0.0
        previous = 0.0
        for bound, rate in zip(schedule.max_incomes, schedule.rates):
            bracket_tax = (bound - previous) * rate
            post_tax_at_bracket_end = bound - (cumulative_tax + bracket_tax)
            if net_amount <= post_tax_at_bracket_end:
                return (net_amount + cumulative_tax - previous * rate) / (1 - rate)
            cumulative_tax += bracket_tax
            previous = bound
        top_rate = schedule.rates[-1]
        return (net_amount + cumulative_tax - previous * top_rate) / (1 - top_rate)

    def taxBurden(self, income: float, filing_status: FilingStatus) -> TaxResult:
        """Returns a TaxResult with total tax, marginal bracket and effective rate for the income."""
        return TaxResult(
            totalTax=self.calculateTax(income, filing_status),
            marginalBracket=self.getMarginalTaxRate(income, filing_status),
            effectiveRate=self.getEffectiveTaxRate(income, filing_status),
        )

    def bracketCeiling(self, rate: float, filing_status: FilingStatus) -> float:
        """Upper bound of the bracket taxed at the given rate."""
        schedule = self.schedule(filing_status)
        for bound, bracket_rate in zip(schedule.max_incomes, schedule.rates):
            if abs(bracket_rate - rate) < 1e-9:
                return bound
        raise ValueError(f"No bounded bracket at rate {rate} for {filing_status.name}")
