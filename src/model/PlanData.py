"""Projection results across all years.

PlanData wraps the ordered yearly ledgers produced by the plan calculator
and carries the lifetime totals that renderers and tools report.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from model.YearlySummary import YearlySummary


@dataclass
class PlanData:
    """Complete projection across the planning horizon."""
    first_year: int
    last_year: int

    # Yearly ledgers indexed by year
    yearly_data: Dict[int, YearlySummary] = field(default_factory=dict)

    # Lifetime totals
    total_income: float = 0.0
    total_social_security: float = 0.0
    total_federal_tax: float = 0.0
    total_state_tax: float = 0.0
    total_capital_gains_tax: float = 0.0
    total_fica: float = 0.0
    total_taxes: float = 0.0
    total_withdrawals: float = 0.0
    total_roth_conversions: float = 0.0
    total_deficit: float = 0.0

    # Final balances
    final_total_assets: float = 0.0
    final_net_worth: float = 0.0

    @classmethod
    def from_summaries(cls, summaries: List[YearlySummary]) -> "PlanData":
        if not summaries:
            return cls(first_year=0, last_year=-1)
        data = cls(first_year=summaries[0].year, last_year=summaries[-1].year)
        for s in summaries:
            data.yearly_data[s.year] = s
            data.total_income += s.total_income
            data.total_social_security += s.total_social_security
            data.total_federal_tax += s.federal_income_tax
            data.total_state_tax += s.state_income_tax
            data.total_capital_gains_tax += s.capital_gains_tax
            data.total_fica += s.social_security_tax + s.medicare_tax
            data.total_taxes += s.total_taxes()
            data.total_withdrawals += s.total_withdrawals()
            data.total_roth_conversions += s.roth_conversions
            data.total_deficit += s.deficit
        data.final_total_assets = summaries[-1].total_assets()
        data.final_net_worth = summaries[-1].net_worth()
        return data

    def get_year(self, year: int) -> Optional[YearlySummary]:
        """Get the ledger for a specific year."""
        return self.yearly_data.get(year)

    def summaries(self) -> List[YearlySummary]:
        """Ledgers in ascending year order."""
        return [self.yearly_data[y] for y in sorted(self.yearly_data)]

    def years(self) -> List[int]:
        return sorted(self.yearly_data)

    def deficit_years(self) -> List[int]:
        return [y for y, s in sorted(self.yearly_data.items()) if s.deficit > 0]
