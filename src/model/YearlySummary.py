"""Per-year ledger for the household projection.

A YearlySummary is the aggregate snapshot for one simulated year. It holds
one IndividualYearlySummary per household member keyed by name. Strategies
mutate the individual snapshots and then re-derive the matching aggregate
fields with sync_from_individuals, so aggregate totals always equal the sum
over individuals.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from model.Person import Person

# Share of Social Security benefits included in ordinary taxable income.
TAXABLE_SOCIAL_SECURITY_FRACTION = 0.85

# Name of the household member that owns entries without an owner.
HOUSEHOLD_MEMBER = "Joint"

CASH_FLOW_TOLERANCE = 1.0
TOTALS_TOLERANCE = 0.01

# Aggregate field -> individual field
INDIVIDUAL_TOTAL_FIELDS = {
    "total_income": "income",
    "total_social_security": "social_security_benefits",
    "qualified_assets": "qualified_assets",
    "non_qualified_assets": "non_qualified_assets",
    "roth_assets": "roth_assets",
    "rmd_withdrawals": "rmd_withdrawals",
    "qualified_withdrawals": "qualified_withdrawals",
    "non_qualified_withdrawals": "non_qualified_withdrawals",
    "roth_withdrawals": "roth_withdrawals",
    "cash_withdrawals": "cash_withdrawals",
    "roth_conversions": "roth_conversions",
    "roth_contributions": "roth_contributions",
    "qualified_contributions": "qualified_contributions",
    "non_qualified_contributions": "non_qualified_contributions",
    "deficit": "deficit",
}


class LedgerValidationError(ValueError):
    """Raised when a year's ledger violates its consistency rules."""


@dataclass
class IndividualYearlySummary:
    """One household member's share of a year."""
    name: str
    year: int
    person: Optional[Person] = None

    income: float = 0.0
    social_security_benefits: float = 0.0

    # Balances (closing, once strategies have run)
    qualified_assets: float = 0.0
    non_qualified_assets: float = 0.0
    roth_assets: float = 0.0

    # Withdrawals
    rmd_withdrawals: float = 0.0
    qualified_withdrawals: float = 0.0
    non_qualified_withdrawals: float = 0.0
    roth_withdrawals: float = 0.0
    cash_withdrawals: float = 0.0
    roth_conversions: float = 0.0

    # Contributions
    roth_contributions: float = 0.0
    qualified_contributions: float = 0.0
    non_qualified_contributions: float = 0.0

    # Payroll taxes on this member's wages
    social_security_tax: float = 0.0
    medicare_tax: float = 0.0

    deficit: float = 0.0

    def age(self) -> Optional[int]:
        """Age in this year, or None for the household member."""
        if self.person is None:
            return None
        return self.person.age_in_year(self.year)

    def total_withdrawals(self) -> float:
        return (self.rmd_withdrawals + self.qualified_withdrawals + self.non_qualified_withdrawals
                + self.roth_withdrawals + self.cash_withdrawals + self.roth_conversions)

    def total_contributions(self) -> float:
        return self.roth_contributions + self.qualified_contributions + self.non_qualified_contributions

    def total_assets(self) -> float:
        return self.qualified_assets + self.non_qualified_assets + self.roth_assets

    def total_cash_inflows(self) -> float:
        return self.income + self.social_security_benefits + self.total_withdrawals()

    def ordinary_income(self) -> float:
        """Income taxed at ordinary rates: wages, pre-tax withdrawals, conversions and 85% of Social Security."""
        return (self.income + self.rmd_withdrawals + self.qualified_withdrawals + self.roth_conversions
                + self.social_security_benefits * TAXABLE_SOCIAL_SECURITY_FRACTION)

    def set_rmd_withdrawals(self, amount: float) -> float:
        """Set this year's RMD, capped at the qualified balance, and take it out of that balance.

        Any RMD already applied this year is restored first so that setting it
        again does not withdraw twice.

        Returns:
            The RMD actually applied.
        """
        self.qualified_assets += self.rmd_withdrawals
        self.rmd_withdrawals = 0.0
        actual = min(max(amount, 0.0), self.qualified_assets)
        self.qualified_assets -= actual
        self.rmd_withdrawals = actual
        return actual

    def withdraw_non_qualified(self, amount: float) -> float:
        actual = min(max(amount, 0.0), self.non_qualified_assets)
        self.non_qualified_assets -= actual
        self.non_qualified_withdrawals += actual
        return actual

    def withdraw_qualified(self, amount: float) -> float:
        actual = min(max(amount, 0.0), self.qualified_assets)
        self.qualified_assets -= actual
        self.qualified_withdrawals += actual
        return actual

    def withdraw_roth(self, amount: float) -> float:
        actual = min(max(amount, 0.0), self.roth_assets)
        self.roth_assets -= actual
        self.roth_withdrawals += actual
        return actual

    def add_surplus(self, amount: float):
        """Save a share of the household surplus into the non-qualified account."""
        self.non_qualified_assets += amount
        self.non_qualified_contributions += amount


@dataclass
class YearlySummary:
    """Aggregate household ledger for one year."""
    year: int

    total_income: float = 0.0
    total_expenses: float = 0.0
    total_social_security: float = 0.0

    # Balances
    qualified_assets: float = 0.0
    non_qualified_assets: float = 0.0
    roth_assets: float = 0.0
    cash: float = 0.0
    real_estate: float = 0.0
    life_insurance_benefits: float = 0.0
    mortgage_balance: float = 0.0

    # Mortgage cash flows
    mortgage_payment: float = 0.0
    mortgage_repayment: float = 0.0

    # Withdrawals
    rmd_withdrawals: float = 0.0
    qualified_withdrawals: float = 0.0
    non_qualified_withdrawals: float = 0.0
    roth_withdrawals: float = 0.0
    cash_withdrawals: float = 0.0
    roth_conversions: float = 0.0

    # Contributions
    roth_contributions: float = 0.0
    qualified_contributions: float = 0.0
    non_qualified_contributions: float = 0.0
    life_insurance_contributions: float = 0.0

    # Taxes
    federal_income_tax: float = 0.0
    state_income_tax: float = 0.0
    capital_gains_tax: float = 0.0
    social_security_tax: float = 0.0
    medicare_tax: float = 0.0

    deficit: float = 0.0
    converged: bool = True

    individual_summaries: Dict[str, IndividualYearlySummary] = field(default_factory=dict)

    def get_individual_summary(self, name: str) -> Optional[IndividualYearlySummary]:
        return self.individual_summaries.get(name)

    def add_individual_summary(self, summary: IndividualYearlySummary):
        self.individual_summaries[summary.name] = summary

    def individuals(self):
        return list(self.individual_summaries.values())

    def total_withdrawals(self) -> float:
        return (self.rmd_withdrawals + self.qualified_withdrawals + self.non_qualified_withdrawals
                + self.roth_withdrawals + self.cash_withdrawals + self.roth_conversions)

    def total_contributions(self) -> float:
        return (self.roth_contributions + self.qualified_contributions + self.non_qualified_contributions
                + self.life_insurance_contributions)

    def total_taxes(self) -> float:
        return (self.federal_income_tax + self.state_income_tax + self.capital_gains_tax
                + self.social_security_tax + self.medicare_tax)

    def total_assets(self) -> float:
        return (self.qualified_assets + self.non_qualified_assets + self.roth_assets
                + self.cash + self.real_estate + self.life_insurance_benefits)

    def net_worth(self) -> float:
        return self.total_assets() - self.mortgage_balance

    def total_cash_inflows(self) -> float:
        return self.total_income + self.total_social_security + self.total_withdrawals()

    def total_cash_outflows(self) -> float:
        return (self.total_expenses + self.total_taxes() + self.total_contributions()
                + self.mortgage_payment + self.mortgage_repayment)

    def cash_flow_surplus(self) -> float:
        """Inflows minus outflows; negative when the year is short."""
        return self.total_cash_inflows() - self.total_cash_outflows()

    def ordinary_income(self) -> float:
        return sum(ind.ordinary_income() for ind in self.individual_summaries.values())

    def reset_deficit(self):
        self.deficit = 0.0
        for ind in self.individual_summaries.values():
            ind.deficit = 0.0

    def sync_from_individuals(self, *fields: str):
        """Re-derive aggregate fields by summing the individual snapshots.

        Args:
            fields: Aggregate field names to re-derive. All individual-backed
                fields are synced when none are given.
        """
        names = fields or tuple(INDIVIDUAL_TOTAL_FIELDS)
        for name in names:
            if name not in INDIVIDUAL_TOTAL_FIELDS:
                raise ValueError(f"'{name}' is not an individual-backed field")
            source = INDIVIDUAL_TOTAL_FIELDS[name]
            setattr(self, name, sum(getattr(ind, source) for ind in self.individual_summaries.values()))

    def validate_individual_totals(self, tolerance: float = TOTALS_TOLERANCE) -> bool:
        """True when every individual-backed aggregate equals the sum over individuals."""
        return not self._individual_total_mismatches(tolerance)

    def validate_cash_flow(self, tolerance: float = CASH_FLOW_TOLERANCE) -> bool:
        """True when inflows plus any unmet deficit cover outflows within the tolerance."""
        return abs(self.total_cash_inflows() + self.deficit - self.total_cash_outflows()) < tolerance

    def validate(self) -> bool:
        return self.validate_individual_totals() and self.validate_cash_flow()

    def _individual_total_mismatches(self, tolerance: float) -> Dict[str, tuple]:
        mismatches = {}
        for name, source in INDIVIDUAL_TOTAL_FIELDS.items():
            aggregate = getattr(self, name)
            total = sum(getattr(ind, source) for ind in self.individual_summaries.values())
            if abs(aggregate - total) > tolerance:
                mismatches[name] = (aggregate, total)
        return mismatches

    def cash_flow_validation_details(self) -> str:
        """Human-readable breakdown of the year's cash flow and any total mismatches."""
        inflows = self.total_cash_inflows()
        outflows = self.total_cash_outflows()
        lines = [
            f"Cash flow for {self.year}:",
            f"  Cash Inflows:  {inflows:,.2f}",
            f"    Income:              {self.total_income:,.2f}",
            f"    Social Security:     {self.total_social_security:,.2f}",
            f"    Withdrawals:         {self.total_withdrawals():,.2f}",
            f"  Cash Outflows: {outflows:,.2f}",
            f"    Expenses:            {self.total_expenses:,.2f}",
            f"    Taxes:               {self.total_taxes():,.2f}",
            f"    Contributions:       {self.total_contributions():,.2f}",
            f"    Mortgage:            {self.mortgage_payment + self.mortgage_repayment:,.2f}",
            f"  Deficit:       {self.deficit:,.2f}",
            f"  Difference:    {inflows + self.deficit - outflows:,.2f}",
        ]
        for name, (aggregate, total) in self._individual_total_mismatches(TOTALS_TOLERANCE).items():
            lines.append(f"  {name} mismatch: aggregate {aggregate:,.2f} vs individuals {total:,.2f}")
        return "\n".join(lines)
