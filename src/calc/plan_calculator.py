"""Projection driver that builds one ledger per year and optimizes it.

For each year from the earliest entry start to the latest entry end:
1. Build the year's ledger from the entries and the prior year's balances
2. Run the optimization strategy against the prior year's final ledger
3. Optionally validate the ledger before moving on
"""

import logging
from typing import Dict, List, Optional, Sequence

from calc.capital_gains_calculator import LongTermCapitalGainsCalculator
from calc.mortgage_calculator import MortgageCalculator
from model.FinancialEntry import FinancialEntry
from model.ItemType import ItemType, PER_PERSON_ASSETS
from model.PlanData import PlanData
from model.PlanInputs import PlanInputs
from model.Person import Person
from model.YearlySummary import (
    YearlySummary, IndividualYearlySummary, LedgerValidationError, HOUSEHOLD_MEMBER,
)
from strategy.composite import CompositeTaxOptimizationStrategy
from strategy.tax_optimization_strategy import TaxOptimizationStrategy
from tax.StateDetails import state_details_for

logger = logging.getLogger(__name__)

# Categories recorded against a household member rather than the household as a whole
PER_PERSON_ITEMS = PER_PERSON_ASSETS + (
    ItemType.INCOME,
    ItemType.SOCIAL_SECURITY_BENEFITS,
    ItemType.ROTH_CONTRIBUTION,
    ItemType.QUALIFIED_CONTRIBUTION,
)

# Individual balance fields carried from one year to the next
CARRIED_BALANCES = {
    ItemType.QUALIFIED: "qualified_assets",
    ItemType.NON_QUALIFIED: "non_qualified_assets",
    ItemType.ROTH: "roth_assets",
}

# Household balance fields carried from one year to the next
CARRIED_HOUSEHOLD_BALANCES = {
    ItemType.CASH: "cash",
    ItemType.REAL_ESTATE: "real_estate",
    ItemType.LIFE_INSURANCE_BENEFIT: "life_insurance_benefits",
}


def build_strategy(inputs: PlanInputs) -> CompositeTaxOptimizationStrategy:
    """Composite strategy configured from the program's tax settings."""
    return CompositeTaxOptimizationStrategy(
        filing_status=inputs.filing_status,
        state=state_details_for(inputs.state),
        capital_gains=LongTermCapitalGainsCalculator(inputs.cost_basis_fraction, inputs.capital_gains_rate),
        target_bracket_rate=inputs.roth_target_bracket_rate,
        target_threshold=inputs.roth_target_threshold,
    )


class MortgageLoan:
    """Running state of one mortgage entry across the projection."""

    def __init__(self, entry: FinancialEntry, annual_rate: float, calculator: MortgageCalculator):
        self.entry = entry
        self.annual_rate = annual_rate
        self.calculator = calculator
        self.term_years = entry.end_year - entry.start_year + 1
        self.annual_payment = calculator.calculate_annual_payment(entry.value, annual_rate, self.term_years)
        self.balance = entry.value

    def is_open(self, year: int) -> bool:
        return year >= self.entry.start_year and self.balance > 0

    def make_payment(self) -> float:
        """Apply this year's scheduled payment, capped at the payoff amount. Returns the amount paid."""
        interest = self.calculator.calculate_interest_portion(self.balance, self.annual_rate)
        payment = min(self.annual_payment, self.balance + interest)
        self.balance = self.calculator.calculate_balance_after_payment(self.balance, payment, self.annual_rate)
        if self.balance < 0.005:
            self.balance = 0.0
        return payment

    def prepay(self, amount: float) -> float:
        """Apply extra principal up to the balance. Returns the amount applied."""
        applied = min(max(amount, 0.0), self.balance)
        self.balance -= applied
        return applied


class PlanCalculator:
    """Walks the planning horizon year by year, optimizing each year's ledger.

    Args:
        strategy: Strategy applied to every year (usually the composite).
        validate: Raise LedgerValidationError when a year fails its consistency checks.
    """

    def __init__(self, strategy: TaxOptimizationStrategy, validate: bool = False,
                 mortgage_calculator: Optional[MortgageCalculator] = None):
        self.strategy = strategy
        self.validate = validate
        self.mortgage_calculator = mortgage_calculator or MortgageCalculator()

    @classmethod
    def for_plan(cls, inputs: PlanInputs, validate: Optional[bool] = None) -> "PlanCalculator":
        return cls(build_strategy(inputs), inputs.validate if validate is None else validate)

    def calculate(self, inputs: PlanInputs) -> PlanData:
        """Calculate the projection for a program.

        Args:
            inputs: The program's entries, people and rates

        Returns:
            PlanData containing every year's ledger and lifetime totals
        """
        summaries = self.generate_yearly_summaries(inputs.entries, inputs.persons, inputs.rates)
        return PlanData.from_summaries(summaries)

    def generate_yearly_summaries(self, entries: Sequence[FinancialEntry], persons: Dict[str, Person],
                                  rates: Dict[ItemType, float]) -> List[YearlySummary]:
        """Build and optimize a ledger for every year covered by the entries, in ascending order."""
        if not entries:
            return []
        first_year = min(e.start_year for e in entries)
        last_year = max(e.end_year for e in entries)
        members = self._household_members(entries, persons)
        mortgage_rate = rates.get(ItemType.MORTGAGE, 0.0)
        loans = [MortgageLoan(e, mortgage_rate, self.mortgage_calculator)
                 for e in entries if e.item == ItemType.MORTGAGE]
        logger.debug("Projecting %d-%d for %s", first_year, last_year, ", ".join(members) or "household")

        summaries = []
        previous = None
        for year in range(first_year, last_year + 1):
            current = self._build_year(year, entries, members, rates, previous, loans)
            self.strategy.optimize(previous, current)
            if self.validate and not current.validate():
                raise LedgerValidationError(current.cash_flow_validation_details())
            summaries.append(current)
            previous = current
        return summaries

    @staticmethod
    def _household_members(entries: Sequence[FinancialEntry], persons: Dict[str, Person]) -> Dict[str, Optional[Person]]:
        """Member name -> Person for every owner of a per-person entry, plus the joint member.

        Persons come first in their declared order, then owners without a Person
        (sorted), then the joint member. A Person who owns no entries is not a member.
        """
        owners = {e.owner for e in entries if e.item in PER_PERSON_ITEMS and e.owner}
        members = {name: person for name, person in persons.items() if name in owners}
        others = sorted(owners - set(members))
        for name in others:
            members[name] = None
        if any(e.item in PER_PERSON_ITEMS and not e.owner for e in entries) and HOUSEHOLD_MEMBER not in members:
            members[HOUSEHOLD_MEMBER] = None
        return members

    def _build_year(self, year: int, entries: Sequence[FinancialEntry], members: Dict[str, Optional[Person]],
                    rates: Dict[ItemType, float], previous: Optional[YearlySummary],
                    loans: List[MortgageLoan]) -> YearlySummary:
        summary = YearlySummary(year=year)

        for name, person in members.items():
            individual = IndividualYearlySummary(name=name, year=year, person=person)
            prior = previous.get_individual_summary(name) if previous is not None else None
            if prior is not None:
                for item, attr in CARRIED_BALANCES.items():
                    setattr(individual, attr, getattr(prior, attr) * (1 + rates.get(item, 0.0) / 100.0))
            summary.add_individual_summary(individual)

        if previous is not None:
            for item, attr in CARRIED_HOUSEHOLD_BALANCES.items():
                setattr(summary, attr, getattr(previous, attr) * (1 + rates.get(item, 0.0) / 100.0))

        extra_principal = 0.0
        for entry in entries:
            if not entry.is_active_in_year(year):
                continue
            value = entry.value_for_year(year, rates.get(entry.item, 0.0))
            # Balances enter once, at their starting value, then compound year over year
            opening = entry.value if entry.start_year == year else 0.0
            individual = None
            if entry.item in PER_PERSON_ITEMS:
                individual = summary.get_individual_summary(entry.owner or HOUSEHOLD_MEMBER)

            if entry.item == ItemType.INCOME:
                individual.income += value
            elif entry.item == ItemType.SOCIAL_SECURITY_BENEFITS:
                individual.social_security_benefits += value
            elif entry.item in CARRIED_BALANCES:
                attr = CARRIED_BALANCES[entry.item]
                setattr(individual, attr, getattr(individual, attr) + opening)
            elif entry.item == ItemType.ROTH_CONTRIBUTION:
                individual.roth_contributions += value
                individual.roth_assets += value
            elif entry.item == ItemType.QUALIFIED_CONTRIBUTION:
                individual.qualified_contributions += value
                individual.qualified_assets += value
            elif entry.item == ItemType.EXPENSE:
                summary.total_expenses += value
            elif entry.item in CARRIED_HOUSEHOLD_BALANCES:
                attr = CARRIED_HOUSEHOLD_BALANCES[entry.item]
                setattr(summary, attr, getattr(summary, attr) + opening)
            elif entry.item == ItemType.LIFE_INSURANCE_CONTRIBUTION:
                summary.life_insurance_contributions += value
            elif entry.item == ItemType.MORTGAGE_REPAYMENT:
                extra_principal += value

        for loan in loans:
            if not loan.is_open(year):
                continue
            summary.mortgage_payment += loan.make_payment()
            applied = loan.prepay(extra_principal)
            extra_principal -= applied
            summary.mortgage_repayment += applied
        summary.mortgage_balance = sum(loan.balance for loan in loans if year >= loan.entry.start_year)

        summary.sync_from_individuals()
        return summary
