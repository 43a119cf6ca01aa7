import logging
from typing import Optional

from calc.rmd_calculator import RMDCalculator
from model.Person import Person
from model.YearlySummary import YearlySummary
from strategy.tax_optimization_strategy import TaxOptimizationStrategy

logger = logging.getLogger(__name__)


class RMDOptimizationStrategy(TaxOptimizationStrategy):
    """Takes each person's required minimum distribution from their qualified account."""

    def __init__(self, rmd_calculator: Optional[RMDCalculator] = None):
        self.rmd_calculator = rmd_calculator or RMDCalculator()

    def name(self) -> str:
        return "RMD Optimization"

    def description(self) -> str:
        return ("Withdraws required minimum distributions from qualified accounts once each person "
                "reaches their RMD start age, based on the prior year-end balance.")

    def get_rmd_start_age(self, person: Person) -> int:
        return self.rmd_calculator.get_rmd_start_age(person.year_of_birth)

    def get_first_rmd_year(self, person: Person) -> int:
        return person.year_of_birth + self.get_rmd_start_age(person)

    def calculate_rmd(self, person: Optional[Person], year: int, prior_balance: float) -> float:
        """RMD owed by the person in the year, or 0 before their start age or with no balance."""
        if person is None or prior_balance <= 0:
            return 0.0
        age = person.age_in_year(year)
        if age < self.get_rmd_start_age(person):
            return 0.0
        return self.rmd_calculator.calculate_rmd(age, prior_balance)

    def optimize(self, previous: Optional[YearlySummary], current: Optional[YearlySummary]) -> None:
        if current is None:
            return
        for individual in current.individuals():
            # No prior ledger means no prior year-end balance to base an RMD on
            prior = previous.get_individual_summary(individual.name) if previous is not None else None
            prior_balance = prior.qualified_assets if prior is not None else 0.0
            rmd = self.calculate_rmd(individual.person, current.year, prior_balance)
            applied = individual.set_rmd_withdrawals(rmd)
            if applied > 0:
                logger.debug("%d: RMD of %.2f for %s", current.year, applied, individual.name)
        current.sync_from_individuals("rmd_withdrawals", "qualified_assets")
