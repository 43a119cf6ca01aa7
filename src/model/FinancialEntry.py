from dataclasses import dataclass
from typing import Optional

from model.ItemType import ItemType


@dataclass(frozen=True)
class FinancialEntry:
    """A dated line item in a plan: an income stream, an expense, a starting balance or a loan.

    The value is expressed in start-year dollars and is active for every year
    in the inclusive range [start_year, end_year]. Entries without an owner
    belong to the household.
    """
    item: ItemType
    value: float
    start_year: int
    end_year: int
    owner: Optional[str] = None
    description: str = ""

    def __post_init__(self):
        if self.start_year > self.end_year:
            raise ValueError(
                f"Start year {self.start_year} is after end year {self.end_year} for '{self.description}'"
            )
        if self.value < 0:
            raise ValueError(f"Value cannot be negative for '{self.description}': {self.value}")

    def is_active_in_year(self, year: int) -> bool:
        return self.start_year <= year <= self.end_year

    def value_for_year(self, year: int, percentage_increase: float = 0.0) -> float:
        """Return the entry's value in the given year compounded at an annual percentage (3.0 = 3%).

        Returns 0 outside the active range.
        """
        if not self.is_active_in_year(year):
            return 0.0
        years_elapsed = year - self.start_year
        return self.value * (1 + percentage_increase / 100.0) ** years_elapsed
