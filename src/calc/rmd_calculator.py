from typing import Optional

from tax.BracketTaxDetails import load_reference


class RMDCalculator:
    """Required minimum distributions from the IRS Uniform Lifetime Table.

    The table runs from age 72 to 120; older ages use the age-120 factor.
    """

    def __init__(self, ref_path: Optional[str] = None):
        data = load_reference('rmd-uniform-lifetime.json', ref_path)
        self.first_age = data.get('firstAge', 72)
        self.distribution_periods = tuple(data.get('distributionPeriods', []))
        if not self.distribution_periods:
            raise ValueError("rmd-uniform-lifetime.json must contain 'distributionPeriods'")
        self.last_age = self.first_age + len(self.distribution_periods) - 1
        self.start_ages = sorted(data.get('startAges', []), key=lambda s: s['bornOnOrBefore'])
        self.default_start_age = data.get('defaultStartAge', 75)

    def get_distribution_period(self, age: int) -> float:
        if age < self.first_age:
            raise ValueError(f"No distribution period below age {self.first_age}: {age}")
        return self.distribution_periods[min(age, self.last_age) - self.first_age]

    def calculate_rmd(self, age: int, account_balance: float) -> float:
        """RMD for the year: prior year-end balance divided by the distribution period for the age."""
        if account_balance < 0:
            raise ValueError(f"Account balance cannot be negative: {account_balance}")
        period = self.get_distribution_period(age)
        if account_balance == 0:
            return 0.0
        return account_balance / period

    def get_rmd_percentage(self, age: int) -> float:
        """Share of the balance that must be withdrawn, as a fraction (0 below the table)."""
        if age < self.first_age:
            return 0.0
        return 1.0 / self.get_distribution_period(age)

    def get_rmd_start_age(self, birth_year: int) -> int:
        """First RMD age under SECURE 2.0: 72 born 1950 or earlier, 73 through 1959, 75 after."""
        for entry in self.start_ages:
            if birth_year <= entry['bornOnOrBefore']:
                return entry['age']
        return self.default_start_age

    def is_rmd_required(self, age: int, birth_year: int) -> bool:
        return age >= self.get_rmd_start_age(birth_year)
