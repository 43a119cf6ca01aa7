import os
import sys
import pytest
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))
from calc.rmd_calculator import RMDCalculator


class TestRMDCalculator:
    def setup_method(self):
        self.calc = RMDCalculator()

    def test_distribution_periods(self):
        assert self.calc.get_distribution_period(72) == 27.4
        assert self.calc.get_distribution_period(73) == 26.5
        assert self.calc.get_distribution_period(120) == 2.0

    def test_factor_strictly_decreases_with_age(self):
        assert self.calc.last_age == 120
        factors = [self.calc.get_distribution_period(age) for age in range(72, 121)]
        assert all(later < earlier for earlier, later in zip(factors, factors[1:]))

    def test_ages_past_table_use_last_factor(self):
        assert self.calc.get_distribution_period(125) == 2.0

    def test_below_table_rejected(self):
        with pytest.raises(ValueError):
            self.calc.get_distribution_period(71)

    def test_calculate_rmd(self):
        assert self.calc.calculate_rmd(73, 500000) == pytest.approx(18867.92, abs=0.01)

    def test_zero_balance(self):
        assert self.calc.calculate_rmd(80, 0) == 0.0

    def test_negative_balance_rejected(self):
        with pytest.raises(ValueError):
            self.calc.calculate_rmd(80, -1)

    def test_rmd_percentage(self):
        assert self.calc.get_rmd_percentage(65) == 0.0
        assert self.calc.get_rmd_percentage(73) == pytest.approx(1 / 26.5)

    @pytest.mark.parametrize("birth_year,start_age", [(1945, 72), (1950, 72), (1951, 73),
                                                      (1959, 73), (1960, 75), (1975, 75)])
    def test_start_age_by_birth_year(self, birth_year, start_age):
        assert self.calc.get_rmd_start_age(birth_year) == start_age

    def test_is_rmd_required(self):
        assert not self.calc.is_rmd_required(72, 1955)
        assert self.calc.is_rmd_required(73, 1955)
        assert not self.calc.is_rmd_required(74, 1962)
        assert self.calc.is_rmd_required(75, 1962)
