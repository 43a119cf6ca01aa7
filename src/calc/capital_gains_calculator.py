from typing import Optional

from tax.BracketTaxDetails import load_reference


class LongTermCapitalGainsCalculator:
    """Long-term capital gains tax on sales from a taxable account.

    Uses a flat cost-basis fraction instead of lot tracking: every dollar of
    proceeds is assumed to be cost_basis_fraction basis and the rest gain,
    taxed at a single long-term rate.
    """

    def __init__(self, cost_basis_fraction: Optional[float] = None, rate: Optional[float] = None,
                 ref_path: Optional[str] = None):
        data = load_reference('capital-gains.json', ref_path)
        self.cost_basis_fraction = data.get('costBasisFraction', 0.25) if cost_basis_fraction is None else cost_basis_fraction
        self.rate = data.get('longTermRate', 0.20) if rate is None else rate
        if not 0 <= self.cost_basis_fraction <= 1:
            raise ValueError(f"Cost basis fraction must be between 0 and 1: {self.cost_basis_fraction}")
        if not 0 <= self.rate <= 1:
            raise ValueError(f"Capital gains rate must be between 0 and 1: {self.rate}")

    @staticmethod
    def _check(amount: float, label: str):
        if amount < 0:
            raise ValueError(f"{label} cannot be negative: {amount}")

    def calculate_cost_basis(self, sales_proceeds: float) -> float:
        self._check(sales_proceeds, "Sales proceeds")
        return sales_proceeds * self.cost_basis_fraction

    def calculate_capital_gain(self, sales_proceeds: float) -> float:
        self._check(sales_proceeds, "Sales proceeds")
        return sales_proceeds * (1 - self.cost_basis_fraction)

    def calculate_tax(self, sales_proceeds: float) -> float:
        return self.calculate_capital_gain(sales_proceeds) * self.rate

    def calculate_net_proceeds(self, sales_proceeds: float) -> float:
        return sales_proceeds - self.calculate_tax(sales_proceeds)

    def calculate_total_sales_proceeds(self, net_proceeds: float) -> float:
        """Sales needed to net the given amount after capital gains tax."""
        self._check(net_proceeds, "Net proceeds")
        if net_proceeds == 0:
            return 0.0
        return net_proceeds / (1 - (1 - self.cost_basis_fraction) * self.rate)
