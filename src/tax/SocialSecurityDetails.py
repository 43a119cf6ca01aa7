from typing import Optional

from tax.BracketTaxDetails import load_reference


class SocialSecurityDetails:
    """Holds Social Security (OASDI) statutory details and computes the payroll tax.

    Rates and the wage base are loaded from reference/fica.json; any of them
    can be overridden at construction.
    """

    def __init__(self, wage_base: Optional[float] = None, employee_rate: Optional[float] = None,
                 self_employed_rate: Optional[float] = None, ref_path: Optional[str] = None):
        """Initialize from the reference file with optional overrides.

        Args:
            wage_base: Maximum wages subject to the tax (must not be negative).
            employee_rate: Employee share of the tax.
            self_employed_rate: Combined rate paid by the self-employed.
            ref_path: Alternate fica.json.
        """
        data = load_reference('fica.json', ref_path).get('socialSecurity', {})
        self.wage_base = data.get('wageBase', 0) if wage_base is None else wage_base
        self.employee_rate = data.get('employeeRate', 0) if employee_rate is None else employee_rate
        self.self_employed_rate = data.get('selfEmployedRate', 0) if self_employed_rate is None else self_employed_rate
        if self.wage_base < 0:
            raise ValueError(f"Wage base cannot be negative: {self.wage_base}")

    def rate(self, self_employed: bool = False) -> float:
        return self.self_employed_rate if self_employed else self.employee_rate

    def total_contribution(self, wages: float, self_employed: bool = False) -> float:
        """Calculate the Social Security tax on one person's wages.

        Args:
            wages: The person's wages for the year.
            self_employed: Apply the self-employed rate instead of the employee rate.

        Returns:
            The tax on wages up to the wage base.
        """
        if wages < 0:
            raise ValueError(f"Wages cannot be negative: {wages}")
        return min(wages, self.wage_base) * self.rate(self_employed)
