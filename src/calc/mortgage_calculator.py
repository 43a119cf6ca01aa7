class MortgageCalculator:
    """Fixed-rate amortization with annual payments.

    Interest rates are annual percentages (6.5 means 6.5%).
    """

    @staticmethod
    def _periodic_rate(annual_rate: float) -> float:
        if annual_rate < 0:
            raise ValueError(f"Interest rate cannot be negative: {annual_rate}")
        return annual_rate / 100.0

    def calculate_annual_payment(self, principal: float, annual_rate: float, term_years: int) -> float:
        """Level annual payment that retires the principal over the term."""
        if principal < 0:
            raise ValueError(f"Principal cannot be negative: {principal}")
        if term_years <= 0:
            raise ValueError(f"Term must be positive: {term_years}")
        r = self._periodic_rate(annual_rate)
        if principal == 0:
            return 0.0
        if r == 0:
            return principal / term_years
        growth = (1 + r) ** term_years
        return principal * r * growth / (growth - 1)

    def calculate_remaining_balance(self, principal: float, annual_rate: float, term_years: int,
                                    payments_made: int) -> float:
        """Balance left after the given number of annual payments."""
        if principal < 0:
            raise ValueError(f"Principal cannot be negative: {principal}")
        if term_years <= 0:
            raise ValueError(f"Term must be positive: {term_years}")
        if payments_made < 0:
            raise ValueError(f"Payments made cannot be negative: {payments_made}")
        r = self._periodic_rate(annual_rate)
        if payments_made >= term_years or principal == 0:
            return 0.0
        if r == 0:
            return principal * (term_years - payments_made) / term_years
        total_growth = (1 + r) ** term_years
        paid_growth = (1 + r) ** payments_made
        return principal * (total_growth - paid_growth) / (total_growth - 1)

    def calculate_interest_portion(self, balance: float, annual_rate: float) -> float:
        if balance < 0:
            raise ValueError(f"Balance cannot be negative: {balance}")
        return balance * self._periodic_rate(annual_rate)

    def calculate_principal_portion(self, payment: float, balance: float, annual_rate: float) -> float:
        return payment - self.calculate_interest_portion(balance, annual_rate)

    def calculate_balance_after_payment(self, balance: float, payment: float, annual_rate: float) -> float:
        """Balance after one year's interest accrues and the payment is applied, floored at zero."""
        if payment < 0:
            raise ValueError(f"Payment cannot be negative: {payment}")
        principal_paid = self.calculate_principal_portion(payment, balance, annual_rate)
        return max(0.0, balance - principal_paid)
