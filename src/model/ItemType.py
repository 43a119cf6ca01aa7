from enum import Enum


class ItemType(Enum):
    """Category of a financial entry."""
    INCOME = "Income"
    EXPENSE = "Expense"
    NON_QUALIFIED = "Non-Qualified"
    QUALIFIED = "Qualified"
    ROTH = "Roth"
    CASH = "Cash"
    LIFE_INSURANCE_BENEFIT = "Life Insurance Benefit"
    REAL_ESTATE = "Real Estate"
    SOCIAL_SECURITY_BENEFITS = "Social Security Benefits"
    ROTH_CONTRIBUTION = "Roth Contribution"
    QUALIFIED_CONTRIBUTION = "Qualified Contribution"
    LIFE_INSURANCE_CONTRIBUTION = "Life Insurance Contribution"
    MORTGAGE = "Mortgage"
    MORTGAGE_REPAYMENT = "Mortgage Repayment"

    @classmethod
    def from_string(cls, value: str) -> "ItemType":
        """Parse an item type from its name, display name or one of the legacy aliases."""
        if value is None or not str(value).strip():
            raise ValueError("Item type cannot be blank")
        key = str(value).strip().upper().replace(' ', '_').replace('-', '_')
        if key in cls.__members__:
            return cls[key]
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(f"Unknown item type: {value}")


_ALIASES = {
    "NONQUALIFIED": ItemType.NON_QUALIFIED,
    "ASSET": ItemType.NON_QUALIFIED,
    "401K": ItemType.QUALIFIED,
    "SOCIAL_SECURITY": ItemType.SOCIAL_SECURITY_BENEFITS,
    "SSA": ItemType.SOCIAL_SECURITY_BENEFITS,
    "401K_CONTRIBUTION": ItemType.QUALIFIED_CONTRIBUTION,
    "MORTGAGE_LOAN": ItemType.MORTGAGE,
    "EXTRA_PRINCIPAL": ItemType.MORTGAGE_REPAYMENT,
}

# Categories tracked per individual; unowned entries of these types belong to the household member.
PER_PERSON_ASSETS = (ItemType.QUALIFIED, ItemType.NON_QUALIFIED, ItemType.ROTH)
HOUSEHOLD_ASSETS = (ItemType.CASH, ItemType.REAL_ESTATE, ItemType.LIFE_INSURANCE_BENEFIT)
