"""Field metadata for YearlySummary fields.

This module provides descriptions and short names for the ledger fields and
derived totals. Short names are used as column headers in tables.
"""

from dataclasses import dataclass
from typing import Dict


@dataclass
class FieldInfo:
    """Metadata for a single field."""
    short_name: str  # Column header (unique, concise)
    description: str  # Full description of the field


# Field metadata dictionary mapping field names to their info
FIELD_METADATA: Dict[str, FieldInfo] = {
    "year": FieldInfo("Year", "Calendar year"),

    # Income
    "total_income": FieldInfo("Income", "Wages and other earned income"),
    "total_social_security": FieldInfo("Social Security", "Social Security benefits received"),
    "total_expenses": FieldInfo("Expenses", "Household living expenses"),

    # Balances
    "qualified_assets": FieldInfo("Qualified", "Pre-tax retirement account balance (401k/IRA)"),
    "non_qualified_assets": FieldInfo("Non-Qualified", "Taxable brokerage account balance"),
    "roth_assets": FieldInfo("Roth", "Roth account balance"),
    "cash": FieldInfo("Cash", "Household cash balance"),
    "real_estate": FieldInfo("Real Estate", "Real estate value"),
    "life_insurance_benefits": FieldInfo("Life Insurance", "Life insurance death benefit"),
    "mortgage_balance": FieldInfo("Mortgage Balance", "Outstanding mortgage principal"),
    "total_assets": FieldInfo("Total Assets", "Sum of all asset balances"),
    "net_worth": FieldInfo("Net Worth", "Total assets less mortgage balance"),

    # Withdrawals
    "rmd_withdrawals": FieldInfo("RMD", "Required minimum distributions"),
    "qualified_withdrawals": FieldInfo("Qualified Withdrawal", "Withdrawals from qualified accounts beyond the RMD"),
    "non_qualified_withdrawals": FieldInfo("Non-Qual Withdrawal", "Sales from taxable accounts"),
    "roth_withdrawals": FieldInfo("Roth Withdrawal", "Tax-free Roth withdrawals"),
    "cash_withdrawals": FieldInfo("Cash Withdrawal", "Withdrawals from household cash"),
    "roth_conversions": FieldInfo("Roth Conversion", "Qualified money converted to Roth"),
    "total_withdrawals": FieldInfo("Total Withdrawals", "All withdrawals and conversions"),

    # Contributions
    "roth_contributions": FieldInfo("Roth Contribution", "Roth contributions including converted amounts"),
    "qualified_contributions": FieldInfo("Qualified Contribution", "Pre-tax retirement contributions"),
    "non_qualified_contributions": FieldInfo("Non-Qual Contribution", "Surplus saved to taxable accounts"),
    "life_insurance_contributions": FieldInfo("Life Premium", "Life insurance premiums"),
    "total_contributions": FieldInfo("Total Contributions", "All contributions"),

    # Mortgage
    "mortgage_payment": FieldInfo("Mortgage Payment", "Scheduled mortgage payment"),
    "mortgage_repayment": FieldInfo("Extra Principal", "Additional mortgage principal paid"),

    # Taxes
    "federal_income_tax": FieldInfo("Federal Tax", "Federal income tax on ordinary income"),
    "state_income_tax": FieldInfo("State Tax", "State income tax"),
    "capital_gains_tax": FieldInfo("Capital Gains Tax", "Federal and state tax on realized gains"),
    "social_security_tax": FieldInfo("Social Security Tax", "Social Security payroll tax"),
    "medicare_tax": FieldInfo("Medicare Tax", "Medicare payroll tax including the additional surcharge"),
    "total_taxes": FieldInfo("Total Taxes", "All income, capital gains and payroll taxes"),

    # Cash flow
    "total_cash_inflows": FieldInfo("Inflows", "Income, Social Security and withdrawals"),
    "total_cash_outflows": FieldInfo("Outflows", "Expenses, taxes, contributions and mortgage payments"),
    "deficit": FieldInfo("Deficit", "Outflows that could not be funded"),
}


def get_short_name(field_name: str) -> str:
    """Get the short name for a field, or the field name if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.short_name if info else field_name


def get_description(field_name: str) -> str:
    """Get the description for a field, or empty string if not found."""
    info = FIELD_METADATA.get(field_name)
    return info.description if info else ""


def get_field_info(field_name: str) -> FieldInfo | None:
    """Get the full FieldInfo for a field, or None if not found."""
    return FIELD_METADATA.get(field_name)


def get_field_value(summary, field_name: str):
    """Read a stored field or derived total (e.g. total_taxes) from a ledger."""
    value = getattr(summary, field_name, None)
    return value() if callable(value) else value


def wrap_header(text: str, max_width: int) -> list[str]:
    """Wrap a header text into multiple lines to fit within max_width.
    
    Words are split on spaces and distributed across lines to minimize
    the total number of lines while staying within max_width.
    
    Args:
        text: The header text to wrap
        max_width: Maximum width per line
        
    Returns:
        List of strings, each representing a line
    """
    if len(text) <= max_width:
        return [text]
    
    words = text.split()
    lines = []
    current_line = ""
    
    for word in words:
        if not current_line:
            current_line = word
        elif len(current_line) + 1 + len(word) <= max_width:
            current_line += " " + word
        else:
            lines.append(current_line)
            current_line = word
    
    if current_line:
        lines.append(current_line)
    
    return lines
