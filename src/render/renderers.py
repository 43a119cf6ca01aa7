"""Renderer classes for displaying projection results.

This module contains renderer classes that handle the presentation logic
for the yearly ledgers. Each renderer takes the PlanData structure and
extracts the fields it needs.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from model.PlanData import PlanData
from model.field_metadata import get_short_name, get_field_value, wrap_header


def format_multiline_headers(columns: List[tuple], year_width: int = 6) -> tuple[List[str], str]:
    """Format column headers with multi-line wrapping support.

    Args:
        columns: List of (header_text, width) tuples for each column
        year_width: Width of the Year column (default 6)

    Returns:
        Tuple of (list of header lines, separator line)
    """
    wrapped_headers = []
    for header, width in columns:
        lines = wrap_header(header, width)
        wrapped_headers.append((lines, width))

    max_lines = max(len(lines) for lines, _ in wrapped_headers) if wrapped_headers else 1

    # Pad at the top so the last line lines up with "Year"
    for lines, width in wrapped_headers:
        while len(lines) < max_lines:
            lines.insert(0, "")

    header_lines = []
    for line_idx in range(max_lines):
        if line_idx == max_lines - 1:
            header_line = f"  {'Year':<{year_width}}"
        else:
            header_line = f"  {'':<{year_width}}"

        for lines, width in wrapped_headers:
            header_line += f" {lines[line_idx]:>{width}}"
        header_lines.append(header_line)

    sep_line = f"  {'-' * year_width}"
    for _, width in wrapped_headers:
        sep_line += f" {'-' * width}"

    return header_lines, sep_line


def parse_year_range(year_range: str, data: PlanData) -> tuple:
    """Parse a year range string into start and end years.

    Args:
        year_range: String in format 'startYear-endYear', 'startYear-', or '-endYear'
        data: PlanData to get default years from

    Returns:
        Tuple of (start_year, end_year)
    """
    if '-' not in year_range:
        year = int(year_range)
        return (year, year)

    parts = year_range.split('-')
    start_year = int(parts[0]) if parts[0] else data.first_year
    end_year = int(parts[1]) if parts[1] else data.last_year
    return (start_year, end_year)


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data: PlanData) -> None:
        """Render the data to output.

        Args:
            data: The PlanData containing all yearly ledgers
        """
        pass


class RangeRenderer(BaseRenderer):
    """Base for renderers that print one row per year over an optional range."""

    def __init__(self, start_year: int = None, end_year: int = None):
        """Initialize with optional year range.

        Args:
            start_year: First year to display (defaults to plan's first year)
            end_year: Last year to display (defaults to plan's last year)
        """
        self.start_year = start_year
        self.end_year = end_year

    def years(self, data: PlanData) -> List[int]:
        start = self.start_year if self.start_year is not None else data.first_year
        end = self.end_year if self.end_year is not None else data.last_year
        return [y for y in data.years() if start <= y <= end]


class YearDetailsRenderer(BaseRenderer):
    """Renderer for one year's ledger with a per-person breakdown."""

    def __init__(self, year: int):
        """Initialize with the year to display.

        Args:
            year: The year of the ledger being rendered
        """
        self.year = year

    def render(self, data: PlanData) -> None:
        yd = data.get_year(self.year)
        if not yd:
            print(f"No data available for year {self.year}")
            return

        print()
        print("=" * 60)
        print(f"{'LEDGER FOR ' + str(self.year):^60}")
        print("=" * 60)

        print()
        print("-" * 60)
        print("CASH INFLOWS")
        print("-" * 60)
        print(f"  {'Income:':<40} ${yd.total_income:>14,.2f}")
        print(f"  {'Social Security:':<40} ${yd.total_social_security:>14,.2f}")
        if yd.rmd_withdrawals > 0:
            print(f"  {'Required Minimum Distributions:':<40} ${yd.rmd_withdrawals:>14,.2f}")
        if yd.qualified_withdrawals > 0:
            print(f"  {'Qualified Withdrawals:':<40} ${yd.qualified_withdrawals:>14,.2f}")
        if yd.non_qualified_withdrawals > 0:
            print(f"  {'Non-Qualified Withdrawals:':<40} ${yd.non_qualified_withdrawals:>14,.2f}")
        if yd.roth_withdrawals > 0:
            print(f"  {'Roth Withdrawals:':<40} ${yd.roth_withdrawals:>14,.2f}")
        if yd.cash_withdrawals > 0:
            print(f"  {'Cash Withdrawals:':<40} ${yd.cash_withdrawals:>14,.2f}")
        if yd.roth_conversions > 0:
            print(f"  {'Roth Conversions:':<40} ${yd.roth_conversions:>14,.2f}")
        print(f"  {'-' * 40}")
        print(f"  {'Total Inflows:':<40} ${yd.total_cash_inflows():>14,.2f}")

        print()
        print("-" * 60)
        print("CASH OUTFLOWS")
        print("-" * 60)
        print(f"  {'Expenses:':<40} ${yd.total_expenses:>14,.2f}")
        print(f"  {'Federal Income Tax:':<40} ${yd.federal_income_tax:>14,.2f}")
        print(f"  {'State Income Tax:':<40} ${yd.state_income_tax:>14,.2f}")
        print(f"  {'Capital Gains Tax:':<40} ${yd.capital_gains_tax:>14,.2f}")
        print(f"  {'Social Security Tax:':<40} ${yd.social_security_tax:>14,.2f}")
        print(f"  {'Medicare Tax:':<40} ${yd.medicare_tax:>14,.2f}")
        print(f"  {'Contributions:':<40} ${yd.total_contributions():>14,.2f}")
        if yd.mortgage_payment > 0 or yd.mortgage_repayment > 0:
            print(f"  {'Mortgage Payments:':<40} ${yd.mortgage_payment + yd.mortgage_repayment:>14,.2f}")
        print(f"  {'-' * 40}")
        print(f"  {'Total Outflows:':<40} ${yd.total_cash_outflows():>14,.2f}")
        if yd.deficit > 0:
            print(f"  {'Unfunded Deficit:':<40} ${yd.deficit:>14,.2f}")

        print()
        print("-" * 60)
        print("BY PERSON")
        print("-" * 60)
        for ind in yd.individuals():
            age = ind.age()
            label = ind.name if age is None else f"{ind.name} (age {age})"
            print(f"  {label}")
            print(f"    {'Income:':<38} ${ind.income:>14,.2f}")
            print(f"    {'Social Security:':<38} ${ind.social_security_benefits:>14,.2f}")
            print(f"    {'Withdrawals:':<38} ${ind.total_withdrawals():>14,.2f}")
            print(f"    {'Contributions:':<38} ${ind.total_contributions():>14,.2f}")
            print(f"    {'Assets:':<38} ${ind.total_assets():>14,.2f}")

        print()
        print("=" * 60)
        print(f"  {'NET WORTH:':<40} ${yd.net_worth():>14,.2f}")
        if not yd.converged:
            print(f"  {'(cash flow did not fully settle)':<40}")
        print("=" * 60)
        print()


class BalancesRenderer(RangeRenderer):
    """Renderer for year-end balances."""

    def render(self, data: PlanData) -> None:
        print()
        print("=" * 124)
        print(f"{'YEAR-END BALANCES':^124}")
        print("=" * 124)
        print()

        fields = ["qualified_assets", "non_qualified_assets", "roth_assets", "cash",
                  "real_estate", "mortgage_balance", "net_worth"]
        columns = [(get_short_name(f), 14) for f in fields]

        header_lines, sep_line = format_multiline_headers(columns)
        for line in header_lines:
            print(line)
        print(sep_line)

        for year in self.years(data):
            yd = data.get_year(year)
            print(f"  {year:<6} ${yd.qualified_assets:>12,.0f} ${yd.non_qualified_assets:>12,.0f} ${yd.roth_assets:>12,.0f} ${yd.cash:>12,.0f} ${yd.real_estate:>12,.0f} ${yd.mortgage_balance:>12,.0f} ${yd.net_worth():>12,.0f}")

        print()
        print(f"  {'Final Total Assets:':<40} ${data.final_total_assets:>18,.2f}")
        print(f"  {'Final Net Worth:':<40} ${data.final_net_worth:>18,.2f}")
        print("=" * 124)
        print()


class AnnualSummaryRenderer(RangeRenderer):
    """Renderer for the annual income, withdrawal and tax summary table."""

    def render(self, data: PlanData) -> None:
        print()
        print("=" * 118)
        print(f"{'ANNUAL INCOME AND TAX SUMMARY':^118}")
        print("=" * 118)
        print()

        fields = ["total_income", "total_social_security", "total_withdrawals", "roth_conversions",
                  "total_expenses", "total_taxes", "deficit"]
        columns = [(get_short_name(f), 14) for f in fields]

        header_lines, sep_line = format_multiline_headers(columns)
        for line in header_lines:
            print(line)
        print(sep_line)

        totals = {f: 0.0 for f in fields}
        for year in self.years(data):
            yd = data.get_year(year)
            values = [get_field_value(yd, f) for f in fields]
            print(f"  {year:<6}" + "".join(f" ${v:>12,.0f}" for v in values))
            for f, v in zip(fields, values):
                totals[f] += v

        print(sep_line)
        print(f"  {'TOTAL':<6}" + "".join(f" ${totals[f]:>12,.0f}" for f in fields))
        print()
        print("=" * 118)
        print()


class CashFlowRenderer(RangeRenderer):
    """Renderer comparing each year's inflows and outflows."""

    def render(self, data: PlanData) -> None:
        print()
        print("=" * 104)
        print(f"{'CASH FLOW':^104}")
        print("=" * 104)
        print()

        columns = [
            (get_short_name("total_cash_inflows"), 14),
            (get_short_name("total_expenses"), 14),
            (get_short_name("total_taxes"), 14),
            (get_short_name("total_contributions"), 14),
            (get_short_name("mortgage_payment"), 14),
            (get_short_name("total_cash_outflows"), 14),
            (get_short_name("deficit"), 14),
        ]
        header_lines, sep_line = format_multiline_headers(columns)
        for line in header_lines:
            print(line)
        print(sep_line)

        for year in self.years(data):
            yd = data.get_year(year)
            mortgage = yd.mortgage_payment + yd.mortgage_repayment
            flag = "" if yd.converged else "  *"
            print(f"  {year:<6} ${yd.total_cash_inflows():>12,.0f} ${yd.total_expenses:>12,.0f} ${yd.total_taxes():>12,.0f} ${yd.total_contributions():>12,.0f} ${mortgage:>12,.0f} ${yd.total_cash_outflows():>12,.0f} ${yd.deficit:>12,.0f}{flag}")

        deficit_years = data.deficit_years()
        print()
        if deficit_years:
            print(f"  Unfunded deficits in: {', '.join(str(y) for y in deficit_years)}")
        else:
            print("  All years fully funded")
        print("=" * 104)
        print()


class CustomRenderer(RangeRenderer):
    """A generalized renderer that displays a table of specified fields.

    Fields may be stored ledger fields or derived totals such as
    total_taxes.
    """

    # Maximum width for a column header before wrapping
    MAX_HEADER_WIDTH = 14

    def __init__(self, title: str, fields: List[str], start_year: int = None, end_year: int = None, show_totals: bool = True):
        """Initialize with a title and list of fields to display.

        Args:
            title: The title to display at the top of the table
            fields: List of YearlySummary field names to display as columns
            start_year: First year to display (defaults to plan's first year)
            end_year: Last year to display (defaults to plan's last year)
            show_totals: Whether to show a totals row at the bottom (default True)
        """
        super().__init__(start_year, end_year)
        self.title = title
        self.fields = fields
        self.show_totals = show_totals

    def _get_column_width(self, field: str) -> int:
        short_name = get_short_name(field)
        if len(short_name) > self.MAX_HEADER_WIDTH:
            wrapped = wrap_header(short_name, self.MAX_HEADER_WIDTH)
            return max(max(len(line) for line in wrapped), 12)
        return max(len(short_name) + 2, 12)

    def _format_value(self, value: Any, width: int) -> str:
        if value is None:
            return f"{'N/A':>{width}}"
        elif isinstance(value, bool):
            return f"{'Yes' if value else 'No':>{width}}"
        elif isinstance(value, (int, float)):
            return f"${value:>{width-2},.0f}"
        return f"{str(value):>{width}}"

    def render(self, data: PlanData) -> None:
        col_widths = {field: self._get_column_width(field) for field in self.fields}
        year_width = 6
        total_width = year_width + 2 + sum(col_widths.values()) + len(self.fields) * 2
        total_width = max(total_width, len(self.title) + 10)

        print()
        print("=" * total_width)
        print(f"{self.title.upper():^{total_width}}")
        print("=" * total_width)
        print()

        header_lines, sep = format_multiline_headers(
            [(get_short_name(f), col_widths[f]) for f in self.fields], year_width)
        for line in header_lines:
            print(line)
        print(sep)

        totals = {field: 0.0 for field in self.fields}
        row_count = 0
        for year in self.years(data):
            yd = data.get_year(year)
            row = f"  {year:<{year_width}}"
            for field in self.fields:
                value = get_field_value(yd, field)
                row += f" {self._format_value(value, col_widths[field])}"
                if isinstance(value, (int, float)) and not isinstance(value, bool):
                    totals[field] += value
            print(row)
            row_count += 1

        if self.show_totals and row_count > 0:
            print(sep)
            total_row = f"  {'TOTAL':<{year_width}}"
            for field in self.fields:
                total_row += f" ${totals[field]:>{col_widths[field]-2},.0f}"
            print(total_row)

        print()
        print("=" * total_width)
        print()


# Built-in field tables served through CustomRenderer
CUSTOM_RENDERERS: Dict[str, dict] = {
    'Withdrawals': {
        'title': 'Withdrawals and Conversions',
        'fields': ['rmd_withdrawals', 'qualified_withdrawals', 'non_qualified_withdrawals',
                   'roth_withdrawals', 'cash_withdrawals', 'roth_conversions'],
    },
    'Taxes': {
        'title': 'Taxes',
        'fields': ['federal_income_tax', 'state_income_tax', 'capital_gains_tax',
                   'social_security_tax', 'medicare_tax', 'total_taxes'],
    },
    'Contributions': {
        'title': 'Contributions',
        'fields': ['qualified_contributions', 'roth_contributions', 'non_qualified_contributions',
                   'life_insurance_contributions', 'total_contributions'],
    },
}


def get_custom_renderer_factory(name: str, config: dict):
    """Return a factory taking (start_year, end_year) for a custom table config."""
    def factory(start_year: int = None, end_year: int = None) -> CustomRenderer:
        return CustomRenderer(config.get('title', name), config['fields'], start_year, end_year,
                              config.get('showTotals', True))
    return factory


# Registry mapping mode names to renderer classes
RENDERER_REGISTRY = {
    'AnnualSummary': AnnualSummaryRenderer,
    'Balances': BalancesRenderer,
    'CashFlow': CashFlowRenderer,
    'YearDetails': YearDetailsRenderer,
}

for _name, _config in CUSTOM_RENDERERS.items():
    RENDERER_REGISTRY[_name] = get_custom_renderer_factory(_name, _config)
