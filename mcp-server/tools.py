"""Retirement Planner Tools for MCP Server.

This module provides the tool implementations that run the projection for a
program and expose its yearly ledgers through MCP.
"""

import os
import sys
import logging
from typing import Dict, List, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from calc.plan_calculator import PlanCalculator
from model.PlanData import PlanData
from model.PlanInputs import PlanInputs, load_plan_inputs
from model.YearlySummary import YearlySummary
from model.field_metadata import get_field_value

logger = logging.getLogger(__name__)


def _round_fields(summary, fields: List[str]) -> dict:
    return {f: round(get_field_value(summary, f), 2) for f in fields}


class FinancialPlannerTools:
    """Tools that wrap the projection for MCP access."""

    def __init__(self, base_path: str, program_name: str):
        """Initialize with paths and run the projection.

        Args:
            base_path: Path to the repository root directory
            program_name: Name of the program folder in input-parameters
        """
        self.base_path = base_path
        self.program_name = program_name
        self.inputs: PlanInputs = self._load_inputs()
        self._calculate_plan()

    def _load_inputs(self) -> PlanInputs:
        """Load the program specification."""
        spec_path = os.path.join(
            self.base_path, 'input-parameters', self.program_name, 'spec.json'
        )
        return load_plan_inputs(spec_path)

    def _calculate_plan(self):
        """Run the projection for every year of the program."""
        self.plan_data: PlanData = PlanCalculator.for_plan(self.inputs).calculate(self.inputs)
        self.first_year = self.plan_data.first_year
        self.last_year = self.plan_data.last_year

    def _year(self, year: int) -> Optional[YearlySummary]:
        return self.plan_data.get_year(year)

    def _missing_year(self, year: int) -> dict:
        return {"error": f"Year {year} is not in the planning horizon ({self.first_year}-{self.last_year})"}

    def get_program_overview(self) -> dict:
        """Get an overview of the program."""
        return {
            "program_name": self.program_name,
            "planning_horizon": {
                "first_year": self.first_year,
                "last_year": self.last_year,
                "total_years": len(self.plan_data.yearly_data),
            },
            "filing_status": self.inputs.filing_status.value,
            "state": self.inputs.state,
            "people": {
                name: {"year_of_birth": p.year_of_birth}
                for name, p in self.inputs.persons.items()
            },
            "entry_count": len(self.inputs.entries),
            "growth_rates": {item.name: rate for item, rate in self.inputs.rates.items()},
            "roth_conversion_target": (self.inputs.roth_target_threshold
                                       if self.inputs.roth_target_threshold is not None
                                       else f"top of {self.inputs.roth_target_bracket_rate:.0%} bracket"),
            "final_net_worth": round(self.plan_data.final_net_worth, 2),
            "deficit_years": self.plan_data.deficit_years(),
        }

    def list_available_years(self) -> dict:
        """List all years in the plan."""
        years = self.plan_data.years()
        rmd_years = [y for y in years if self._year(y).rmd_withdrawals > 0]
        conversion_years = [y for y in years if self._year(y).roth_conversions > 0]
        return {
            "years": years,
            "rmd_years": rmd_years,
            "roth_conversion_years": conversion_years,
            "deficit_years": self.plan_data.deficit_years(),
            "total_years": len(years),
        }

    def get_annual_summary(self, year: int) -> dict:
        """Get income, withdrawal and tax summary for a specific year."""
        yd = self._year(year)
        if yd is None:
            return self._missing_year(year)

        result = {"year": year, "converged": yd.converged}
        result.update(_round_fields(yd, [
            "total_income", "total_social_security", "total_withdrawals", "roth_conversions",
            "total_expenses", "total_taxes", "total_contributions", "deficit", "net_worth",
        ]))
        return result

    def get_tax_details(self, year: int) -> dict:
        """Get the tax breakdown for a specific year."""
        yd = self._year(year)
        if yd is None:
            return self._missing_year(year)

        ordinary_income = yd.ordinary_income()
        return {
            "year": year,
            "ordinary_income": round(ordinary_income, 2),
            "federal_income_tax": round(yd.federal_income_tax, 2),
            "state_income_tax": round(yd.state_income_tax, 2),
            "capital_gains_tax": round(yd.capital_gains_tax, 2),
            "fica": {
                "social_security": round(yd.social_security_tax, 2),
                "medicare": round(yd.medicare_tax, 2),
            },
            "total_taxes": round(yd.total_taxes(), 2),
            "effective_tax_rate": round(yd.total_taxes() / ordinary_income * 100, 1) if ordinary_income > 0 else 0,
        }

    def get_cash_flow(self, year: int) -> dict:
        """Get inflows, outflows and deficit for a specific year."""
        yd = self._year(year)
        if yd is None:
            return self._missing_year(year)

        return {
            "year": year,
            "inflows": _round_fields(yd, [
                "total_income", "total_social_security", "rmd_withdrawals", "qualified_withdrawals",
                "non_qualified_withdrawals", "roth_withdrawals", "cash_withdrawals", "roth_conversions",
            ]),
            "outflows": _round_fields(yd, [
                "total_expenses", "total_taxes", "total_contributions", "mortgage_payment", "mortgage_repayment",
            ]),
            "total_inflows": round(yd.total_cash_inflows(), 2),
            "total_outflows": round(yd.total_cash_outflows(), 2),
            "deficit": round(yd.deficit, 2),
            "balanced": yd.validate_cash_flow(),
        }

    def get_balances(self, year: Optional[int] = None) -> dict:
        """Get asset balances for one year, or final balances when no year is given."""
        fields = ["qualified_assets", "non_qualified_assets", "roth_assets", "cash", "real_estate",
                  "life_insurance_benefits", "mortgage_balance", "total_assets", "net_worth"]
        if year is not None:
            yd = self._year(year)
            if yd is None:
                return self._missing_year(year)
            result = {"year": year}
            result.update(_round_fields(yd, fields))
            return result

        return {
            "final_year": self.last_year,
            "final_balances": _round_fields(self._year(self.last_year), fields) if self.plan_data.yearly_data else {},
            "yearly_net_worth": {y: round(s.net_worth(), 2) for y, s in sorted(self.plan_data.yearly_data.items())},
        }

    def get_individual_summary(self, year: int, name: Optional[str] = None) -> dict:
        """Get one or all household members' share of a year."""
        yd = self._year(year)
        if yd is None:
            return self._missing_year(year)

        fields = ["income", "social_security_benefits", "qualified_assets", "non_qualified_assets", "roth_assets",
                  "rmd_withdrawals", "qualified_withdrawals", "non_qualified_withdrawals", "roth_withdrawals",
                  "cash_withdrawals", "roth_conversions", "roth_contributions", "qualified_contributions",
                  "non_qualified_contributions", "social_security_tax", "medicare_tax", "deficit"]
        individuals = yd.individuals()
        if name is not None:
            individuals = [i for i in individuals if i.name == name]
            if not individuals:
                return {"error": f"No household member named '{name}'. Members: {list(yd.individual_summaries)}"}

        members = {}
        for ind in individuals:
            entry = {"age": ind.age()}
            entry.update(_round_fields(ind, fields))
            members[ind.name] = entry
        return {"year": year, "members": members}

    def compare_years(self, year1: int, year2: int) -> dict:
        """Compare financial metrics between two years."""
        yd1 = self._year(year1)
        if yd1 is None:
            return self._missing_year(year1)
        yd2 = self._year(year2)
        if yd2 is None:
            return self._missing_year(year2)

        def compare_metric(v1: float, v2: float) -> dict:
            diff = v2 - v1
            pct = (diff / v1 * 100) if v1 != 0 else 0
            return {
                f"year_{year1}": round(v1, 2),
                f"year_{year2}": round(v2, 2),
                "difference": round(diff, 2),
                "percent_change": round(pct, 1)
            }

        metrics = ["total_income", "total_social_security", "total_withdrawals", "total_expenses",
                   "total_taxes", "total_assets", "net_worth"]
        result = {"comparison": f"{year1} vs {year2}"}
        for metric in metrics:
            result[metric] = compare_metric(get_field_value(yd1, metric), get_field_value(yd2, metric))
        return result

    def get_lifetime_totals(self) -> dict:
        """Get lifetime totals across the planning horizon."""
        pd = self.plan_data
        totals = {
            "income": pd.total_income,
            "social_security": pd.total_social_security,
            "federal_tax": pd.total_federal_tax,
            "state_tax": pd.total_state_tax,
            "capital_gains_tax": pd.total_capital_gains_tax,
            "fica": pd.total_fica,
            "total_tax": pd.total_taxes,
            "withdrawals": pd.total_withdrawals,
            "roth_conversions": pd.total_roth_conversions,
            "deficit": pd.total_deficit,
        }
        gross = pd.total_income + pd.total_social_security + pd.total_withdrawals
        return {
            "lifetime_totals": {k: round(v, 2) for k, v in totals.items()},
            "final_total_assets": round(pd.final_total_assets, 2),
            "final_net_worth": round(pd.final_net_worth, 2),
            "effective_lifetime_tax_rate": round(pd.total_taxes / gross * 100, 1) if gross > 0 else 0,
        }

    def search_financial_data(self, query: str, year: Optional[int] = None) -> dict:
        """Search for specific financial metrics based on a query."""
        query_lower = query.lower()

        # Map common terms to ledger field names
        term_mapping = {
            "income": ["total_income"],
            "wage": ["total_income"],
            "social security": ["total_social_security", "social_security_tax"],
            "expense": ["total_expenses"],
            "rmd": ["rmd_withdrawals"],
            "required minimum": ["rmd_withdrawals"],
            "withdraw": ["rmd_withdrawals", "qualified_withdrawals", "non_qualified_withdrawals",
                         "roth_withdrawals", "cash_withdrawals", "total_withdrawals"],
            "roth": ["roth_assets", "roth_conversions", "roth_contributions", "roth_withdrawals"],
            "conversion": ["roth_conversions"],
            "401k": ["qualified_assets", "qualified_withdrawals", "qualified_contributions"],
            "qualified": ["qualified_assets", "qualified_withdrawals", "qualified_contributions"],
            "brokerage": ["non_qualified_assets", "non_qualified_withdrawals", "non_qualified_contributions"],
            "federal": ["federal_income_tax"],
            "state": ["state_income_tax"],
            "capital gain": ["capital_gains_tax", "non_qualified_withdrawals"],
            "fica": ["social_security_tax", "medicare_tax"],
            "medicare": ["medicare_tax"],
            "tax": ["federal_income_tax", "state_income_tax", "capital_gains_tax", "social_security_tax",
                    "medicare_tax", "total_taxes"],
            "mortgage": ["mortgage_balance", "mortgage_payment", "mortgage_repayment"],
            "cash": ["cash", "cash_withdrawals"],
            "real estate": ["real_estate"],
            "life insurance": ["life_insurance_benefits", "life_insurance_contributions"],
            "contribution": ["qualified_contributions", "roth_contributions", "non_qualified_contributions",
                             "life_insurance_contributions", "total_contributions"],
            "balance": ["qualified_assets", "non_qualified_assets", "roth_assets", "cash", "total_assets"],
            "asset": ["total_assets"],
            "net worth": ["net_worth"],
            "deficit": ["deficit"],
            "shortfall": ["deficit"],
        }

        matched_keys = []
        for term, keys in term_mapping.items():
            if term in query_lower:
                for key in keys:
                    if key not in matched_keys:
                        matched_keys.append(key)

        if not matched_keys:
            return {
                "query": query,
                "message": "No matching financial metrics found. Try terms like: income, social security, expense, RMD, withdraw, Roth, conversion, 401k, brokerage, federal, state, capital gains, FICA, mortgage, cash, contribution, balance, net worth, deficit."
            }

        if year is not None:
            yd = self._year(year)
            if yd is None:
                return self._missing_year(year)
            return {"year": year, "query": query, "results": _round_fields(yd, matched_keys)}

        return {
            "query": query,
            "years": {yr: _round_fields(yd, matched_keys) for yr, yd in sorted(self.plan_data.yearly_data.items())}
        }


class MultiProgramTools:
    """Manager for multiple programs.

    Discovers all available programs and caches their projections,
    allowing queries to specify which program to use.
    """

    def __init__(self, base_path: str, default_program: Optional[str] = None):
        """Initialize and discover all available programs.

        Args:
            base_path: Path to the repository root directory
            default_program: Default program to use when none specified
        """
        self.base_path = base_path
        self.programs: Dict[str, FinancialPlannerTools] = {}
        self.default_program = default_program
        self._discover_programs()

    def _discover_programs(self):
        """Discover and load all available programs."""
        input_params_path = os.path.join(self.base_path, 'input-parameters')

        if not os.path.exists(input_params_path):
            return

        for name in sorted(os.listdir(input_params_path)):
            program_dir = os.path.join(input_params_path, name)
            spec_path = os.path.join(program_dir, 'spec.json')

            if os.path.isdir(program_dir) and os.path.exists(spec_path):
                try:
                    self.programs[name] = FinancialPlannerTools(self.base_path, name)
                except (OSError, ValueError) as e:
                    # One bad program should not take the server down
                    logger.warning("Failed to load program '%s': %s", name, e)

        if self.default_program is None and self.programs:
            self.default_program = list(self.programs.keys())[0]

    def _get_program(self, program: Optional[str] = None, require_explicit: bool = False) -> FinancialPlannerTools:
        """Get the specified program or default.

        Args:
            program: Program name to use, or None for default
            require_explicit: If True, raise error when program not specified and multiple exist
        """
        if program is None and len(self.programs) > 1 and require_explicit:
            available = list(self.programs.keys())
            raise ValueError(
                f"Multiple programs available: {available}. Please specify which program to query."
            )

        program_name = program or self.default_program

        if program_name not in self.programs:
            available = list(self.programs.keys())
            raise ValueError(
                f"Program '{program_name}' not found. Available programs: {available}"
            )

        return self.programs[program_name]

    def _tag(self, result: dict, program: Optional[str]) -> dict:
        result["program"] = program or self.default_program
        return result

    def list_programs(self) -> dict:
        """List all available programs."""
        programs_info = {}
        for name, tools in self.programs.items():
            programs_info[name] = {
                "first_year": tools.first_year,
                "last_year": tools.last_year,
                "people": list(tools.inputs.persons.keys()),
                "state": tools.inputs.state,
            }

        return {
            "available_programs": list(self.programs.keys()),
            "default_program": self.default_program,
            "programs_info": programs_info
        }

    def reload_programs(self) -> dict:
        """Reload all programs from disk, refreshing the cache."""
        old_programs = set(self.programs.keys())

        self.programs.clear()
        self.default_program = None
        self._discover_programs()

        new_programs = set(self.programs.keys())
        added = new_programs - old_programs
        removed = old_programs - new_programs
        unchanged = old_programs & new_programs

        return {
            "status": "success",
            "message": f"Reloaded {len(self.programs)} programs",
            "programs_loaded": list(self.programs.keys()),
            "default_program": self.default_program,
            "changes": {
                "added": sorted(added),
                "removed": sorted(removed),
                "reloaded": sorted(unchanged)
            }
        }

    def get_program_overview(self, program: Optional[str] = None) -> dict:
        return self._tag(self._get_program(program, require_explicit=True).get_program_overview(), program)

    def list_available_years(self, program: Optional[str] = None) -> dict:
        return self._tag(self._get_program(program, require_explicit=True).list_available_years(), program)

    def get_annual_summary(self, year: int, program: Optional[str] = None) -> dict:
        return self._tag(self._get_program(program, require_explicit=True).get_annual_summary(year), program)

    def get_tax_details(self, year: int, program: Optional[str] = None) -> dict:
        return self._tag(self._get_program(program, require_explicit=True).get_tax_details(year), program)

    def get_cash_flow(self, year: int, program: Optional[str] = None) -> dict:
        return self._tag(self._get_program(program, require_explicit=True).get_cash_flow(year), program)

    def get_balances(self, year: Optional[int] = None, program: Optional[str] = None) -> dict:
        return self._tag(self._get_program(program, require_explicit=True).get_balances(year), program)

    def get_individual_summary(self, year: int, name: Optional[str] = None, program: Optional[str] = None) -> dict:
        return self._tag(self._get_program(program, require_explicit=True).get_individual_summary(year, name), program)

    def compare_years(self, year1: int, year2: int, program: Optional[str] = None) -> dict:
        return self._tag(self._get_program(program, require_explicit=True).compare_years(year1, year2), program)

    def get_lifetime_totals(self, program: Optional[str] = None) -> dict:
        return self._tag(self._get_program(program, require_explicit=True).get_lifetime_totals(), program)

    def search_financial_data(self, query: str, year: Optional[int] = None, program: Optional[str] = None) -> dict:
        return self._tag(self._get_program(program, require_explicit=True).search_financial_data(query, year), program)

    def compare_programs(self, program1: str, program2: str, metrics: Optional[List[str]] = None) -> dict:
        """Compare two programs' lifetime results.

        Args:
            program1: First program name to compare
            program2: Second program name to compare
            metrics: Optional subset of 'lifetime_taxes', 'final_net_worth', 'roth_conversions',
                     'lifetime_withdrawals', 'deficit'. All are compared when None.
        """
        if program1 not in self.programs:
            return {"error": f"Program '{program1}' not found. Available: {list(self.programs.keys())}"}
        if program2 not in self.programs:
            return {"error": f"Program '{program2}' not found. Available: {list(self.programs.keys())}"}

        pd1 = self.programs[program1].plan_data
        pd2 = self.programs[program2].plan_data

        def compare_metric(val1: float, val2: float, higher_is_better: bool) -> dict:
            diff = val2 - val1
            if val1 != 0:
                pct_diff = (diff / abs(val1)) * 100
            else:
                pct_diff = 100 if val2 > 0 else (-100 if val2 < 0 else 0)

            if higher_is_better:
                winner = program1 if val1 > val2 else (program2 if val2 > val1 else "tie")
            else:
                winner = program1 if val1 < val2 else (program2 if val2 < val1 else "tie")

            return {
                program1: round(val1, 2),
                program2: round(val2, 2),
                "difference": round(diff, 2),
                "percent_difference": round(pct_diff, 1),
                "better": winner,
                "higher_is_better": higher_is_better
            }

        all_metrics = {
            "lifetime_taxes": (pd1.total_taxes, pd2.total_taxes, False),
            "final_net_worth": (pd1.final_net_worth, pd2.final_net_worth, True),
            "roth_conversions": (pd1.total_roth_conversions, pd2.total_roth_conversions, True),
            "lifetime_withdrawals": (pd1.total_withdrawals, pd2.total_withdrawals, False),
            "deficit": (pd1.total_deficit, pd2.total_deficit, False),
        }
        selected = metrics or list(all_metrics.keys())
        unknown = [m for m in selected if m not in all_metrics]
        if unknown:
            return {"error": f"Unknown metrics: {unknown}. Options: {list(all_metrics.keys())}"}

        return {
            "programs": {
                program1: f"{pd1.first_year}-{pd1.last_year}",
                program2: f"{pd2.first_year}-{pd2.last_year}",
            },
            "metrics": {m: compare_metric(*all_metrics[m]) for m in selected},
        }
