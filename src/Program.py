import sys
import os
import argparse
import logging
from model.PlanInputs import load_plan_inputs
from model.YearlySummary import LedgerValidationError
from calc.plan_calculator import PlanCalculator
from render.renderers import YearDetailsRenderer, RENDERER_REGISTRY, parse_year_range


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Household retirement projection and tax optimization',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  AnnualSummary  Income, withdrawals, expenses and taxes for each year (default)
  CashFlow       Inflows against outflows and any unfunded deficit
  Balances       Year-end balances and net worth
  YearDetails    Full ledger for one year with a per-person breakdown
  Withdrawals    Withdrawals and Roth conversions by source
  Taxes          Tax breakdown by type
  Contributions  Contributions by account

Examples:
  python src/Program.py sample
  python src/Program.py sample --mode CashFlow --years 2030-2040
  python src/Program.py sample --mode YearDetails --years 2035
  python src/Program.py sample --validate
        """
    )
    parser.add_argument('program_name', help='Name of the program (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='AnnualSummary',
                        help='Output mode (default: AnnualSummary)')
    parser.add_argument('--years', '-y',
                        help="Year range to display: 'start-end', 'start-', '-end' or a single year")
    parser.add_argument('--validate',
                        action='store_true',
                        help='Stop with an error if any year fails its ledger consistency checks')
    parser.add_argument('--verbose', '-v',
                        action='store_true',
                        help='Log projection progress')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    spec_path = os.path.join(os.path.dirname(__file__), '../input-parameters', args.program_name, 'spec.json')
    if not os.path.exists(spec_path):
        print(f"Spec file not found: {spec_path}")
        sys.exit(1)
    inputs = load_plan_inputs(spec_path)

    calculator = PlanCalculator.for_plan(inputs, validate=True if args.validate else None)
    try:
        data = calculator.calculate(inputs)
    except LedgerValidationError as e:
        print(f"Ledger validation failed:\n{e}")
        sys.exit(1)

    if not data.yearly_data:
        print("No entries to project")
        return

    start_year, end_year = parse_year_range(args.years, data) if args.years else (None, None)
    if args.mode == 'YearDetails':
        renderer = YearDetailsRenderer(start_year if start_year is not None else data.first_year)
    else:
        renderer = RENDERER_REGISTRY[args.mode](start_year, end_year)
    renderer.render(data)

if __name__ == "__main__":
    main()
