from typing import Dict, Optional

from model.FilingStatus import FilingStatus
from model.TaxResult import TaxResult
from tax.BracketTaxDetails import BracketTaxDetails, BracketSchedule, load_reference, parse_schedules


class StateDetails(BracketTaxDetails):
    """State income tax over the state's bracket schedules.

    Schedules come from reference/state-brackets.json under the state's code
    unless passed explicitly.
    """
    state_code = None

    def __init__(self, schedules: Optional[Dict[FilingStatus, BracketSchedule]] = None,
                 ref_path: Optional[str] = None, state_code: Optional[str] = None):
        if state_code is not None:
            self.state_code = state_code.upper()
        self.name = self.state_code
        self.taxes_social_security = True
        if schedules is None:
            schedules = self._load_schedules(ref_path)
        super().__init__(schedules)

    def _load_schedules(self, ref_path: Optional[str]) -> Dict[FilingStatus, BracketSchedule]:
        if self.state_code is None:
            raise ValueError("A state code is required to load state brackets")
        states = load_reference('state-brackets.json', ref_path).get('states', {})
        if self.state_code not in states:
            raise ValueError(f"No state brackets for '{self.state_code}'")
        state = states[self.state_code]
        self.name = state.get('name', self.state_code)
        self.taxes_social_security = state.get('taxesSocialSecurity', True)
        return parse_schedules(state.get('schedules', {}))


class NewJerseyStateDetails(StateDetails):
    """New Jersey: single and MFS share one schedule, MFJ and HOH another."""
    state_code = 'NJ'


class NewYorkStateDetails(StateDetails):
    """New York: separate schedules per filing status. Social Security is exempt."""
    state_code = 'NY'


class NoIncomeTaxStateDetails:
    """A state without a personal income tax (e.g. Florida). Every amount is zero."""

    def __init__(self, state_code: str = 'FL', name: str = 'Florida'):
        self.state_code = state_code
        self.name = name
        self.taxes_social_security = False

    def calculateTax(self, income: float, filing_status: FilingStatus) -> float:
        return 0.0

    def getMarginalTaxRate(self, income: float, filing_status: FilingStatus) -> float:
        return 0.0

    def getEffectiveTaxRate(self, income: float, filing_status: FilingStatus) -> float:
        return 0.0

    def calculatePreTaxAmount(self, net_amount: float, filing_status: FilingStatus) -> float:
        # No tax, so the gross equals the net
        if net_amount < 0:
            raise ValueError(f"Net amount cannot be negative: {net_amount}")
        return net_amount

    def taxBurden(self, income: float, filing_status: FilingStatus) -> TaxResult:
        return TaxResult(totalTax=0.0, marginalBracket=0.0, effectiveRate=0.0)


STATE_DETAILS_REGISTRY = {
    'NJ': NewJerseyStateDetails,
    'NY': NewYorkStateDetails,
    'FL': NoIncomeTaxStateDetails,
    'NONE': lambda: NoIncomeTaxStateDetails('NONE', 'No State Income Tax'),
}


def state_details_for(state_code: Optional[str]):
    """Return the state calculator for a two-letter state code (NJ, NY, FL or NONE)."""
    if state_code is None or not state_code.strip():
        raise ValueError("State code cannot be blank")
    factory = STATE_DETAILS_REGISTRY.get(state_code.strip().upper())
    if factory is None:
        raise ValueError(f"Unsupported state: {state_code}. Supported: {', '.join(STATE_DETAILS_REGISTRY)}")
    return factory()
