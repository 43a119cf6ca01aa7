"""Program inputs loaded from input-parameters/<program>/spec.json."""

import json
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from model.FilingStatus import FilingStatus
from model.FinancialEntry import FinancialEntry
from model.ItemType import ItemType
from model.Person import Person


@dataclass(frozen=True)
class PlanInputs:
    """Everything the projection needs: entries, people, growth rates and tax settings.

    Rates are annual percentages keyed by item type (3.0 = 3%). For MORTGAGE
    the rate is the loan's interest rate.
    """
    entries: Tuple[FinancialEntry, ...]
    persons: Dict[str, Person] = field(default_factory=dict)
    rates: Dict[ItemType, float] = field(default_factory=dict)
    filing_status: FilingStatus = FilingStatus.MARRIED_FILING_JOINTLY
    state: str = "NJ"
    validate: bool = False
    roth_target_bracket_rate: float = 0.22
    roth_target_threshold: Optional[float] = None
    cost_basis_fraction: Optional[float] = None
    capital_gains_rate: Optional[float] = None

    @classmethod
    def from_spec(cls, spec: dict) -> "PlanInputs":
        """Build inputs from a parsed spec.json dictionary."""
        persons = {}
        for i, p in enumerate(spec.get('persons', [])):
            try:
                person = Person(p['name'], int(p['yearOfBirth']))
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Invalid person at index {i}: {e}") from e
            if person.name in persons:
                raise ValueError(f"Duplicate person name: {person.name}")
            persons[person.name] = person

        rates = {}
        for key, value in spec.get('rates', {}).items():
            rates[ItemType.from_string(key)] = float(value)

        entries = []
        for i, e in enumerate(spec.get('entries', [])):
            try:
                entries.append(FinancialEntry(
                    item=ItemType.from_string(e['item']),
                    value=float(e['value']),
                    start_year=int(e['startYear']),
                    end_year=int(e['endYear']),
                    owner=e.get('owner') or None,
                    description=e.get('description', ''),
                ))
            except (KeyError, TypeError, ValueError) as err:
                raise ValueError(f"Invalid entry at index {i}: {err}") from err

        roth = spec.get('rothConversion', {})
        capital_gains = spec.get('capitalGains', {})
        return cls(
            entries=tuple(entries),
            persons=persons,
            rates=rates,
            filing_status=FilingStatus.from_string(spec.get('filingStatus', 'MFJ')),
            state=spec.get('state', 'NJ'),
            validate=bool(spec.get('validate', False)),
            roth_target_bracket_rate=roth.get('targetBracketRate', 0.22),
            roth_target_threshold=roth.get('targetBracketThreshold'),
            cost_basis_fraction=capital_gains.get('costBasisFraction'),
            capital_gains_rate=capital_gains.get('rate'),
        )


def load_plan_inputs(spec_path: str) -> PlanInputs:
    with open(spec_path, 'r') as f:
        spec = json.load(f)
    return PlanInputs.from_spec(spec)
