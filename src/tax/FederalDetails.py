from typing import Dict, Optional

from model.FilingStatus import FilingStatus
from tax.BracketTaxDetails import BracketTaxDetails, BracketSchedule, load_reference


class FederalDetails(BracketTaxDetails):
	def __init__(self, schedules: Optional[Dict[FilingStatus, BracketSchedule]] = None, ref_path: Optional[str] = None):
		"""
		schedules: explicit bracket schedules keyed by filing status
		ref_path: alternate federal-brackets.json (defaults to reference/federal-brackets.json)
		"""
		self.tax_year = None
		if schedules is None:
			schedules = self._load_brackets(ref_path)
		super().__init__(schedules)

	def _load_brackets(self, ref_path: Optional[str]) -> Dict[FilingStatus, BracketSchedule]:
		data = load_reference("federal-brackets.json", ref_path)
		rates = data.get("rates", [])
		brackets = data.get("brackets", {})
		if not rates or not brackets:
			raise ValueError("federal-brackets.json must contain 'rates' and 'brackets'")
		self.tax_year = data.get("taxYear")

		# Every filing status shares the same rate ladder
		schedules = {}
		for key, max_incomes in brackets.items():
			schedules[FilingStatus.from_string(key)] = BracketSchedule.from_json(max_incomes, rates)
		return schedules
