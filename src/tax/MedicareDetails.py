from typing import Dict, Optional

from model.FilingStatus import FilingStatus
from tax.BracketTaxDetails import load_reference


class MedicareDetails:
    """Holds Medicare statutory details and computes contributions.

    The base tax applies to all wages; the additional Medicare surcharge
    applies to wages above a filing-status threshold.
    """

    def __init__(self, medicare_rate: Optional[float] = None, surcharge_rate: Optional[float] = None,
                 surcharge_thresholds: Optional[Dict[FilingStatus, float]] = None,
                 self_employed_rate: Optional[float] = None, ref_path: Optional[str] = None):
        """Initialize from reference/fica.json with optional overrides.

        Args:
            medicare_rate: The employee Medicare rate.
            surcharge_rate: The additional Medicare surcharge rate.
            surcharge_thresholds: Wages above which the surcharge applies, by filing status.
            self_employed_rate: Combined rate paid by the self-employed.
            ref_path: Alternate fica.json.
        """
        data = load_reference('fica.json', ref_path).get('medicare', {})
        self.medicare_rate = data.get('employeeRate', 0) if medicare_rate is None else medicare_rate
        self.self_employed_rate = data.get('selfEmployedRate', 0) if self_employed_rate is None else self_employed_rate
        self.surcharge_rate = data.get('additionalRate', 0) if surcharge_rate is None else surcharge_rate
        if surcharge_thresholds is None:
            surcharge_thresholds = {
                FilingStatus.from_string(k): v for k, v in data.get('additionalThresholds', {}).items()
            }
        self.surcharge_thresholds = dict(surcharge_thresholds)

    def surcharge_threshold(self, filing_status: FilingStatus) -> float:
        if filing_status is None:
            raise ValueError("Filing status is required for the Medicare surcharge")
        return self.surcharge_thresholds[filing_status]

    def base_contribution(self, wages: float, self_employed: bool = False) -> float:
        """Calculate the base Medicare contribution.

        Args:
            wages: Wages subject to Medicare (no cap).
            self_employed: Apply the self-employed rate.

        Returns:
            The base Medicare charge.
        """
        if wages < 0:
            raise ValueError(f"Wages cannot be negative: {wages}")
        return wages * (self.self_employed_rate if self_employed else self.medicare_rate)

    def surcharge(self, wages: float, filing_status: FilingStatus) -> float:
        """Calculate the additional Medicare surcharge if applicable.

        Args:
            wages: Combined wages for the filing unit.
            filing_status: Selects the surcharge threshold.

        Returns:
            The surcharge amount (0 if at or below threshold).
        """
        threshold = self.surcharge_threshold(filing_status)
        if wages < 0:
            raise ValueError(f"Wages cannot be negative: {wages}")
        if wages > threshold:
            return (wages - threshold) * self.surcharge_rate
        return 0.0

    def total_contribution(self, wages: float, filing_status: FilingStatus, self_employed: bool = False) -> float:
        """Calculate total Medicare contribution including surcharge."""
        return self.base_contribution(wages, self_employed) + self.surcharge(wages, filing_status)
