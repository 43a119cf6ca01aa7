from enum import Enum


class FilingStatus(Enum):
    """Federal filing status used to select bracket tables and surtax thresholds."""
    SINGLE = "Single"
    MARRIED_FILING_JOINTLY = "Married Filing Jointly"
    MARRIED_FILING_SEPARATELY = "Married Filing Separately"
    HEAD_OF_HOUSEHOLD = "Head of Household"

    @classmethod
    def from_string(cls, value: str) -> "FilingStatus":
        """Parse a filing status from its name, display name or short alias (MFJ, MFS, HOH)."""
        if value is None or not str(value).strip():
            raise ValueError("Filing status cannot be blank")
        key = str(value).strip().upper().replace(' ', '_').replace('-', '_')
        if key in _ALIASES:
            return _ALIASES[key]
        raise ValueError(f"Unknown filing status: {value}")


_ALIASES = {
    "SINGLE": FilingStatus.SINGLE,
    "S": FilingStatus.SINGLE,
    "MARRIED_FILING_JOINTLY": FilingStatus.MARRIED_FILING_JOINTLY,
    "MFJ": FilingStatus.MARRIED_FILING_JOINTLY,
    "MARRIED_FILING_SEPARATELY": FilingStatus.MARRIED_FILING_SEPARATELY,
    "MFS": FilingStatus.MARRIED_FILING_SEPARATELY,
    "HEAD_OF_HOUSEHOLD": FilingStatus.HEAD_OF_HOUSEHOLD,
    "HOH": FilingStatus.HEAD_OF_HOUSEHOLD,
}
