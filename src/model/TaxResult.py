from dataclasses import dataclass

@dataclass
class TaxResult:
    totalTax: float
    marginalBracket: float
    effectiveRate: float = 0.0
