"""
Risk classifier — map a view's total contribution percentage to a risk band.

Thresholds are half-open [lower, upper); a value equal to a boundary belongs
to the band that starts there.
"""
from bisect import bisect_right
from enum import Enum


class RiskBand(Enum):
    """Risk profile implied by the expected annual return of a view."""
    ULTRA_CONSERVATIVE = "ultra-conservative"
    CONSERVATIVE = "conservative"
    MODERATE = "moderate"
    BALANCED = "balanced"
    GROWTH = "growth"
    AGGRESSIVE = "aggressive"

    @property
    def lower_bound(self) -> float:
        """Lowest contribution percentage in this band."""
        return {
            RiskBand.ULTRA_CONSERVATIVE: float("-inf"),
            RiskBand.CONSERVATIVE: 2.0,
            RiskBand.MODERATE: 4.0,
            RiskBand.BALANCED: 7.0,
            RiskBand.GROWTH: 10.0,
            RiskBand.AGGRESSIVE: 15.0,
        }[self]

    @property
    def risk_level(self) -> str:
        return {
            RiskBand.ULTRA_CONSERVATIVE: "very low",
            RiskBand.CONSERVATIVE: "low",
            RiskBand.MODERATE: "medium-low",
            RiskBand.BALANCED: "medium",
            RiskBand.GROWTH: "medium-high",
            RiskBand.AGGRESSIVE: "high",
        }[self]

    @property
    def label(self) -> str:
        return self.value.replace("-", " ").title()


_ORDERED_BANDS = list(RiskBand)
_THRESHOLDS = [band.lower_bound for band in _ORDERED_BANDS[1:]]


def classify_risk(contribution_percent: float) -> RiskBand:
    """
    Args:
        contribution_percent: total contribution of a view, percent scale (6.67 = 6.67%)
    """
    return _ORDERED_BANDS[bisect_right(_THRESHOLDS, contribution_percent)]
