"""
Contribution calculator — a holding's weighted slice of the expected forward return.

contribution = allocation (as a fraction) * growth rate

Values stay unrounded; format_percent() is for display only.
"""
from typing import Iterable, Optional


def compute_contribution(allocation: float, growth_rate: Optional[float]) -> Optional[float]:
    """
    Args:
        allocation: share of the view total in percent (0-100)
        growth_rate: fractional CAGR, or None when unknown

    Returns:
        Fractional contribution (0.0533 = 5.33%), None iff growth_rate is None.
    """
    if growth_rate is None:
        return None
    return (allocation / 100) * growth_rate


def total_contribution_percent(contributions: Iterable[Optional[float]]) -> float:
    """Sum of known contributions on the percent scale."""
    return sum(c for c in contributions if c is not None) * 100


def format_percent(fraction: Optional[float], digits: int = 2) -> Optional[str]:
    """0.05333 -> "5.33". None stays None."""
    if fraction is None:
        return None
    return f"{fraction * 100:.{digits}f}"
