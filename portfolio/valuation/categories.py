"""
Category aggregator — roll enriched holdings up by category for one view.

Per category:
    total_amount             sum of holding amounts
    weighted_growth_rate     growth rates weighted by amount within the category
                             (holdings without a growth rate are left out)
    allocation_of_portfolio  total_amount / view total (fraction)
    category_contribution    allocation_of_portfolio * weighted_growth_rate

Two presentation orders are offered over the same aggregation:
by_contribution() and by_amount().
"""
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from portfolio.holdings.schema import Holding

logger = logging.getLogger(__name__)


@dataclass
class CategorySummary:
    """Aggregate over all holdings sharing a category in one view."""
    category: str
    total_amount: int = 0
    allocation_of_portfolio: float = 0.0   # fraction of view total (0-1)
    weighted_growth_rate: float = 0.0      # fractional CAGR
    category_contribution: float = 0.0     # fraction
    holding_count: int = 0
    symbols: List[str] = field(default_factory=list)

    @property
    def allocation_percent(self) -> float:
        return self.allocation_of_portfolio * 100

    @property
    def contribution_percent(self) -> float:
        return self.category_contribution * 100

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "total_amount": self.total_amount,
            "allocation_of_portfolio": self.allocation_of_portfolio,
            "weighted_growth_rate": self.weighted_growth_rate,
            "category_contribution": self.category_contribution,
            "holding_count": self.holding_count,
            "symbols": list(self.symbols),
        }


class CategoryAggregator:
    """Aggregate one view of a holdings list by category."""

    def __init__(self, holdings: List[Holding], view: str, view_total: Optional[int] = None):
        self.holdings = holdings
        self.view = view
        if view_total is None:
            view_total = sum(self._amount(h) for h in holdings)
        self.view_total = view_total
        self._summaries: Optional[Dict[str, CategorySummary]] = None

    def summarize(self) -> Dict[str, CategorySummary]:
        """
        One summary per category present among holdings with quantity > 0,
        in order of first appearance.
        """
        if self._summaries is None:
            self._summaries = self._aggregate()
        return self._summaries

    def by_contribution(self) -> List[CategorySummary]:
        """Descending by category contribution; ties keep first-appearance order."""
        return sorted(self.summarize().values(), key=lambda s: -s.category_contribution)

    def by_amount(self) -> List[CategorySummary]:
        """Descending by total amount."""
        return sorted(self.summarize().values(), key=lambda s: -s.total_amount)

    # -----------------------------------------------------------------------
    # Internal helpers
    # -----------------------------------------------------------------------

    def _amount(self, holding: Holding) -> int:
        return getattr(holding, f"{self.view}_amount")

    def _aggregate(self) -> Dict[str, CategorySummary]:
        groups: Dict[str, List[Holding]] = {}
        for h in self.holdings:
            if h.quantity(self.view) <= 0:
                continue
            groups.setdefault(h.category, []).append(h)

        result = {}
        for category, members in groups.items():
            category_total = sum(self._amount(h) for h in members)

            weighted_sum = 0.0
            weight_total = 0.0
            for h in members:
                if h.growth_rate is None:
                    continue
                weight = self._amount(h) / category_total if category_total > 0 else 0.0
                weighted_sum += h.growth_rate * weight
                weight_total += weight
            growth_rate = weighted_sum / weight_total if weight_total > 0 else 0.0

            allocation = category_total / self.view_total if self.view_total > 0 else 0.0

            result[category] = CategorySummary(
                category=category,
                total_amount=category_total,
                allocation_of_portfolio=allocation,
                weighted_growth_rate=growth_rate,
                category_contribution=allocation * growth_rate,
                holding_count=len(members),
                symbols=[h.symbol for h in members],
            )

        logger.debug(f"{self.view}: aggregated {len(result)} categories, total {self.view_total}")
        return result
