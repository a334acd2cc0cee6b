"""
Recompute orchestrator — derive every computed field of a holdings list.

recompute() runs, for the current and target views independently:
    allocation -> contribution -> category aggregation -> risk band
and the per-holding progress ratio. Inputs are never mutated; derived fields
are written onto fresh copies, so applying recompute() to its own output gives
the same numbers.

The caller owns the returned ValuationState and passes it back as `previous`
on the next event; nothing is kept at module level.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional

from portfolio.holdings.schema import Holding
from portfolio.valuation.allocation import CURRENT, TARGET, VIEWS, allocate
from portfolio.valuation.categories import CategoryAggregator, CategorySummary
from portfolio.valuation.contribution import compute_contribution, total_contribution_percent
from portfolio.valuation.progress import compute_progress
from portfolio.valuation.risk import RiskBand, classify_risk

logger = logging.getLogger(__name__)


@dataclass
class ViewSummary:
    """Totals, category rollups and risk band for one view."""
    view: str
    total_amount: int = 0
    categories: Dict[str, CategorySummary] = field(default_factory=dict)
    total_contribution_percent: float = 0.0
    risk_profile: RiskBand = RiskBand.ULTRA_CONSERVATIVE

    def categories_by_contribution(self) -> List[CategorySummary]:
        return sorted(self.categories.values(), key=lambda s: -s.category_contribution)

    def categories_by_amount(self) -> List[CategorySummary]:
        return sorted(self.categories.values(), key=lambda s: -s.total_amount)

    def to_dict(self) -> dict:
        return {
            "view": self.view,
            "total_amount": self.total_amount,
            "categories": {k: v.to_dict() for k, v in self.categories.items()},
            "total_contribution_percent": self.total_contribution_percent,
            "risk_profile": self.risk_profile.value,
        }


@dataclass
class ValuationState:
    """Enriched holdings plus both view summaries, as of one recompute."""
    holdings: List[Holding] = field(default_factory=list)
    current: ViewSummary = field(default_factory=lambda: ViewSummary(view=CURRENT))
    target: ViewSummary = field(default_factory=lambda: ViewSummary(view=TARGET))
    revision: int = 0

    def summary(self, view: str) -> ViewSummary:
        return self.current if view == CURRENT else self.target

    def get_holding(self, holding_id: str) -> Optional[Holding]:
        for h in self.holdings:
            if h.id == holding_id:
                return h
        return None


def recompute(holdings: List[Holding], previous: Optional[ValuationState] = None) -> ValuationState:
    """
    Derive amounts, allocations, contributions, progress and both view summaries.

    Args:
        holdings: assembled holdings; derived fields on them are ignored
        previous: state from the last recompute, if any

    Returns:
        New ValuationState with revision = previous.revision + 1.
    """
    enriched = [replace(h) for h in holdings]
    summaries = {}

    for view in VIEWS:
        allocation = allocate(enriched, view)
        contributions = []
        for h, amount, share in zip(enriched, allocation.amounts, allocation.allocations):
            contribution = compute_contribution(share, h.growth_rate)
            setattr(h, f"{view}_amount", amount)
            setattr(h, f"{view}_allocation", share)
            setattr(h, f"{view}_contribution", contribution)
            contributions.append(contribution)

        contribution_pct = total_contribution_percent(contributions)
        summaries[view] = ViewSummary(
            view=view,
            total_amount=allocation.total,
            categories=CategoryAggregator(enriched, view, allocation.total).summarize(),
            total_contribution_percent=contribution_pct,
            risk_profile=classify_risk(contribution_pct),
        )

    for h in enriched:
        h.progress = compute_progress(h.current_quantity, h.target_quantity)

    revision = previous.revision + 1 if previous is not None else 1
    logger.debug(
        f"Recompute #{revision}: {len(enriched)} holdings, "
        f"current {summaries[CURRENT].total_amount}, target {summaries[TARGET].total_amount}"
    )
    return ValuationState(
        holdings=enriched,
        current=summaries[CURRENT],
        target=summaries[TARGET],
        revision=revision,
    )
