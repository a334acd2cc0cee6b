"""
Allocation calculator — monetary amount per holding and its share of a view total.

A view is either "current" (as held) or "target" (desired); each view uses its
own quantity field and its own total.
"""
import math
from dataclasses import dataclass, field
from typing import List, Optional

from portfolio.holdings.schema import Holding

CURRENT = "current"
TARGET = "target"
VIEWS = (CURRENT, TARGET)


@dataclass
class ViewAllocation:
    """Amounts and allocations for one view, aligned with the input order."""
    view: str
    amounts: List[int] = field(default_factory=list)
    allocations: List[float] = field(default_factory=list)
    total: int = 0


def compute_amount(price: Optional[float], quantity: int) -> int:
    """
    price * quantity rounded half-up to a whole currency unit.
    A holding without a price has no amount yet.
    """
    if price is None:
        return 0
    return int(math.floor(price * quantity + 0.5))


def compute_allocation(amount: float, total: float) -> float:
    """Share of the view total in percent; 0 for an empty view."""
    return amount / total * 100 if total > 0 else 0.0


def allocate(holdings: List[Holding], view: str) -> ViewAllocation:
    amounts = [compute_amount(h.price, h.quantity(view)) for h in holdings]
    total = sum(amounts)
    return ViewAllocation(
        view=view,
        amounts=amounts,
        allocations=[compute_allocation(a, total) for a in amounts],
        total=total,
    )
