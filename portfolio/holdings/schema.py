"""
Holdings data models — Holding, Portfolio, Category

Uses dataclasses for zero-dependency type safety.
Derived fields (amounts, allocations, contributions, progress) are a cache
written by the valuation engine; they are persisted as-is and never edited.
"""
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


# ---------------------------------------------------------------------------
# Category
# ---------------------------------------------------------------------------

class Category(str, Enum):
    """Fixed holding categories used as aggregation keys."""
    CORE_ETF = "Core ETF"
    HIGH_GROWTH = "High-Growth Stock"
    SWING_TRADE = "Swing Trade"
    THEMATIC_ETF = "Thematic ETF"
    HIGH_DIVIDEND_ETF = "High-Dividend ETF"
    PENDING_TRANSFER = "Pending Transfer-Out"
    UNCATEGORIZED = "Uncategorized"


def new_holding_id() -> str:
    return uuid.uuid4().hex


# ---------------------------------------------------------------------------
# Holding
# ---------------------------------------------------------------------------

@dataclass
class Holding:
    """A single tracked asset with current and target quantities."""

    # Identity
    id: str
    symbol: str
    name: str = ""
    category: str = Category.UNCATEGORIZED.value

    # Market inputs (home currency; None until the first refresh)
    price: Optional[float] = None
    original_price: Optional[float] = None
    exchange_rate: Optional[float] = None

    # User inputs
    current_quantity: int = 0
    target_quantity: int = 0

    # Forward-return input: fractional CAGR, 0.08 = 8%
    growth_rate: Optional[float] = None

    # Derived
    current_amount: int = 0
    target_amount: int = 0
    current_allocation: float = 0.0    # percent of current view total
    target_allocation: float = 0.0     # percent of target view total
    current_contribution: Optional[float] = None
    target_contribution: Optional[float] = None
    progress: float = 0.0              # current / target quantity, percent

    def quantity(self, view: str) -> int:
        """Quantity field for a view ("current" or "target")."""
        return self.current_quantity if view == "current" else self.target_quantity

    def to_dict(self) -> dict:
        """Serialize to JSON-friendly dict."""
        return {
            "id": self.id,
            "symbol": self.symbol,
            "name": self.name,
            "category": self.category,
            "price": self.price,
            "original_price": self.original_price,
            "exchange_rate": self.exchange_rate,
            "current_quantity": self.current_quantity,
            "target_quantity": self.target_quantity,
            "growth_rate": self.growth_rate,
            "growth_rate_percent": _percent_str(self.growth_rate),
            "current_amount": self.current_amount,
            "target_amount": self.target_amount,
            "current_allocation": self.current_allocation,
            "target_allocation": self.target_allocation,
            "current_contribution": self.current_contribution,
            "current_contribution_percent": _percent_str(self.current_contribution),
            "target_contribution": self.target_contribution,
            "target_contribution_percent": _percent_str(self.target_contribution),
            "progress": self.progress,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Holding":
        """
        Deserialize from dict, filling defaults for missing identity fields
        and coercing numeric fields. Presentation strings are not read back.
        """
        return cls(
            id=data.get("id") or f"unknown-{uuid.uuid4().hex[:7]}",
            symbol=data.get("symbol") or "UNKNOWN",
            name=data.get("name") or "",
            category=data.get("category") or Category.UNCATEGORIZED.value,
            price=_to_float(data.get("price")),
            original_price=_to_float(data.get("original_price")),
            exchange_rate=_to_float(data.get("exchange_rate")),
            current_quantity=_to_int(data.get("current_quantity")),
            target_quantity=_to_int(data.get("target_quantity")),
            growth_rate=_to_float(data.get("growth_rate")),
            current_amount=_to_int(data.get("current_amount")),
            target_amount=_to_int(data.get("target_amount")),
            current_allocation=_to_float(data.get("current_allocation")) or 0.0,
            target_allocation=_to_float(data.get("target_allocation")) or 0.0,
            current_contribution=_to_float(data.get("current_contribution")),
            target_contribution=_to_float(data.get("target_contribution")),
            progress=_to_float(data.get("progress")) or 0.0,
        )


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _to_float(value) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value) -> int:
    number = _to_float(value)
    return int(number) if number is not None else 0


def _percent_str(fraction: Optional[float]) -> Optional[str]:
    if fraction is None:
        return None
    return f"{fraction * 100:.2f}"


# ---------------------------------------------------------------------------
# Portfolio
# ---------------------------------------------------------------------------

@dataclass
class Portfolio:
    """A named, persisted holdings list."""

    id: str
    name: str
    description: str = ""
    holdings: List[Holding] = field(default_factory=list)
    created_at: str = ""           # ISO timestamp
    updated_at: str = ""           # ISO timestamp

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "holdings": [h.to_dict() for h in self.holdings],
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Portfolio":
        return cls(
            id=data.get("id") or uuid.uuid4().hex,
            name=data.get("name", ""),
            description=data.get("description", ""),
            holdings=[Holding.from_dict(h) for h in data.get("holdings", [])],
            created_at=data.get("created_at", ""),
            updated_at=data.get("updated_at", ""),
        )
