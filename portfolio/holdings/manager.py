"""
Portfolio store — CRUD operations for named portfolios.

Data is persisted as JSON in data/portfolios/portfolios.json.
Holdings are stored exactly as given, derived fields included; the store
never recomputes them.
"""
import json
import logging
import uuid
from datetime import datetime
from typing import List, Optional

from config.settings import PORTFOLIO_FILE
from portfolio.holdings.schema import Holding, Portfolio

logger = logging.getLogger(__name__)

# File paths
_PORTFOLIO_FILE = PORTFOLIO_FILE


# ---------------------------------------------------------------------------
# File access
# ---------------------------------------------------------------------------

def load_portfolios() -> List[Portfolio]:
    """Load all portfolios in file order."""
    if not _PORTFOLIO_FILE.exists():
        return []
    try:
        with open(_PORTFOLIO_FILE, "r") as f:
            data = json.load(f)
        return [Portfolio.from_dict(d) for d in data]
    except (json.JSONDecodeError, OSError, TypeError, AttributeError) as e:
        logger.error(f"Failed to load portfolios: {e}")
        return []


def save_portfolios(portfolios: List[Portfolio]) -> None:
    """Persist portfolios to the JSON store."""
    _PORTFOLIO_FILE.parent.mkdir(parents=True, exist_ok=True)
    with open(_PORTFOLIO_FILE, "w") as f:
        json.dump([p.to_dict() for p in portfolios], f, indent=2, ensure_ascii=False)
    logger.info(f"Saved {len(portfolios)} portfolios to {_PORTFOLIO_FILE}")


# ---------------------------------------------------------------------------
# Portfolio CRUD
# ---------------------------------------------------------------------------

def list_portfolios() -> List[Portfolio]:
    """All portfolios, most recently updated first."""
    return sorted(load_portfolios(), key=lambda p: p.updated_at, reverse=True)


def get_portfolio(portfolio_id: str) -> Optional[Portfolio]:
    for p in load_portfolios():
        if p.id == portfolio_id:
            return p
    return None


def find_portfolio_by_name(name: str) -> Optional[Portfolio]:
    name = name.strip()
    for p in load_portfolios():
        if p.name == name:
            return p
    return None


def get_latest_portfolio() -> Optional[Portfolio]:
    """The most recently updated portfolio, or None if the store is empty."""
    portfolios = list_portfolios()
    return portfolios[0] if portfolios else None


def create_portfolio(name: str, holdings: List[Holding], description: str = "") -> Portfolio:
    """Create a portfolio. Raises ValueError on an empty or duplicate name."""
    name = name.strip()
    if not name:
        raise ValueError("Portfolio name is required")

    portfolios = load_portfolios()
    if any(p.name == name for p in portfolios):
        raise ValueError(f"Portfolio '{name}' already exists. Use update_portfolio() instead.")

    now = datetime.now().isoformat()
    portfolio = Portfolio(
        id=uuid.uuid4().hex,
        name=name,
        description=description.strip(),
        holdings=list(holdings),
        created_at=now,
        updated_at=now,
    )
    portfolios.append(portfolio)
    save_portfolios(portfolios)
    logger.info(f"Created portfolio '{name}' with {len(portfolio.holdings)} holdings")
    return portfolio


def update_portfolio(
    portfolio_id: str,
    name: Optional[str] = None,
    description: Optional[str] = None,
    holdings: Optional[List[Holding]] = None,
) -> Optional[Portfolio]:
    """
    Update fields on an existing portfolio.
    Returns the updated Portfolio, or None if not found.
    Raises ValueError if the new name belongs to another portfolio.
    """
    portfolios = load_portfolios()

    for i, p in enumerate(portfolios):
        if p.id != portfolio_id:
            continue

        if name is not None:
            name = name.strip()
            if not name:
                raise ValueError("Portfolio name is required")
            if any(other.name == name and other.id != portfolio_id for other in portfolios):
                raise ValueError(f"Portfolio '{name}' already exists")
            p.name = name
        if description is not None:
            p.description = description.strip()
        if holdings is not None:
            p.holdings = list(holdings)

        p.updated_at = datetime.now().isoformat()
        portfolios[i] = p
        save_portfolios(portfolios)
        return p

    logger.warning(f"Portfolio {portfolio_id} not found")
    return None


def delete_portfolio(portfolio_id: str) -> Optional[Portfolio]:
    """Remove a portfolio. Returns the removed Portfolio."""
    portfolios = load_portfolios()

    for i, p in enumerate(portfolios):
        if p.id == portfolio_id:
            removed = portfolios.pop(i)
            save_portfolios(portfolios)
            logger.info(f"Deleted portfolio '{removed.name}'")
            return removed

    logger.warning(f"Portfolio {portfolio_id} not found for removal")
    return None
