"""
Portfolio session — the caller-owned state around the valuation engine.

Every user action (add, edit quantity, remove, market refresh, save) runs
mutate -> recompute -> commit while holding the session guard, so overlapping
triggers never interleave partial writes. The last commit to complete wins.

Market data is fetched outside the guard. When the fetch returns, its prices
and growth rates are merged onto the latest holdings, so quantity edits made
meanwhile survive. A refresh that started before a newer refresh committed is
discarded.
"""
import logging
import threading
from dataclasses import replace
from typing import Dict, List, Optional

from config.settings import GROWTH_LOOKBACK_YEARS
from portfolio.holdings import manager
from portfolio.holdings.schema import Holding, Portfolio
from portfolio.valuation.engine import ValuationState, ViewSummary, recompute
from src.data.market_data import MarketDataService, MarketQuote

logger = logging.getLogger(__name__)


class PortfolioSession:
    """One user's working copy of a holdings list."""

    def __init__(
        self,
        holdings: Optional[List[Holding]] = None,
        market: Optional[MarketDataService] = None,
    ):
        self.market = market
        self.portfolio_id: Optional[str] = None
        self.portfolio_name = ""
        self.description = ""
        self._guard = threading.Lock()
        self._state = recompute(list(holdings or []))
        self._refresh_seq = 0
        self._committed_refresh = 0

    @classmethod
    def from_portfolio(cls, portfolio: Portfolio, market: Optional[MarketDataService] = None) -> "PortfolioSession":
        """Open a stored portfolio; cached derived fields are recomputed."""
        session = cls(portfolio.holdings, market=market)
        session.portfolio_id = portfolio.id
        session.portfolio_name = portfolio.name
        session.description = portfolio.description
        logger.info(f"Loaded portfolio '{portfolio.name}' ({len(portfolio.holdings)} holdings)")
        return session

    # -----------------------------------------------------------------------
    # Read access
    # -----------------------------------------------------------------------

    @property
    def state(self) -> ValuationState:
        return self._state

    @property
    def holdings(self) -> List[Holding]:
        return self._state.holdings

    @property
    def current(self) -> ViewSummary:
        return self._state.current

    @property
    def target(self) -> ViewSummary:
        return self._state.target

    # -----------------------------------------------------------------------
    # User edits
    # -----------------------------------------------------------------------

    def add_holding(self, holding: Holding) -> Holding:
        """
        Add a holding. If the symbol is already tracked, the existing row is
        replaced by the new values but keeps its id.
        """
        with self._guard:
            holdings = list(self._state.holdings)
            index = next((i for i, h in enumerate(holdings) if h.symbol == holding.symbol), None)
            if index is None:
                holdings.append(holding)
                index = len(holdings) - 1
                logger.info(f"Added {holding.symbol}")
            else:
                holdings[index] = replace(holding, id=holdings[index].id)
                logger.info(f"Updated existing {holding.symbol}")
            self._state = recompute(holdings, self._state)
            return self._state.holdings[index]

    def remove_holding(self, holding_id: str) -> Optional[Holding]:
        """Remove a holding by id. Returns the removed Holding."""
        with self._guard:
            holdings = list(self._state.holdings)
            for i, h in enumerate(holdings):
                if h.id == holding_id:
                    removed = holdings.pop(i)
                    self._state = recompute(holdings, self._state)
                    logger.info(f"Removed {removed.symbol}")
                    return removed

        logger.warning(f"Holding {holding_id} not found for removal")
        return None

    def update_holding(self, holding_id: str, **changes) -> Optional[Holding]:
        """
        Update input fields on a holding.
        Returns the recomputed Holding, or None if not found.
        """
        with self._guard:
            holdings = list(self._state.holdings)
            for i, h in enumerate(holdings):
                if h.id == holding_id:
                    holdings[i] = replace(h, **changes)
                    self._state = recompute(holdings, self._state)
                    return self._state.holdings[i]

        logger.warning(f"Holding {holding_id} not found")
        return None

    def set_current_quantity(self, holding_id: str, quantity: int) -> Optional[Holding]:
        return self.update_holding(holding_id, current_quantity=quantity)

    def set_target_quantity(self, holding_id: str, quantity: int) -> Optional[Holding]:
        return self.update_holding(holding_id, target_quantity=quantity)

    def recalculate(self) -> ValuationState:
        """Recompute without changing inputs (before presentation or persistence)."""
        with self._guard:
            self._state = recompute(self._state.holdings, self._state)
            return self._state

    # -----------------------------------------------------------------------
    # Market data
    # -----------------------------------------------------------------------

    def begin_refresh(self) -> int:
        """Reserve a refresh token; tokens are ordered by start time."""
        with self._guard:
            self._refresh_seq += 1
            return self._refresh_seq

    def commit_refresh(self, token: int, quotes: Dict[str, MarketQuote]) -> bool:
        """
        Merge fetched market inputs onto the latest holdings and recompute.
        Returns False when a refresh that started later has already committed.
        """
        with self._guard:
            if token < self._committed_refresh:
                logger.warning(
                    f"Refresh #{token} superseded by #{self._committed_refresh}, discarding result"
                )
                return False
            holdings = [_merge_quote(h, quotes.get(h.symbol)) for h in self._state.holdings]
            self._state = recompute(holdings, self._state)
            self._committed_refresh = token
            logger.info(f"Refresh #{token} committed for {len(quotes)} symbols")
            return True

    def apply_market_data(self, quotes: Dict[str, MarketQuote]) -> bool:
        return self.commit_refresh(self.begin_refresh(), quotes)

    def refresh_market_data(self, years: int = GROWTH_LOOKBACK_YEARS) -> bool:
        """Fetch prices and growth rates for every tracked symbol and commit them."""
        if self.market is None:
            raise ValueError("No market data service configured for this session")

        token = self.begin_refresh()
        symbols = [h.symbol for h in self._state.holdings]
        if not symbols:
            logger.warning("No holdings to refresh")
            return False

        quotes = self.market.fetch_market_data(symbols, years=years)
        return self.commit_refresh(token, quotes)

    # -----------------------------------------------------------------------
    # Persistence
    # -----------------------------------------------------------------------

    def save(self, name: Optional[str] = None, description: Optional[str] = None) -> Portfolio:
        """
        Recompute, then store the holdings with their derived fields.
        Creates a new portfolio when the session is not bound to one yet.
        Raises ValueError on a duplicate name.
        """
        state = self.recalculate()

        portfolio = None
        if self.portfolio_id is not None:
            portfolio = manager.update_portfolio(
                self.portfolio_id,
                name=name,
                description=description,
                holdings=state.holdings,
            )
        if portfolio is None:
            portfolio = manager.create_portfolio(
                name or self.portfolio_name,
                state.holdings,
                description=description if description is not None else self.description,
            )

        self.portfolio_id = portfolio.id
        self.portfolio_name = portfolio.name
        self.description = portfolio.description
        return portfolio


def _merge_quote(holding: Holding, quote: Optional[MarketQuote]) -> Holding:
    """Take the fetched values that exist; keep the previous ones otherwise."""
    if quote is None:
        return holding
    changes = {}
    if quote.price is not None:
        changes.update(
            price=quote.price,
            original_price=quote.original_price,
            exchange_rate=quote.exchange_rate,
        )
    else:
        logger.warning(f"{holding.symbol}: no price in refresh, keeping previous price")
    if quote.growth_rate is not None:
        changes["growth_rate"] = quote.growth_rate
    return replace(holding, **changes) if changes else holding
