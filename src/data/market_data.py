"""
Market data service — home-currency quotes and historical growth rates.

- 纯数字代码视为台股 (FMP 代码加 .TW 后缀)，以本币报价，汇率 = 1
- 其他代码视为美股，按缓存的 USD/TWD 汇率换算为本币
- 年化报酬率 (CAGR) 取回看期间首尾收盘价: (end / start) ** (1 / years) - 1

The exchange rate is cached on the service instance, not at module level.
"""
import logging
import re
import time
from dataclasses import dataclass
from datetime import date
from typing import Callable, Dict, Iterable, List, Optional

import pandas as pd

from config.settings import (
    DEFAULT_EXCHANGE_RATE,
    FOREIGN_CURRENCY,
    FX_REFRESH_SECONDS,
    FX_SYMBOL,
    GROWTH_LOOKBACK_YEARS,
    HOME_CURRENCY,
)
from src.data.fmp_client import FMPClient, fmp_client

logger = logging.getLogger(__name__)

_HOME_MARKET_PATTERN = re.compile(r"^\d+$")


@dataclass
class MarketQuote:
    """Market inputs for one symbol. price is in home currency."""
    symbol: str
    price: Optional[float] = None
    original_price: Optional[float] = None
    exchange_rate: Optional[float] = None
    currency: Optional[str] = None
    growth_rate: Optional[float] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "price": self.price,
            "original_price": self.original_price,
            "exchange_rate": self.exchange_rate,
            "currency": self.currency,
            "growth_rate": self.growth_rate,
            "error": self.error,
        }


def is_home_market(symbol: str) -> bool:
    """Taiwan listings use all-digit codes."""
    return bool(_HOME_MARKET_PATTERN.match(symbol))


def to_provider_symbol(symbol: str) -> str:
    return f"{symbol}.TW" if is_home_market(symbol) else symbol


def compute_cagr(history: List[Dict], years: int) -> Optional[float]:
    """
    CAGR from the first and last close of a daily history.

    Args:
        history: [{"date": "YYYY-MM-DD", "close": ...}, ...] in any order
        years: nominal length of the lookback window

    Returns:
        Fractional CAGR, or None with fewer than two closes or a non-positive start.
    """
    if not history or years <= 0:
        return None

    df = pd.DataFrame(history)
    if "close" not in df.columns or "date" not in df.columns:
        return None

    df["date"] = pd.to_datetime(df["date"], errors="coerce")
    df["close"] = pd.to_numeric(df["close"], errors="coerce")
    df = df.dropna(subset=["date", "close"]).sort_values("date")
    if len(df) < 2:
        return None

    start_price = float(df["close"].iloc[0])
    end_price = float(df["close"].iloc[-1])
    if start_price <= 0:
        return None
    return (end_price / start_price) ** (1 / years) - 1


class MarketDataService:
    """Fetch quotes and growth rates for a batch of symbols."""

    def __init__(
        self,
        client: Optional[FMPClient] = None,
        default_rate: float = DEFAULT_EXCHANGE_RATE,
        clock: Callable[[], float] = time.time,
    ):
        self.client = client or fmp_client
        self.exchange_rate = default_rate
        self._clock = clock
        self._rate_fetched_at: Optional[float] = None

    # ========== 汇率 ==========

    def get_exchange_rate(self, force: bool = False) -> float:
        """
        USD -> TWD rate, refreshed at most once per FX_REFRESH_SECONDS.
        A failed fetch keeps the cached (or default) rate.
        """
        now = self._clock()
        fresh = (
            self._rate_fetched_at is not None
            and now - self._rate_fetched_at < FX_REFRESH_SECONDS
        )
        if fresh and not force:
            return self.exchange_rate

        rate = self.client.get_price(FX_SYMBOL)
        if rate is not None and rate > 0:
            self.exchange_rate = rate
            self._rate_fetched_at = now
            logger.info(f"已更新 {FOREIGN_CURRENCY}/{HOME_CURRENCY} 汇率: {rate}")
        else:
            logger.warning(f"无法获取汇率，沿用 {self.exchange_rate}")
        return self.exchange_rate

    # ========== 报价 ==========

    def fetch_quotes(self, symbols: Iterable[str]) -> Dict[str, MarketQuote]:
        """Home-currency quotes; a failed symbol gets price=None and an error."""
        symbols = list(dict.fromkeys(symbols))
        if not symbols:
            return {}

        rate = self.get_exchange_rate()
        quotes = {}
        for symbol in symbols:
            original_price = self.client.get_price(to_provider_symbol(symbol))
            if original_price is None:
                logger.warning(f"{symbol}: 无法获取价格")
                quotes[symbol] = MarketQuote(symbol=symbol, error="price unavailable")
                continue

            if is_home_market(symbol):
                quotes[symbol] = MarketQuote(
                    symbol=symbol,
                    price=original_price,
                    original_price=original_price,
                    exchange_rate=1.0,
                    currency=HOME_CURRENCY,
                )
            else:
                quotes[symbol] = MarketQuote(
                    symbol=symbol,
                    price=original_price * rate,
                    original_price=original_price,
                    exchange_rate=rate,
                    currency=FOREIGN_CURRENCY,
                )
                logger.debug(f"{symbol}: {original_price} {FOREIGN_CURRENCY} -> {original_price * rate:.2f} {HOME_CURRENCY}")
        return quotes

    # ========== 年化报酬率 ==========

    def fetch_growth_rates(
        self,
        symbols: Iterable[str],
        years: int = GROWTH_LOOKBACK_YEARS,
        end_date: Optional[date] = None,
    ) -> Dict[str, Optional[float]]:
        """CAGR over the lookback window per symbol; None when history is insufficient."""
        end = pd.Timestamp(end_date or date.today())
        start = end - pd.DateOffset(years=years)
        from_date = start.strftime("%Y-%m-%d")
        to_date = end.strftime("%Y-%m-%d")

        rates = {}
        for symbol in dict.fromkeys(symbols):
            history = self.client.get_historical_price_range(to_provider_symbol(symbol), from_date, to_date)
            rate = compute_cagr(history, years)
            if rate is None:
                logger.warning(f"{symbol}: 历史数据不足，无法计算 CAGR ({len(history)} 条)")
            rates[symbol] = rate
        return rates

    def fetch_market_data(self, symbols: Iterable[str], years: int = GROWTH_LOOKBACK_YEARS) -> Dict[str, MarketQuote]:
        """Quotes merged with growth rates: symbol -> MarketQuote."""
        symbols = list(dict.fromkeys(symbols))
        quotes = self.fetch_quotes(symbols)
        for symbol, rate in self.fetch_growth_rates(symbols, years=years).items():
            quotes.setdefault(symbol, MarketQuote(symbol=symbol)).growth_rate = rate
        return quotes
