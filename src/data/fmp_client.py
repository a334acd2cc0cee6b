"""
FMP API 客户端 (报价 / 汇率 / 日线收盘价)
- 串行调用，间隔防限流
- 超时与 429 重试
- 失败统一返回 None / 空列表，由调用方降级处理
"""
import logging
import time
from typing import Any, Dict, List, Optional

import requests

from config.settings import API_CALL_INTERVAL, API_RETRY_TIMES, API_TIMEOUT, FMP_API_KEY, FMP_BASE_URL

logger = logging.getLogger(__name__)


class FMPClient:
    """FMP API 客户端"""

    def __init__(
        self,
        api_key: str = FMP_API_KEY,
        base_url: str = FMP_BASE_URL,
        call_interval: float = API_CALL_INTERVAL,
        retry_times: int = API_RETRY_TIMES,
        timeout: float = API_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.call_interval = call_interval
        self.retry_times = retry_times
        self.timeout = timeout
        self.session = session or requests.Session()
        self._last_call_time = 0.0

    def _throttle(self):
        wait = self.call_interval - (time.time() - self._last_call_time)
        if wait > 0:
            time.sleep(wait)
        self._last_call_time = time.time()

    def _request(self, endpoint: str, params: Optional[Dict] = None) -> Any:
        """GET endpoint, retrying timeouts and 429s. Returns decoded JSON or None."""
        if not self.api_key:
            logger.warning("FMP_API_KEY 未设置，跳过请求")
            return None

        url = f"{self.base_url}/{endpoint}"
        query = dict(params or {}, apikey=self.api_key)

        for attempt in range(1, self.retry_times + 1):
            self._throttle()
            try:
                resp = self.session.get(url, params=query, timeout=self.timeout)
            except requests.exceptions.Timeout:
                logger.warning(f"{endpoint}: timeout ({attempt}/{self.retry_times})")
                continue
            except requests.exceptions.RequestException as e:
                logger.error(f"{endpoint}: request error: {e}")
                return None

            if resp.status_code == 429:
                backoff = attempt * 5
                logger.warning(f"{endpoint}: rate limited, retry in {backoff}s")
                time.sleep(backoff)
                continue
            if resp.status_code != 200:
                logger.error(f"{endpoint}: HTTP {resp.status_code}: {resp.text[:200]}")
                return None

            try:
                return resp.json()
            except ValueError:
                logger.error(f"{endpoint}: invalid JSON response")
                return None

        logger.error(f"{endpoint}: giving up after {self.retry_times} attempts")
        return None

    # ========== 报价 ==========

    def get_quote(self, symbol: str) -> Optional[Dict]:
        """最新报价; 股票、ETF、汇率对 (如 USDTWD) 共用同一端点"""
        data = self._request("quote", {"symbol": symbol})
        if isinstance(data, list) and data:
            return data[0]
        return None

    def get_price(self, symbol: str) -> Optional[float]:
        """报价中的 price 字段，取不到或无法解析返回 None"""
        quote = self.get_quote(symbol)
        if not quote or quote.get("price") is None:
            return None
        try:
            return float(quote["price"])
        except (TypeError, ValueError):
            logger.warning(f"{symbol}: 无法解析价格 {quote.get('price')!r}")
            return None

    # ========== 日线 ==========

    def get_historical_price_range(self, symbol: str, from_date: str, to_date: str) -> List[Dict]:
        """
        指定区间的日线

        Args:
            symbol: FMP 代码 (台股带 .TW)
            from_date / to_date: YYYY-MM-DD

        Returns:
            [{"date": ..., "close": ...}, ...]，顺序以接口为准; 失败返回 []
        """
        data = self._request("historical-price-eod/full", {
            "symbol": symbol,
            "from": from_date,
            "to": to_date,
        })
        if isinstance(data, dict):
            data = data.get("historical")
        if not isinstance(data, list):
            return []
        return [
            {"date": row.get("date"), "close": row.get("close", row.get("price"))}
            for row in data
            if isinstance(row, dict)
        ]


# 单例
fmp_client = FMPClient()
