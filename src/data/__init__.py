# Data layer modules
from .fmp_client import fmp_client
from .market_data import (
    MarketDataService,
    MarketQuote,
    compute_cagr,
    is_home_market,
    to_provider_symbol,
)
