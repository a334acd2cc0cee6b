"""
全局测试守卫: 测试期间把投资组合存储重定向到 tmp_path，避免改写真实数据文件。
"""
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from portfolio.holdings.schema import Category, Holding


@pytest.fixture(autouse=True)
def isolated_store(tmp_path):
    """Every test gets its own empty portfolio file."""
    store_file = tmp_path / "portfolios" / "portfolios.json"
    with patch("portfolio.holdings.manager._PORTFOLIO_FILE", store_file):
        yield store_file


@pytest.fixture
def sample_holdings():
    """Two holdings from the worked example plus one without market data."""
    return [
        Holding(
            id="h1", symbol="0050", name="Yuanta Taiwan 50",
            category=Category.CORE_ETF.value,
            price=100.0, current_quantity=10, target_quantity=20, growth_rate=0.08,
        ),
        Holding(
            id="h2", symbol="VOO", name="Vanguard S&P 500",
            category=Category.CORE_ETF.value,
            price=50.0, current_quantity=10, target_quantity=5, growth_rate=0.04,
        ),
        Holding(
            id="h3", symbol="NVDA", name="NVIDIA",
            category=Category.HIGH_GROWTH.value,
            price=None, current_quantity=0, target_quantity=3, growth_rate=None,
        ),
    ]
