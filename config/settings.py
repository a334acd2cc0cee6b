"""
Allocation Tracker 配置
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# 项目根目录
PROJECT_ROOT = Path(__file__).parent.parent

# 自动加载 .env（API keys 等敏感配置）
load_dotenv(PROJECT_ROOT / ".env")

# 数据目录
DATA_DIR = PROJECT_ROOT / "data"
PORTFOLIO_DIR = DATA_DIR / "portfolios"
PORTFOLIO_FILE = PORTFOLIO_DIR / "portfolios.json"

# FMP API 配置 (从环境变量读取)
FMP_API_KEY = os.environ.get("FMP_API_KEY", "")
FMP_BASE_URL = "https://financialmodelingprep.com/stable"

# API 调用配置 (防限流)
API_CALL_INTERVAL = 0.5  # 秒，每次 API 调用间隔
API_RETRY_TIMES = 3
API_TIMEOUT = 30

# 币种配置: 所有金额以本币计价，美股报价按汇率换算
HOME_CURRENCY = "TWD"
FOREIGN_CURRENCY = "USD"
FX_SYMBOL = "USDTWD"
DEFAULT_EXCHANGE_RATE = float(os.environ.get("DEFAULT_USD_TWD_RATE", "31.5"))
FX_REFRESH_SECONDS = 3600  # 汇率缓存有效期

# 年化报酬率 (CAGR) 回看年数
GROWTH_LOOKBACK_YEARS = 5
