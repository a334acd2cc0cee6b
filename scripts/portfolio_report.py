"""
投资组合估值报告入口
用法:
    python scripts/portfolio_report.py --list                        # 列出所有投资组合
    python scripts/portfolio_report.py                               # 最近更新的投资组合
    python scripts/portfolio_report.py --portfolio 长期配置           # 指定名称或 ID
    python scripts/portfolio_report.py --refresh --save              # 更新股价/CAGR 并保存
    python scripts/portfolio_report.py --set-current 0050=120 --set-target VOO=30
    python scripts/portfolio_report.py --output report.md            # 输出到文件
"""
import argparse
import logging
import sys
from pathlib import Path
from datetime import datetime

# 添加项目根目录到 path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from portfolio.holdings.manager import (
    find_portfolio_by_name,
    get_latest_portfolio,
    get_portfolio,
    list_portfolios,
)
from portfolio.valuation.report import format_amount, generate_valuation_summary
from portfolio.valuation.session import PortfolioSession
from src.data.market_data import MarketDataService

logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def _parse_quantity_edit(text: str):
    """Parse SYMBOL=QTY into (symbol, quantity)."""
    symbol, sep, qty = text.partition("=")
    if not sep or not symbol.strip():
        raise argparse.ArgumentTypeError(f"expected SYMBOL=QTY, got {text!r}")
    try:
        quantity = int(qty)
    except ValueError:
        raise argparse.ArgumentTypeError(f"quantity must be an integer: {text!r}")
    if quantity < 0:
        raise argparse.ArgumentTypeError(f"quantity must be >= 0: {text!r}")
    return symbol.strip().upper(), quantity


def print_portfolio_list():
    portfolios = list_portfolios()
    if not portfolios:
        print("尚无投资组合")
        return
    print(f"{'ID':<34} {'名称':<20} {'标的数':>6}  更新时间")
    for p in portfolios:
        print(f"{p.id:<34} {p.name:<20} {len(p.holdings):>6}  {p.updated_at[:19]}")


def _resolve_portfolio(key):
    if key is None:
        return get_latest_portfolio()
    return get_portfolio(key) or find_portfolio_by_name(key)


def _apply_edits(session: PortfolioSession, edits, field_setter) -> None:
    by_symbol = {h.symbol: h for h in session.holdings}
    for symbol, quantity in edits or []:
        holding = by_symbol.get(symbol)
        if holding is None:
            logger.warning(f"{symbol} 不在投资组合中，跳过")
            continue
        field_setter(holding.id, quantity)


def main():
    parser = argparse.ArgumentParser(description="投资组合估值报告")
    parser.add_argument("--list", action="store_true", help="列出所有投资组合")
    parser.add_argument("--portfolio", type=str, help="投资组合名称或 ID (默认最近更新)")
    parser.add_argument("--refresh", action="store_true", help="更新股价与 CAGR")
    parser.add_argument("--set-current", type=_parse_quantity_edit, action="append",
                        metavar="SYMBOL=QTY", help="修改现况数量")
    parser.add_argument("--set-target", type=_parse_quantity_edit, action="append",
                        metavar="SYMBOL=QTY", help="修改目标数量")
    parser.add_argument("--save", action="store_true", help="保存计算结果")
    parser.add_argument("--output", type=str, help="报告输出路径 (markdown)")

    args = parser.parse_args()

    if args.list:
        print_portfolio_list()
        return

    portfolio = _resolve_portfolio(args.portfolio)
    if portfolio is None:
        print("找不到投资组合" if args.portfolio else "尚无投资组合")
        sys.exit(1)

    print(f"\n{'='*60}")
    print(f"投资组合: {portfolio.name}")
    print(f"时间: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"{'='*60}\n")

    session = PortfolioSession.from_portfolio(portfolio, market=MarketDataService())

    _apply_edits(session, args.set_current, session.set_current_quantity)
    _apply_edits(session, args.set_target, session.set_target_quantity)

    if args.refresh:
        if session.refresh_market_data():
            print("✅ 股价与报酬率已更新")
        else:
            print("❌ 更新未提交")

    state = session.recalculate()
    report = generate_valuation_summary(state, title=f"{portfolio.name} Valuation Summary")

    if args.output:
        Path(args.output).write_text(report, encoding="utf-8")
        print(f"报告已写入 {args.output}")
    else:
        print(report)

    if args.save:
        saved = session.save()
        print(f"\n已保存「{saved.name}」: 现况 {format_amount(state.current.total_amount)} / "
              f"目标 {format_amount(state.target.total_amount)}")


if __name__ == "__main__":
    main()
