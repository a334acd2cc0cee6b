"""
Holdings — 持仓数据

Core types: Holding, Portfolio, Category
Manager: load/save/create/update/delete named portfolios
"""
from portfolio.holdings.schema import Holding, Portfolio, Category, new_holding_id
from portfolio.holdings.manager import (
    list_portfolios,
    get_portfolio,
    find_portfolio_by_name,
    get_latest_portfolio,
    create_portfolio,
    update_portfolio,
    delete_portfolio,
)

__all__ = [
    "Holding",
    "Portfolio",
    "Category",
    "new_holding_id",
    "list_portfolios",
    "get_portfolio",
    "find_portfolio_by_name",
    "get_latest_portfolio",
    "create_portfolio",
    "update_portfolio",
    "delete_portfolio",
]
