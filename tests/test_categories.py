"""Tests for portfolio/valuation/categories.py"""
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from portfolio.holdings.schema import Holding
from portfolio.valuation.categories import CategoryAggregator
from portfolio.valuation.engine import recompute


def _make_holding(hid, category, price, current=0, target=0, growth_rate=None):
    return Holding(
        id=hid, symbol=hid.upper(), category=category, price=price,
        current_quantity=current, target_quantity=target, growth_rate=growth_rate,
    )


def _aggregate(holdings, view="current"):
    """Aggregate holdings after the engine has filled in their amounts."""
    enriched = recompute(holdings).holdings
    return CategoryAggregator(enriched, view)


class TestCategoryTotals:
    def test_single_category_weighted_rate(self):
        agg = _aggregate([
            _make_holding("a", "Core ETF", 100.0, current=10, growth_rate=0.08),
            _make_holding("b", "Core ETF", 50.0, current=10, growth_rate=0.04),
        ])
        core = agg.summarize()["Core ETF"]
        assert core.total_amount == 1500
        assert core.allocation_of_portfolio == pytest.approx(1.0)
        assert core.weighted_growth_rate == pytest.approx(0.066667, abs=1e-6)
        assert core.category_contribution == pytest.approx(0.066667, abs=1e-6)
        assert core.holding_count == 2
        assert core.symbols == ["A", "B"]

    def test_category_totals_sum_to_view_total(self):
        holdings = [
            _make_holding("a", "Core ETF", 101.3, current=13, growth_rate=0.07),
            _make_holding("b", "High-Growth Stock", 512.0, current=2, growth_rate=0.25),
            _make_holding("c", "Core ETF", 48.9, current=40),
            _make_holding("d", "Swing Trade", 9.99, current=77, growth_rate=-0.02),
        ]
        agg = _aggregate(holdings)
        assert sum(s.total_amount for s in agg.summarize().values()) == agg.view_total
        assert sum(s.allocation_of_portfolio for s in agg.summarize().values()) == pytest.approx(1.0)

    def test_weighting_uses_category_total(self):
        # Core: 1000 with 10% growth, 1000 without; High-Growth: 2000 at 5%
        agg = _aggregate([
            _make_holding("a", "Core ETF", 100.0, current=10, growth_rate=0.10),
            _make_holding("b", "Core ETF", 100.0, current=10),
            _make_holding("c", "High-Growth Stock", 200.0, current=10, growth_rate=0.05),
        ])
        summaries = agg.summarize()
        core = summaries["Core ETF"]
        assert core.total_amount == 2000
        assert core.weighted_growth_rate == pytest.approx(0.10)
        assert core.allocation_of_portfolio == pytest.approx(0.5)
        assert core.category_contribution == pytest.approx(0.05)
        assert summaries["High-Growth Stock"].category_contribution == pytest.approx(0.025)

    def test_no_growth_rates_gives_zero(self):
        agg = _aggregate([_make_holding("a", "Thematic ETF", 30.0, current=5)])
        thematic = agg.summarize()["Thematic ETF"]
        assert thematic.weighted_growth_rate == 0.0
        assert thematic.category_contribution == 0.0

    def test_zero_quantity_holdings_excluded(self):
        agg = _aggregate([
            _make_holding("a", "Core ETF", 10.0, current=5, target=0),
            _make_holding("b", "High-Dividend ETF", 10.0, current=0, target=5),
        ])
        assert list(agg.summarize()) == ["Core ETF"]
        target_agg = _aggregate([
            _make_holding("a", "Core ETF", 10.0, current=5, target=0),
            _make_holding("b", "High-Dividend ETF", 10.0, current=0, target=5),
        ], view="target")
        assert list(target_agg.summarize()) == ["High-Dividend ETF"]

    def test_held_without_price(self):
        agg = _aggregate([
            _make_holding("a", "Core ETF", 10.0, current=5, growth_rate=0.05),
            _make_holding("b", "Swing Trade", None, current=5, growth_rate=0.30),
        ])
        swing = agg.summarize()["Swing Trade"]
        assert swing.total_amount == 0
        assert swing.allocation_of_portfolio == 0.0
        assert swing.weighted_growth_rate == 0.0
        assert swing.category_contribution == 0.0

    def test_empty_view(self):
        agg = CategoryAggregator([], "current")
        assert agg.view_total == 0
        assert agg.summarize() == {}
        assert agg.by_amount() == []
        assert agg.by_contribution() == []

    def test_explicit_view_total(self):
        enriched = recompute([_make_holding("a", "Core ETF", 10.0, current=10)]).holdings
        agg = CategoryAggregator(enriched, "current", view_total=400)
        assert agg.summarize()["Core ETF"].allocation_of_portfolio == pytest.approx(0.25)


class TestCategoryOrdering:
    def _holdings(self):
        return [
            _make_holding("a", "Swing Trade", 20.0, current=10, growth_rate=0.50),    # 200
            _make_holding("b", "Core ETF", 100.0, current=10, growth_rate=0.05),      # 1000
            _make_holding("c", "Thematic ETF", 50.0, current=10),                     # 500
            _make_holding("d", "High-Dividend ETF", 20.0, current=10),                # 200
        ]

    def test_by_amount(self):
        order = [s.category for s in _aggregate(self._holdings()).by_amount()]
        # Swing and High-Dividend tie at 200; first appearance wins
        assert order == ["Core ETF", "Thematic ETF", "Swing Trade", "High-Dividend ETF"]

    def test_by_contribution(self):
        order = [s.category for s in _aggregate(self._holdings()).by_contribution()]
        # Swing: 200/1900 * 0.50 = 0.0526; Core: 1000/1900 * 0.05 = 0.0263
        assert order[:2] == ["Swing Trade", "Core ETF"]
        # zero-contribution categories keep first-appearance order
        assert order[2:] == ["Thematic ETF", "High-Dividend ETF"]

    def test_ties_keep_insertion_order(self):
        agg = _aggregate([
            _make_holding("a", "Thematic ETF", 10.0, current=1),
            _make_holding("b", "Core ETF", 10.0, current=1),
            _make_holding("c", "Swing Trade", 10.0, current=1),
        ])
        assert [s.category for s in agg.by_contribution()] == ["Thematic ETF", "Core ETF", "Swing Trade"]
        assert [s.category for s in agg.by_amount()] == ["Thematic ETF", "Core ETF", "Swing Trade"]

    def test_sort_views_share_one_aggregation(self):
        agg = _aggregate(self._holdings())
        by_amount = agg.by_amount()
        by_contribution = agg.by_contribution()
        assert {id(s) for s in by_amount} == {id(s) for s in by_contribution}

    def test_to_dict(self):
        data = _aggregate(self._holdings()).summarize()["Core ETF"].to_dict()
        assert data["total_amount"] == 1000
        assert data["symbols"] == ["B"]
        assert set(data) == {
            "category", "total_amount", "allocation_of_portfolio", "weighted_growth_rate",
            "category_contribution", "holding_count", "symbols",
        }
