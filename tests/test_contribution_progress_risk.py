"""Tests for the per-holding calculators: contribution, progress, risk band."""
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from portfolio.valuation.contribution import (
    compute_contribution,
    format_percent,
    total_contribution_percent,
)
from portfolio.valuation.progress import compute_progress
from portfolio.valuation.risk import RiskBand, classify_risk


class TestContribution:
    def test_allocation_times_growth(self):
        assert compute_contribution(66.6667, 0.08) == pytest.approx(0.0533, abs=1e-4)
        assert compute_contribution(33.3333, 0.04) == pytest.approx(0.0133, abs=1e-4)

    def test_none_without_growth_rate(self):
        assert compute_contribution(50.0, None) is None

    def test_zero_allocation_with_known_rate_is_zero(self):
        result = compute_contribution(0.0, 0.12)
        assert result is not None
        assert result == 0.0

    def test_zero_growth_rate_is_not_none(self):
        assert compute_contribution(40.0, 0.0) == 0.0

    def test_negative_growth_rate(self):
        assert compute_contribution(50.0, -0.1) == pytest.approx(-0.05)

    def test_total_skips_missing(self):
        assert total_contribution_percent([0.05, None, 0.015]) == pytest.approx(6.5)

    def test_total_of_nothing(self):
        assert total_contribution_percent([]) == 0
        assert total_contribution_percent([None, None]) == 0

    def test_format_percent(self):
        assert format_percent(0.053333) == "5.33"
        assert format_percent(0.0) == "0.00"
        assert format_percent(0.12345, digits=1) == "12.3"
        assert format_percent(None) is None


class TestProgress:
    def test_boundaries(self):
        assert compute_progress(0, 100) == 0
        assert compute_progress(100, 0) == 0
        assert compute_progress(100, 100) == 100
        assert compute_progress(150, 100) == 150

    def test_partial(self):
        assert compute_progress(1, 3) == pytest.approx(33.3333, abs=1e-4)

    def test_no_target_no_holding(self):
        assert compute_progress(0, 0) == 0


class TestRiskClassifier:
    @pytest.mark.parametrize("pct,band", [
        (2, RiskBand.CONSERVATIVE),
        (4, RiskBand.MODERATE),
        (7, RiskBand.BALANCED),
        (10, RiskBand.GROWTH),
        (15, RiskBand.AGGRESSIVE),
    ])
    def test_boundary_belongs_to_upper_band(self, pct, band):
        assert classify_risk(pct) == band
        assert band.lower_bound == pct

    @pytest.mark.parametrize("pct,band", [
        (-3.0, RiskBand.ULTRA_CONSERVATIVE),
        (0.0, RiskBand.ULTRA_CONSERVATIVE),
        (1.99, RiskBand.ULTRA_CONSERVATIVE),
        (3.999, RiskBand.CONSERVATIVE),
        (6.67, RiskBand.MODERATE),
        (9.5, RiskBand.BALANCED),
        (14.99, RiskBand.GROWTH),
        (42.0, RiskBand.AGGRESSIVE),
    ])
    def test_inside_bands(self, pct, band):
        assert classify_risk(pct) == band

    def test_band_metadata(self):
        assert RiskBand.MODERATE.value == "moderate"
        assert RiskBand.ULTRA_CONSERVATIVE.label == "Ultra Conservative"
        assert RiskBand.AGGRESSIVE.risk_level == "high"

    def test_bands_are_ordered(self):
        bounds = [band.lower_bound for band in RiskBand]
        assert bounds == sorted(bounds)
