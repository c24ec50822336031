import logging

import numpy as np
import pytest

from chartstats import InvalidBandwidthError, resolve_bandwidth, silverman
from chartstats.bandwidth import FALLBACK_BANDWIDTH


class TestSilverman:
    """Test Silverman's rule of thumb"""

    def test_formula_uses_population_std(self, sample_data):
        """Test 1.06 * sigma_pop * n^(-1/5)"""
        n = sample_data.size
        expected = 1.06 * np.std(sample_data, ddof=0) * n ** (-1 / 5)
        assert silverman(sample_data) == pytest.approx(expected)

    def test_small_sample(self):
        """Test a hand-computed value"""
        # sigma_pop of [1, 2, 3, 4] is sqrt(1.25)
        assert silverman([1, 2, 3, 4]) == pytest.approx(1.06 * np.sqrt(1.25) * 4 ** (-0.2))

    def test_empty_is_one(self):
        """Test the empty-sample default"""
        assert silverman([]) == 1.0

    def test_single_value_is_zero(self):
        """Test the degenerate single-value bandwidth"""
        assert silverman([5]) == 0.0

    def test_constant_is_zero(self):
        """Test repeated values give exactly zero"""
        assert silverman([0.1, 0.1, 0.1]) == 0.0


class TestResolveBandwidth:
    """Test bandwidth specification handling"""

    def test_auto_is_silverman(self, sample_data):
        """Test auto resolves to Silverman for ordinary data"""
        assert resolve_bandwidth(sample_data, "auto") == silverman(sample_data)

    def test_auto_degenerate_falls_back(self, caplog):
        """Test a zero Silverman bandwidth is replaced and logged"""
        with caplog.at_level(logging.WARNING, logger="chartstats.bandwidth"):
            h = resolve_bandwidth([5.0], "auto")
        assert h == FALLBACK_BANDWIDTH
        assert "fallback" in caplog.text

    def test_explicit_value_passes_through(self):
        """Test a positive number is returned unchanged"""
        assert resolve_bandwidth([1, 2, 3], 0.25) == 0.25

    @pytest.mark.parametrize("h", [0, -1.0, float("nan"), float("inf"), "scott", None])
    def test_invalid(self, h):
        """Test non-positive, non-finite and unknown bandwidths fail fast"""
        with pytest.raises(InvalidBandwidthError):
            resolve_bandwidth([1, 2, 3], h)
