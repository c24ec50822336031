import pytest

from chartstats import (
    DEFAULT_ENGINE,
    BoxPlotStats,
    DistributionContext,
    DistributionEngine,
    FnStatistic,
    InvalidArgumentError,
    Sample,
    freedman_diaconis,
    group_values,
    histogram,
    kde,
    summarize,
    summarize_distribution,
    summarize_groups,
)
from chartstats.engine import build_default_engine, stat_iqr, stat_quartiles


class TestDistributionEngine:
    """Test DistributionEngine class"""

    def test_engine_creation(self):
        """Test creating an engine with statistics"""
        engine = DistributionEngine([FnStatistic("iqr", stat_iqr), FnStatistic("quartiles", stat_quartiles)])
        assert engine.available() == ("iqr", "quartiles")

    def test_engine_compute(self, sample_data, ctx_basic):
        """Test computing all statistics"""
        engine = DistributionEngine([FnStatistic("iqr", stat_iqr), FnStatistic("quartiles", stat_quartiles)])
        result = engine.compute(sample_data, **ctx_basic)
        assert set(result) == {"iqr", "quartiles"}
        assert result["quartiles"]["q3"] - result["quartiles"]["q1"] == pytest.approx(result["iqr"])

    def test_default_engine_compute(self, sample_data, ctx_basic):
        """Test default engine computes every chart statistic"""
        result = build_default_engine().compute(sample_data, **ctx_basic)
        assert set(result) == {
            "quantiles",
            "quartiles",
            "iqr",
            "boxplot",
            "notch",
            "bin_count",
            "histogram",
            "bandwidth",
            "kde",
        }
        assert isinstance(result["boxplot"], BoxPlotStats)
        assert result["bin_count"] == freedman_diaconis(sample_data) == len(result["histogram"])
        assert len(result["kde"]) == ctx_basic["num_points"]
        assert list(result["quantiles"]) == list(ctx_basic["probabilities"])

    def test_engine_without_density(self, sample_data):
        """Test building engine without the KDE statistics"""
        result = build_default_engine(include_density=False).compute(sample_data)
        assert "kde" not in result
        assert "bandwidth" not in result

    def test_results_match_direct_calls(self, sample_data):
        """Test the shared sample gives the same values as the standalone functions"""
        ctx = DistributionContext(bins=12, bandwidth=0.4, num_points=30, whisker_method="minmax")
        result = DEFAULT_ENGINE.compute(sample_data, ctx)
        assert result["boxplot"] == summarize(sample_data, "minmax")
        assert result["histogram"] == histogram(sample_data, 12)
        assert result["kde"] == kde(sample_data, 0.4, 30)
        assert result["bandwidth"] == 0.4

    def test_select(self, sample_data):
        """Test computing a subset of statistics"""
        result = DEFAULT_ENGINE.compute(sample_data, select=("iqr", "boxplot"))
        assert set(result) == {"iqr", "boxplot"}

    def test_select_unknown(self, sample_data):
        """Test selecting an unknown statistic fails"""
        with pytest.raises(InvalidArgumentError, match="Unknown statistics"):
            DEFAULT_ENGINE.compute(sample_data, select=("mode",))

    def test_summarize_distribution(self):
        """Test the module-level shortcut"""
        result = summarize_distribution([1, 2, 3, 4, 100], select=("boxplot",))
        assert result["boxplot"].outliers == (100.0,)

    def test_accepts_sample_instance(self, sample_data):
        """Test a prebuilt Sample is used as is"""
        s = Sample(sample_data)
        assert DEFAULT_ENGINE.compute(s, select=("iqr",)) == DEFAULT_ENGINE.compute(sample_data, select=("iqr",))


class TestDistributionContext:
    """Test configuration validation"""

    def test_defaults(self):
        """Test default field values"""
        ctx = DistributionContext()
        assert ctx.bins == "auto"
        assert ctx.bandwidth == "auto"
        assert ctx.num_points == 100
        assert ctx.whisker_method == "tukey"
        assert ctx.nan_policy == "raise"

    def test_with_overrides(self):
        """Test overrides produce a modified copy"""
        base = DistributionContext()
        ctx = base.with_overrides(num_points=20, whisker_method="minmax")
        assert ctx.num_points == 20
        assert ctx.whisker_method == "minmax"
        assert base.num_points == 100

    @pytest.mark.parametrize(
        ("kwargs", "message"),
        [
            ({"num_points": 1}, "num_points"),
            ({"num_points": 2.0}, "num_points"),
            ({"probabilities": (0.5, 1.2)}, "probabilities"),
            ({"whisker_method": "iqr"}, "whisker_method"),
            ({"nan_policy": "propagate"}, "nan_policy"),
            ({"bandwidth": 0.0}, "bandwidth"),
            ({"bandwidth": "scott"}, "bandwidth"),
            ({"backend": "gpu"}, "backend"),
            ({"backend": object()}, "backend"),
        ],
    )
    def test_validation_errors(self, kwargs, message):
        """Test out-of-range fields are rejected"""
        with pytest.raises(ValueError, match=message):
            DistributionContext(**kwargs)


class TestGroupedCompute:
    """Test per-category evaluation"""

    def test_compute_groups(self):
        """Test each category gets its own statistics in input order"""
        groups = {"low": [1, 2, 3, 4, 100], "high": [10, 20, 30]}
        result = DEFAULT_ENGINE.compute_groups(groups, select=("boxplot", "iqr"))
        assert list(result) == ["low", "high"]
        assert result["low"]["boxplot"].outliers == (100.0,)
        assert result["high"]["iqr"] == pytest.approx(10.0)

    def test_groups_share_context(self):
        """Test one context applies to every group"""
        groups = {"a": [1, 2, 3, 4, 100], "b": [5, 6, 7, 8, 90]}
        result = summarize_groups(groups, whisker_method="minmax", select=("boxplot",))
        assert all(r["boxplot"].outliers == () for r in result.values())

    def test_from_records(self):
        """Test grouping raw records then summarising each category"""
        records = [("a", 1.0), ("b", "n/a"), ("a", 3.0), ("b", 2.0), ("a", None)]
        result = summarize_groups(group_values(records), select=("quartiles",))
        assert result["a"]["quartiles"]["q2"] == 2.0
        assert result["b"]["quartiles"]["q2"] == 2.0

    def test_empty_group_uses_fallbacks(self):
        """Test a category with no usable values gets the empty-sample defaults"""
        result = summarize_groups({"none": []}, select=("iqr", "histogram"))
        assert result["none"] == {"iqr": 0.0, "histogram": []}
