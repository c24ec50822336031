import logging

import numpy as np
import pytest

from chartstats import (
    DEFAULT_ENGINE,
    ChartStatsError,
    DegenerateInputError,
    DistributionContext,
    DistributionEngine,
    FnStatistic,
    InvalidArgumentError,
    histogram,
    quantile,
    silverman,
    sturges,
    summarize,
    summarize_distribution,
)
from chartstats.engine import _ensure_ctx, stat_iqr


def test_reference_scenarios():
    data = [1, 2, 3, 4, 5]
    assert (quantile(data, 0.5), quantile(data, 0.25), quantile(data, 0.75)) == (3.0, 2.0, 4.0)

    stats = summarize([1, 2, 3, 4, 100], "tukey")
    assert (stats.q1, stats.q3, stats.iqr) == (2.0, 4.0, 2.0)
    assert stats.outliers == (100.0,)
    assert stats.whisker_high == 4.0

    assert DEFAULT_ENGINE.compute([1, 1, 1, 1], select=("bin_count",)) == {"bin_count": sturges([1, 1, 1, 1])}
    assert sturges([1, 1, 1, 1]) == 3

    bins = histogram(list(range(11)), 5)
    assert len(bins) == 5 and bins[-1].count == 3

    assert silverman([]) == 1.0
    assert silverman([5]) == 0.0


def test_empty_sample_fallbacks():
    result = DEFAULT_ENGINE.compute([])
    assert result["iqr"] == 0.0
    assert result["boxplot"].outliers == ()
    assert result["histogram"] == []
    assert result["kde"] == []
    assert result["bin_count"] == 10
    assert result["bandwidth"] == 1.0


def test_require_data_raises_on_empty():
    with pytest.raises(DegenerateInputError):
        DEFAULT_ENGINE.compute([], require_data=True)
    with pytest.raises(DegenerateInputError):
        DEFAULT_ENGINE.compute([np.nan], nan_policy="omit", require_data=True)


def test_constant_sample_every_statistic_finite():
    result = DEFAULT_ENGINE.compute([4.0, 4.0, 4.0])
    assert result["bandwidth"] == 1.0
    assert len(result["histogram"]) == 1
    assert all(np.isfinite(p.y) for p in result["kde"])


def test_nan_policy_from_context():
    data = [1.0, np.nan, 3.0]
    with pytest.raises(InvalidArgumentError, match="non-finite"):
        DEFAULT_ENGINE.compute(data)
    result = DEFAULT_ENGINE.compute(data, nan_policy="omit", select=("quartiles",))
    assert result["quartiles"]["q2"] == 2.0


def test_engine_skips_typed_failures(caplog):
    def bad(sample, ctx):
        raise InvalidArgumentError("bad parameter")

    engine = DistributionEngine([FnStatistic("iqr", stat_iqr), FnStatistic("bad", bad)])
    with caplog.at_level(logging.WARNING, logger="chartstats.engine"):
        result = engine.compute([1.0, 2.0, 3.0])
    assert result == {"iqr": pytest.approx(1.0)}
    assert "Skipping statistic bad" in caplog.text


def test_engine_skips_histogram_with_single_edge():
    result = DEFAULT_ENGINE.compute([1.0, 2.0], bins=[1.0], select=("histogram", "bin_count"))
    assert "histogram" not in result
    assert result["bin_count"] == 0


def test_engine_propagates_unexpected_errors():
    def boom(sample, ctx):
        raise RuntimeError("boom")

    engine = DistributionEngine([FnStatistic("boom", boom)])
    with pytest.raises(RuntimeError, match="boom"):
        engine.compute([1.0])


def test_error_taxonomy():
    assert issubclass(InvalidArgumentError, ChartStatsError)
    assert issubclass(InvalidArgumentError, ValueError)
    assert issubclass(DegenerateInputError, ChartStatsError)


def test_ensure_ctx_handles_dict_and_attributes():
    ctx_from_dict = _ensure_ctx({"num_points": 10})
    assert isinstance(ctx_from_dict, DistributionContext)
    assert ctx_from_dict.num_points == 10

    class AttrCtx:
        def __init__(self):
            self.bins = "sturges"
            self.whisker_method = "minmax"

    ctx_from_attrs = _ensure_ctx(AttrCtx())
    assert ctx_from_attrs.bins == "sturges"
    assert ctx_from_attrs.whisker_method == "minmax"

    assert _ensure_ctx(None) == DistributionContext()


def test_ensure_ctx_rejects_invalid_object():
    with pytest.raises(TypeError):
        _ensure_ctx(42)


def test_engine_compute_with_dict_ctx():
    result = DEFAULT_ENGINE.compute([1, 2, 3, 4, 100], {"whisker_method": "minmax"}, select=("boxplot",))
    assert result["boxplot"].whisker_high == 100.0


def test_thread_backend_through_context(sample_data):
    seq = DEFAULT_ENGINE.compute(sample_data, select=("kde",), num_points=32)
    par = DEFAULT_ENGINE.compute(sample_data, select=("kde",), num_points=32, backend="thread")
    assert np.allclose([p.y for p in seq["kde"]], [p.y for p in par["kde"]], rtol=1e-12, atol=0)


def test_unknown_backend_fails_with_typed_error():
    with pytest.raises(InvalidArgumentError, match="backend"):
        summarize_distribution([1.0, 2.0, 3.0], backend="gpu")
    with pytest.raises(ChartStatsError):
        DistributionContext(backend="gpu")
