"""chartstats package public API."""

from .bandwidth import resolve_bandwidth, silverman
from .bins import freedman_diaconis, resolve_bins, sturges
from .boxplot import BoxPlotStats, WhiskerMethod, notch_interval, summarize, tukey_fences
from .density import (
    DensityPoint,
    ViolinSummary,
    density_to_counts,
    gaussian_kernel,
    kde,
    normalize_peak,
    scale_density,
    violin,
)
from .engine import (
    DEFAULT_ENGINE,
    DistributionContext,
    DistributionEngine,
    FnStatistic,
    summarize_distribution,
    summarize_groups,
)
from .errors import (
    ChartStatsError,
    DegenerateInputError,
    InvalidArgumentError,
    InvalidBandwidthError,
    InvalidProbabilityError,
)
from .histogram import HistogramBin, bin_edges, histogram
from .quantiles import Quartiles, iqr, quantile, quantiles, quartiles
from .sample import NanPolicy, Sample, group_values

__all__ = [
    "Sample",
    "NanPolicy",
    "group_values",
    "quantile",
    "quantiles",
    "quartiles",
    "iqr",
    "Quartiles",
    "summarize",
    "tukey_fences",
    "notch_interval",
    "BoxPlotStats",
    "WhiskerMethod",
    "sturges",
    "freedman_diaconis",
    "resolve_bins",
    "histogram",
    "bin_edges",
    "HistogramBin",
    "silverman",
    "resolve_bandwidth",
    "kde",
    "gaussian_kernel",
    "scale_density",
    "density_to_counts",
    "normalize_peak",
    "violin",
    "DensityPoint",
    "ViolinSummary",
    "DistributionContext",
    "DistributionEngine",
    "FnStatistic",
    "DEFAULT_ENGINE",
    "summarize_distribution",
    "summarize_groups",
    "ChartStatsError",
    "InvalidArgumentError",
    "InvalidProbabilityError",
    "InvalidBandwidthError",
    "DegenerateInputError",
]

__version__ = "0.1.0"
