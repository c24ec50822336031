import numpy as np
import pytest


@pytest.fixture
def sample_data():
    """Fixture providing a unimodal sample for testing"""
    rng = np.random.default_rng(42)
    return rng.normal(5.0, 2.0, 1000)


@pytest.fixture
def small_samples():
    """Assorted small samples, including duplicates and sizes 1-3"""
    rng = np.random.default_rng(7)
    samples = [
        [1.0],
        [1.0, 2.0],
        [3.0, 1.0, 2.0],
        [1.0, 1.0, 1.0, 1.0],
        [1.0, 2.0, 3.0, 4.0, 100.0],
        [-50.0, 0.0, 0.1, 0.2, 0.3],
    ]
    samples.extend(rng.standard_cauchy(size=n).tolist() for n in range(1, 25))
    return samples


@pytest.fixture
def ctx_basic():
    """Basic context for engine tests"""
    return {
        "bins": "auto",
        "bandwidth": "auto",
        "num_points": 64,
        "whisker_method": "tukey",
        "nan_policy": "raise",
        "probabilities": (0.05, 0.25, 0.5, 0.75, 0.95),
    }
