import pytest
import numpy as np


@pytest.fixture
def rng():
    return np.random.default_rng(42)

@pytest.fixture
def data():
    return np.array([
        [0.6948, 0.4387, 0.1869],
        [0.3171, 0.3816, 0.4898],
        [0.9502, 0.7655, 0.4456],
        [0.0344, 0.7952, 0.6463],
    ])

@pytest.fixture
def unit_weights():
    return np.ones(4)

@pytest.fixture
def weights():
    return np.array([0.25, 0.33, 0.81, 0.14])

@pytest.fixture
def squares():
    # 4x3 matrix whose columns are (1..4)/12, (5..8)/12, (9..12)/12, squared
    return (np.arange(1, 13).reshape(3, 4).T / 12.0) ** 2

@pytest.fixture
def spd_matrix():
    # U.T @ U for the upper triangle of a 3x3 matrix of squares
    U = np.triu((np.arange(1, 10).reshape(3, 3).T / 12.0) ** 2)
    return U.T @ U
