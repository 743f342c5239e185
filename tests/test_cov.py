# tests/test_cov.py
import numpy as np
import pytest
from scipy.linalg import cholesky as scipy_cholesky

from statsutils import (
    DimensionMismatchError,
    ShapeError,
    sqrtcov,
    cov,
    sqrtcor,
    std,
    combine,
    cholesky,
    pivoted_cholesky,
    qr,
)
from statsutils.linalg.linop import (
    DenseLinOp,
    DiagonalLinOp,
    TriangularLinOp,
    RootLinOp,
    CholeskyLinOp,
)


# ------------------------------ Helpers ------------------------------

def _weighted_cov(X: np.ndarray, w: np.ndarray, correction: float) -> np.ndarray:
    """sum w (x - m)(x - m)^T / (sum w - correction)."""
    m = (w[:, None] * X).sum(axis=0) / w.sum()
    diff = X - m
    return diff.T @ (diff * w[:, None]) / (w.sum() - correction)


# ------------------------------ From data ------------------------------

def test_cov_unit_weights_matches_numpy(data, unit_weights):
    assert np.allclose(cov(data, unit_weights), np.cov(data, rowvar=False))


def test_cov_weighted_uncorrected_matches_numpy_aweights(data, weights):
    expected = np.cov(data, rowvar=False, aweights=weights, ddof=0)
    assert np.allclose(cov(data, weights, corrected=False), expected)


def test_cov_weighted_corrected(data, weights):
    assert np.allclose(cov(data, weights), _weighted_cov(data, weights, 1.0))


def test_cov_reference_values(squares):
    expected = np.array([
        [0.00160751, 0.00392233, 0.00623714],
        [0.00392233, 0.0096665, 0.0154107],
        [0.00623714, 0.0154107, 0.0245842],
    ])
    assert np.allclose(cov(squares, [1, 2, 3, 4]), expected, rtol=1e-5)


def test_sqrtcov_round_trip(data, weights):
    R = sqrtcov(data, weights)
    assert R.shape == data.shape
    assert np.allclose(R.T @ R, _weighted_cov(data, weights, 1.0))

    R0 = sqrtcov(data, weights, corrected=False)
    assert np.allclose(R0.T @ R0, _weighted_cov(data, weights, 0.0))


def test_sqrtcov_without_weights_equals_unit_weights(data, unit_weights):
    X = sqrtcov(data, unit_weights)
    assert np.allclose(X.T @ X, np.cov(data, rowvar=False))
    assert np.allclose(sqrtcov(data), X)


def test_sqrtcov_reference_values(squares):
    expected = np.array([
        [-0.0208333, -0.0578704, -0.0949074],
        [-0.0196419, -0.045831, -0.0720201],
        [-0.00400938, -0.00400938, -0.00400938],
        [0.0277778, 0.0648148, 0.101852],
    ])
    assert np.allclose(sqrtcov(squares, [1, 2, 3, 4]), expected, rtol=1e-4)


def test_sqrtcov_is_row_scaled_centered_data(data, weights):
    m = np.average(data, axis=0, weights=weights)
    sv = 1.0 / (weights.sum() - 1.0)
    expected = np.sqrt(weights)[:, None] * (data - m) * np.sqrt(sv)
    assert np.allclose(sqrtcov(data, weights), expected)


def test_zero_weight_rows_do_not_contribute(data):
    w = np.array([1.0, 0.0, 2.0, 1.5])
    R = sqrtcov(data, w)
    assert np.all(R[1] == 0.0)
    assert np.allclose(cov(data, w), cov(data[[0, 2, 3]], w[[0, 2, 3]]))


def test_integer_data_is_promoted():
    X = np.array([[1, 2], [3, 5], [4, 4]])
    assert np.allclose(cov(X), np.cov(X.astype(float), rowvar=False))


@pytest.mark.parametrize("fn", [sqrtcov, cov, sqrtcor, std])
def test_rejects_mismatched_weights(fn, data):
    with pytest.raises(DimensionMismatchError):
        fn(data, np.ones(3))


def test_rejects_non_finite_data(data):
    bad = data.copy()
    bad[0, 0] = np.nan
    with pytest.raises(ValueError):
        sqrtcov(bad)
    with pytest.raises(ValueError):
        cov(data, [1.0, np.inf, 1.0, 1.0])


# --------------------------- From factorizations ---------------------------

def test_sqrtcov_cholesky_is_upper_factor(spd_matrix):
    U = sqrtcov(cholesky(spd_matrix))
    assert np.allclose(U, scipy_cholesky(spd_matrix, lower=False))
    assert np.allclose(U, np.triu(U))
    assert np.allclose(U.T @ U, spd_matrix)


def test_sqrtcov_pivoted_cholesky_recovers_matrix(spd_matrix):
    F = pivoted_cholesky(spd_matrix)
    # Largest diagonal entry is pivoted first
    assert F.perm[0] == 2
    R = sqrtcov(F)
    assert np.allclose(R.T @ R, spd_matrix)
    # The pivoted factor itself does not reproduce A in the original order
    assert not np.allclose(F.factor.T @ F.factor, spd_matrix)


def test_sqrtcov_qr(data):
    R = sqrtcov(qr(data))
    assert R.shape == (3, 3)
    assert np.allclose(R.T @ R, data.T @ data)


# ----------------------------- Structured input -----------------------------

def test_sqrtcov_diagonal_linop():
    root = sqrtcov(DiagonalLinOp([4.0, 9.0, 0.25]))
    assert isinstance(root, DiagonalLinOp)
    assert np.allclose(root.diag(), [2.0, 3.0, 0.5])


def test_sqrtcov_diagonal_linop_rejects_negative():
    with pytest.raises(np.linalg.LinAlgError):
        sqrtcov(DiagonalLinOp([1.0, -1.0]))


def test_sqrtcov_cholesky_linop_returns_upper_factor(spd_matrix):
    L = scipy_cholesky(spd_matrix, lower=True)
    root = sqrtcov(CholeskyLinOp(TriangularLinOp(L, lower=True)))
    assert isinstance(root, TriangularLinOp)
    assert root.has_flag("triangular_upper")
    assert np.allclose(root.to_dense(), L.T)


def test_sqrtcov_root_linop(data):
    S = data.T  # A = S @ S.T
    root = sqrtcov(RootLinOp(S))
    R = root.to_dense()
    assert np.allclose(R.T @ R, S @ S.T)


def test_sqrtcov_dense_linop(spd_matrix):
    root = sqrtcov(DenseLinOp(spd_matrix))
    assert isinstance(root, TriangularLinOp)
    assert np.allclose(root.to_dense().T @ root.to_dense(), spd_matrix)


def test_sqrtcov_dense_linop_rejects_asymmetric():
    with pytest.raises(ShapeError, match="not symmetric"):
        sqrtcov(DenseLinOp([[4.0, 1.0], [0.0, 3.0]]))
    with pytest.raises(ShapeError):
        sqrtcov(TriangularLinOp([[4.0, 0.0], [1.0, 3.0]], lower=True))


# --------------------------------- combine ---------------------------------

def test_combine_recovers_covariance(data, unit_weights):
    U = combine(sqrtcor(data, unit_weights), np.diag(std(data, unit_weights)))
    assert U.shape == (3, 3)
    assert np.allclose(U, np.triu(U))
    assert np.allclose(U.T @ U, np.cov(data, rowvar=False))


def test_combine_weighted(data, weights):
    U = combine(sqrtcor(data, weights), np.diag(std(data, weights)))
    assert np.allclose(U.T @ U, cov(data, weights))


def test_combine_accepts_diagonal_linop_and_vector(data):
    C = sqrtcor(data)
    s = std(data)
    expected = combine(C, np.diag(s))
    assert np.allclose(combine(C, DiagonalLinOp(s)), expected)
    assert np.allclose(combine(C, s), expected)


def test_combine_rejects_wrong_dimension(data):
    with pytest.raises(DimensionMismatchError):
        combine(sqrtcor(data), np.eye(4))
    with pytest.raises(DimensionMismatchError):
        combine(sqrtcor(data), DiagonalLinOp([1.0, 2.0]))


def test_combine_rejects_non_diagonal(data):
    stds = np.diag(std(data))
    stds[0, 1] = 0.1
    with pytest.raises(ShapeError):
        combine(sqrtcor(data), stds)
    with pytest.raises(ShapeError):
        combine(sqrtcor(data), np.ones((3, 2)))
