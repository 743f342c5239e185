# cor.py
"""
Square roots of weighted Pearson correlation matrices.
"""
from __future__ import annotations

import logging

import numpy as np

from .custom_types import Array, ArrayLike
from .array_backend.utils import _ensure_data_matrix, _ensure_weights
from .weights import _center, weighted_scale
from .cov import _sqrtcov_centered
from .std import _std_centered
from .linalg.operations import reconstruct

__all__ = ["sqrtcor", "cor"]

_LOGGER = logging.getLogger(__name__)


def sqrtcor(data: ArrayLike, weights: ArrayLike | None = None, *, corrected: bool = True) -> Array:
    """Compute the square root of a weighted Pearson correlation matrix.

    Given an (n, m) matrix of finite values, returns another (n, m) matrix
    `C` such that ``C.T @ C`` is the weighted correlation of `data`. `C` is
    the covariance root of `sqrtcov` with each column divided by the
    weighted standard deviation of that variable; both are computed from the
    same centered data and scale value.

    A variable with zero weighted variance has no defined correlation: its
    column comes back as NaN/Inf rather than raising. Drop constant
    variables beforehand if that matters.

    Args:
        data: array-like, shape (n, m) or (n,). Rows are observations.
        weights: array-like, shape (n,). If None, every observation has weight one.
        corrected: bias correction passed to `weighted_scale`. It cancels in the
            correlation, but is kept so the intermediate roots match `sqrtcov`.

    Returns:
        Array of shape (n, m).

    Raises:
        DimensionMismatchError: if the number of weights differs from n.

    Example:
        >>> X = (np.arange(1, 13).reshape(3, 4).T / 12) ** 2
        >>> C = sqrtcor(X, [1, 2, 3, 4])
        >>> np.allclose(C.T @ C, cor(X, [1, 2, 3, 4]))
        True
    """
    X = _ensure_data_matrix(data)
    w = _ensure_weights(weights, X.shape[0])

    sv = weighted_scale(w, corrected)
    centered = _center(X, w)
    stds = _std_centered(centered, w, sv)

    zero_var = np.flatnonzero(stds == 0)
    if zero_var.size:
        _LOGGER.debug("sqrtcor: variables %s have zero weighted variance", zero_var.tolist())

    with np.errstate(divide="ignore", invalid="ignore"):
        return _sqrtcov_centered(centered, w, sv) * (1.0 / stds)[np.newaxis, :]


def cor(data: ArrayLike, weights: ArrayLike | None = None, *, corrected: bool = True) -> Array:
    """Compute the weighted Pearson correlation matrix of `data`.

    Formed as ``C.T @ C`` from ``C = sqrtcor(data, weights, corrected=corrected)``.
    """
    return reconstruct(sqrtcor(data, weights, corrected=corrected))
