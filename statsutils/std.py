# std.py
"""
Weighted standard deviation along the observation axis.

These functions let an arbitrary vector be used as a weight vector with the
bias correction of `weighted_scale`, independently of how numpy or scipy
interpret weights.
"""
from __future__ import annotations

import numpy as np

from .custom_types import Array, ArrayLike
from .array_backend.utils import _ensure_data_matrix, _ensure_weights
from .weights import _center, weighted_scale

__all__ = ["std"]


def _std_centered(centered: Array, w: Array, sv: float) -> Array:
    """Weighted standard deviation from already centered data and scale value `sv`.

    You probably don't want to call this directly; it exists so that
    `sqrtcor` can reuse the centering and scale of the covariance root.
    """
    return np.sqrt(sv * (w @ centered**2))


def std(data: ArrayLike, weights: ArrayLike | None = None, *, corrected: bool = True) -> Array:
    """Compute the weighted standard deviation of each variable.

    Equivalent to the column norms of ``sqrtcov(data, weights, corrected=corrected)``,
    i.e. the square roots of the diagonal of the weighted covariance matrix.

    Args:
        data: array-like, shape (n, m) or (n,). Rows are observations.
        weights: array-like, shape (n,). If None, every observation has weight one.
        corrected: apply the bias correction of `weighted_scale`. Defaults to True.

    Returns:
        Array of shape (m,).

    Raises:
        DimensionMismatchError: if the number of weights differs from n.

    Example:
        >>> X = (np.arange(1, 13).reshape(3, 4).T / 12) ** 2
        >>> std(X, [1, 2, 3, 4])
        array([0.04009377, 0.09831834, 0.15679347])
    """
    X = _ensure_data_matrix(data)
    w = _ensure_weights(weights, X.shape[0])
    return _std_centered(_center(X, w), w, weighted_scale(w, corrected))
