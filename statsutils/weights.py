# weights.py
"""
Weight normalization and centering shared by `std`, `sqrtcov` and `sqrtcor`.

The weights are arbitrary non-negative reals ("frequency-like" weights); they
are never normalized to sum to one. The bias correction convention is
controlled by the `corrected` flag:

.. math::

    s_v = \\frac{1}{\\sum_i w_i - c}, \\qquad c = 1 \\text{ if corrected else } 0

With unit weights and ``corrected=True`` this is the familiar ``1 / (n - 1)``.
"""
from __future__ import annotations

import numpy as np

from .custom_types import Array, ArrayLike
from .array_backend.utils import (
    _ensure_data_matrix,
    _ensure_real_scalar,
    _ensure_weights,
)

__all__ = ["weighted_scale", "center", "exponential_weights"]


def weighted_scale(weights: ArrayLike, corrected: bool = True) -> float:
    """Return the scalar normalization factor ``1 / (sum(weights) - corrected)``.

    No clamping is applied. If the weights sum to the correction term the
    result follows numpy division semantics (``inf`` or ``nan``); keeping the
    effective sample size above the correction term is the caller's job.

    Args:
        weights: array-like of shape (n,).
        corrected: apply the Bessel-style bias correction. Defaults to True.

    Returns:
        float, the scale value.
    """
    w = _ensure_weights(weights, np.size(weights))
    with np.errstate(divide="ignore", invalid="ignore"):
        return float(np.float64(1.0) / (w.sum() - float(bool(corrected))))


def _center(X: Array, w: Array) -> Array:
    """Subtract the weighted column means of already validated inputs."""
    mean = (w @ X) / w.sum()
    return X - mean


def center(data: ArrayLike, weights: ArrayLike | None = None) -> Array:
    """Subtract the weighted mean of each variable from the data.

    Args:
        data: array-like, shape (n, m) or (n,). Rows are observations.
        weights: array-like, shape (n,). If None, uniform weights are used.

    Returns:
        Array of shape (n, m) with every column having zero weighted mean.

    Raises:
        DimensionMismatchError: if the number of weights differs from n.
    """
    X = _ensure_data_matrix(data)
    w = _ensure_weights(weights, X.shape[0])
    return _center(X, w)


def exponential_weights(lam: float, n: int) -> Array:
    """Return `n` exponentially increasing weights ``lam**t`` for ``t = n-1, ..., 0``.

    The most recent observation (last row) gets weight one and each step back
    in time multiplies the weight by `lam`.

    >>> exponential_weights(0.75, 5)
    array([0.31640625, 0.421875  , 0.5625    , 0.75      , 1.        ])

    Raises:
        ValueError: unless ``0 < lam <= 1`` and ``n >= 0``.
    """
    lam = float(_ensure_real_scalar(lam))
    if not 0 < lam <= 1:
        raise ValueError(f"Must be 0 < lam <= 1. Got lam={lam}")
    n = int(n)
    if n < 0:
        raise ValueError(f"Number of weights must be non-negative. Got n={n}")
    return lam ** np.arange(n - 1, -1, -1, dtype=np.float64)
