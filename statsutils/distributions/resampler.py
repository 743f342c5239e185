# distributions/resampler.py
from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np

from ..custom_types import Array, ArrayLike, PRNG, VariateForm, ValueSupport
from ..config import get_config
from ..errors import DimensionMismatchError, ShapeError, _check_same_length
from ..array_backend.utils import _as_array, _check_finite, _ensure_vector
from .distribution import Distribution

__all__ = ["Resampler"]

_LOGGER = logging.getLogger(__name__)


def _classify(observations: Any) -> tuple[Array, VariateForm]:
    """Return observations as an array together with their variate form.

    - 1D array or flat sequence of scalars -> "univariate", shape (n,)
    - 2D array -> "multivariate", shape (m, n), column j is observation j
    - sequence of 2D arrays, or a 3D array -> "matrixvariate", shape (n, r, c)
    """
    if (
        not isinstance(observations, np.ndarray)
        and isinstance(observations, Sequence)
        and len(observations) > 0
        and all(np.ndim(obs) == 2 for obs in observations)
    ):
        try:
            arr = np.stack([np.asarray(obs) for obs in observations])
        except ValueError as e:
            raise ShapeError("All matrix observations must have the same shape.") from e
    else:
        arr = _as_array(observations)

    if arr.ndim == 1:
        form = "univariate"
    elif arr.ndim == 2:
        form = "multivariate"
    elif arr.ndim == 3:
        form = "matrixvariate"
    else:
        raise ShapeError(
            f"Observations must be a vector, a matrix or a sequence of matrices. Got shape {arr.shape}."
        )
    if not (np.issubdtype(arr.dtype, np.number) or arr.dtype == np.bool_):
        raise TypeError(f"Observations must be numeric. Got dtype {arr.dtype}.")
    return np.array(arr, copy=True), form


class Resampler(Distribution):
    """Draws stored observations with probability proportional to their weights.

    A `Resampler` pairs a finite set of observations with one non-negative
    weight per observation. Each draw picks index ``j`` with probability
    ``weights[j] / sum(weights)``, independently of every other draw (i.e.
    with replacement), and returns a copy of observation ``j``.

    Three observation layouts are supported:

    - univariate: a vector of n scalars; a draw is a scalar.
    - multivariate: an (m, n) matrix whose *columns* are the observations; a
      draw is a length-m vector, all of whose coordinates come from the same
      column.
    - matrixvariate: a sequence of n (r, c) matrices (or an (n, r, c) array);
      a draw is an (r, c) matrix.

    The resampler is immutable and holds no random state. All randomness
    comes from the `numpy.random.Generator` passed to each draw, so two
    resamplers built from the same inputs and driven by identically seeded
    generators produce identical draws.

    Args:
        observations: the observations, in one of the layouts above.
        weights: array-like, shape (n,), one weight per observation.

    Raises:
        DimensionMismatchError: if the number of weights differs from the
            number of observations.
        ValueError: if weights contain NaN/Inf (when `StatsConfig.check_finite`),
            or are negative or sum to a non-positive value (when
            `StatsConfig.validate_weights`).
    """

    def __init__(self, observations: ArrayLike, weights: ArrayLike) -> None:
        obs, form = _classify(observations)
        w = _ensure_vector(weights).astype(np.float64)

        n = obs.shape[1] if form == "multivariate" else obs.shape[0]
        _check_same_length(n, w.size)
        _check_finite(w, "weights")

        total = float(w.sum())
        if get_config().validate_weights:
            if np.any(w < 0):
                raise ValueError("weights must be nonnegative.")
            if not total > 0:
                raise ValueError("weights must sum to a positive value.")

        obs.setflags(write=False)
        w.setflags(write=False)
        with np.errstate(divide="ignore", invalid="ignore"):
            p = w / total
        p.setflags(write=False)

        self._obs = obs
        self._w = w
        self._p = p
        self._total = total
        self._n = int(n)
        self._form: VariateForm = form

        _LOGGER.debug("Built %s resampler over %d observations (total weight %g)", form, self._n, total)

    @classmethod
    def build(cls, observations: ArrayLike, weights: ArrayLike) -> Resampler:
        """Construct a resampler; equivalent to ``Resampler(observations, weights)``."""
        return cls(observations, weights)

    # ---- Properties ----

    @property
    def n(self) -> int:
        """Number of stored observations."""
        return self._n

    @property
    def variate_form(self) -> VariateForm:
        return self._form

    @property
    def value_support(self) -> ValueSupport:
        dtype = self._obs.dtype
        if np.issubdtype(dtype, np.integer) or dtype == np.bool_:
            return "discrete"
        return "continuous"

    @property
    def event_shape(self) -> tuple[int, ...]:
        """Shape of a single draw."""
        if self._form == "univariate":
            return ()
        if self._form == "multivariate":
            return (self._obs.shape[0],)
        return self._obs.shape[1:]

    @property
    def length(self) -> int:
        """Number of entries in a single draw (m for multivariate resamplers)."""
        return int(np.prod(self.event_shape, dtype=np.intp))

    @property
    def observations(self) -> Array:
        """Read-only view of the stored observations."""
        return self._obs

    @property
    def weights(self) -> Array:
        """Read-only view of the (unnormalized) weights, shape (n,)."""
        return self._w

    @property
    def total_weight(self) -> float:
        """Sum of the weights."""
        return self._total

    @property
    def probabilities(self) -> Array:
        """Read-only view of the selection probabilities ``weights / total_weight``."""
        return self._p

    # ---- Sampling ----

    def _indices(self, rng: PRNG, size: int | None = None) -> Any:
        return np.random.default_rng(rng).choice(self._n, size=size, replace=True, p=self._p)

    def _take(self, idx: Any) -> Any:
        if self._form == "multivariate":
            return self._obs[:, idx]
        return self._obs[idx]

    def draw(self, rng: PRNG) -> Any:
        """Draw a single observation.

        Returns:
            a scalar (univariate), a length-m vector (multivariate) or an
            (r, c) matrix (matrixvariate). Arrays are fresh copies.
        """
        out = self._take(int(self._indices(rng)))
        return out.copy() if isinstance(out, np.ndarray) else out

    def draw_into(self, rng: PRNG, out: Array) -> Array:
        """Fill `out` with a single multivariate draw and return it.

        All m coordinates are copied from the same selected observation.

        Raises:
            TypeError: if the resampler is not multivariate.
            DimensionMismatchError: if `out` does not have length m.
        """
        if self._form != "multivariate":
            raise TypeError(f"draw_into requires a multivariate resampler; this one is {self._form}.")
        m = self._obs.shape[0]
        if np.ndim(out) != 1 or np.shape(out)[0] != m:
            raise DimensionMismatchError(f"Output buffer must have shape ({m},). Got {np.shape(out)}.")
        j = int(self._indices(rng))
        out[:] = self._obs[:, j]
        return out

    def draw_many(self, rng: PRNG, size: int) -> Array:
        """Draw `size` independent observations (with replacement).

        Returns:
            shape (size,) for univariate, (m, size) for multivariate (one
            draw per column) and (size, r, c) for matrixvariate resamplers.
        """
        size = int(size)
        if size < 0:
            raise ValueError(f"size must be non-negative. Got {size}.")
        return self._take(self._indices(rng, size))

    def sample(self, n_samples: int = 1, *, rng: PRNG | None = None) -> Array:
        """Draw `n_samples` observations; see `draw_many` for the output shape.

        If `rng` is None a fresh, unseeded generator is used for this call.
        """
        return self.draw_many(np.random.default_rng(rng), n_samples)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(form={self._form!r}, n={self._n}, "
            f"event_shape={self.event_shape}, support={self.value_support!r})"
        )
