# distributions/distribution.py
from __future__ import annotations

from abc import ABC, abstractmethod

from ..custom_types import Array, PRNG, VariateForm, ValueSupport

__all__ = ["Distribution"]


class Distribution(ABC):
    """
    Abstract base class for objects that can be sampled from.

    Implementations hold no random state of their own: every draw takes the
    random number generator to advance, so that reproducibility is entirely
    controlled by the caller.
    """

    @property
    @abstractmethod
    def variate_form(self) -> VariateForm:
        """Shape of a single draw: "univariate", "multivariate" or "matrixvariate"."""
        ...

    @property
    @abstractmethod
    def value_support(self) -> ValueSupport:
        """"discrete" for integer valued draws, "continuous" otherwise."""
        ...

    @abstractmethod
    def sample(self, n_samples: int = 1, *, rng: PRNG | None = None) -> Array:
        """
        Draw `n_samples` independent values using `rng`.

        Returns an array whose leading (or, for multivariate draws, trailing)
        axis indexes the draws.
        """
        ...

    def rvs(self, n_samples: int = 1, *, rng: PRNG | None = None) -> Array:
        """Alias of `sample`, following the scipy.stats naming."""
        return self.sample(n_samples, rng=rng)
