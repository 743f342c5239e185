"""statsutils: weighted covariance square roots and weighted resampling."""
from statsutils.config import StatsConfig, get_config, config_context
from statsutils.errors import DimensionMismatchError, ShapeError

from statsutils.weights import weighted_scale, center, exponential_weights
from statsutils.std import std
from statsutils.cov import sqrtcov, cov, combine
from statsutils.cor import sqrtcor, cor

from statsutils.linalg.operations import reconstruct
from statsutils.linalg.factorizations import (
    Factorization,
    Cholesky,
    PivotedCholesky,
    QR,
    cholesky,
    pivoted_cholesky,
    qr,
)
from statsutils.distributions.resampler import Resampler

__version__ = "0.1.0"

__all__ = [
    "StatsConfig",
    "get_config",
    "config_context",
    "DimensionMismatchError",
    "ShapeError",
    "weighted_scale",
    "center",
    "exponential_weights",
    "std",
    "sqrtcov",
    "cov",
    "combine",
    "sqrtcor",
    "cor",
    "reconstruct",
    "Factorization",
    "Cholesky",
    "PivotedCholesky",
    "QR",
    "cholesky",
    "pivoted_cholesky",
    "qr",
    "Resampler",
]
