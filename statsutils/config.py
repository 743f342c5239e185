# config.py
"""
Process-wide validation policy for statsutils.

The numeric functions accept arbitrary array-likes. Whether they additionally
reject non-finite values, and whether the resampler rejects negative or
all-zero weights, is a policy decision captured by `StatsConfig`.

Defaults are read once from the environment:

- ``STATSUTILS_CHECK_FINITE``: reject NaN/Inf in data and weights.
- ``STATSUTILS_VALIDATE_WEIGHTS``: reject negative weights and weight vectors
  with a non-positive sum when building a resampler.

Both accept ``1/true/yes/on`` and ``0/false/no/off`` and default to on.
`config_context` overrides the active configuration for the current context
only, so threads and asyncio tasks do not see each other's overrides.
"""
from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Iterator

__all__ = ["StatsConfig", "get_config", "config_context"]

_LOGGER = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class StatsConfig:
    """Validation switches consulted by statsutils functions.

    Attributes:
        check_finite: if True, data and weights containing NaN or Inf raise
            ``ValueError`` instead of propagating into the result.
        validate_weights: if True, `Resampler` rejects negative weights and
            weight vectors whose sum is not positive.
    """

    check_finite: bool = True
    validate_weights: bool = True


def _env_flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    _LOGGER.debug("Ignoring unrecognised value %r for %s; using %s", raw, name, default)
    return default


@lru_cache(maxsize=1)
def _default_config() -> StatsConfig:
    return StatsConfig(
        check_finite=_env_flag("STATSUTILS_CHECK_FINITE", True),
        validate_weights=_env_flag("STATSUTILS_VALIDATE_WEIGHTS", True),
    )


_ACTIVE: ContextVar[StatsConfig | None] = ContextVar("statsutils_config", default=None)


def get_config() -> StatsConfig:
    """Return the configuration active in the current context."""
    cfg = _ACTIVE.get()
    return _default_config() if cfg is None else cfg


@contextmanager
def config_context(**overrides: bool) -> Iterator[StatsConfig]:
    """Temporarily override fields of the active `StatsConfig`.

    Example:
        >>> with config_context(check_finite=False):
        ...     cov(data_with_nans)

    Raises:
        TypeError: if an override names a field `StatsConfig` does not have.
    """
    cfg = replace(get_config(), **overrides)
    token = _ACTIVE.set(cfg)
    try:
        yield cfg
    finally:
        _ACTIVE.reset(token)
