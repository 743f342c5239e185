# errors.py
"""
Exceptions raised by statsutils.

Both exceptions subclass `ValueError`, so callers that already guard numeric
code with `except ValueError` keep working.
"""


class DimensionMismatchError(ValueError):
    """Two inputs that must agree along an axis do not.

    Raised when the observation count differs from the weight count, or when
    a standard-deviation matrix does not match the column count of the
    correlation square root it is combined with.
    """


class ShapeError(ValueError):
    """An input does not have the required structure (e.g. is not diagonal)."""


def _check_same_length(n_obs: int, n_weights: int, what: str = "observations") -> None:
    if n_obs != n_weights:
        raise DimensionMismatchError(
            f"Length of the weights vector ({n_weights}) must match the number of {what} ({n_obs})."
        )
