# custom_types.py
"""
Type aliases shared across statsutils.

We generally follow the conventions:
- Annotate function input with `ArrayLike`
- Annotate function output with `Array`
- Annotate random sources with `PRNG`
"""
from __future__ import annotations
from typing import Literal, TypeAlias
from numpy.random import Generator as NumpyRNG

from numpy.typing import (
    NDArray as NumpyArray,
    ArrayLike as NumpyArrayLike
)

Array = NumpyArray
ArrayLike: TypeAlias = NumpyArrayLike
PRNG: TypeAlias = NumpyRNG

VariateForm: TypeAlias = Literal["univariate", "multivariate", "matrixvariate"]
ValueSupport: TypeAlias = Literal["discrete", "continuous"]
