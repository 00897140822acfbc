"""
Coercion of hyperparameters into fixed-width types.

Values crossing the remote boundary are numpy scalars or homogeneous
numpy arrays, so the backend sees the same types regardless of whether the
caller passed Python ints, floats or numpy values.
"""

from collections.abc import Iterable
from typing import Any

import numpy as np
import numpy.typing as npt
import pandas as pd


def is_missing(value: Any) -> bool:
    """Whether a value counts as a missing entry (None, NaN, NaT or pd.NA)."""
    return value is None or (pd.api.types.is_scalar(value) and bool(pd.isna(value)))


def drop_missing(values: Iterable[Any]) -> list[Any]:
    """Return the entries of ``values`` that are not missing."""
    return [v for v in values if not is_missing(v)]


def as_double(value: Any) -> np.float64:
    return np.float64(value)


def as_int(value: Any) -> np.int32:
    """Coerce to a 32-bit integer, truncating towards zero."""
    return np.int32(int(value))


def as_bool(value: Any) -> np.bool_:
    return np.bool_(value)


def as_double_array(values: Any) -> npt.NDArray[np.float64]:
    """Coerce a scalar or iterable into a float64 array without missing entries."""
    if pd.api.types.is_scalar(values):
        values = [values]
    return np.asarray(drop_missing(values), dtype=np.float64)


def as_int_array(values: Any) -> npt.NDArray[np.int32]:
    """Coerce a scalar or iterable into an int32 array without missing entries."""
    if pd.api.types.is_scalar(values):
        values = [values]
    return np.asarray([int(v) for v in drop_missing(values)], dtype=np.int32)


def optional_column(name: str | None) -> str | None:
    """Treat an empty column name as absent."""
    if name is None or name == "":
        return None
    return str(name)
