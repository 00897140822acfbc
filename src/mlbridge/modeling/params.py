"""
Hyperparameter models for each classifier.

Defaults match the backend wrappers. Validation runs locally, before any
remote call is made.
"""

from typing import Any, Literal

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, field_validator

from mlbridge.modeling.coercion import drop_missing, optional_column


class ModelParams(BaseModel):
    """Base class for classifier hyperparameters."""

    model_config = ConfigDict(frozen=True, extra="forbid")


def _as_sequence(value: Any) -> list[Any]:
    if pd.api.types.is_scalar(value):
        return [value]
    return list(value)


def _truncate(value: Any) -> Any:
    """Truncate finite floats towards zero; anything else is left to pydantic."""
    if isinstance(value, (float, np.floating)) and np.isfinite(value):
        return int(value)
    return value


class LinearSVCParams(ModelParams):
    """Linear support vector classifier (binary only)."""

    reg_param: float = Field(default=0.0, ge=0, description="Regularization parameter")
    max_iter: int = Field(default=100, gt=0)
    tol: float = Field(default=1e-6, gt=0, description="Convergence tolerance")
    standardization: bool = Field(
        default=True, description="Standardize features before fitting"
    )
    threshold: float = Field(
        default=0.0, ge=0, le=1, description="Binary classification threshold"
    )
    weight_col: str | None = Field(default=None, description="Weight column name")
    aggregation_depth: int = Field(
        default=2, ge=2, description="Depth for tree aggregation (expert)"
    )

    @field_validator("weight_col", mode="before")
    @classmethod
    def empty_weight_col_is_absent(cls, v: Any) -> str | None:
        """An empty column name means no weight column."""
        return optional_column(v)

    @field_validator("max_iter", "aggregation_depth", mode="before")
    @classmethod
    def truncate_integers(cls, v: Any) -> Any:
        return _truncate(v)


class LogisticRegressionParams(ModelParams):
    """Binomial or multinomial logistic regression."""

    reg_param: float = Field(default=0.0, ge=0)
    elastic_net_param: float = Field(
        default=0.0, ge=0, le=1, description="0 = L2 penalty, 1 = L1 penalty"
    )
    max_iter: int = Field(default=100, gt=0)
    tol: float = Field(default=1e-6, gt=0)
    family: Literal["auto", "binomial", "multinomial"] = Field(default="auto")
    standardization: bool = Field(default=True)
    thresholds: tuple[float, ...] = Field(
        default=(0.5,), description="Per-class thresholds, or one binary threshold"
    )
    weight_col: str | None = Field(default=None)
    aggregation_depth: int = Field(default=2, ge=2)

    @field_validator("weight_col", mode="before")
    @classmethod
    def empty_weight_col_is_absent(cls, v: Any) -> str | None:
        """An empty column name means no weight column."""
        return optional_column(v)

    @field_validator("max_iter", "aggregation_depth", mode="before")
    @classmethod
    def truncate_integers(cls, v: Any) -> Any:
        return _truncate(v)

    @field_validator("family", mode="before")
    @classmethod
    def lower_case_family(cls, v: Any) -> Any:
        """Family names are case-insensitive."""
        return v.lower() if isinstance(v, str) else v

    @field_validator("thresholds", mode="before")
    @classmethod
    def validate_thresholds(cls, v: Any) -> list[float]:
        """Accept a scalar or array; values must be >= 0 with at most one 0."""
        values = [float(t) for t in drop_missing(_as_sequence(v))]
        if not values:
            msg = "thresholds must contain at least one value"
            raise ValueError(msg)
        if any(t < 0 for t in values):
            msg = f"thresholds must be non-negative, got: {values}"
            raise ValueError(msg)
        if sum(1 for t in values if t == 0) > 1:
            msg = f"at most one threshold may be 0, got: {values}"
            raise ValueError(msg)
        if len(values) == 1 and values[0] > 1:
            msg = f"a binary threshold must be in [0, 1], got: {values[0]}"
            raise ValueError(msg)
        return values


class MultilayerPerceptronParams(ModelParams):
    """Feed-forward neural network classifier."""

    layers: tuple[int, ...] = Field(
        description="Layer sizes including input and output layers"
    )
    block_size: int = Field(default=128, gt=0)
    solver: Literal["l-bfgs", "gd"] = Field(default="l-bfgs")
    max_iter: int = Field(default=100, gt=0)
    tol: float = Field(default=1e-6, gt=0)
    step_size: float = Field(default=0.03, gt=0)
    seed: int | None = Field(
        default=None,
        ge=-(2**31),
        le=2**31 - 1,
        description="Seed for weight initialization",
    )
    initial_weights: tuple[float, ...] | None = Field(default=None)

    @field_validator("layers", mode="before")
    @classmethod
    def validate_layers(cls, v: Any) -> list[int]:
        """Drop missing entries; at least an input and an output layer remain."""
        msg = "layers must be an integer vector with length > 1"
        if v is None:
            raise ValueError(msg)
        layers = [int(size) for size in drop_missing(_as_sequence(v))]
        if len(layers) <= 1:
            raise ValueError(msg)
        if any(size <= 0 for size in layers):
            msg = f"layer sizes must be positive, got: {layers}"
            raise ValueError(msg)
        return layers

    @field_validator("block_size", "max_iter", mode="before")
    @classmethod
    def truncate_integers(cls, v: Any) -> Any:
        return _truncate(v)

    @field_validator("seed", mode="before")
    @classmethod
    def truncate_seed(cls, v: Any) -> int | None:
        if v is None:
            return None
        return int(v)

    @field_validator("initial_weights", mode="before")
    @classmethod
    def drop_missing_weights(cls, v: Any) -> list[float] | None:
        if v is None:
            return None
        return [float(w) for w in drop_missing(_as_sequence(v))]


class NaiveBayesParams(ModelParams):
    """Bernoulli naive Bayes."""

    smoothing: float = Field(default=1.0, ge=0, description="Additive smoothing")
