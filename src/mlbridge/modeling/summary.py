"""
Model summaries.

The backend returns coefficients, priors and weights as flat arrays. The
functions here reshape them into labeled matrices. Multi-column blocks are
laid out column-major by the backend.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import numpy.typing as npt
import pandas as pd
from rich.console import Console
from rich.table import Table

from mlbridge.errors import RemoteError
from mlbridge.utils.logging import get_logger

log = get_logger(__name__)

SINGLE_COLUMN_LABEL = "Estimate"


def coefficient_matrix(
    coefficients: Sequence[float],
    features: Sequence[str],
    labels: Sequence[str],
) -> pd.DataFrame:
    """
    Reshape flat coefficients into a features x columns matrix.

    Args:
        coefficients: Flat coefficients, length ``len(features) * n_col``.
        features: Feature names (row labels).
        labels: Class labels, used as column labels when ``n_col > 1``.

    Returns:
        DataFrame with one row per feature. A single column is labeled
        "Estimate"; otherwise there is one column per class label.

    Raises:
        RemoteError: If the array length does not fit the feature count.
    """
    values = np.asarray(coefficients, dtype=np.float64).ravel()
    row_labels = [str(f) for f in features]
    n_rows = len(row_labels)

    if n_rows == 0 or values.size % n_rows != 0:
        msg = (
            f"Cannot reshape {values.size} coefficients "
            f"for {n_rows} features"
        )
        raise RemoteError(msg)

    n_col = values.size // n_rows
    if n_col == 1:
        columns = [SINGLE_COLUMN_LABEL]
    else:
        columns = [str(label) for label in labels]
        if len(columns) != n_col:
            msg = f"Got {n_col} coefficient columns but {len(columns)} class labels"
            raise RemoteError(msg)

    matrix = values.reshape((n_rows, n_col), order="F")
    return pd.DataFrame(matrix, index=row_labels, columns=columns)


def expected_weight_count(layers: Sequence[int]) -> int:
    """Number of weights of a fully connected network, biases included."""
    return sum(
        (int(n_in) + 1) * int(n_out) for n_in, n_out in zip(layers[:-1], layers[1:])
    )


@dataclass(frozen=True, eq=False)
class LinearSVCSummary:
    """Summary of a linear SVM."""

    coefficients: pd.DataFrame
    intercept: float
    num_classes: int
    num_features: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "coefficients": self.coefficients,
            "intercept": self.intercept,
            "numClasses": self.num_classes,
            "numFeatures": self.num_features,
        }


@dataclass(frozen=True, eq=False)
class LogisticRegressionSummary:
    """
    Summary of a logistic regression.

    A single "Estimate" column means a binomial model with pivoting;
    otherwise there is one column per class (multinomial, no pivoting).
    """

    coefficients: pd.DataFrame

    def to_dict(self) -> dict[str, Any]:
        return {"coefficients": self.coefficients}


@dataclass(frozen=True, eq=False)
class MultilayerPerceptronSummary:
    """Summary of a multilayer perceptron."""

    num_of_inputs: int
    num_of_outputs: int
    layers: npt.NDArray[np.int64]
    weights: npt.NDArray[np.float64]

    def to_dict(self) -> dict[str, Any]:
        return {
            "numOfInputs": self.num_of_inputs,
            "numOfOutputs": self.num_of_outputs,
            "layers": self.layers,
            "weights": self.weights,
        }


@dataclass(frozen=True, eq=False)
class NaiveBayesSummary:
    """
    Summary of a naive Bayes model.

    Attributes:
        apriori: Label distribution, one row with a column per class.
        tables: Conditional probabilities, labels x features.
    """

    apriori: pd.DataFrame
    tables: pd.DataFrame

    def to_dict(self) -> dict[str, Any]:
        return {"apriori": self.apriori, "tables": self.tables}


ModelSummary = (
    LinearSVCSummary
    | LogisticRegressionSummary
    | MultilayerPerceptronSummary
    | NaiveBayesSummary
)


def linear_svc_summary(
    features: Sequence[str],
    labels: Sequence[str],
    coefficients: Sequence[float],
    intercept: float,
    num_classes: int,
    num_features: int,
) -> LinearSVCSummary:
    return LinearSVCSummary(
        coefficients=coefficient_matrix(coefficients, features, labels),
        intercept=float(intercept),
        num_classes=int(num_classes),
        num_features=int(num_features),
    )


def logistic_regression_summary(
    features: Sequence[str],
    labels: Sequence[str],
    coefficients: Sequence[float],
) -> LogisticRegressionSummary:
    return LogisticRegressionSummary(
        coefficients=coefficient_matrix(coefficients, features, labels)
    )


def multilayer_perceptron_summary(
    layers: Sequence[int],
    weights: Sequence[float],
) -> MultilayerPerceptronSummary:
    """Split the layer sizes into input/output counts alongside the weights."""
    layer_sizes = np.asarray(layers, dtype=np.int64).ravel()
    if layer_sizes.size < 2:
        msg = f"Backend returned {layer_sizes.size} layer sizes, expected at least 2"
        raise RemoteError(msg)

    weight_values = np.asarray(weights, dtype=np.float64).ravel()
    expected = expected_weight_count(layer_sizes.tolist())
    if weight_values.size != expected:
        log.warning(
            "Unexpected weight count",
            layers=layer_sizes.tolist(),
            expected=expected,
            actual=int(weight_values.size),
        )

    return MultilayerPerceptronSummary(
        num_of_inputs=int(layer_sizes[0]),
        num_of_outputs=int(layer_sizes[-1]),
        layers=layer_sizes,
        weights=weight_values,
    )


def naive_bayes_summary(
    features: Sequence[str],
    labels: Sequence[str],
    apriori: Sequence[float],
    tables: Sequence[float],
) -> NaiveBayesSummary:
    """Label the class priors and reshape the conditional probability table."""
    label_names = [str(label) for label in labels]
    feature_names = [str(f) for f in features]

    priors = np.asarray(apriori, dtype=np.float64).ravel()
    if priors.size != len(label_names):
        msg = f"Got {priors.size} priors for {len(label_names)} labels"
        raise RemoteError(msg)

    probabilities = np.asarray(tables, dtype=np.float64).ravel()
    if probabilities.size != len(label_names) * len(feature_names):
        msg = (
            f"Cannot reshape {probabilities.size} probabilities into "
            f"{len(label_names)} labels x {len(feature_names)} features"
        )
        raise RemoteError(msg)

    return NaiveBayesSummary(
        apriori=pd.DataFrame([priors], columns=label_names),
        tables=pd.DataFrame(
            probabilities.reshape((len(label_names), len(feature_names)), order="F"),
            index=label_names,
            columns=feature_names,
        ),
    )


def _frame_table(name: str, frame: pd.DataFrame) -> Table:
    table = Table(title=name)
    table.add_column("", style="cyan")
    for column in frame.columns:
        table.add_column(str(column), justify="right", style="green")
    for index, row in frame.iterrows():
        table.add_row(str(index), *(f"{value:.6g}" for value in row))
    return table


def render_summary(summary: ModelSummary, console: Console | None = None) -> None:
    """
    Print a model summary as rich tables.

    Args:
        summary: Any model summary.
        console: Console to print to (default: a new stdout console).
    """
    console = console or Console()

    scalars = Table(title=type(summary).__name__)
    scalars.add_column("Field", style="cyan")
    scalars.add_column("Value", style="green")

    frames: list[Table] = []
    for name, value in summary.to_dict().items():
        if isinstance(value, pd.DataFrame):
            frames.append(_frame_table(name, value))
        elif isinstance(value, np.ndarray):
            scalars.add_row(name, np.array2string(value, threshold=20, precision=4))
        else:
            scalars.add_row(name, str(value))

    if scalars.row_count:
        console.print(scalars)
    for table in frames:
        console.print(table)
