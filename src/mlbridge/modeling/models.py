"""
Model registry.

Registers the four classifier bindings with their backend wrapper classes,
fit-argument layouts and summary reshaping.
"""

from typing import Any

from mlbridge.client import BackendClient
from mlbridge.errors import UnsupportedOperation
from mlbridge.formula import Formula
from mlbridge.modeling.binding import BoundModel, ModelBinding, ModelKind
from mlbridge.modeling.coercion import (
    as_bool,
    as_double,
    as_double_array,
    as_int,
    as_int_array,
)
from mlbridge.modeling.params import (
    LinearSVCParams,
    LogisticRegressionParams,
    MultilayerPerceptronParams,
    NaiveBayesParams,
)
from mlbridge.modeling.summary import (
    LinearSVCSummary,
    LogisticRegressionSummary,
    MultilayerPerceptronSummary,
    NaiveBayesSummary,
    linear_svc_summary,
    logistic_regression_summary,
    multilayer_perceptron_summary,
    naive_bayes_summary,
)
from mlbridge.transport.base import ObjectRef, TableRef


WRAPPER_PACKAGE = "org.apache.spark.ml.r"


# --- Fit argument layouts ---


def _linear_svc_args(data: TableRef, formula: str, p: LinearSVCParams) -> list[Any]:
    return [
        data,
        formula,
        as_double(p.reg_param),
        as_int(p.max_iter),
        as_double(p.tol),
        as_bool(p.standardization),
        as_double(p.threshold),
        p.weight_col,
        as_int(p.aggregation_depth),
    ]


def _logistic_regression_args(
    data: TableRef, formula: str, p: LogisticRegressionParams
) -> list[Any]:
    return [
        data,
        formula,
        as_double(p.reg_param),
        as_double(p.elastic_net_param),
        as_int(p.max_iter),
        as_double(p.tol),
        p.family,
        as_bool(p.standardization),
        as_double_array(p.thresholds),
        p.weight_col,
        as_int(p.aggregation_depth),
    ]


def _multilayer_perceptron_args(
    data: TableRef, formula: str, p: MultilayerPerceptronParams
) -> list[Any]:
    # The backend takes the seed as a decimal string
    seed = str(as_int(p.seed)) if p.seed is not None else None
    initial_weights = (
        as_double_array(p.initial_weights) if p.initial_weights is not None else None
    )
    return [
        data,
        formula,
        as_int(p.block_size),
        as_int_array(p.layers),
        p.solver,
        as_int(p.max_iter),
        as_double(p.tol),
        as_double(p.step_size),
        seed,
        initial_weights,
    ]


def _naive_bayes_args(data: TableRef, formula: str, p: NaiveBayesParams) -> list[Any]:
    # Formula comes before the data for this wrapper
    return [formula, data, as_double(p.smoothing)]


# --- Summaries ---


def _summarize_linear_svc(client: BackendClient, handle: ObjectRef) -> LinearSVCSummary:
    return linear_svc_summary(
        features=client.fetch(handle, "features"),
        labels=client.fetch(handle, "labels"),
        coefficients=client.fetch(handle, "coefficients"),
        intercept=client.fetch(handle, "intercept"),
        num_classes=client.fetch(handle, "numClasses"),
        num_features=client.fetch(handle, "numFeatures"),
    )


def _summarize_logistic_regression(
    client: BackendClient, handle: ObjectRef
) -> LogisticRegressionSummary:
    return logistic_regression_summary(
        features=client.fetch(handle, "rFeatures"),
        labels=client.fetch(handle, "labels"),
        coefficients=client.fetch(handle, "rCoefficients"),
    )


def _summarize_multilayer_perceptron(
    client: BackendClient, handle: ObjectRef
) -> MultilayerPerceptronSummary:
    return multilayer_perceptron_summary(
        layers=client.fetch(handle, "layers"),
        weights=client.fetch(handle, "weights"),
    )


def _summarize_naive_bayes(
    client: BackendClient, handle: ObjectRef
) -> NaiveBayesSummary:
    return naive_bayes_summary(
        features=client.fetch(handle, "features"),
        labels=client.fetch(handle, "labels"),
        apriori=client.fetch(handle, "apriori"),
        tables=client.fetch(handle, "tables"),
    )


# --- Registry ---

LINEAR_SVC: ModelBinding[LinearSVCParams, LinearSVCSummary] = ModelBinding(
    kind=ModelKind.LINEAR_SVC,
    wrapper_class=f"{WRAPPER_PACKAGE}.LinearSVCWrapper",
    params_model=LinearSVCParams,
    build_args=_linear_svc_args,
    summarize=_summarize_linear_svc,
    summary_on_loaded=False,
)

LOGISTIC_REGRESSION: ModelBinding[
    LogisticRegressionParams, LogisticRegressionSummary
] = ModelBinding(
    kind=ModelKind.LOGISTIC_REGRESSION,
    wrapper_class=f"{WRAPPER_PACKAGE}.LogisticRegressionWrapper",
    params_model=LogisticRegressionParams,
    build_args=_logistic_regression_args,
    summarize=_summarize_logistic_regression,
    summary_on_loaded=False,
)

MULTILAYER_PERCEPTRON: ModelBinding[
    MultilayerPerceptronParams, MultilayerPerceptronSummary
] = ModelBinding(
    kind=ModelKind.MULTILAYER_PERCEPTRON,
    wrapper_class=f"{WRAPPER_PACKAGE}.MultilayerPerceptronClassifierWrapper",
    params_model=MultilayerPerceptronParams,
    build_args=_multilayer_perceptron_args,
    summarize=_summarize_multilayer_perceptron,
)

NAIVE_BAYES: ModelBinding[NaiveBayesParams, NaiveBayesSummary] = ModelBinding(
    kind=ModelKind.NAIVE_BAYES,
    wrapper_class=f"{WRAPPER_PACKAGE}.NaiveBayesWrapper",
    params_model=NaiveBayesParams,
    build_args=_naive_bayes_args,
    summarize=_summarize_naive_bayes,
)

MODEL_REGISTRY: dict[ModelKind, ModelBinding[Any, Any]] = {
    binding.kind: binding
    for binding in (LINEAR_SVC, LOGISTIC_REGRESSION, MULTILAYER_PERCEPTRON, NAIVE_BAYES)
}


def get_binding(kind: ModelKind | str) -> ModelBinding[Any, Any]:
    """
    Get a binding by variant.

    Raises:
        KeyError: If the variant is unknown.
    """
    try:
        return MODEL_REGISTRY[ModelKind(kind)]
    except ValueError:
        available = ", ".join(k.value for k in ModelKind)
        msg = f"Unknown model '{kind}'. Available: {available}"
        raise KeyError(msg) from None


def binding_for_class(class_name: str) -> ModelBinding[Any, Any]:
    """
    Find the binding whose backend wrapper class matches ``class_name``.

    Accepts fully qualified or simple class names.

    Raises:
        UnsupportedOperation: If no binding handles the class.
    """
    simple = class_name.rsplit(".", 1)[-1]
    for binding in MODEL_REGISTRY.values():
        if class_name == binding.wrapper_class or simple == binding.simple_class_name:
            return binding
    msg = f"No binding for backend class {class_name!r}"
    raise UnsupportedOperation(msg)


def list_models() -> list[str]:
    """List all available model variants."""
    return [kind.value for kind in MODEL_REGISTRY]


def fit_linear_svc(
    client: BackendClient,
    data: TableRef,
    formula: str | Formula,
    params: LinearSVCParams | None = None,
    **hyperparameters: Any,
) -> BoundModel:
    """
    Fit a linear SVM (binary classifier).

    Example:
        model = fit_linear_svc(client, training, "Survived ~ .", reg_param=0.5)
        model.summary().coefficients
    """
    return LINEAR_SVC.fit(client, data, formula, params, **hyperparameters)


def fit_logistic_regression(
    client: BackendClient,
    data: TableRef,
    formula: str | Formula,
    params: LogisticRegressionParams | None = None,
    **hyperparameters: Any,
) -> BoundModel:
    """
    Fit a logistic regression.

    ``family="auto"`` lets the backend pick binomial for one or two classes
    and multinomial otherwise.
    """
    return LOGISTIC_REGRESSION.fit(client, data, formula, params, **hyperparameters)


def fit_multilayer_perceptron(
    client: BackendClient,
    data: TableRef,
    formula: str | Formula,
    params: MultilayerPerceptronParams | None = None,
    **hyperparameters: Any,
) -> BoundModel:
    """
    Fit a multilayer perceptron classifier.

    Raises:
        InvalidConfiguration: If ``layers`` is missing or has fewer than two
            sizes after dropping missing entries.
    """
    return MULTILAYER_PERCEPTRON.fit(client, data, formula, params, **hyperparameters)


def fit_naive_bayes(
    client: BackendClient,
    data: TableRef,
    formula: str | Formula,
    params: NaiveBayesParams | None = None,
    **hyperparameters: Any,
) -> BoundModel:
    return NAIVE_BAYES.fit(client, data, formula, params, **hyperparameters)
