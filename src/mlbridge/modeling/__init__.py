"""
Classifier bindings.

Each classifier variant is a ModelBinding that validates hyperparameters,
fits on the backend and reshapes the returned summary data.
"""

from mlbridge.modeling.binding import BoundModel, ModelBinding, ModelKind, ModelState
from mlbridge.modeling.models import (
    LINEAR_SVC,
    LOGISTIC_REGRESSION,
    MODEL_REGISTRY,
    MULTILAYER_PERCEPTRON,
    NAIVE_BAYES,
    binding_for_class,
    fit_linear_svc,
    fit_logistic_regression,
    fit_multilayer_perceptron,
    fit_naive_bayes,
    get_binding,
    list_models,
)
from mlbridge.modeling.params import (
    LinearSVCParams,
    LogisticRegressionParams,
    ModelParams,
    MultilayerPerceptronParams,
    NaiveBayesParams,
)
from mlbridge.modeling.persistence import read_model, save_model
from mlbridge.modeling.summary import (
    LinearSVCSummary,
    LogisticRegressionSummary,
    MultilayerPerceptronSummary,
    NaiveBayesSummary,
    render_summary,
)

__all__ = [
    # Types
    "BoundModel",
    "ModelBinding",
    "ModelKind",
    "ModelState",
    # Hyperparameters
    "ModelParams",
    "LinearSVCParams",
    "LogisticRegressionParams",
    "MultilayerPerceptronParams",
    "NaiveBayesParams",
    # Summaries
    "LinearSVCSummary",
    "LogisticRegressionSummary",
    "MultilayerPerceptronSummary",
    "NaiveBayesSummary",
    "render_summary",
    # Bindings
    "LINEAR_SVC",
    "LOGISTIC_REGRESSION",
    "MULTILAYER_PERCEPTRON",
    "NAIVE_BAYES",
    "MODEL_REGISTRY",
    "binding_for_class",
    "get_binding",
    "list_models",
    # Functions
    "fit_linear_svc",
    "fit_logistic_regression",
    "fit_multilayer_perceptron",
    "fit_naive_bayes",
    "read_model",
    "save_model",
]
