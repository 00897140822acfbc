"""
Generic model binding.

A ModelBinding ties one backend wrapper class to its hyperparameter model,
its fit-argument layout and its summary reshaping. Fitting returns a
BoundModel, an immutable wrapper around the remote handle that delegates
predict, summary and save back to its binding.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import ValidationError

from mlbridge.client import BackendClient
from mlbridge.errors import InvalidConfiguration, UnsupportedOperation
from mlbridge.formula import Formula, serialize_formula
from mlbridge.modeling.params import ModelParams
from mlbridge.transport.base import ObjectRef, TableRef
from mlbridge.utils.logging import get_logger, log_context

log = get_logger(__name__)

ConfigT = TypeVar("ConfigT", bound=ModelParams)
SummaryT = TypeVar("SummaryT")


class ModelKind(str, Enum):
    """Supported classifier variants."""

    LINEAR_SVC = "linear_svc"
    LOGISTIC_REGRESSION = "logistic_regression"
    MULTILAYER_PERCEPTRON = "multilayer_perceptron"
    NAIVE_BAYES = "naive_bayes"


class ModelState(str, Enum):
    """How a model handle came into being."""

    FITTED = "fitted"  # Returned by fit in this session
    LOADED = "loaded"  # Restored from storage


@dataclass(frozen=True)
class BoundModel:
    """
    Local wrapper around a remote model handle.

    Attributes:
        kind: Classifier variant.
        handle: Opaque reference to the remote model.
        state: FITTED or LOADED.
        client: Client the handle belongs to.
        binding: Binding that produced this model.
    """

    kind: ModelKind
    handle: ObjectRef
    state: ModelState
    client: BackendClient = field(repr=False, compare=False)
    binding: "ModelBinding[Any, Any]" = field(repr=False, compare=False)

    def predict(self, new_data: TableRef) -> TableRef:
        """Score a remote dataset; the result gains a "prediction" column."""
        return self.binding.predict(self, new_data)

    def summary(self) -> Any:
        """Labeled summary of the fitted model."""
        return self.binding.summary(self)

    def save(self, path: str, *, overwrite: bool = False) -> None:
        """Persist the model to ``path`` on the backend's storage."""
        self.binding.save(self, path, overwrite=overwrite)


ArgsBuilder = Callable[[TableRef, str, ConfigT], list[Any]]
Summarizer = Callable[[BackendClient, ObjectRef], SummaryT]


@dataclass(frozen=True)
class ModelBinding(Generic[ConfigT, SummaryT]):
    """
    Binding between a classifier variant and its backend wrapper.

    Attributes:
        kind: Variant tag.
        wrapper_class: Fully qualified backend wrapper class.
        params_model: Pydantic model validating the hyperparameters.
        build_args: Builds the wrapper's positional fit arguments.
        summarize: Fetches and reshapes the summary from a handle.
        summary_on_loaded: Whether a reloaded handle can still be summarized.
    """

    kind: ModelKind
    wrapper_class: str
    params_model: type[ConfigT]
    build_args: ArgsBuilder[ConfigT] = field(repr=False)
    summarize: Summarizer[SummaryT] = field(repr=False)
    summary_on_loaded: bool = True

    @property
    def simple_class_name(self) -> str:
        return self.wrapper_class.rsplit(".", 1)[-1]

    def build_params(
        self, params: ConfigT | None = None, **hyperparameters: Any
    ) -> ConfigT:
        """
        Validate hyperparameters.

        Args:
            params: Optional params instance used as the starting point.
            **hyperparameters: Overrides, by field name.

        Returns:
            Validated params.

        Raises:
            InvalidConfiguration: If any value is rejected.
        """
        values = params.model_dump() if params is not None else {}
        values.update(hyperparameters)
        try:
            return self.params_model(**values)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc']) or 'params'}: {err['msg']}"
                for err in e.errors()
            )
            msg = f"Invalid {self.kind.value} configuration: {details}"
            raise InvalidConfiguration(msg) from e
        except (TypeError, OverflowError) as e:
            msg = f"Invalid {self.kind.value} configuration: {e}"
            raise InvalidConfiguration(msg) from e

    def remote_args(
        self,
        data: TableRef,
        formula: "str | Formula",
        params: ConfigT | None = None,
        **hyperparameters: Any,
    ) -> list[Any]:
        """Positional arguments sent to the wrapper's fit method."""
        validated = self.build_params(params, **hyperparameters)
        return self.build_args(data, serialize_formula(formula), validated)

    def fit(
        self,
        client: BackendClient,
        data: TableRef,
        formula: "str | Formula",
        params: ConfigT | None = None,
        **hyperparameters: Any,
    ) -> BoundModel:
        """
        Fit the model on the backend.

        Blocks until the remote job finishes. Remote failures propagate
        unchanged and are not retried.

        Args:
            client: Backend client.
            data: Remote training dataset.
            formula: Label/feature formula.
            params: Optional validated hyperparameters.
            **hyperparameters: Hyperparameter overrides.

        Returns:
            Fitted model.
        """
        formula_text = serialize_formula(formula)
        args = self.build_args(
            data, formula_text, self.build_params(params, **hyperparameters)
        )

        with log_context(model=self.kind.value):
            log.info(
                "Fitting model", wrapper=self.simple_class_name, formula=formula_text
            )
            start = time.perf_counter()
            handle = client.fit(self.wrapper_class, args)
            log.info(
                "Model fitted",
                handle=handle.ref_id,
                elapsed_s=round(time.perf_counter() - start, 3),
            )

        return self.bind(client, handle, ModelState.FITTED)

    def bind(
        self, client: BackendClient, handle: ObjectRef, state: ModelState
    ) -> BoundModel:
        """Wrap an existing handle."""
        return BoundModel(
            kind=self.kind, handle=handle, state=state, client=client, binding=self
        )

    def predict(self, model: BoundModel, new_data: TableRef) -> TableRef:
        return model.client.transform(model.handle, new_data)

    def summary(self, model: BoundModel) -> SummaryT:
        """
        Fetch and reshape the model summary.

        Raises:
            UnsupportedOperation: If the model was loaded from storage and
                the backend wrapper does not keep summary data on reload.
        """
        if model.state is ModelState.LOADED and not self.summary_on_loaded:
            msg = (
                f"summary is not available for a {self.kind.value} model loaded "
                "from storage; refit the model to inspect it"
            )
            raise UnsupportedOperation(msg)
        return self.summarize(model.client, model.handle)

    def save(self, model: BoundModel, path: str, *, overwrite: bool = False) -> None:
        model.client.save(model.handle, path, overwrite=overwrite)
        log.info(
            "Saved model", model=self.kind.value, path=path, overwrite=overwrite
        )
