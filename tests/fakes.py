"""In-memory backend used by the test suite."""

import itertools
from collections.abc import Sequence
from typing import Any

from mlbridge.client import LOADER_CLASS
from mlbridge.errors import AlreadyExists, RemoteError
from mlbridge.transport.base import ObjectRef

DATASET_CLASS = "org.apache.spark.sql.Dataset"
WRITER_CLASS = "org.apache.spark.ml.util.MLWriter"


class FakeBackend:
    """
    In-memory Transport standing in for the model backend.

    Records every invocation and keeps just enough state to emulate
    fitting, scoring, saving and loading.
    """

    def __init__(self) -> None:
        self.calls: list[tuple[Any, str, list[Any]]] = []
        # Attribute values per wrapper simple class name
        self.attributes: dict[str, dict[str, Any]] = {}
        # Saved path -> wrapper class name
        self.saved: dict[str, str] = {}
        self.fit_error: Exception | None = None
        self.closed = False
        self._objects: dict[str, tuple[str, Any]] = {}
        self._ids = itertools.count(1)

    def _new_ref(self, class_name: str, kind: str, payload: Any = None) -> ObjectRef:
        ref = ObjectRef(ref_id=f"obj-{next(self._ids)}", class_name=class_name)
        self._objects[ref.ref_id] = (kind, payload)
        return ref

    @property
    def fit_calls(self) -> list[tuple[str, list[Any]]]:
        return [
            (target, args) for target, method, args in self.calls if method == "fit"
        ]

    def invoke_static(
        self, class_name: str, method: str, args: Sequence[Any] = ()
    ) -> Any:
        self.calls.append((class_name, method, list(args)))

        if method == "fit":
            if self.fit_error is not None:
                raise self.fit_error
            return self._new_ref(class_name, "model", class_name)

        if class_name == LOADER_CLASS and method == "load":
            path = args[0]
            if path not in self.saved:
                msg = f"Input path does not exist: {path}"
                raise RemoteError(msg, remote_type="InvalidInputException")
            model_class = self.saved[path]
            return self._new_ref(model_class, "model", model_class)

        msg = f"Unknown static method {class_name}.{method}"
        raise RemoteError(msg)

    def invoke_method(
        self, target: ObjectRef, method: str, args: Sequence[Any] = ()
    ) -> Any:
        self.calls.append((target, method, list(args)))
        kind, payload = self._objects[target.ref_id]

        if kind == "model":
            if method == "transform":
                return self._new_ref(DATASET_CLASS, "table")
            if method == "write":
                return self._new_ref(
                    WRITER_CLASS, "writer", {"model_class": payload, "overwrite": False}
                )
            attributes = self.attributes.get(payload.rsplit(".", 1)[-1], {})
            if method in attributes:
                return attributes[method]

        if kind == "writer":
            if method == "overwrite":
                payload["overwrite"] = True
                return target
            if method == "save":
                path = args[0]
                if path in self.saved and not payload["overwrite"]:
                    msg = f"Path {path} already exists."
                    raise AlreadyExists(msg, remote_type="AlreadyExists")
                self.saved[path] = payload["model_class"]
                return None

        msg = f"{target!r} has no method {method}"
        raise RemoteError(msg)

    def close(self) -> None:
        self.closed = True
