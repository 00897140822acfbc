"""
Typed client for the model backend.

Exposes one method per remote operation on top of a single Transport.
"""

from collections.abc import Sequence
from types import TracebackType
from typing import Any

from mlbridge.config.settings import ClientSettings
from mlbridge.errors import RemoteError
from mlbridge.transport.base import ObjectRef, TableRef, Transport
from mlbridge.transport.http import HttpTransport
from mlbridge.utils.logging import get_logger

log = get_logger(__name__)

# Backend class that restores any saved model wrapper
LOADER_CLASS = "org.apache.spark.ml.r.RWrappers"


def _expect_ref(value: Any, operation: str) -> ObjectRef:
    if not isinstance(value, ObjectRef):
        msg = (
            f"Backend returned {type(value).__name__} instead of an object "
            f"reference for {operation}"
        )
        raise RemoteError(msg)
    return value


class BackendClient:
    """
    Client for fitting, applying and persisting remote models.

    Every call is a single blocking round trip. Remote handles are not
    released by the client; they live until the backend session ends.
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def fit(self, wrapper_class: str, args: Sequence[Any]) -> ObjectRef:
        """
        Fit a model through a backend wrapper class.

        Args:
            wrapper_class: Fully qualified backend wrapper class name.
            args: Positional arguments of the wrapper's fit method.

        Returns:
            Handle to the fitted remote model.
        """
        log.debug("Fitting remote model", wrapper=wrapper_class)
        result = self.transport.invoke_static(wrapper_class, "fit", list(args))
        return _expect_ref(result, f"{wrapper_class}.fit")

    def transform(self, handle: ObjectRef, data: TableRef) -> TableRef:
        """Apply a model to a remote dataset, returning the scored dataset."""
        result = self.transport.invoke_method(handle, "transform", [data])
        return _expect_ref(result, "transform")

    def fetch(self, handle: ObjectRef, attribute: str) -> Any:
        """Read an attribute exposed by a remote model wrapper."""
        return self.transport.invoke_method(handle, attribute)

    def save(self, handle: ObjectRef, path: str, *, overwrite: bool = False) -> None:
        """Persist a remote model with the backend's own writer."""
        writer = _expect_ref(self.transport.invoke_method(handle, "write"), "write")
        if overwrite:
            writer = _expect_ref(
                self.transport.invoke_method(writer, "overwrite"), "overwrite"
            )
        self.transport.invoke_method(writer, "save", [path])

    def load(self, path: str) -> ObjectRef:
        """Restore a saved model, returning its handle."""
        result = self.transport.invoke_static(LOADER_CLASS, "load", [path])
        return _expect_ref(result, "load")

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> "BackendClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()


def connect(settings: ClientSettings | None = None) -> BackendClient:
    """
    Open a client over HTTP.

    Logging is left to the application; call
    ``configure_logging(settings.logging.level, ...)`` at startup.

    Args:
        settings: Client settings; defaults apply when omitted.

    Returns:
        Client bound to the configured backend gateway.
    """
    settings = settings or ClientSettings()

    transport = HttpTransport(
        settings.backend.base_url,
        timeout_s=settings.backend.timeout_s,
        verify_tls=settings.backend.verify_tls,
        headers=settings.backend.headers,
    )
    log.info("Connected to backend", base_url=settings.backend.base_url)
    return BackendClient(transport)
