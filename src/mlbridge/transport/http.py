"""
JSON-over-HTTP transport.

Every invocation is a single ``POST {base_url}/invoke`` round trip:

    request:  {"target": {"class": name} | {"ref": id},
               "method": name, "args": [...]}
    response: {"result": value} | {"error": {"type": t, "message": m}}

Object references are encoded as ``{"__ref__": id, "class": name}`` in both
directions. Calls are never retried.
"""

from collections.abc import Mapping, Sequence
from typing import Any

import numpy as np
import requests

from mlbridge.errors import AlreadyExists, RemoteError
from mlbridge.transport.base import ObjectRef
from mlbridge.utils.logging import get_logger

log = get_logger(__name__)

REF_KEY = "__ref__"

# Remote error types that mean "save target already occupied"
ALREADY_EXISTS_TYPES = frozenset(
    {"AlreadyExists", "FileAlreadyExistsException"}
)


def encode_value(value: Any) -> Any:
    """Convert a call argument into a JSON-compatible value."""
    if isinstance(value, ObjectRef):
        return {REF_KEY: value.ref_id, "class": value.class_name}
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    if isinstance(value, Mapping):
        return {str(k): encode_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [encode_value(v) for v in value]
    return value


def decode_value(value: Any) -> Any:
    """Convert a JSON result, restoring object references."""
    if isinstance(value, dict):
        if REF_KEY in value:
            return ObjectRef(
                ref_id=str(value[REF_KEY]), class_name=value.get("class", "")
            )
        return {k: decode_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [decode_value(v) for v in value]
    return value


def _raise_remote_error(error: Any) -> None:
    if not isinstance(error, Mapping):
        raise RemoteError(str(error))
    error_type = str(error.get("type", "")) or None
    message = str(error.get("message", "Remote call failed"))
    if error_type in ALREADY_EXISTS_TYPES:
        raise AlreadyExists(message, remote_type=error_type)
    raise RemoteError(message, remote_type=error_type)


class HttpTransport:
    """
    Transport that posts invocations to a backend gateway over HTTP.

    Args:
        base_url: Gateway root URL.
        timeout_s: Per-call timeout; None blocks until the backend answers.
        verify_tls: Whether to verify TLS certificates.
        headers: Extra headers sent with every request.
        session: Optional pre-built session (mainly for tests).
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_s: float | None = None,
        verify_tls: bool = True,
        headers: Mapping[str, str] | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        self.session.verify = verify_tls
        if headers:
            self.session.headers.update(headers)

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/invoke"

    def invoke_static(
        self, class_name: str, method: str, args: Sequence[Any] = ()
    ) -> Any:
        return self._post({"class": class_name}, method, args)

    def invoke_method(
        self, target: ObjectRef, method: str, args: Sequence[Any] = ()
    ) -> Any:
        return self._post({"ref": target.ref_id}, method, args)

    def close(self) -> None:
        self.session.close()

    def _post(self, target: dict[str, str], method: str, args: Sequence[Any]) -> Any:
        payload = {
            "target": target,
            "method": method,
            "args": [encode_value(a) for a in args],
        }
        log.debug("Remote call", target=target, method=method, n_args=len(args))

        try:
            response = self.session.post(
                self.endpoint, json=payload, timeout=self.timeout_s
            )
        except requests.RequestException as e:
            msg = f"Transport failure calling {method}: {e}"
            raise RemoteError(msg) from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if isinstance(body, dict) and "error" in body:
            _raise_remote_error(body["error"])

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            msg = f"Backend returned HTTP {response.status_code} for {method}"
            raise RemoteError(msg) from e

        if not isinstance(body, dict) or "result" not in body:
            msg = f"Malformed backend response for {method}"
            raise RemoteError(msg)

        return decode_value(body["result"])
