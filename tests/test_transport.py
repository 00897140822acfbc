"""Tests for the HTTP transport and the backend client."""

import json
from typing import Any
from unittest.mock import MagicMock

import numpy as np
import pytest
import requests
import structlog

from mlbridge.client import BackendClient, connect
from mlbridge.config import BackendConfig, ClientSettings, LoggingConfig
from mlbridge.errors import AlreadyExists, RemoteError
from mlbridge.transport import HttpTransport, ObjectRef, Transport
from mlbridge.transport.http import decode_value, encode_value
from fakes import FakeBackend


def make_response(status: int, body: Any = None, raw: bytes | None = None) -> requests.Response:
    """Build a real requests response with a JSON (or raw) body."""
    response = requests.Response()
    response.status_code = status
    response.url = "http://backend.test/invoke"
    response._content = raw if raw is not None else json.dumps(body).encode()
    return response


def make_transport(response: requests.Response | Exception) -> HttpTransport:
    session = requests.Session()
    if isinstance(response, Exception):
        session.post = MagicMock(side_effect=response)  # type: ignore[method-assign]
    else:
        session.post = MagicMock(return_value=response)  # type: ignore[method-assign]
    return HttpTransport("http://backend.test/", timeout_s=30.0, session=session)


class TestValueCodec:
    """Tests for argument encoding and result decoding."""

    def test_encode_reference(self) -> None:
        ref = ObjectRef(ref_id="42", class_name="org.apache.spark.sql.Dataset")
        assert encode_value(ref) == {
            "__ref__": "42",
            "class": "org.apache.spark.sql.Dataset",
        }

    def test_encode_numpy_values(self) -> None:
        """Test that fixed-width numpy values become plain JSON values."""
        encoded = encode_value(
            [np.float64(0.5), np.int32(3), np.bool_(True), np.array([4, 5], dtype=np.int32)]
        )
        assert encoded == [0.5, 3, True, [4, 5]]
        assert type(encoded[1]) is int
        assert type(encoded[2]) is bool
        json.dumps(encoded)

    def test_encode_none(self) -> None:
        assert encode_value(None) is None

    def test_decode_nested_references(self) -> None:
        decoded = decode_value({"model": {"__ref__": "7", "class": "X"}, "n": [1, 2]})
        assert decoded == {"model": ObjectRef(ref_id="7", class_name="X"), "n": [1, 2]}


class TestHttpTransport:
    """Tests for HttpTransport."""

    def test_static_call_payload(self) -> None:
        transport = make_transport(make_response(200, {"result": {"__ref__": "1", "class": "W"}}))

        result = transport.invoke_static("W", "fit", [np.float64(0.1), "y ~ ."])

        assert result == ObjectRef(ref_id="1", class_name="W")
        transport.session.post.assert_called_once_with(  # type: ignore[attr-defined]
            "http://backend.test/invoke",
            json={"target": {"class": "W"}, "method": "fit", "args": [0.1, "y ~ ."]},
            timeout=30.0,
        )

    def test_method_call_payload(self) -> None:
        transport = make_transport(make_response(200, {"result": [1.0, 2.0]}))

        result = transport.invoke_method(ObjectRef(ref_id="9"), "coefficients")

        assert result == [1.0, 2.0]
        _, kwargs = transport.session.post.call_args  # type: ignore[attr-defined]
        assert kwargs["json"] == {"target": {"ref": "9"}, "method": "coefficients", "args": []}

    def test_null_result(self) -> None:
        transport = make_transport(make_response(200, {"result": None}))
        assert transport.invoke_method(ObjectRef(ref_id="9"), "save", ["/p"]) is None

    def test_remote_error(self) -> None:
        """Test that backend errors keep their type and message."""
        body = {"error": {"type": "SparkException", "message": "Job aborted"}}
        transport = make_transport(make_response(500, body))

        with pytest.raises(RemoteError, match="Job aborted") as exc_info:
            transport.invoke_static("W", "fit", [])

        assert exc_info.value.remote_type == "SparkException"
        assert not isinstance(exc_info.value, AlreadyExists)

    @pytest.mark.parametrize("error_type", ["AlreadyExists", "FileAlreadyExistsException"])
    def test_already_exists(self, error_type: str) -> None:
        body = {"error": {"type": error_type, "message": "Path /m already exists."}}
        transport = make_transport(make_response(500, body))

        with pytest.raises(AlreadyExists, match="already exists"):
            transport.invoke_method(ObjectRef(ref_id="w"), "save", ["/m"])

    def test_http_status_without_error_body(self) -> None:
        transport = make_transport(make_response(502, raw=b"Bad Gateway"))

        with pytest.raises(RemoteError, match="HTTP 502"):
            transport.invoke_static("W", "fit", [])

    def test_malformed_response(self) -> None:
        transport = make_transport(make_response(200, {"value": 1}))

        with pytest.raises(RemoteError, match="Malformed"):
            transport.invoke_static("W", "fit", [])

    def test_error_body_without_details(self) -> None:
        """Test that a bare error string still surfaces as a remote error."""
        transport = make_transport(make_response(500, {"error": "boom"}))

        with pytest.raises(RemoteError, match="boom") as exc_info:
            transport.invoke_static("W", "fit", [])

        assert exc_info.value.remote_type is None

    def test_connection_failure(self) -> None:
        """Test that transport failures surface as remote errors."""
        transport = make_transport(requests.ConnectionError("refused"))

        with pytest.raises(RemoteError, match="Transport failure") as exc_info:
            transport.invoke_static("W", "fit", [])

        assert isinstance(exc_info.value.__cause__, requests.ConnectionError)

    def test_no_retry(self) -> None:
        transport = make_transport(requests.Timeout("timed out"))

        with pytest.raises(RemoteError):
            transport.invoke_static("W", "fit", [])

        assert transport.session.post.call_count == 1  # type: ignore[attr-defined]

    def test_session_options(self) -> None:
        transport = HttpTransport(
            "https://backend.test",
            verify_tls=False,
            headers={"Authorization": "Bearer token"},
        )
        assert transport.session.verify is False
        assert transport.session.headers["Authorization"] == "Bearer token"
        assert transport.endpoint == "https://backend.test/invoke"

    def test_satisfies_protocol(self) -> None:
        assert isinstance(HttpTransport("http://backend.test"), Transport)


class TestBackendClient:
    """Tests for the client lifecycle."""

    def test_context_manager_closes_transport(self) -> None:
        backend = FakeBackend()

        with BackendClient(backend) as client:
            assert client.transport is backend

        assert backend.closed

    def test_save_chain_without_overwrite(self, client: BackendClient, backend: FakeBackend) -> None:
        handle = client.fit("org.apache.spark.ml.r.NaiveBayesWrapper", ["y ~ .", None, 1.0])

        client.save(handle, "/models/nb")

        assert [method for _, method, _ in backend.calls] == ["fit", "write", "save"]

    def test_connect_uses_settings(self) -> None:
        settings = ClientSettings(
            backend=BackendConfig(base_url="http://gateway.test:9000/", timeout_s=5)
        )

        client = connect(settings)

        assert isinstance(client.transport, HttpTransport)
        assert client.transport.endpoint == "http://gateway.test:9000/invoke"
        assert client.transport.timeout_s == 5
        client.close()

    def test_connect_leaves_logging_alone(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that opening a client does not reconfigure global logging."""
        configure = MagicMock()
        monkeypatch.setattr(structlog, "configure", configure)

        connect(ClientSettings(logging=LoggingConfig(level="DEBUG"))).close()

        configure.assert_not_called()
