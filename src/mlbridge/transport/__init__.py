"""Transport adapters for the remote invocation boundary."""

from mlbridge.transport.base import ObjectRef, TableRef, Transport
from mlbridge.transport.http import HttpTransport

__all__ = [
    "HttpTransport",
    "ObjectRef",
    "TableRef",
    "Transport",
]
