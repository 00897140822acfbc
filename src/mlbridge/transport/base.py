"""
Remote invocation boundary.

The backend exposes static methods on named classes and instance methods on
objects it holds. Objects never leave the backend; the client only sees
opaque references to them.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable


@dataclass(frozen=True)
class ObjectRef:
    """
    Opaque reference to an object held by the backend.

    Attributes:
        ref_id: Backend-assigned identifier.
        class_name: Fully qualified class name of the remote object.
    """

    ref_id: str
    class_name: str = ""

    def __repr__(self) -> str:
        return f"ObjectRef({self.class_name or '?'}#{self.ref_id})"


# A reference to a remote tabular dataset is an ordinary object reference.
TableRef = ObjectRef


@runtime_checkable
class Transport(Protocol):
    """Call-by-name invocation of backend methods."""

    def invoke_static(
        self, class_name: str, method: str, args: Sequence[Any] = ()
    ) -> Any:
        """Call a static method and return its result."""
        ...

    def invoke_method(
        self, target: ObjectRef, method: str, args: Sequence[Any] = ()
    ) -> Any:
        """Call a method on a remote object and return its result."""
        ...

    def close(self) -> None:
        """Release local transport resources."""
        ...
