"""
Exception hierarchy for the binding layer.

Local validation failures are raised before any remote call is made.
Remote failures are propagated without retry.
"""


class BindingError(Exception):
    """Base class for all errors raised by mlbridge."""


class InvalidConfiguration(BindingError, ValueError):
    """Hyperparameters or formula rejected before contacting the backend."""


class UnsupportedOperation(BindingError):
    """Operation not available for this model handle."""


class RemoteError(BindingError):
    """
    Failure reported by the backend or the transport.

    Attributes:
        remote_type: Error type name reported by the backend, if any.
    """

    def __init__(self, message: str, remote_type: str | None = None) -> None:
        super().__init__(message)
        self.remote_type = remote_type


class AlreadyExists(RemoteError):
    """Save target is occupied and overwrite was not requested."""
