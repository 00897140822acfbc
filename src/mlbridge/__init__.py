"""
mlbridge: client bindings for remotely trained classifiers.

Marshals formulas and hyperparameters into calls against a remote model
backend and wraps the returned handles in local typed models.
"""

from importlib.metadata import version

from mlbridge.client import BackendClient, connect
from mlbridge.errors import (
    AlreadyExists,
    BindingError,
    InvalidConfiguration,
    RemoteError,
    UnsupportedOperation,
)
from mlbridge.formula import Formula

__version__ = version("mlbridge")

__all__ = [
    "AlreadyExists",
    "BackendClient",
    "BindingError",
    "Formula",
    "InvalidConfiguration",
    "RemoteError",
    "UnsupportedOperation",
    "__version__",
    "connect",
]
