"""
Model persistence (save/load).

Models are written and read by the backend in its own format; nothing is
stored locally.
"""

from mlbridge.client import BackendClient
from mlbridge.modeling.binding import BoundModel, ModelState
from mlbridge.modeling.models import binding_for_class
from mlbridge.utils.logging import get_logger

log = get_logger(__name__)


def save_model(model: BoundModel, path: str, *, overwrite: bool = False) -> None:
    """
    Save a model to a path on the backend's storage.

    Args:
        model: Fitted or loaded model.
        path: Target directory.
        overwrite: Replace an existing model at ``path``.

    Raises:
        AlreadyExists: If ``path`` is occupied and ``overwrite`` is False.
    """
    model.save(path, overwrite=overwrite)


def read_model(client: BackendClient, path: str) -> BoundModel:
    """
    Load a saved model.

    The variant is taken from the class of the restored backend object.
    Linear SVM and logistic regression models loaded this way can predict
    and be saved again, but cannot be summarized.

    Args:
        client: Backend client.
        path: Directory the model was saved to.

    Returns:
        Model in the LOADED state.

    Raises:
        UnsupportedOperation: If the saved model is not a supported variant.
    """
    handle = client.load(path)
    binding = binding_for_class(handle.class_name)
    log.info("Loaded model", model=binding.kind.value, path=path, handle=handle.ref_id)
    return binding.bind(client, handle, ModelState.LOADED)
