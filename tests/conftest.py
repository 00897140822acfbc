"""Pytest configuration and shared fixtures."""

from pathlib import Path

import pytest

from fakes import DATASET_CLASS, FakeBackend
from mlbridge.client import BackendClient
from mlbridge.transport.base import ObjectRef, TableRef


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def backend() -> FakeBackend:
    """Fake backend preloaded with summary data for every variant."""
    fake = FakeBackend()
    fake.attributes = {
        "LinearSVCWrapper": {
            "features": ["Class_1st", "Class_2nd", "Sex_Male"],
            "labels": ["No", "Yes"],
            "coefficients": [0.12, -0.34, 0.56],
            "intercept": -0.25,
            "numClasses": 2,
            "numFeatures": 3,
        },
        "LogisticRegressionWrapper": {
            "rFeatures": ["(Intercept)", "Sepal_Length", "Sepal_Width"],
            "labels": ["setosa", "versicolor", "virginica"],
            # Column-major: one block of three coefficients per class
            "rCoefficients": [1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 7.0, 8.0, 9.0],
        },
        "MultilayerPerceptronClassifierWrapper": {
            "layers": [4, 5, 3],
            # (4 + 1) * 5 + (5 + 1) * 3
            "weights": [0.01 * i for i in range(43)],
        },
        "NaiveBayesWrapper": {
            "features": ["Gender_Male", "Dept_A"],
            "labels": ["Admitted", "Rejected"],
            "apriori": [0.6, 0.4],
            "tables": [0.1, 0.2, 0.3, 0.4],
        },
    }
    return fake


@pytest.fixture
def client(backend: FakeBackend) -> BackendClient:
    """Client talking to the fake backend."""
    return BackendClient(backend)


@pytest.fixture
def training() -> TableRef:
    """Reference to a remote training dataset."""
    return ObjectRef(ref_id="df-training", class_name=DATASET_CLASS)
