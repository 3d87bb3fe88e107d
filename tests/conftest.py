"""Shared fixtures — the full engine is trained once per test session."""

import pytest

from intake.config import TASKS
from intake.engine import IntakeEngine
from intake.routing.ensemble import EnsembleResolver

@pytest.fixture
def fast():
    """Tiny corpus / epoch count for tests that only exercise plumbing."""
    return {"examples_per_label": {t: 12 for t in TASKS}, "epochs": 2}


@pytest.fixture(scope="session")
def model_dir(tmp_path_factory):
    return tmp_path_factory.mktemp("models")


@pytest.fixture(scope="session")
def engine(model_dir):
    """Default hyper-parameters, persisted into a temporary directory."""
    return IntakeEngine(model_dir).initialize()


@pytest.fixture(scope="session")
def resolver(engine):
    return EnsembleResolver(engine, mode="ensemble")
