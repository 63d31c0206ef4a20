import numpy as np
import pytest
import torch

from domaintensor import config


@pytest.fixture(scope="session", autouse=True)
def seed_random_generators():
    """
    Seed numpy and torch once, so reference values drawn at module level
    are the same on every run.
    """
    np.random.seed(42)
    torch.manual_seed(42)
    yield


@pytest.fixture(autouse=True)
def restore_config():
    """
    Restore the module-wide tensor config after each test, since some tests
    change tolerances or enable evaluation logging.
    """
    previous = config.get_config()
    yield
    config._config = previous
