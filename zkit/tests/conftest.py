import random

import pytest

from zkit.backend import DEFAULT_BACKEND, Parameters
from zkit.circuit import CircuitShape
from zkit.session import SessionCoordinator
from zkit.tests import TEST_K, TEST_SEED


@pytest.fixture(scope="session")
def params() -> Parameters:
    # generating powers of tau is the expensive part; share one set per run
    return DEFAULT_BACKEND.setup(TEST_K, max_degree=3, seed=TEST_SEED)


@pytest.fixture
def shape() -> CircuitShape:
    return CircuitShape(enabled_rows=1)


@pytest.fixture
def session(params) -> SessionCoordinator:
    return SessionCoordinator(params)


@pytest.fixture
def ready_session(session, shape) -> SessionCoordinator:
    session.keygen(shape)
    return session


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1337)
