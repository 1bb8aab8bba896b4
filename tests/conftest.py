"""Pytest configuration and fixtures."""

from collections.abc import Iterator

import pytest
from structlog.testing import capture_logs

from ammpair.chain import Chain
from ammpair.factory import PairFactory
from ammpair.pair import Pair
from ammpair.tokens import Token
from tests.helpers import make_pair


@pytest.fixture
def deployment() -> tuple[Chain, PairFactory, Pair]:
    """Fresh chain with two funded tokens, a factory and their pair."""
    return make_pair()


@pytest.fixture
def chain(deployment) -> Chain:
    return deployment[0]


@pytest.fixture
def factory(deployment) -> PairFactory:
    return deployment[1]


@pytest.fixture
def pair(deployment) -> Pair:
    return deployment[2]


@pytest.fixture
def token0(pair: Pair) -> Token:
    return pair.token0


@pytest.fixture
def token1(pair: Pair) -> Token:
    return pair.token1


@pytest.fixture
def captured_logs() -> Iterator[list[dict]]:
    """Capture structlog events emitted during the test."""
    with capture_logs() as logs:
        yield logs
