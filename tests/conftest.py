import random

import pytest

from array_heist.domain.secret_pattern import SecretPattern
from array_heist.domain.session import GameSession


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_session(clock):
    def _make(secret=(1, 7, 3), level=2, **kwargs):
        session = GameSession(level=level, clock=clock, rng=random.Random(0), **kwargs)
        session.reset()
        if secret is not None:
            session.secret = SecretPattern(
                digits=tuple(secret),
                reversed_for_display=level == 3,
                level=level,
            )
        return session

    return _make
