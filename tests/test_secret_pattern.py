"""
Testing secret generation per level.
"""
import random

import pytest

from array_heist.domain.errors import InvalidLevel
from array_heist.domain.secret_pattern import SecretPattern, regenerate


def test_level_one_is_two_digits_forward():
    rng = random.Random(1)
    for _ in range(50):
        secret = regenerate(1, rng)
        assert len(secret.digits) == 2
        assert secret.reversed_for_display is False


def test_level_two_is_three_digits_forward():
    rng = random.Random(2)
    for _ in range(50):
        secret = regenerate(2, rng)
        assert len(secret.digits) == 3
        assert secret.reversed_for_display is False


def test_level_three_is_three_digits_reversed():
    rng = random.Random(3)
    for _ in range(50):
        secret = regenerate(3, rng)
        assert len(secret.digits) == 3
        assert secret.reversed_for_display is True
        assert all(0 <= d <= 9 for d in secret.digits)


def test_seeded_rng_is_reproducible():
    assert regenerate(2, random.Random(7)) == regenerate(2, random.Random(7))


@pytest.mark.parametrize("level", [0, 4, -1, True, "2", None])
def test_invalid_level(level):
    with pytest.raises(InvalidLevel):
        regenerate(level)


def test_display_reverses_only_for_display():
    secret = SecretPattern(digits=(3, 7, 1), reversed_for_display=True, level=3)
    assert secret.digits == (3, 7, 1)
    assert secret.display_digits == (1, 7, 3)
    assert secret.display_text() == "[ 1, 7, 3 ] (Reverse)"


def test_display_labels():
    assert SecretPattern((4, 2), False, 1).display_text() == "[ 4, 2 ] (2-digit)"
    assert SecretPattern((4, 2, 0), False, 2).display_text() == "[ 4, 2, 0 ] (3-digit)"
