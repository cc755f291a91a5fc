"""Secret pattern generation per difficulty level."""
import random
from dataclasses import dataclass
from typing import Tuple

from array_heist.domain.errors import InvalidLevel

LEVELS = (1, 2, 3)

PATTERN_LENGTH = {1: 2, 2: 3, 3: 3}
LEVEL_LABEL = {1: "(2-digit)", 2: "(3-digit)", 3: "(Reverse)"}
# Levels whose secret is shown back-to-front. Matching always uses stored order.
REVERSED_LEVELS = (3,)


@dataclass(frozen=True)
class SecretPattern:
    digits: Tuple[int, ...]
    reversed_for_display: bool
    level: int

    @property
    def display_digits(self) -> Tuple[int, ...]:
        if self.reversed_for_display:
            return tuple(reversed(self.digits))
        return self.digits

    @property
    def label(self) -> str:
        return LEVEL_LABEL[self.level]

    def display_text(self) -> str:
        return f"[ {', '.join(str(d) for d in self.display_digits)} ] {self.label}"


def validate_level(level) -> int:
    if isinstance(level, bool) or level not in LEVELS:
        raise InvalidLevel(f"Level must be one of {', '.join(str(lv) for lv in LEVELS)}.")
    return level


def regenerate(level: int, rng: random.Random | None = None) -> SecretPattern:
    """Generate a new secret for the given level.

    Level 1 draws 2 digits, levels 2 and 3 draw 3. Level 3 is displayed reversed.
    """
    level = validate_level(level)
    rng = rng or random.Random()
    digits = tuple(rng.randint(0, 9) for _ in range(PATTERN_LENGTH[level]))
    return SecretPattern(
        digits=digits,
        reversed_for_display=level in REVERSED_LEVELS,
        level=level,
    )
